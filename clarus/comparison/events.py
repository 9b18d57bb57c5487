"""
Browsing context events.

A BrowsingContext stands for one tab or window. Each context owns an
EventChannel; session storage notifies the *other* contexts of a change,
and components re-broadcast within their own context explicitly.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

STORAGE_EVENT = "storage"

Listener = Callable[[Any], None]


@dataclass(frozen=True)
class StorageEvent:
    """
    Change notification for a session storage key.

    key is None when the whole storage area was cleared.
    """
    key: Optional[str]
    old_value: Optional[str] = None
    new_value: Optional[str] = None


class EventChannel:
    """Synchronous publish/subscribe keyed by event type."""

    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)

    def add_listener(self, event_type: str, listener: Listener) -> None:
        if listener not in self._listeners[event_type]:
            self._listeners[event_type].append(listener)

    def remove_listener(self, event_type: str, listener: Listener) -> None:
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    def listener_count(self, event_type: str) -> int:
        return len(self._listeners.get(event_type, []))

    def dispatch(self, event_type: str, event: Any = None) -> None:
        """
        Deliver event to every listener registered for event_type.

        A failing listener is logged and does not stop delivery to the rest.
        """
        # Copy: listeners may unsubscribe while being notified
        for listener in list(self._listeners.get(event_type, [])):
            try:
                listener(event)
            except Exception as e:
                logger.error(f"Listener for '{event_type}' failed: {e}", exc_info=True)


class BrowsingContext:
    """One tab/window of a browser session."""

    def __init__(self, name: str = "main"):
        self.name = name
        self.events = EventChannel()

    def __repr__(self) -> str:
        return f"BrowsingContext({self.name!r})"
