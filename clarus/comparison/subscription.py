"""
Comparison subscription.

Reactive view over a ComparisonStore for UI code. It refreshes its cached
state on both the cross-context storage event and the same-context update
event, always by re-reading storage, so missed or duplicate notifications
are harmless.
"""

import logging
from typing import Callable, List, Tuple

import config.settings as settings
from clarus.comparison.events import StorageEvent, STORAGE_EVENT
from clarus.comparison.store import ComparisonStore
from clarus.comparison.urls import build_shareable_url
from clarus.models.comparison import ComparisonItem, ComparisonList

logger = logging.getLogger(__name__)

Subscriber = Callable[[ComparisonList], None]


class ComparisonSubscription:
    """Cached, self-refreshing comparison state with change callbacks."""

    def __init__(self, store: ComparisonStore):
        self.store = store
        self._subscribers: List[Subscriber] = []
        self._state = store.read()
        self._closed = False

        events = store.context.events
        events.add_listener(STORAGE_EVENT, self._on_storage)
        events.add_listener(settings.COMPARISON_UPDATED_EVENT, self._on_updated)

    # State

    @property
    def state(self) -> ComparisonList:
        return self._state

    @property
    def items(self) -> Tuple[ComparisonItem, ...]:
        return self._state.items

    @property
    def count(self) -> int:
        return self._state.count

    @property
    def is_full(self) -> bool:
        return self._state.is_full

    @property
    def max_items(self) -> int:
        return self._state.max_items

    # Actions

    def add_to_comparison(self, property_id: str, property_slug: str, property_name: str) -> bool:
        """
        Add a property.

        Returns:
            True if the property is now in the comparison because of this
            call, False if it was already present, the list was full, or
            the write failed
        """
        if self.is_in_comparison(property_id) or self.is_full:
            return False
        updated = self.store.add(property_id, property_slug, property_name)
        self._set_state(updated)
        return updated.contains(property_id)

    def remove_from_comparison(self, property_id: str) -> None:
        self._set_state(self.store.remove(property_id))

    def clear_comparison(self) -> None:
        self._set_state(self.store.clear())

    def is_in_comparison(self, property_id: str) -> bool:
        return self._state.contains(property_id)

    def get_comparison_url(self) -> str:
        return build_shareable_url(self._state.items)

    # Subscription

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register callback for state changes.

        Returns:
            A function that unregisters the callback
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def refresh(self) -> ComparisonList:
        """Re-read storage and notify subscribers if the state changed."""
        self._set_state(self.store.read())
        return self._state

    def close(self) -> None:
        """Stop listening for events."""
        if self._closed:
            return
        events = self.store.context.events
        events.remove_listener(STORAGE_EVENT, self._on_storage)
        events.remove_listener(settings.COMPARISON_UPDATED_EVENT, self._on_updated)
        self._subscribers.clear()
        self._closed = True

    # Event handlers

    def _on_storage(self, event: StorageEvent) -> None:
        # key None means the whole storage area was cleared
        if event is None or event.key is None or event.key == self.store.storage_key:
            self.refresh()

    def _on_updated(self, _event) -> None:
        self.refresh()

    def _set_state(self, state: ComparisonList) -> None:
        if state == self._state:
            return
        self._state = state
        for callback in list(self._subscribers):
            try:
                callback(state)
            except Exception as e:
                logger.error(f"Comparison subscriber failed: {e}", exc_info=True)
