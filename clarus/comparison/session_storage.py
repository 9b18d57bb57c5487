"""
Session storage.

Key/value store shared by every browsing context of one browser session.
A write from one context fires a StorageEvent in all other attached
contexts, never in the writer's own.
"""

import json
import logging
import os
from typing import Dict, List, Optional

from clarus.comparison.events import BrowsingContext, StorageEvent, STORAGE_EVENT

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Base class for session storage failures."""


class StorageUnavailableError(StorageError):
    """Storage is disabled or cannot be reached."""


class StorageQuotaExceededError(StorageError):
    """A write would exceed the storage quota."""


class SessionStorage:
    """
    In-memory session-scoped storage.

    Args:
        quota_bytes: Optional total size limit over keys and values
    """

    def __init__(self, quota_bytes: Optional[int] = None):
        self.quota_bytes = quota_bytes
        self.available = True
        self._data: Dict[str, str] = {}
        self._contexts: List[BrowsingContext] = []

    # Context management

    def attach(self, context: BrowsingContext) -> None:
        """Register a context to receive change notifications."""
        if context not in self._contexts:
            self._contexts.append(context)

    def detach(self, context: BrowsingContext) -> None:
        if context in self._contexts:
            self._contexts.remove(context)

    # Storage API

    def get_item(self, key: str) -> Optional[str]:
        self._ensure_available()
        return self._read_all().get(key)

    def set_item(self, key: str, value: str, origin: Optional[BrowsingContext] = None) -> None:
        """
        Store value under key and notify the other contexts.

        Raises:
            StorageUnavailableError: If storage is disabled
            StorageQuotaExceededError: If the write exceeds quota_bytes
        """
        self._ensure_available()
        data = self._read_all()
        old_value = data.get(key)

        updated = dict(data)
        updated[key] = value
        if self.quota_bytes is not None and self._size(updated) > self.quota_bytes:
            raise StorageQuotaExceededError(
                f"Writing '{key}' exceeds session storage quota of {self.quota_bytes} bytes"
            )

        self._write_all(updated)
        if old_value != value:
            self._notify(StorageEvent(key=key, old_value=old_value, new_value=value), origin)

    def remove_item(self, key: str, origin: Optional[BrowsingContext] = None) -> None:
        self._ensure_available()
        data = self._read_all()
        if key not in data:
            return
        old_value = data.pop(key)
        self._write_all(data)
        self._notify(StorageEvent(key=key, old_value=old_value, new_value=None), origin)

    def clear(self, origin: Optional[BrowsingContext] = None) -> None:
        """Drop every key, as when the browser session ends."""
        self._ensure_available()
        if not self._read_all():
            return
        self._write_all({})
        self._notify(StorageEvent(key=None), origin)

    def keys(self) -> List[str]:
        self._ensure_available()
        return list(self._read_all().keys())

    # Backend hooks

    def _read_all(self) -> Dict[str, str]:
        return dict(self._data)

    def _write_all(self, data: Dict[str, str]) -> None:
        self._data = dict(data)

    # Helpers

    def _ensure_available(self) -> None:
        if not self.available:
            raise StorageUnavailableError("Session storage is unavailable")

    @staticmethod
    def _size(data: Dict[str, str]) -> int:
        return sum(len(k.encode("utf-8")) + len(v.encode("utf-8")) for k, v in data.items())

    def _notify(self, event: StorageEvent, origin: Optional[BrowsingContext]) -> None:
        for context in list(self._contexts):
            if context is origin:
                continue
            context.events.dispatch(STORAGE_EVENT, event)


class FileSessionStorage(SessionStorage):
    """
    Session storage persisted to a JSON file.

    Writes go to a temp file and are renamed into place. An unreadable
    file is treated as empty storage.
    """

    def __init__(self, path: str, quota_bytes: Optional[int] = None):
        super().__init__(quota_bytes=quota_bytes)
        self.path = path
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

    def _read_all(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read session storage {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Session storage {self.path} is not a JSON object, ignoring")
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: Dict[str, str]) -> None:
        temp_path = f"{self.path}.tmp"
        try:
            with open(temp_path, "w") as f:
                json.dump(data, f, indent=2)
            os.replace(temp_path, self.path)
        except OSError as e:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise StorageUnavailableError(f"Failed to write session storage {self.path}: {e}") from e
