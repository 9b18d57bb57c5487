"""
TTL cache abstraction.

Verification codes and rate-limit windows live behind this interface so a
shared store can replace the in-memory one for multi-process deployments.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


class TTLCache(ABC):
    """Key/value cache whose entries expire after a per-entry TTL."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the live value for key, or None if absent or expired."""

    @abstractmethod
    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        """Store value under key for ttl_seconds."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key if present."""

    @abstractmethod
    def sweep_expired(self) -> int:
        """Drop expired entries and return how many were removed."""

    @abstractmethod
    def update(self, key: str, value: Any) -> bool:
        """Replace the value of a live key, keeping its expiry. False if absent."""


class InMemoryTTLCache(TTLCache):
    """
    Single-process TTL cache.

    Args:
        clock: Returns the current time in seconds (defaults to time.monotonic)
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self.clock() > expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        self._entries[key] = (value, self.clock() + ttl_seconds)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def sweep_expired(self) -> int:
        now = self.clock()
        expired = [k for k, (_, expires_at) in self._entries.items() if now > expires_at]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug(f"Swept {len(expired)} expired cache entries")
        return len(expired)

    def update(self, key: str, value: Any) -> bool:
        if self.get(key) is None:
            return False
        _, expires_at = self._entries[key]
        self._entries[key] = (value, expires_at)
        return True

    def __len__(self) -> int:
        return len(self._entries)
