"""
Comparison Store.

Tracks the properties a visitor is comparing, persisted in session
storage under one well-known key and kept in sync across contexts.

Cross-context writes are last-write-wins with no locking: two contexts
adding at the same moment can lose one of the adds.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

import config.settings as settings
from clarus.comparison.events import BrowsingContext
from clarus.comparison.session_storage import SessionStorage, StorageError
from clarus.comparison.urls import build_shareable_url
from clarus.models.comparison import ComparisonItem, ComparisonList

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _isoformat(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ComparisonStore:
    """
    Comparison state for one browsing context.

    Every mutation reads the persisted state, applies the change, writes
    it back, then dispatches COMPARISON_UPDATED_EVENT in its own context.
    Storage failures never propagate: reads degrade to an empty list and
    failed writes leave the prior state in place.
    """

    def __init__(
        self,
        storage: SessionStorage,
        context: Optional[BrowsingContext] = None,
        storage_key: str = settings.COMPARISON_STORAGE_KEY,
        max_items: int = settings.MAX_COMPARISON_ITEMS,
        clock: Callable[[], datetime] = _utc_now
    ):
        """
        Initialize comparison store.

        Args:
            storage: Session storage shared by all contexts
            context: The browsing context this store runs in
            storage_key: Key the comparison JSON is stored under
            max_items: Capacity of the comparison list
            clock: Source of addedAt timestamps
        """
        self.storage = storage
        self.context = context or BrowsingContext()
        self.storage_key = storage_key
        self.max_items = max_items
        self.clock = clock

        self.storage.attach(self.context)
        self._state = ComparisonList.empty(max_items)

    @property
    def state(self) -> ComparisonList:
        """Last state read or written by this store."""
        return self._state

    def read(self) -> ComparisonList:
        """
        Load the persisted comparison list.

        Absent, unreadable or malformed storage yields the empty list.
        """
        try:
            stored = self.storage.get_item(self.storage_key)
        except StorageError as e:
            logger.error(f"Error reading comparison state: {e}")
            stored = None

        self._state = self._parse(stored) if stored else ComparisonList.empty(self.max_items)
        return self._state

    def add(self, property_id: str, property_slug: str, property_name: str) -> ComparisonList:
        """
        Append a property to the comparison.

        Already-present ids and a full list are silent no-ops; callers
        detect them by checking the returned state.
        """
        current = self.read()

        if current.contains(property_id):
            logger.debug(f"Property {property_id} already in comparison")
            return current

        if current.is_full:
            logger.info(
                f"Comparison full ({current.count}/{self.max_items}), "
                f"not adding {property_id}"
            )
            return current

        try:
            item = ComparisonItem(
                property_id=property_id,
                property_slug=property_slug,
                property_name=property_name,
                added_at=_isoformat(self.clock()),
            )
        except ValueError as e:
            logger.warning(f"Not adding invalid comparison item: {e}")
            return current
        return self._save(current, current.with_item(item))

    def remove(self, property_id: str) -> ComparisonList:
        """Remove a property; remaining items keep their order."""
        current = self.read()
        return self._save(current, current.without(property_id))

    def clear(self) -> ComparisonList:
        current = self.read()
        return self._save(current, ComparisonList.empty(self.max_items))

    def contains(self, property_id: str) -> bool:
        """Membership check against the in-memory state; no storage access."""
        return self._state.contains(property_id)

    def count(self) -> int:
        return self._state.count

    def is_full(self) -> bool:
        return self._state.is_full

    def get_comparison_url(self) -> str:
        return build_shareable_url(self._state.items)

    # Internal helpers

    def _save(self, previous: ComparisonList, updated: ComparisonList) -> ComparisonList:
        payload = json.dumps(updated.to_dict())
        try:
            self.storage.set_item(self.storage_key, payload, origin=self.context)
        except (StorageError, TypeError, ValueError) as e:
            logger.error(f"Error saving comparison state: {e}")
            self._state = previous
            return previous

        self._state = updated
        logger.debug(f"Saved comparison state with {updated.count} items")
        self.context.events.dispatch(settings.COMPARISON_UPDATED_EVENT, updated)
        return updated

    def _parse(self, stored: str) -> ComparisonList:
        try:
            data = json.loads(stored)
        except (ValueError, RecursionError) as e:
            logger.error(f"Error parsing comparison state: {e}")
            return ComparisonList.empty(self.max_items)

        raw_items = data.get("items") if isinstance(data, dict) else None
        if not isinstance(raw_items, list):
            logger.warning("Stored comparison state has no item list, treating as empty")
            return ComparisonList.empty(self.max_items)

        items: List[ComparisonItem] = []
        seen = set()
        for raw in raw_items:
            try:
                item = ComparisonItem.from_dict(raw)
            except (KeyError, TypeError, AttributeError, ValueError) as e:
                logger.warning(f"Skipping malformed comparison item {raw!r}: {e}")
                continue
            if item.property_id in seen:
                continue
            seen.add(item.property_id)
            items.append(item)

        if len(items) > self.max_items:
            logger.warning(
                f"Stored comparison has {len(items)} items, keeping first {self.max_items}"
            )
            items = items[:self.max_items]

        return ComparisonList(items=tuple(items), max_items=self.max_items)
