"""
Comparison data models.

ComparisonItem is one property a visitor is comparing; ComparisonList is the
bounded, ordered set held for one browser session.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import config.settings as settings


@dataclass(frozen=True)
class ComparisonItem:
    """A property added to the comparison tray."""
    property_id: str
    property_slug: str
    property_name: str
    added_at: str  # ISO-8601

    def __post_init__(self):
        if not self.property_id:
            raise ValueError("property_id must be a non-empty string")
        if not self.property_slug:
            raise ValueError("property_slug must be a non-empty string")

    @classmethod
    def from_dict(cls, data: dict) -> "ComparisonItem":
        """Create ComparisonItem from its persisted camelCase form."""
        return cls(
            property_id=data["propertyId"],
            property_slug=data["propertySlug"],
            property_name=data.get("propertyName", ""),
            added_at=data.get("addedAt", ""),
        )

    def to_dict(self) -> dict:
        return {
            "propertyId": self.property_id,
            "propertySlug": self.property_slug,
            "propertyName": self.property_name,
            "addedAt": self.added_at,
        }


@dataclass(frozen=True)
class ComparisonList:
    """
    Ordered comparison set. Insertion order is display order.

    Invariants: len(items) <= max_items and property ids are unique.
    Instances are values; every mutation produces a new list.
    """
    items: Tuple[ComparisonItem, ...] = field(default_factory=tuple)
    max_items: int = settings.MAX_COMPARISON_ITEMS

    def __post_init__(self):
        if len(self.items) > self.max_items:
            raise ValueError(
                f"Comparison holds {len(self.items)} items, max is {self.max_items}"
            )
        ids = [item.property_id for item in self.items]
        if len(ids) != len(set(ids)):
            raise ValueError("Duplicate property_id in comparison list")

    @classmethod
    def empty(cls, max_items: int = settings.MAX_COMPARISON_ITEMS) -> "ComparisonList":
        return cls(items=(), max_items=max_items)

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def is_full(self) -> bool:
        return len(self.items) >= self.max_items

    @property
    def slugs(self) -> List[str]:
        return [item.property_slug for item in self.items]

    def contains(self, property_id: str) -> bool:
        return any(item.property_id == property_id for item in self.items)

    def get(self, property_id: str) -> Optional[ComparisonItem]:
        for item in self.items:
            if item.property_id == property_id:
                return item
        return None

    def with_item(self, item: ComparisonItem) -> "ComparisonList":
        """Return a new list with item appended."""
        return ComparisonList(items=self.items + (item,), max_items=self.max_items)

    def without(self, property_id: str) -> "ComparisonList":
        """Return a new list without property_id; relative order is kept."""
        return ComparisonList(
            items=tuple(item for item in self.items if item.property_id != property_id),
            max_items=self.max_items,
        )

    def to_dict(self) -> dict:
        """Persisted shape: {"items": [...]}."""
        return {"items": [item.to_dict() for item in self.items]}
