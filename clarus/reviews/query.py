"""
Review list queries.

Parses list-endpoint query parameters and applies them to an in-memory
list of reviews: filtering, sorting and pagination.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence

import config.settings as settings
from clarus.models.review import ReviewRecord

logger = logging.getLogger(__name__)

SORT_OPTIONS = ("newest", "oldest", "highest", "lowest", "helpful")


def _rating_key(review: ReviewRecord) -> int:
    return review.overall_rating or 0


# sort option -> (key, descending)
_SORT_KEYS: Dict[str, tuple] = {
    "newest": (lambda r: r.created_at or "", True),
    "oldest": (lambda r: r.created_at or "", False),
    "highest": (_rating_key, True),
    "lowest": (_rating_key, False),
    "helpful": (lambda r: r.helpful_count, True),
}


def _parse_int(value: Optional[str], default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring non-integer query value {value!r}")
        return default


@dataclass
class ReviewPage:
    """One page of reviews plus pagination metadata."""
    reviews: List[ReviewRecord]
    page: int
    limit: int
    total_count: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.limit) if self.limit else 0

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous_page(self) -> bool:
        return self.page > 1

    def to_dict(self) -> dict:
        return {
            "reviews": [r.to_dict() for r in self.reviews],
            "pagination": {
                "page": self.page,
                "limit": self.limit,
                "totalCount": self.total_count,
                "totalPages": self.total_pages,
                "hasNextPage": self.has_next_page,
                "hasPreviousPage": self.has_previous_page,
            },
        }


@dataclass
class ReviewQuery:
    page: int = 1
    limit: int = settings.REVIEWS_DEFAULT_LIMIT
    sort: str = settings.REVIEWS_DEFAULT_SORT
    verified_only: bool = False
    team_only: bool = False

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, str],
        max_limit: int = settings.REVIEWS_MAX_LIMIT
    ) -> "ReviewQuery":
        """
        Build a query from request parameters.

        page and limit fall back to their defaults when unparsable and are
        clamped to at least 1; limit is capped at max_limit. An unknown sort
        falls back to newest.
        """
        page = max(1, _parse_int(params.get("page"), 1))
        limit = _parse_int(params.get("limit"), settings.REVIEWS_DEFAULT_LIMIT)
        limit = max(1, min(limit, max_limit))

        sort = params.get("sort") or settings.REVIEWS_DEFAULT_SORT
        if sort not in SORT_OPTIONS:
            logger.debug(f"Unknown sort '{sort}', using {settings.REVIEWS_DEFAULT_SORT}")
            sort = settings.REVIEWS_DEFAULT_SORT

        return cls(
            page=page,
            limit=limit,
            sort=sort,
            verified_only=params.get("verified") == "true",
            team_only=params.get("team") == "true",
        )

    def matches(self, review: ReviewRecord) -> bool:
        if self.verified_only and not review.verified:
            return False
        if self.team_only and not review.is_team_review:
            return False
        return True

    def apply(self, reviews: Sequence[ReviewRecord]) -> ReviewPage:
        """Filter, sort and slice reviews into a ReviewPage."""
        matching = [r for r in reviews if self.matches(r)]

        key, descending = _SORT_KEYS[self.sort]
        ordered = sorted(matching, key=key, reverse=descending)

        start = (self.page - 1) * self.limit
        return ReviewPage(
            reviews=ordered[start:start + self.limit],
            page=self.page,
            limit=self.limit,
            total_count=len(matching),
        )
