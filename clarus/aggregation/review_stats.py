"""
Review Statistics.

Computes the display-ready review summary shown on property pages and
comparison views. Every function here is pure: no input is mutated and
the same input always produces an equal output.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Sequence

from clarus.models.review import (
    ReviewRecord,
    GOAL_FULLY,
    GOAL_PARTIALLY,
    GOAL_NOT_ACHIEVED,
)

logger = logging.getLogger(__name__)

_ONE_DECIMAL = Decimal("0.1")
_WHOLE = Decimal("1")

DIMENSIONS = (
    ("service", "service_rating"),
    ("facilities", "facilities_rating"),
    ("dining", "dining_rating"),
    ("value", "value_rating"),
)


@dataclass(frozen=True)
class DimensionAverages:
    """Per-dimension means; None means no contributing reviews."""
    service: Optional[float] = None
    facilities: Optional[float] = None
    dining: Optional[float] = None
    value: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "service": self.service,
            "facilities": self.facilities,
            "dining": self.dining,
            "value": self.value,
        }


@dataclass(frozen=True)
class OutcomeStats:
    """Goal achievement partition over reviews that report an outcome."""
    total_with_outcomes: int
    fully_achieved: int
    partially_achieved: int
    not_achieved: int

    @property
    def achievement_rate(self) -> Optional[int]:
        return compute_goal_achievement_rate(
            self.fully_achieved, self.partially_achieved, self.total_with_outcomes
        )

    def to_dict(self) -> dict:
        return {
            "totalWithOutcomes": self.total_with_outcomes,
            "fullyAchieved": self.fully_achieved,
            "partiallyAchieved": self.partially_achieved,
            "notAchieved": self.not_achieved,
        }


@dataclass(frozen=True)
class ReviewStatsSummary:
    """Summary value derived from a list of reviews; never persisted."""
    total_reviews: int
    average_rating: Optional[float]
    dimension_averages: DimensionAverages
    outcome_stats: Optional[OutcomeStats]

    def to_dict(self) -> dict:
        """Convert to the JSON shape consumed by the property page."""
        return {
            "totalReviews": self.total_reviews,
            "averageRating": self.average_rating,
            "ratings": {
                "overall": self.average_rating,
                **self.dimension_averages.to_dict(),
            },
            "outcomeStats": self.outcome_stats.to_dict() if self.outcome_stats else None,
        }


@dataclass(frozen=True)
class ComparisonReviewSummary:
    """Compact review figures shown per column of the comparison page."""
    count: int
    average_rating: Optional[float]
    goal_achievement_rate: Optional[int]

    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "averageRating": self.average_rating,
            "goalAchievementRate": self.goal_achievement_rate,
        }


def mean_one_decimal(values: Iterable[int]) -> Optional[float]:
    """
    Arithmetic mean rounded to one decimal, or None for no values.

    Division is done in Decimal so exact ties such as 81/20 round up.
    """
    values = list(values)
    if not values:
        return None
    mean = Decimal(sum(values)) / Decimal(len(values))
    return float(mean.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def compute_goal_achievement_rate(
    fully_achieved: int,
    partially_achieved: int,
    total_with_outcomes: int
) -> Optional[int]:
    """
    Weighted goal achievement percentage.

    Partial achievement counts half. Returns None when no review reports
    an outcome.

    Args:
        fully_achieved: Reviews reporting FULLY
        partially_achieved: Reviews reporting PARTIALLY
        total_with_outcomes: Reviews reporting any outcome

    Returns:
        Integer percentage 0-100, or None
    """
    if total_with_outcomes <= 0:
        return None
    weighted = Decimal(fully_achieved) + Decimal(partially_achieved) / 2
    rate = weighted / Decimal(total_with_outcomes) * 100
    return int(rate.quantize(_WHOLE, rounding=ROUND_HALF_UP))


def compute_outcome_stats(reviews: Sequence[ReviewRecord]) -> Optional[OutcomeStats]:
    """Partition reviews with a goal_achievement value into three buckets."""
    counts = Counter(r.goal_achievement for r in reviews if r.goal_achievement is not None)
    total = sum(counts.values())
    if total == 0:
        return None
    return OutcomeStats(
        total_with_outcomes=total,
        fully_achieved=counts[GOAL_FULLY],
        partially_achieved=counts[GOAL_PARTIALLY],
        not_achieved=counts[GOAL_NOT_ACHIEVED],
    )


def compute_review_stats(reviews: Sequence[ReviewRecord]) -> ReviewStatsSummary:
    """
    Compute the review summary for one property.

    Each optional dimension is averaged only over the reviews that report
    it. A review missing overall_rating is left out of the overall average
    but still counted in total_reviews; upstream data should never contain
    one.

    Args:
        reviews: Approved reviews for a single property (may be empty)

    Returns:
        ReviewStatsSummary with None fields where there is no data
    """
    total_reviews = len(reviews)

    if total_reviews == 0:
        return ReviewStatsSummary(
            total_reviews=0,
            average_rating=None,
            dimension_averages=DimensionAverages(),
            outcome_stats=None,
        )

    overall = [r.overall_rating for r in reviews if r.overall_rating is not None]
    if len(overall) < total_reviews:
        logger.warning(
            f"{total_reviews - len(overall)} of {total_reviews} reviews have no "
            f"overall rating; excluded from the average"
        )

    dimension_averages = DimensionAverages(**{
        name: mean_one_decimal(
            getattr(r, attr) for r in reviews if getattr(r, attr) is not None
        )
        for name, attr in DIMENSIONS
    })

    return ReviewStatsSummary(
        total_reviews=total_reviews,
        average_rating=mean_one_decimal(overall),
        dimension_averages=dimension_averages,
        outcome_stats=compute_outcome_stats(reviews),
    )


def summarize_for_comparison(reviews: Sequence[ReviewRecord]) -> ComparisonReviewSummary:
    """Review count, average and goal achievement rate for one comparison column."""
    stats = compute_review_stats(reviews)
    outcomes = stats.outcome_stats
    return ComparisonReviewSummary(
        count=stats.total_reviews,
        average_rating=stats.average_rating,
        goal_achievement_rate=outcomes.achievement_rate if outcomes else None,
    )
