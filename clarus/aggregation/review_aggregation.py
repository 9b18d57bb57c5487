"""
Extended Review Aggregation.

Outcome-focused statistics for a property: verification counts, quality
averages, endorsement scores and follow-up sustainability.
"""

import json
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from clarus.aggregation.review_stats import mean_one_decimal
from clarus.models.review import (
    ReviewRecord,
    GOAL_FULLY,
    GOAL_PARTIALLY,
    GOAL_NOT_ACHIEVED,
)

logger = logging.getLogger(__name__)

# Numeric weights for categorical answers
GOAL_ACHIEVEMENT_SCORES = {GOAL_FULLY: 5, GOAL_PARTIALLY: 3, GOAL_NOT_ACHIEVED: 1}
PHYSICIAN_ENDORSEMENT_SCORES = {"YES": 5, "PROBABLY": 4, "UNSURE": 2, "NO": 1}

FOLLOW_UP_PERIODS = (
    ("thirty_day", "follow_up_30_days"),
    ("ninety_day", "follow_up_90_days"),
    ("one_eighty_day", "follow_up_180_days"),
)


@dataclass(frozen=True)
class FollowUpData:
    thirty_day_count: int = 0
    thirty_day_fully_sustained: int = 0
    ninety_day_count: int = 0
    ninety_day_fully_sustained: int = 0
    one_eighty_day_count: int = 0
    one_eighty_day_fully_sustained: int = 0

    def to_dict(self) -> dict:
        return {
            "thirtyDayCount": self.thirty_day_count,
            "thirtyDayFullySustained": self.thirty_day_fully_sustained,
            "ninetyDayCount": self.ninety_day_count,
            "ninetyDayFullySustained": self.ninety_day_fully_sustained,
            "oneEightyDayCount": self.one_eighty_day_count,
            "oneEightyDayFullySustained": self.one_eighty_day_fully_sustained,
        }


@dataclass(frozen=True)
class GoalAchievementDistribution:
    fully: int = 0
    partially: int = 0
    not_achieved: int = 0

    def to_dict(self) -> dict:
        return {
            "fully": self.fully,
            "partially": self.partially,
            "notAchieved": self.not_achieved,
        }


@dataclass(frozen=True)
class ReviewAggregation:
    """Full statistics block for a property's approved reviews."""
    total_reviews: int
    verified_count: int
    team_review_count: int
    overall_average: Optional[float]
    goal_achievement_avg: Optional[float]
    protocol_quality_avg: Optional[float]
    followup_quality_avg: Optional[float]
    physician_endorsement_avg: Optional[float]
    facilities_avg: Optional[float]
    service_avg: Optional[float]
    food_avg: Optional[float]
    value_avg: Optional[float]
    follow_up: FollowUpData
    goal_achievement_distribution: GoalAchievementDistribution

    def to_dict(self) -> dict:
        """Convert to JSON-serializable camelCase dict."""
        return {
            "totalReviews": self.total_reviews,
            "verifiedCount": self.verified_count,
            "teamReviewCount": self.team_review_count,
            "overallAverage": self.overall_average,
            "goalAchievementAvg": self.goal_achievement_avg,
            "protocolQualityAvg": self.protocol_quality_avg,
            "followupQualityAvg": self.followup_quality_avg,
            "physicianEndorsementAvg": self.physician_endorsement_avg,
            "facilitiesAvg": self.facilities_avg,
            "serviceAvg": self.service_avg,
            "foodAvg": self.food_avg,
            "valueAvg": self.value_avg,
            "followUpData": self.follow_up.to_dict(),
            "goalAchievementDistribution": self.goal_achievement_distribution.to_dict(),
        }


def _present(reviews: Sequence[ReviewRecord], attr: str) -> list:
    return [getattr(r, attr) for r in reviews if getattr(r, attr) is not None]


def _is_fully_sustained(payload: str) -> bool:
    try:
        parsed = json.loads(payload)
    except (TypeError, ValueError):
        logger.warning("Unparsable follow-up payload; counted as not sustained")
        return False
    return isinstance(parsed, dict) and parsed.get("resultsSustained") == "fully"


def _follow_up_data(reviews: Sequence[ReviewRecord]) -> FollowUpData:
    counts = {}
    for prefix, attr in FOLLOW_UP_PERIODS:
        payloads = _present(reviews, attr)
        counts[f"{prefix}_count"] = len(payloads)
        counts[f"{prefix}_fully_sustained"] = sum(1 for p in payloads if _is_fully_sustained(p))
    return FollowUpData(**counts)


def compute_review_aggregation(reviews: Sequence[ReviewRecord]) -> Optional[ReviewAggregation]:
    """
    Aggregate approved reviews for one property.

    Args:
        reviews: Approved reviews for a single property

    Returns:
        ReviewAggregation, or None when there are no reviews
    """
    if not reviews:
        return None

    goals = _present(reviews, "goal_achievement")
    endorsements = _present(reviews, "physician_endorsement")

    return ReviewAggregation(
        total_reviews=len(reviews),
        verified_count=sum(1 for r in reviews if r.verified),
        team_review_count=sum(1 for r in reviews if r.is_team_review),
        overall_average=mean_one_decimal(_present(reviews, "overall_rating")),
        goal_achievement_avg=mean_one_decimal(GOAL_ACHIEVEMENT_SCORES[g] for g in goals),
        protocol_quality_avg=mean_one_decimal(_present(reviews, "protocol_quality_rating")),
        followup_quality_avg=mean_one_decimal(_present(reviews, "followup_quality_rating")),
        physician_endorsement_avg=mean_one_decimal(
            PHYSICIAN_ENDORSEMENT_SCORES[e] for e in endorsements
        ),
        facilities_avg=mean_one_decimal(_present(reviews, "facilities_rating")),
        service_avg=mean_one_decimal(_present(reviews, "service_rating")),
        food_avg=mean_one_decimal(_present(reviews, "dining_rating")),
        value_avg=mean_one_decimal(_present(reviews, "value_rating")),
        follow_up=_follow_up_data(reviews),
        goal_achievement_distribution=GoalAchievementDistribution(
            fully=goals.count(GOAL_FULLY),
            partially=goals.count(GOAL_PARTIALLY),
            not_achieved=goals.count(GOAL_NOT_ACHIEVED),
        ),
    )
