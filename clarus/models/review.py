"""
Review data model.

Represents an approved review record as returned by the data-fetch boundary.
"""

from dataclasses import dataclass, field
from typing import Optional

GOAL_FULLY = "FULLY"
GOAL_PARTIALLY = "PARTIALLY"
GOAL_NOT_ACHIEVED = "NOT_ACHIEVED"
GOAL_ACHIEVEMENT_VALUES = (GOAL_FULLY, GOAL_PARTIALLY, GOAL_NOT_ACHIEVED)

ENDORSEMENT_VALUES = ("YES", "PROBABLY", "UNSURE", "NO")

RATING_FIELDS = (
    "overall_rating",
    "service_rating",
    "facilities_rating",
    "dining_rating",
    "value_rating",
    "protocol_quality_rating",
    "followup_quality_rating",
)


@dataclass
class ReviewRecord:
    """
    One visitor's rating and outcome submission for a property.

    overall_rating is guaranteed by the data-fetch boundary; every other
    rating is independently optional. Absent values are None, never 0.
    """
    overall_rating: Optional[int]  # 1-5, required upstream
    service_rating: Optional[int] = None
    facilities_rating: Optional[int] = None
    dining_rating: Optional[int] = None
    value_rating: Optional[int] = None
    goal_achievement: Optional[str] = None  # FULLY, PARTIALLY or NOT_ACHIEVED

    # Outcome-focused fields
    protocol_quality_rating: Optional[int] = None
    followup_quality_rating: Optional[int] = None
    physician_endorsement: Optional[str] = None  # YES, PROBABLY, UNSURE or NO
    follow_up_30_days: Optional[str] = None  # JSON payload
    follow_up_90_days: Optional[str] = None
    follow_up_180_days: Optional[str] = None

    # Identity and listing metadata
    review_id: Optional[str] = None
    status: Optional[str] = None
    reviewer_name: Optional[str] = None
    verified: bool = False
    is_team_review: bool = False
    helpful_count: int = 0
    created_at: Optional[str] = None  # ISO-8601
    extra: dict = field(default_factory=dict)

    def __post_init__(self):
        for name in RATING_FIELDS:
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int) or not (1 <= value <= 5):
                raise ValueError(f"Invalid {name}: {value!r}. Must be an integer 1-5")

        if self.goal_achievement is not None and self.goal_achievement not in GOAL_ACHIEVEMENT_VALUES:
            raise ValueError(
                f"Invalid goal_achievement: {self.goal_achievement}. "
                f"Must be one of {', '.join(GOAL_ACHIEVEMENT_VALUES)}"
            )

        if self.physician_endorsement is not None and self.physician_endorsement not in ENDORSEMENT_VALUES:
            raise ValueError(
                f"Invalid physician_endorsement: {self.physician_endorsement}. "
                f"Must be one of {', '.join(ENDORSEMENT_VALUES)}"
            )

    @classmethod
    def from_dict(cls, data: dict) -> "ReviewRecord":
        """Create ReviewRecord from a camelCase JSON dict."""
        known = {
            "id", "status", "reviewerName", "verified", "isTeamReview",
            "helpfulCount", "createdAt", "overallRating", "serviceRating",
            "facilitiesRating", "diningRating", "valueRating", "goalAchievement",
            "protocolQualityRating", "followupQualityRating",
            "physicianEndorsement", "followUp30Days", "followUp90Days",
            "followUp180Days",
        }
        return cls(
            overall_rating=data.get("overallRating"),
            service_rating=data.get("serviceRating"),
            facilities_rating=data.get("facilitiesRating"),
            dining_rating=data.get("diningRating"),
            value_rating=data.get("valueRating"),
            goal_achievement=data.get("goalAchievement"),
            protocol_quality_rating=data.get("protocolQualityRating"),
            followup_quality_rating=data.get("followupQualityRating"),
            physician_endorsement=data.get("physicianEndorsement"),
            follow_up_30_days=data.get("followUp30Days"),
            follow_up_90_days=data.get("followUp90Days"),
            follow_up_180_days=data.get("followUp180Days"),
            review_id=data.get("id"),
            status=data.get("status"),
            reviewer_name=data.get("reviewerName"),
            verified=bool(data.get("verified", False)),
            is_team_review=bool(data.get("isTeamReview", False)),
            helpful_count=data.get("helpfulCount") or 0,
            created_at=data.get("createdAt"),
            extra={k: v for k, v in data.items() if k not in known},
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable camelCase dict."""
        data = {
            "id": self.review_id,
            "status": self.status,
            "reviewerName": self.reviewer_name,
            "verified": self.verified,
            "isTeamReview": self.is_team_review,
            "helpfulCount": self.helpful_count,
            "createdAt": self.created_at,
            "overallRating": self.overall_rating,
            "serviceRating": self.service_rating,
            "facilitiesRating": self.facilities_rating,
            "diningRating": self.dining_rating,
            "valueRating": self.value_rating,
            "goalAchievement": self.goal_achievement,
            "protocolQualityRating": self.protocol_quality_rating,
            "followupQualityRating": self.followup_quality_rating,
            "physicianEndorsement": self.physician_endorsement,
            "followUp30Days": self.follow_up_30_days,
            "followUp90Days": self.follow_up_90_days,
            "followUp180Days": self.follow_up_180_days,
        }
        data.update(self.extra)
        return data
