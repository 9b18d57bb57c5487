"""
Property data model.

The subset of a published property needed to build a comparison table.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from clarus.models.review import ReviewRecord

SCORE_FIELDS = (
    ("Clinical Rigor", "clinical_rigor_score"),
    ("Outcome Evidence", "outcome_evidence_score"),
    ("Program Depth", "program_depth_score"),
    ("Experience Quality", "experience_quality_score"),
    ("Value Alignment", "value_alignment_score"),
)


@dataclass
class PropertyRecord:
    """A wellness destination as returned by the data-fetch boundary."""
    property_id: str
    slug: str
    name: str
    tier: str  # TIER_1, TIER_2 or TIER_3
    city: str = ""
    country: str = ""
    price_min: Optional[float] = None
    price_max: Optional[float] = None
    currency: str = "USD"
    founded_year: Optional[int] = None
    capacity: Optional[int] = None
    overall_score: Optional[int] = None
    clinical_rigor_score: Optional[int] = None
    outcome_evidence_score: Optional[int] = None
    program_depth_score: Optional[int] = None
    experience_quality_score: Optional[int] = None
    value_alignment_score: Optional[int] = None
    focus_areas: List[str] = field(default_factory=list)
    treatments: List[str] = field(default_factory=list)
    program_prices: List[float] = field(default_factory=list)
    published: bool = True
    reviews: List[ReviewRecord] = field(default_factory=list)

    def __post_init__(self):
        if not self.slug:
            raise ValueError(f"Property {self.property_id} has no slug")

    @classmethod
    def from_dict(cls, data: dict) -> "PropertyRecord":
        """Create PropertyRecord from a camelCase JSON dict."""
        return cls(
            property_id=data["id"],
            slug=data["slug"],
            name=data.get("name", data["slug"]),
            tier=data.get("tier", ""),
            city=data.get("city", ""),
            country=data.get("country", ""),
            price_min=data.get("priceMin"),
            price_max=data.get("priceMax"),
            currency=data.get("currency") or "USD",
            founded_year=data.get("foundedYear"),
            capacity=data.get("capacity"),
            overall_score=data.get("overallScore"),
            clinical_rigor_score=data.get("clinicalRigorScore"),
            outcome_evidence_score=data.get("outcomeEvidenceScore"),
            program_depth_score=data.get("programDepthScore"),
            experience_quality_score=data.get("experienceQualityScore"),
            value_alignment_score=data.get("valueAlignmentScore"),
            focus_areas=list(data.get("focusAreas") or []),
            treatments=list(data.get("treatments") or []),
            program_prices=[p["price"] for p in data.get("programs") or [] if p.get("price") is not None],
            published=data.get("published", True),
        )
