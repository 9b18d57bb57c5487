"""
Comparison Exporter.

Builds the side-by-side comparison table for up to MAX_COMPARISON_ITEMS
properties and writes it as CSV or HTML with a metadata sidecar.
"""

import html
import json
import logging
import os
from datetime import datetime, timezone
from typing import List, Optional

import pandas as pd

import config.settings as settings
from clarus.aggregation.review_stats import summarize_for_comparison
from clarus.models.property import PropertyRecord, SCORE_FIELDS
from clarus.utils.storage import DataStore

logger = logging.getLogger(__name__)

MISSING = "—"

TIER_LABELS = {
    "TIER_1": "Medical Longevity",
    "TIER_2": "Integrated Wellness",
    "TIER_3": "Luxury Destination",
}

FOCUS_AREA_LABELS = {
    "LONGEVITY": "Longevity & Anti-aging",
    "DETOX": "Detox & Reset",
    "WEIGHT_METABOLIC": "Weight & Metabolic Health",
    "STRESS_BURNOUT": "Stress & Burnout Recovery",
    "FITNESS_PERFORMANCE": "Fitness & Performance",
    "BEAUTY_AESTHETIC": "Beauty & Aesthetic",
    "HOLISTIC_SPIRITUAL": "Holistic & Spiritual",
    "MEDICAL_ASSESSMENT": "Medical Assessment",
    "POST_ILLNESS": "Post-illness Recovery",
    "ADDICTION_BEHAVIORAL": "Addiction & Behavioral",
    "COGNITIVE_BRAIN": "Cognitive & Brain Health",
    "SLEEP": "Sleep Optimization",
    "WOMENS_HEALTH": "Women's Health",
    "MENS_HEALTH": "Men's Health",
    "GENERAL_REJUVENATION": "General Rejuvenation",
}

EXPORT_FORMATS = ("csv", "html")


class ComparisonExportError(Exception):
    """Raised when a comparison export cannot be produced."""


def score_tier(score: Optional[int]) -> str:
    """Label for an overall score."""
    if score is None:
        return "Not rated"
    if score >= 90:
        return "Exceptional"
    if score >= 80:
        return "Distinguished"
    if score >= 70:
        return "Notable"
    return "Curated"


def format_price(amount: Optional[float], currency: str) -> str:
    if amount is None:
        return MISSING
    return f"{currency} {amount:,.0f}"


def format_price_range(low: Optional[float], high: Optional[float], currency: str) -> str:
    if low is None and high is None:
        return MISSING
    return f"{format_price(low, currency)} - {format_price(high, currency)}"


def _or_missing(value) -> str:
    if value is None or value == "" or value == []:
        return MISSING
    return str(value)


def _property_column(prop: PropertyRecord) -> dict:
    """All table rows for one property, keyed by row label."""
    reviews = summarize_for_comparison(prop.reviews)
    location = ", ".join(part for part in (prop.city, prop.country) if part)

    column = {
        "Property Tier": TIER_LABELS.get(prop.tier, prop.tier) or MISSING,
        "Location": location or MISSING,
        "Established": _or_missing(prop.founded_year),
        "Capacity": f"{prop.capacity} rooms" if prop.capacity else MISSING,
        "Price Range": format_price_range(prop.price_min, prop.price_max, prop.currency),
        "Overall Score": (
            f"{prop.overall_score} ({score_tier(prop.overall_score)})"
            if prop.overall_score is not None else MISSING
        ),
    }

    for label, attr in SCORE_FIELDS:
        column[label] = _or_missing(getattr(prop, attr))

    column["Focus Areas"] = _or_missing(
        ", ".join(FOCUS_AREA_LABELS.get(fa, fa) for fa in prop.focus_areas)
    )
    column["Treatments Offered"] = f"{len(prop.treatments)} treatments"
    column["Programs"] = str(len(prop.program_prices))
    column["Program Price Range"] = (
        format_price_range(min(prop.program_prices), max(prop.program_prices), prop.currency)
        if prop.program_prices else MISSING
    )
    column["Reviews"] = str(reviews.count)
    column["Average Rating"] = _or_missing(reviews.average_rating)
    column["Goal Achievement"] = (
        f"{reviews.goal_achievement_rate}%"
        if reviews.goal_achievement_rate is not None else MISSING
    )
    return column


class ComparisonExporter:
    """
    Exports a comparison of published properties.
    """

    def __init__(
        self,
        data_store: DataStore,
        max_items: int = settings.MAX_COMPARISON_ITEMS
    ):
        """
        Initialize comparison exporter.

        Args:
            data_store: Data-fetch boundary for properties and reviews
            max_items: Maximum number of properties per comparison
        """
        self.data_store = data_store
        self.max_items = max_items

    def resolve(self, slugs: List[str]) -> List[PropertyRecord]:
        """
        Load properties for slugs in the requested order.

        Raises:
            ComparisonExportError: If no slug is given or none resolves
        """
        requested = [slug for slug in slugs if slug][:self.max_items]
        if not requested:
            raise ComparisonExportError("No property slugs provided")

        properties = self.data_store.load_properties_by_slugs(requested)
        if not properties:
            raise ComparisonExportError(f"No valid properties found for {', '.join(requested)}")
        return properties

    def build_table(self, properties: List[PropertyRecord]) -> pd.DataFrame:
        """One row per attribute, one column per property, in input order."""
        if not properties:
            return pd.DataFrame()

        rows = [_property_column(prop) for prop in properties]
        df = pd.DataFrame(rows, index=[prop.name for prop in properties]).T
        df.index.name = "Attribute"
        return df

    def export(
        self,
        slugs: List[str],
        output_dir: str = str(settings.OUTPUT_ROOT),
        fmt: str = "csv"
    ) -> str:
        """
        Write the comparison table for slugs.

        Args:
            slugs: Property slugs in display order
            output_dir: Directory to save the export
            fmt: "csv" or "html"

        Returns:
            Path to the written table
        """
        if fmt not in EXPORT_FORMATS:
            raise ComparisonExportError(f"Unsupported export format: {fmt}")

        requested = [slug for slug in slugs if slug][:self.max_items]
        properties = self.resolve(requested)
        df = self.build_table(properties)

        generated_at = datetime.now(timezone.utc)
        stamp = generated_at.strftime("%Y%m%dT%H%M%S%f")

        os.makedirs(output_dir, exist_ok=True)
        output_path = os.path.join(output_dir, f"comparison_{stamp}.{fmt}")

        if fmt == "csv":
            df.to_csv(output_path)
        else:
            title = html.escape(" vs ".join(prop.name for prop in properties))
            with open(output_path, 'w', encoding="utf-8") as f:
                f.write(f"<h1>Clarus Vitae Property Comparison</h1>\n<h2>{title}</h2>\n")
                f.write(df.to_html(escape=True))

        logger.info(
            f"Comparison export saved to {output_path} "
            f"({len(properties)} of {len(requested)} properties)"
        )

        returned = [prop.slug for prop in properties]
        metadata = {
            "requested_slugs": requested,
            "returned_slugs": returned,
            "missing_slugs": [slug for slug in requested if slug not in returned],
            "max_items": self.max_items,
            "format": fmt,
            "generated_at": generated_at.isoformat().replace("+00:00", "Z"),
        }
        metadata_path = os.path.join(output_dir, f"comparison_{stamp}_metadata.json")
        with open(metadata_path, 'w') as f:
            json.dump(metadata, f, indent=2)

        logger.info(f"Metadata saved to {metadata_path}")
        return output_path
