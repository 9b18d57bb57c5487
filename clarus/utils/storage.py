"""
Storage utility.

File-backed data-fetch boundary for properties and their reviews.
"""

import json
import logging
import os
from typing import Dict, List, Optional

import config.settings as settings
from clarus.models.property import PropertyRecord
from clarus.models.review import ReviewRecord

logger = logging.getLogger(__name__)


class DataStore:
    """
    Reads property and review records from JSON files.

    Layout:
    - Properties: data/properties.json (list of property dicts)
    - Reviews: data/reviews/<property_id>.json (list of review dicts)
    """

    def __init__(self, data_root: str):
        """
        Initialize data store.

        Args:
            data_root: Root data directory (e.g., /path/to/data)
        """
        self.data_root = data_root
        self.properties_path = os.path.join(data_root, "properties.json")
        self.reviews_dir = os.path.join(data_root, "reviews")

        os.makedirs(self.reviews_dir, exist_ok=True)

        logger.info(f"Initialized DataStore with data_root={data_root}")

    def _load_json(self, filepath: str) -> Optional[list]:
        if not os.path.exists(filepath):
            logger.debug(f"No data file at {filepath}")
            return None

        try:
            with open(filepath, 'r') as f:
                data = json.load(f)
        except Exception as e:
            logger.error(f"Failed to load {filepath}: {e}")
            return None

        if not isinstance(data, list):
            logger.error(f"Expected a JSON list in {filepath}, got {type(data).__name__}")
            return None
        return data

    def save_reviews(self, reviews: List[Dict], property_id: str) -> None:
        """
        Save raw review dicts for a property.

        Args:
            reviews: List of camelCase review dicts
            property_id: Owning property id
        """
        filepath = os.path.join(self.reviews_dir, f"{property_id}.json")

        try:
            with open(filepath, 'w') as f:
                json.dump(reviews, f, indent=2)
            logger.info(f"Saved {len(reviews)} reviews to {filepath}")
        except Exception as e:
            logger.error(f"Failed to save reviews for {property_id}: {e}")
            raise

    def save_properties(self, properties: List[Dict]) -> None:
        try:
            with open(self.properties_path, 'w') as f:
                json.dump(properties, f, indent=2)
            logger.info(f"Saved {len(properties)} properties to {self.properties_path}")
        except Exception as e:
            logger.error(f"Failed to save properties: {e}")
            raise

    def load_reviews(self, property_id: str, approved_only: bool = True) -> List[ReviewRecord]:
        """
        Load reviews for a property.

        Records that fail validation are skipped with a warning.

        Args:
            property_id: Property id
            approved_only: Keep only reviews with APPROVED status (records
                without a status are treated as approved)

        Returns:
            List of ReviewRecord, empty if the file doesn't exist
        """
        raw_reviews = self._load_json(os.path.join(self.reviews_dir, f"{property_id}.json"))
        if not raw_reviews:
            return []

        reviews = []
        for raw in raw_reviews:
            try:
                review = ReviewRecord.from_dict(raw)
            except (ValueError, TypeError, AttributeError) as e:
                logger.warning(f"Skipping invalid review for {property_id}: {e}")
                continue

            if approved_only and review.status not in (None, settings.APPROVED_REVIEW_STATUS):
                continue
            reviews.append(review)

        logger.debug(f"Loaded {len(reviews)} reviews for {property_id}")
        return reviews

    def load_properties(self, published_only: bool = True) -> List[PropertyRecord]:
        """
        Load all properties, each with its approved reviews attached.

        Returns:
            List of PropertyRecord, empty if properties.json doesn't exist
        """
        raw_properties = self._load_json(self.properties_path)
        if not raw_properties:
            return []

        properties = []
        for raw in raw_properties:
            try:
                prop = PropertyRecord.from_dict(raw)
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                logger.warning(f"Skipping invalid property record: {e}")
                continue

            if published_only and not prop.published:
                continue
            prop.reviews = self.load_reviews(prop.property_id)
            properties.append(prop)

        return properties

    def load_properties_by_slugs(self, slugs: List[str]) -> List[PropertyRecord]:
        """
        Load published properties in the order of slugs.

        Unknown slugs are dropped.
        """
        by_slug = {p.slug: p for p in self.load_properties()}
        found = [by_slug[slug] for slug in slugs if slug in by_slug]

        missing = [slug for slug in slugs if slug not in by_slug]
        if missing:
            logger.warning(f"Properties not found: {', '.join(missing)}")

        return found

    def load_property(self, slug: str) -> Optional[PropertyRecord]:
        found = self.load_properties_by_slugs([slug])
        return found[0] if found else None
