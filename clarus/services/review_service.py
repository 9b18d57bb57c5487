"""
Review Service.

Binds the data-fetch boundary to review aggregation and listing.
"""

import logging
from typing import Mapping, Optional

from clarus.aggregation.review_aggregation import ReviewAggregation, compute_review_aggregation
from clarus.aggregation.review_stats import (
    ComparisonReviewSummary,
    ReviewStatsSummary,
    compute_review_stats,
    summarize_for_comparison,
)
from clarus.reviews.query import ReviewPage, ReviewQuery
from clarus.utils.storage import DataStore

logger = logging.getLogger(__name__)


class ReviewService:
    """Review statistics and listings for a property."""

    def __init__(self, data_store: DataStore):
        self.data_store = data_store

    def get_review_stats(self, property_id: str) -> ReviewStatsSummary:
        reviews = self.data_store.load_reviews(property_id)
        stats = compute_review_stats(reviews)
        logger.info(
            f"Review stats for {property_id}: {stats.total_reviews} reviews, "
            f"average {stats.average_rating}"
        )
        return stats

    def get_review_aggregation(self, property_id: str) -> Optional[ReviewAggregation]:
        return compute_review_aggregation(self.data_store.load_reviews(property_id))

    def get_comparison_summary(self, property_id: str) -> ComparisonReviewSummary:
        return summarize_for_comparison(self.data_store.load_reviews(property_id))

    def get_property_reviews(self, property_id: str, params: Mapping[str, str]) -> ReviewPage:
        """
        One page of approved reviews for a property.

        Args:
            property_id: Property id
            params: Query parameters (page, limit, sort, verified, team)
        """
        query = ReviewQuery.from_params(params)
        return query.apply(self.data_store.load_reviews(property_id))
