"""
Unit tests for review statistics.

Covers averaging, partial dimensions, rounding and outcome partitioning.
"""

import copy

import pytest
from clarus.models.review import ReviewRecord
from clarus.aggregation.review_stats import (
    compute_review_stats,
    compute_goal_achievement_rate,
    mean_one_decimal,
    summarize_for_comparison,
)


def make_reviews(*overall, **kwargs):
    return [ReviewRecord(overall_rating=o, **kwargs) for o in overall]


def test_empty_input():
    """Empty input yields zero reviews and all-null fields."""
    stats = compute_review_stats([])

    assert stats.total_reviews == 0
    assert stats.average_rating is None
    assert stats.dimension_averages.service is None
    assert stats.dimension_averages.facilities is None
    assert stats.dimension_averages.dining is None
    assert stats.dimension_averages.value is None
    assert stats.outcome_stats is None


def test_average_rating():
    stats = compute_review_stats(make_reviews(5, 4, 3, 4))

    assert stats.total_reviews == 4
    assert stats.average_rating == 4.0


def test_average_rounds_to_one_decimal():
    """Mean 4.6667 rounds to 4.7."""
    stats = compute_review_stats(make_reviews(5, 5, 4))
    assert stats.average_rating == 4.7


def test_exact_half_rounds_up():
    """81 / 20 = 4.05 exactly, which rounds half up to 4.1."""
    values = [5] + [4] * 19
    assert mean_one_decimal(values) == 4.1
    assert compute_review_stats(make_reviews(*values)).average_rating == 4.1


def test_partial_dimension_uses_only_present_values():
    """Service average divides by the 2 reviews that have it, not 3."""
    reviews = [
        ReviewRecord(overall_rating=4, service_rating=4),
        ReviewRecord(overall_rating=5, service_rating=5),
        ReviewRecord(overall_rating=3),
    ]

    stats = compute_review_stats(reviews)

    assert stats.dimension_averages.service == 4.5
    assert stats.dimension_averages.dining is None


def test_dimension_with_no_data_is_none_not_zero():
    stats = compute_review_stats(make_reviews(4, 4))
    assert stats.dimension_averages.dining is None
    assert stats.to_dict()["ratings"]["dining"] is None


def test_outcome_partition():
    reviews = [
        ReviewRecord(overall_rating=5, goal_achievement="FULLY"),
        ReviewRecord(overall_rating=4, goal_achievement="FULLY"),
        ReviewRecord(overall_rating=3, goal_achievement="PARTIALLY"),
        ReviewRecord(overall_rating=2, goal_achievement="NOT_ACHIEVED"),
        ReviewRecord(overall_rating=4),
    ]

    outcomes = compute_review_stats(reviews).outcome_stats

    assert outcomes.total_with_outcomes == 4
    assert outcomes.fully_achieved == 2
    assert outcomes.partially_achieved == 1
    assert outcomes.not_achieved == 1
    assert (
        outcomes.fully_achieved + outcomes.partially_achieved + outcomes.not_achieved
        == outcomes.total_with_outcomes
    )
    assert outcomes.total_with_outcomes <= len(reviews)


def test_outcome_stats_none_without_goal_data():
    stats = compute_review_stats(make_reviews(5, 4))
    assert stats.outcome_stats is None


def test_goal_achievement_rate():
    assert compute_goal_achievement_rate(0, 0, 0) is None
    assert compute_goal_achievement_rate(2, 2, 4) == 75
    assert compute_goal_achievement_rate(0, 0, 3) == 0
    assert compute_goal_achievement_rate(3, 0, 3) == 100


def test_goal_achievement_rate_rounds_half_up():
    # 1 of 8 fully achieved is 12.5%
    assert compute_goal_achievement_rate(1, 0, 8) == 13


def test_end_to_end_property_reviews():
    reviews = [
        ReviewRecord(overall_rating=5, service_rating=5, goal_achievement="FULLY"),
        ReviewRecord(overall_rating=3, service_rating=None, goal_achievement="PARTIALLY"),
        ReviewRecord(overall_rating=4, service_rating=4, goal_achievement=None),
    ]

    stats = compute_review_stats(reviews)

    assert stats.total_reviews == 3
    assert stats.average_rating == 4.0
    assert stats.dimension_averages.service == 4.5
    assert stats.outcome_stats.to_dict() == {
        "totalWithOutcomes": 2,
        "fullyAchieved": 1,
        "partiallyAchieved": 1,
        "notAchieved": 0,
    }


def test_inputs_not_mutated_and_output_repeatable():
    reviews = [
        ReviewRecord(overall_rating=5, dining_rating=3, goal_achievement="FULLY"),
        ReviewRecord(overall_rating=2, value_rating=4),
    ]
    snapshot = copy.deepcopy(reviews)

    first = compute_review_stats(reviews)
    second = compute_review_stats(reviews)

    assert reviews == snapshot
    assert first == second


def test_missing_overall_rating_excluded_from_average():
    """A record without overall_rating does not crash and is left out of the mean."""
    reviews = [
        ReviewRecord(overall_rating=4),
        ReviewRecord(overall_rating=None, service_rating=2),
    ]

    stats = compute_review_stats(reviews)

    assert stats.total_reviews == 2
    assert stats.average_rating == 4.0
    assert stats.dimension_averages.service == 2.0


def test_to_dict_shape():
    stats = compute_review_stats(make_reviews(5, 4))
    data = stats.to_dict()

    assert data["totalReviews"] == 2
    assert data["averageRating"] == 4.5
    assert data["ratings"]["overall"] == 4.5
    assert data["outcomeStats"] is None


def test_summarize_for_comparison():
    reviews = [
        ReviewRecord(overall_rating=5, goal_achievement="FULLY"),
        ReviewRecord(overall_rating=4, goal_achievement="PARTIALLY"),
    ]

    summary = summarize_for_comparison(reviews)

    assert summary.count == 2
    assert summary.average_rating == 4.5
    assert summary.goal_achievement_rate == 75


def test_summarize_for_comparison_empty():
    summary = summarize_for_comparison([])
    assert summary.to_dict() == {"count": 0, "averageRating": None, "goalAchievementRate": None}


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
