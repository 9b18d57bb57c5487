"""
Unit tests for review listing queries and the review service.
"""

import os
import tempfile

import pytest
from clarus.models.review import ReviewRecord
from clarus.reviews.query import ReviewPage, ReviewQuery
from clarus.services.review_service import ReviewService
from clarus.utils.storage import DataStore


@pytest.fixture
def reviews():
    return [
        ReviewRecord(review_id="r1", overall_rating=3, created_at="2024-01-01T00:00:00Z",
                     helpful_count=2, verified=True),
        ReviewRecord(review_id="r2", overall_rating=5, created_at="2024-03-01T00:00:00Z",
                     helpful_count=0, is_team_review=True),
        ReviewRecord(review_id="r3", overall_rating=1, created_at="2024-02-01T00:00:00Z",
                     helpful_count=7, verified=True),
    ]


def ids(page):
    return [r.review_id for r in page.reviews]


def test_defaults():
    query = ReviewQuery.from_params({})
    assert (query.page, query.limit, query.sort) == (1, 10, "newest")
    assert not query.verified_only
    assert not query.team_only


def test_params_clamped():
    query = ReviewQuery.from_params({"page": "-3", "limit": "500", "sort": "weird"})
    assert query.page == 1
    assert query.limit == 50
    assert query.sort == "newest"

    assert ReviewQuery.from_params({"limit": "0"}).limit == 1
    assert ReviewQuery.from_params({"page": "abc"}).page == 1


@pytest.mark.parametrize("sort, expected", [
    ("newest", ["r2", "r3", "r1"]),
    ("oldest", ["r1", "r3", "r2"]),
    ("highest", ["r2", "r1", "r3"]),
    ("lowest", ["r3", "r1", "r2"]),
    ("helpful", ["r3", "r1", "r2"]),
])
def test_sorting(reviews, sort, expected):
    assert ids(ReviewQuery(sort=sort).apply(reviews)) == expected


def test_filters(reviews):
    assert ids(ReviewQuery(verified_only=True).apply(reviews)) == ["r3", "r1"]
    assert ids(ReviewQuery(team_only=True).apply(reviews)) == ["r2"]


def test_pagination(reviews):
    page = ReviewQuery(page=2, limit=2, sort="oldest").apply(reviews)

    assert ids(page) == ["r2"]
    assert page.total_count == 3
    assert page.total_pages == 2
    assert not page.has_next_page
    assert page.has_previous_page


def test_page_to_dict():
    page = ReviewPage(reviews=[], page=1, limit=10, total_count=0)
    assert page.to_dict()["pagination"] == {
        "page": 1,
        "limit": 10,
        "totalCount": 0,
        "totalPages": 0,
        "hasNextPage": False,
        "hasPreviousPage": False,
    }


def test_review_service():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = DataStore(os.path.join(tmpdir, "data"))
        store.save_reviews([
            {"id": "r1", "status": "APPROVED", "overallRating": 5, "serviceRating": 4,
             "goalAchievement": "FULLY", "createdAt": "2024-01-01T00:00:00Z"},
            {"id": "r2", "status": "APPROVED", "overallRating": 4,
             "goalAchievement": "NOT_ACHIEVED", "createdAt": "2024-02-01T00:00:00Z"},
            {"id": "r3", "status": "PENDING", "overallRating": 1},
        ], "p1")
        service = ReviewService(store)

        stats = service.get_review_stats("p1")
        assert stats.total_reviews == 2
        assert stats.average_rating == 4.5
        assert stats.dimension_averages.service == 4.0
        assert stats.outcome_stats.achievement_rate == 50

        assert service.get_review_aggregation("p1").total_reviews == 2
        assert service.get_review_aggregation("empty") is None
        assert service.get_comparison_summary("p1").goal_achievement_rate == 50

        page = service.get_property_reviews("p1", {"limit": "1"})
        assert ids(page) == ["r2"]
        assert page.has_next_page


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
