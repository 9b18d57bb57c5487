"""
Basic unit tests for data models.
"""

import pytest
from clarus.models.review import ReviewRecord
from clarus.models.comparison import ComparisonItem, ComparisonList
from clarus.models.property import PropertyRecord


def make_item(n):
    return ComparisonItem(
        property_id=f"p{n}",
        property_slug=f"prop-{n}",
        property_name=f"Prop {n}",
        added_at="2024-06-01T00:00:00.000Z",
    )


def test_review_rating_validation():
    review = ReviewRecord(overall_rating=5, service_rating=1)
    assert review.service_rating == 1

    with pytest.raises(ValueError):
        ReviewRecord(overall_rating=6)

    with pytest.raises(ValueError):
        ReviewRecord(overall_rating=4, dining_rating=0)

    with pytest.raises(ValueError):
        ReviewRecord(overall_rating=True)


def test_review_goal_validation():
    with pytest.raises(ValueError):
        ReviewRecord(overall_rating=4, goal_achievement="MOSTLY")

    with pytest.raises(ValueError):
        ReviewRecord(overall_rating=4, physician_endorsement="MAYBE")


def test_review_from_dict():
    review = ReviewRecord.from_dict({
        "id": "r1",
        "overallRating": 4,
        "serviceRating": None,
        "diningRating": 5,
        "goalAchievement": "PARTIALLY",
        "verified": True,
        "programType": "Detox",
    })

    assert review.review_id == "r1"
    assert review.overall_rating == 4
    assert review.service_rating is None
    assert review.dining_rating == 5
    assert review.goal_achievement == "PARTIALLY"
    assert review.verified is True
    assert review.to_dict()["programType"] == "Detox"


def test_comparison_item_serialization():
    item = make_item(1)
    data = item.to_dict()

    assert data == {
        "propertyId": "p1",
        "propertySlug": "prop-1",
        "propertyName": "Prop 1",
        "addedAt": "2024-06-01T00:00:00.000Z",
    }
    assert ComparisonItem.from_dict(data) == item


def test_comparison_list_invariants():
    with pytest.raises(ValueError):
        ComparisonList(items=(make_item(1), make_item(1)))

    with pytest.raises(ValueError):
        ComparisonList(items=tuple(make_item(n) for n in range(3)), max_items=2)


def test_comparison_list_without_keeps_order():
    comparison = ComparisonList(items=(make_item(1), make_item(2), make_item(3)))

    remaining = comparison.without("p2")

    assert [i.property_id for i in remaining.items] == ["p1", "p3"]
    assert comparison.count == 3


def test_property_from_dict():
    prop = PropertyRecord.from_dict({
        "id": "p1",
        "slug": "prop-a",
        "name": "Prop A",
        "tier": "TIER_1",
        "programs": [{"price": 5000}, {"price": 12000}, {"price": None}],
        "focusAreas": ["LONGEVITY"],
    })

    assert prop.program_prices == [5000, 12000]
    assert prop.focus_areas == ["LONGEVITY"]
    assert prop.currency == "USD"
    assert prop.reviews == []


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
