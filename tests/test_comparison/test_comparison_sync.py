"""
Tests for cross-context comparison sync and the subscription view.
"""

from unittest.mock import Mock

import pytest

import config.settings as settings
from clarus.comparison.events import BrowsingContext
from clarus.comparison.session_storage import SessionStorage
from clarus.comparison.store import ComparisonStore
from clarus.comparison.subscription import ComparisonSubscription


@pytest.fixture
def storage():
    return SessionStorage()


@pytest.fixture
def tabs(storage):
    """Two subscriptions over one session, one per tab."""
    a = ComparisonSubscription(ComparisonStore(storage, context=BrowsingContext("a")))
    b = ComparisonSubscription(ComparisonStore(storage, context=BrowsingContext("b")))
    return a, b


def test_add_in_one_tab_visible_in_other(tabs):
    a, b = tabs

    assert a.add_to_comparison("p1", "prop-a", "Prop A") is True

    assert b.is_in_comparison("p1")
    assert b.count == 1


def test_remove_and_clear_propagate(tabs):
    a, b = tabs
    a.add_to_comparison("p1", "prop-a", "Prop A")
    a.add_to_comparison("p2", "prop-b", "Prop B")

    b.remove_from_comparison("p1")
    assert [i.property_id for i in a.items] == ["p2"]

    b.clear_comparison()
    assert a.count == 0


def test_session_clear_propagates(tabs, storage):
    a, b = tabs
    a.add_to_comparison("p1", "prop-a", "Prop A")

    storage.clear()

    assert a.count == 0
    assert b.count == 0


def test_unrelated_key_ignored(tabs, storage):
    a, b = tabs
    callback = Mock()
    b.subscribe(callback)

    storage.set_item("something-else", "1", origin=a.store.context)

    callback.assert_not_called()


def test_add_result_flags(tabs):
    a, _ = tabs
    assert a.add_to_comparison("p1", "prop-a", "Prop A") is True
    assert a.add_to_comparison("p1", "prop-a", "Prop A") is False

    for n in range(2, 5):
        a.add_to_comparison(f"p{n}", f"prop-{n}", f"Prop {n}")

    assert a.is_full
    assert a.add_to_comparison("p5", "prop-5", "Prop 5") is False


def test_add_returns_false_when_write_fails(tabs, storage):
    a, _ = tabs
    storage.available = False
    assert a.add_to_comparison("p1", "prop-a", "Prop A") is False
    assert a.count == 0


def test_stale_view_cannot_exceed_capacity(storage):
    """A tab whose cached view missed updates still cannot overfill storage."""
    a = ComparisonSubscription(ComparisonStore(storage, context=BrowsingContext("a")))
    b_store = ComparisonStore(storage, context=BrowsingContext("b"))
    a.close()

    for n in range(1, 5):
        b_store.add(f"p{n}", f"prop-{n}", f"Prop {n}")

    assert a.count == 0
    assert a.add_to_comparison("p9", "prop-9", "Prop 9") is False
    assert b_store.read().count == 4


def test_subscriber_notified_once_per_change(tabs):
    a, b = tabs
    own, other = Mock(), Mock()
    a.subscribe(own)
    b.subscribe(other)

    a.add_to_comparison("p1", "prop-a", "Prop A")

    assert own.call_count == 1
    assert other.call_count == 1
    assert other.call_args[0][0].contains("p1")


def test_unsubscribe(tabs):
    a, _ = tabs
    callback = Mock()
    unsubscribe = a.subscribe(callback)
    unsubscribe()

    a.add_to_comparison("p1", "prop-a", "Prop A")

    callback.assert_not_called()


def test_failing_subscriber_does_not_block_others(tabs):
    a, _ = tabs
    a.subscribe(Mock(side_effect=RuntimeError("boom")))
    healthy = Mock()
    a.subscribe(healthy)

    a.add_to_comparison("p1", "prop-a", "Prop A")

    healthy.assert_called_once()


def test_close_stops_listening(tabs):
    a, b = tabs
    b.close()

    a.add_to_comparison("p1", "prop-a", "Prop A")

    assert b.count == 0
    assert b.refresh().count == 1
    assert b.store.context.events.listener_count(settings.COMPARISON_UPDATED_EVENT) == 0


def test_comparison_url(tabs):
    a, b = tabs
    a.add_to_comparison("p1", "prop-a", "Prop A")
    a.add_to_comparison("p2", "prop-b", "Prop B")

    assert b.get_comparison_url() == "/compare?properties=prop-a,prop-b"


class RacingStorage(SessionStorage):
    """Runs a competing write right after the first read of the comparison key."""

    def __init__(self):
        super().__init__()
        self.on_first_read = None

    def get_item(self, key):
        value = super().get_item(key)
        if self.on_first_read is not None:
            hook, self.on_first_read = self.on_first_read, None
            hook()
        return value


def test_concurrent_adds_last_write_wins():
    """Two tabs adding at once may lose one add; the list stays valid."""
    storage = RacingStorage()
    tab_a = ComparisonStore(storage, context=BrowsingContext("a"))
    tab_b = ComparisonStore(storage, context=BrowsingContext("b"))

    storage.on_first_read = lambda: tab_b.add("p2", "prop-b", "Prop B")
    tab_a.add("p1", "prop-a", "Prop A")

    final = tab_a.read()
    assert [i.property_id for i in final.items] == ["p1"]
    assert final.count <= final.max_items


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
