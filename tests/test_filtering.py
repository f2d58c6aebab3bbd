"""Unit tests for tier and category filters."""

from datetime import datetime

from activity_heatmap.filtering import available_tiers, filter_intervals
from activity_heatmap.models import ActivityCategory, ActivityInterval

FARM = ActivityCategory.FARM
TOURNAMENT = ActivityCategory.TOURNAMENT


def _interval(interval_id, tier, category):
    return ActivityInterval(
        id=interval_id,
        end_time=datetime(2026, 2, 25, 14),
        duration_seconds=3600,
        category=category,
        tier=tier,
    )


def _mixed():
    return [
        _interval("t11-farm", 11, FARM),
        _interval("t11-tourney", 11, TOURNAMENT),
        _interval("t8-farm", 8, FARM),
        _interval("t8-tourney", 8, TOURNAMENT),
        _interval("t5-farm", 5, FARM),
    ]


def test_no_filters_keeps_everything():
    assert len(filter_intervals(_mixed())) == 5
    assert len(filter_intervals(_mixed(), tier=0)) == 5


def test_filter_by_tier():
    result = filter_intervals(_mixed(), tier=11)
    assert [i.id for i in result] == ["t11-farm", "t11-tourney"]


def test_filter_by_category():
    result = filter_intervals(_mixed(), category=FARM)
    assert len(result) == 3
    assert all(i.category is FARM for i in result)


def test_combined_filters():
    result = filter_intervals(_mixed(), tier=8, category=TOURNAMENT)
    assert [i.id for i in result] == ["t8-tourney"]


def test_no_matches():
    assert filter_intervals(_mixed(), tier=5, category=TOURNAMENT) == []
    assert filter_intervals([], tier=5) == []


def test_available_tiers_descending_and_positive():
    intervals = _mixed() + [_interval("untiered", 0, FARM)]
    assert available_tiers(intervals) == [11, 8, 5]
    assert available_tiers([]) == []
