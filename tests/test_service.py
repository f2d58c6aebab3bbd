"""Unit tests for assembling the heatmap view."""

from datetime import datetime

import pytest

from activity_heatmap.models import (
    ActiveHoursEnabled,
    ActivityCategory,
    ActivityInterval,
)
from activity_heatmap.service import build_heatmap_view

FARM = ActivityCategory.FARM
TOURNAMENT = ActivityCategory.TOURNAMENT


def _intervals():
    return [
        ActivityInterval(
            id="w1-farm", end_time=datetime(2024, 1, 8, 14, 45), duration_seconds=1800,
            category=FARM, tier=11,
        ),
        ActivityInterval(
            id="w2-farm", end_time=datetime(2024, 1, 15, 10, 0), duration_seconds=3600,
            category=FARM, tier=11,
        ),
        ActivityInterval(
            id="w2-tourney", end_time=datetime(2024, 1, 17, 20, 0), duration_seconds=1800,
            category=TOURNAMENT, tier=8,
        ),
    ]


def test_empty_intervals():
    view = build_heatmap_view([])
    assert view.weeks == []
    assert view.selected_week is None
    assert view.grid is None
    assert view.summary is None
    assert view.next_week is None
    assert view.prev_week is None
    assert not view.can_go_next
    assert not view.can_go_prev
    assert not view.has_intervals


def test_defaults_to_latest_week():
    view = build_heatmap_view(_intervals())
    assert view.selected_week.week_start == datetime(2024, 1, 14)
    assert view.summary.interval_count == 2
    assert not view.can_go_next
    assert view.can_go_prev
    assert view.available_tiers == [11, 8]
    assert view.next_week is None
    assert view.prev_week.week_start == datetime(2024, 1, 7)


def test_selects_requested_week():
    view = build_heatmap_view(_intervals(), week=datetime(2024, 1, 10))
    assert view.selected_week.week_start == datetime(2024, 1, 7)
    assert view.grid.days[1][14].total_coverage == pytest.approx(0.5)
    assert view.can_go_next
    assert not view.can_go_prev
    assert view.next_week.week_start == datetime(2024, 1, 14)
    assert view.prev_week is None


def test_unknown_week_falls_back_to_latest():
    view = build_heatmap_view(_intervals(), week=datetime(2023, 5, 1))
    assert view.selected_week.week_start == datetime(2024, 1, 14)


def test_filters_do_not_change_navigable_weeks():
    view = build_heatmap_view(_intervals(), category=TOURNAMENT)
    assert len(view.weeks) == 2
    assert view.summary.interval_count == 1
    assert list(view.summary.category_stats) == [TOURNAMENT]


def test_tier_filter():
    view = build_heatmap_view(_intervals(), tier=11)
    assert view.summary.interval_count == 1
    assert view.summary.total_active_seconds == pytest.approx(3600)


def test_unavailable_tier_resets_to_all():
    view = build_heatmap_view(_intervals(), tier=3)
    assert view.summary.interval_count == 2


def test_window_is_applied():
    window = ActiveHoursEnabled(start_hour=9, end_hour=11)
    view = build_heatmap_view(_intervals(), window=window)
    assert view.window == window
    assert view.summary.total_idle_seconds == pytest.approx(2 * 7 * 3600 - 3600)
