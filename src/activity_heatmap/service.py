"""Assemble the heatmap for a selected week from the full interval set.

Weeks are derived from the unfiltered intervals so that changing the tier or
category filter never changes which weeks can be navigated; the grid itself
is built from the filtered intervals.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from .catalog import (
    can_navigate_next,
    can_navigate_prev,
    derive_available_weeks,
    intervals_for_week,
    next_week,
    prev_week,
    resolve_selected_week,
)
from .filtering import available_tiers, filter_intervals
from .grid import build_grid
from .models import (
    ActiveHoursDisabled,
    ActiveHoursWindow,
    ActivityCategory,
    ActivityInterval,
    HeatmapGrid,
    HeatmapSummary,
    WeekInfo,
)
from .statistics import summarize


@dataclass(slots=True)
class HeatmapView:
    weeks: list[WeekInfo]
    selected_week: Optional[WeekInfo]
    grid: Optional[HeatmapGrid]
    summary: Optional[HeatmapSummary]
    can_go_next: bool
    can_go_prev: bool
    next_week: Optional[WeekInfo]
    prev_week: Optional[WeekInfo]
    available_tiers: list[int]
    window: ActiveHoursWindow

    @property
    def has_intervals(self) -> bool:
        return bool(self.weeks)


def build_heatmap_view(
    intervals: Sequence[ActivityInterval],
    *,
    week: Optional[datetime] = None,
    tier: Optional[int] = None,
    category: Optional[ActivityCategory] = None,
    window: Optional[ActiveHoursWindow] = None,
) -> HeatmapView:
    """Build the grid and summary for ``week`` (default: the most recent week with activity)."""
    window = window if window is not None else ActiveHoursDisabled()
    weeks = derive_available_weeks(intervals)
    selected = resolve_selected_week(week, weeks)
    tiers = available_tiers(intervals)
    if tier and tier not in tiers:
        tier = None

    grid: Optional[HeatmapGrid] = None
    summary: Optional[HeatmapSummary] = None
    if selected is not None:
        filtered = filter_intervals(intervals, tier=tier, category=category)
        grid = build_grid(intervals_for_week(filtered, selected.week_start), selected.week_start)
        summary = summarize(grid, window)

    return HeatmapView(
        weeks=weeks,
        selected_week=selected,
        grid=grid,
        summary=summary,
        can_go_next=selected is not None and can_navigate_next(selected.week_start, weeks),
        can_go_prev=selected is not None and can_navigate_prev(selected.week_start, weeks),
        next_week=next_week(selected.week_start, weeks) if selected is not None else None,
        prev_week=prev_week(selected.week_start, weeks) if selected is not None else None,
        available_tiers=tiers,
        window=window,
    )
