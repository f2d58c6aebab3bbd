"""Coverage metrics and summary statistics computed from a built grid.

Every function here is read-only: it takes a grid (and, where relevant, an
active hours window) and returns a freshly built value.
"""

from __future__ import annotations

from collections import defaultdict

from .models import (
    ActiveHoursEnabled,
    ActiveHoursWindow,
    ActivityCategory,
    CategoryStats,
    HeatmapGrid,
    HeatmapSummary,
)
from .weeks import DAYS_PER_WEEK, HOURS_PER_DAY

TOTAL_CELLS = DAYS_PER_WEEK * HOURS_PER_DAY
SECONDS_PER_HOUR = 3600


def overall_coverage(grid: HeatmapGrid) -> float:
    return sum(cell.total_coverage for cell in grid.iter_cells()) / TOTAL_CELLS


def daily_coverage(grid: HeatmapGrid) -> list[float]:
    """Mean coverage per day, index 0 = Sunday."""
    return [
        sum(cell.total_coverage for cell in day_cells) / HOURS_PER_DAY
        for day_cells in grid.days
    ]


def is_hour_in_window(hour: int, start_hour: int, end_hour: int) -> bool:
    """Return whether ``hour`` lies in ``[start_hour, end_hour)``.

    When ``start_hour >= end_hour`` the window wraps past midnight, so (22, 6)
    covers 22:00-23:59 and 00:00-05:59.
    """
    if start_hour < end_hour:
        return start_hour <= hour < end_hour
    return hour >= start_hour or hour < end_hour


def active_hour_count(start_hour: int, end_hour: int) -> int:
    if start_hour < end_hour:
        return end_hour - start_hour
    return (HOURS_PER_DAY - start_hour) + end_hour


def active_hours_coverage(grid: HeatmapGrid, start_hour: int, end_hour: int) -> float:
    hours = active_hour_count(start_hour, end_hour)
    if hours == 0:
        return 0.0
    total = sum(
        cell.total_coverage
        for cell in grid.iter_cells()
        if is_hour_in_window(cell.hour, start_hour, end_hour)
    )
    return total / (DAYS_PER_WEEK * hours)


def _fold_segments(grid: HeatmapGrid) -> dict[ActivityCategory, tuple[float, frozenset[str]]]:
    spans: defaultdict[ActivityCategory, float] = defaultdict(float)
    ids: defaultdict[ActivityCategory, set[str]] = defaultdict(set)
    for cell in grid.iter_cells():
        for segment in cell.segments:
            spans[segment.category] += segment.span
            ids[segment.category].add(segment.interval_id)
    return {category: (span, frozenset(ids[category])) for category, span in spans.items()}


def category_breakdown(grid: HeatmapGrid) -> dict[ActivityCategory, float]:
    """Share of all segment time per category; values sum to 1.0, or ``{}`` when empty."""
    folded = _fold_segments(grid)
    total = sum(span for span, _ in folded.values())
    if total == 0:
        return {}
    return {category: span / total for category, (span, _) in folded.items()}


def category_stats(grid: HeatmapGrid) -> dict[ActivityCategory, CategoryStats]:
    """Absolute per-category coverage of the 168-hour week, active seconds and run count.

    An interval that spans several cells counts once towards ``run_count``.
    """
    return {
        category: CategoryStats(
            coverage=span / TOTAL_CELLS,
            active_seconds=span * SECONDS_PER_HOUR,
            run_count=len(interval_ids),
        )
        for category, (span, interval_ids) in _fold_segments(grid).items()
    }


def total_active_seconds(grid: HeatmapGrid) -> float:
    return sum(cell.total_coverage * SECONDS_PER_HOUR for cell in grid.iter_cells())


def total_idle_seconds(grid: HeatmapGrid, window: ActiveHoursWindow) -> float:
    """Uncovered seconds across the week, or only inside the window when it is enabled."""
    if isinstance(window, ActiveHoursEnabled):
        cells = (
            cell
            for cell in grid.iter_cells()
            if is_hour_in_window(cell.hour, window.start_hour, window.end_hour)
        )
    else:
        cells = grid.iter_cells()
    return sum((1 - cell.total_coverage) * SECONDS_PER_HOUR for cell in cells)


def unique_interval_count(grid: HeatmapGrid) -> int:
    return len(
        {segment.interval_id for cell in grid.iter_cells() for segment in cell.segments}
    )


def summarize(grid: HeatmapGrid, window: ActiveHoursWindow) -> HeatmapSummary:
    overall = overall_coverage(grid)
    if isinstance(window, ActiveHoursEnabled):
        active = active_hours_coverage(grid, window.start_hour, window.end_hour)
    else:
        active = overall
    return HeatmapSummary(
        overall_coverage=overall,
        daily_coverage=daily_coverage(grid),
        active_hours_coverage=active,
        category_breakdown=category_breakdown(grid),
        category_stats=category_stats(grid),
        total_active_seconds=total_active_seconds(grid),
        total_idle_seconds=total_idle_seconds(grid, window),
        interval_count=unique_interval_count(grid),
    )
