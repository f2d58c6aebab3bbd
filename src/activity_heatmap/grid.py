"""Build the 7 x 24 coverage grid for one week from activity intervals.

Each interval is clipped to the target week, then walked hour by hour. Every
hour it touches receives a segment holding the fractional ``[start, end)``
portion of that hour the interval occupied. A cell's coverage is the sum of
its segment spans, capped at 1.0.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Iterable, Optional

from .models import (
    ActivityCategory,
    ActivityInterval,
    Cell,
    ClippedRange,
    HeatmapGrid,
    HourEntry,
    Segment,
)
from .weeks import DAYS_PER_WEEK, HOURS_PER_DAY, day_index, format_week_label, week_end

logger = logging.getLogger(__name__)

_HOUR = timedelta(hours=1)


def interval_time_range(interval: ActivityInterval) -> tuple[datetime, datetime]:
    return interval.start_time, interval.end_time


def clip_to_week(
    start: datetime,
    end: datetime,
    week_start: datetime,
    week_end: datetime,
) -> Optional[ClippedRange]:
    """Clip ``[start, end)`` to the week, or return ``None`` when they do not overlap.

    An interval ending exactly at ``week_start`` does not overlap that week.
    """
    if end <= week_start or start > week_end:
        return None
    return ClippedRange(
        clipped_start=max(start, week_start),
        clipped_end=min(end, week_end),
    )


def distribute_to_hours(
    clipped_start: datetime,
    clipped_end: datetime,
    category: ActivityCategory,
    tier: int,
    interval_id: str,
) -> list[HourEntry]:
    """Split a clipped range into per-hour segments.

    A range from 14:30 to 16:15 yields hour 14 ``[0.5, 1.0]``, hour 15
    ``[0.0, 1.0]`` and hour 16 ``[0.0, 0.25]``.
    """
    entries: list[HourEntry] = []
    cursor = clipped_start.replace(minute=0, second=0, microsecond=0)
    while cursor < clipped_end:
        hour_start = cursor
        hour_end = hour_start + _HOUR
        overlap_start = max(clipped_start, hour_start)
        overlap_end = min(clipped_end, hour_end)
        if overlap_end > overlap_start:
            entries.append(
                HourEntry(
                    day_index=day_index(hour_start),
                    hour=hour_start.hour,
                    segment=Segment(
                        start_fraction=(overlap_start - hour_start) / _HOUR,
                        end_fraction=(overlap_end - hour_start) / _HOUR,
                        category=category,
                        tier=tier,
                        interval_id=interval_id,
                    ),
                )
            )
        cursor = hour_end
    return entries


def cell_coverage(segments: Iterable[Segment]) -> float:
    total = sum(segment.span for segment in segments)
    return min(total, 1.0)


def empty_days(start: datetime) -> list[list[Cell]]:
    days: list[list[Cell]] = []
    for index in range(DAYS_PER_WEEK):
        day_date = start + timedelta(days=index)
        days.append(
            [Cell(hour=hour, day_index=index, date=day_date) for hour in range(HOURS_PER_DAY)]
        )
    return days


def build_grid(intervals: Iterable[ActivityInterval], week_start: datetime) -> HeatmapGrid:
    """Build the full grid for the week starting at ``week_start`` (a Sunday midnight)."""
    end_of_week = week_end(week_start)
    days = empty_days(week_start)

    placed = 0
    for interval in intervals:
        start, end = interval_time_range(interval)
        clipped = clip_to_week(start, end, week_start, end_of_week)
        if clipped is None:
            continue
        placed += 1
        for entry in distribute_to_hours(
            clipped.clipped_start,
            clipped.clipped_end,
            interval.category,
            interval.tier,
            interval.id,
        ):
            days[entry.day_index][entry.hour].segments.append(entry.segment)

    for day_cells in days:
        for cell in day_cells:
            cell.total_coverage = cell_coverage(cell.segments)

    logger.debug("Built grid for week of %s from %d intervals.", week_start.date(), placed)
    return HeatmapGrid(
        week_start=week_start,
        week_end=end_of_week,
        days=days,
        label=format_week_label(week_start),
    )
