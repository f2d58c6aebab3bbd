"""Enumerate the weeks that contain activity and navigate between them."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Sequence

from .grid import clip_to_week, interval_time_range
from .models import ActivityInterval, WeekInfo
from .weeks import format_week_label, is_same_week, week_end, week_start


def derive_available_weeks(intervals: Iterable[ActivityInterval]) -> list[WeekInfo]:
    """Return every week touched by an interval, newest first.

    Both the start and the end of each interval are mapped to their week so an
    interval spanning Saturday night into Sunday lists both weeks.
    """
    starts = {
        week_start(moment)
        for interval in intervals
        for moment in interval_time_range(interval)
    }
    return [
        WeekInfo(week_start=ws, label=format_week_label(ws))
        for ws in sorted(starts, reverse=True)
    ]


def default_week(weeks: Sequence[WeekInfo]) -> Optional[WeekInfo]:
    return weeks[0] if weeks else None


def can_navigate_next(current: datetime, weeks: Sequence[WeekInfo]) -> bool:
    if not weeks:
        return False
    return not is_same_week(current, weeks[0].week_start)


def can_navigate_prev(current: datetime, weeks: Sequence[WeekInfo]) -> bool:
    if not weeks:
        return False
    return not is_same_week(current, weeks[-1].week_start)


def _position(current: datetime, weeks: Sequence[WeekInfo]) -> Optional[int]:
    for index, info in enumerate(weeks):
        if is_same_week(current, info.week_start):
            return index
    return None


def next_week(current: datetime, weeks: Sequence[WeekInfo]) -> Optional[WeekInfo]:
    """The adjacent newer week, or ``None`` at the newest edge."""
    index = _position(current, weeks)
    if index is None or index == 0:
        return None
    return weeks[index - 1]


def prev_week(current: datetime, weeks: Sequence[WeekInfo]) -> Optional[WeekInfo]:
    """The adjacent older week, or ``None`` at the oldest edge."""
    index = _position(current, weeks)
    if index is None or index == len(weeks) - 1:
        return None
    return weeks[index + 1]


def resolve_selected_week(
    selected: Optional[datetime], weeks: Sequence[WeekInfo]
) -> Optional[WeekInfo]:
    """Keep the selection while it is still in the catalog, otherwise fall back to the newest."""
    if selected is not None:
        index = _position(selected, weeks)
        if index is not None:
            return weeks[index]
    return default_week(weeks)


def intervals_for_week(
    intervals: Iterable[ActivityInterval], start: datetime
) -> list[ActivityInterval]:
    end = week_end(start)
    return [
        interval
        for interval in intervals
        if clip_to_week(interval.start_time, interval.end_time, start, end) is not None
    ]
