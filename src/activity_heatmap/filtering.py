"""Tier and category filters applied before a grid is built."""

from __future__ import annotations

from typing import Iterable, Optional

from .models import ActivityCategory, ActivityInterval


def filter_intervals(
    intervals: Iterable[ActivityInterval],
    *,
    tier: Optional[int] = None,
    category: Optional[ActivityCategory] = None,
) -> list[ActivityInterval]:
    """Keep intervals matching ``tier`` and ``category``; ``None`` (or tier 0) matches all."""
    return [
        interval
        for interval in intervals
        if (not tier or interval.tier == tier)
        and (category is None or interval.category is category)
    ]


def available_tiers(intervals: Iterable[ActivityInterval]) -> list[int]:
    return sorted({interval.tier for interval in intervals if interval.tier > 0}, reverse=True)
