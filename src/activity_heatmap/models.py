"""Domain models for activity intervals and the weekly coverage grid."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterator, Optional, Union


class ActivityCategory(str, Enum):
    """Closed set of interval categories; anything unrecognised is UNKNOWN."""

    FARM = "farm"
    TOURNAMENT = "tournament"
    MILESTONE = "milestone"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value: object) -> "ActivityCategory":
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return cls.UNKNOWN


@dataclass(slots=True)
class ActivityInterval:
    """A timed occurrence described by its end timestamp and duration."""

    id: str
    end_time: datetime
    duration_seconds: float
    category: ActivityCategory = ActivityCategory.UNKNOWN
    tier: int = 0

    def __post_init__(self) -> None:
        if not math.isfinite(self.duration_seconds) or self.duration_seconds < 0:
            raise ValueError(
                "duration_seconds must be a finite value >= 0 "
                f"(got {self.duration_seconds} for {self.id!r})"
            )
        try:
            self.end_time - timedelta(seconds=self.duration_seconds)
        except (OverflowError, ValueError) as exc:
            raise ValueError(
                f"duration_seconds={self.duration_seconds} puts the start of {self.id!r} "
                "outside the supported date range"
            ) from exc
        self.category = ActivityCategory(self.category)

    @property
    def start_time(self) -> datetime:
        return self.end_time - timedelta(seconds=self.duration_seconds)


@dataclass(frozen=True, slots=True)
class Segment:
    """Portion of one hour occupied by one interval, as fractions of the hour."""

    start_fraction: float
    end_fraction: float
    category: ActivityCategory
    tier: int
    interval_id: str

    @property
    def span(self) -> float:
        return self.end_fraction - self.start_fraction


@dataclass(slots=True)
class Cell:
    hour: int
    day_index: int
    date: datetime
    segments: list[Segment] = field(default_factory=list)
    total_coverage: float = 0.0


@dataclass(slots=True)
class HeatmapGrid:
    """7 x 24 cells for one Sunday-to-Saturday week, indexed ``days[day][hour]``."""

    week_start: datetime
    week_end: datetime
    days: list[list[Cell]]
    label: str

    def iter_cells(self) -> Iterator[Cell]:
        for day_cells in self.days:
            yield from day_cells


@dataclass(frozen=True, slots=True)
class ClippedRange:
    clipped_start: datetime
    clipped_end: datetime


@dataclass(frozen=True, slots=True)
class HourEntry:
    day_index: int
    hour: int
    segment: Segment


@dataclass(frozen=True, slots=True)
class WeekInfo:
    week_start: datetime
    label: str


@dataclass(frozen=True, slots=True)
class ActiveHoursDisabled:
    """Active hours are off; statistics cover the whole day."""

    enabled = False


@dataclass(frozen=True, slots=True)
class ActiveHoursEnabled:
    """Active hours window ``[start_hour, end_hour)``; wraps midnight when end <= start."""

    start_hour: int
    end_hour: int

    enabled = True

    def __post_init__(self) -> None:
        for name in ("start_hour", "end_hour"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 23:
                raise ValueError(f"{name} must be an integer in [0, 23] (got {value!r})")


ActiveHoursWindow = Union[ActiveHoursDisabled, ActiveHoursEnabled]


@dataclass(frozen=True, slots=True)
class CategoryStats:
    coverage: float
    active_seconds: float
    run_count: int


@dataclass(frozen=True, slots=True)
class HeatmapSummary:
    overall_coverage: float
    daily_coverage: list[float]
    active_hours_coverage: float
    category_breakdown: dict[ActivityCategory, float]
    category_stats: dict[ActivityCategory, CategoryStats]
    total_active_seconds: float
    total_idle_seconds: float
    interval_count: int

    @property
    def categories(self) -> list[ActivityCategory]:
        return list(self.category_stats)


def parse_category(value: Optional[str]) -> Optional[ActivityCategory]:
    """Return the category for a user-supplied filter value; ``None``/"all" mean no filter."""
    if value is None:
        return None
    stripped = value.strip().lower()
    if not stripped or stripped == "all":
        return None
    return ActivityCategory(stripped)
