"""Sunday-based week arithmetic.

All values are naive datetimes interpreted in the observer's local calendar;
no timezone conversion happens anywhere in this package.
"""

from __future__ import annotations

from datetime import datetime, timedelta

DAYS_PER_WEEK = 7
HOURS_PER_DAY = 24

_WEEK = timedelta(days=DAYS_PER_WEEK)


def week_start(value: datetime) -> datetime:
    """Return Sunday 00:00:00.000 of the week containing ``value``."""
    midnight = value.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight - timedelta(days=day_index(value))


def week_end(start: datetime) -> datetime:
    """Return Saturday 23:59:59.999 of the week beginning at ``start``."""
    last_day = start + timedelta(days=DAYS_PER_WEEK - 1)
    return last_day.replace(hour=23, minute=59, second=59, microsecond=999000)


def next_week_start(start: datetime) -> datetime:
    return start + _WEEK


def prev_week_start(start: datetime) -> datetime:
    return start - _WEEK


def is_same_week(a: datetime, b: datetime) -> bool:
    return week_start(a).date() == week_start(b).date()


def day_index(value: datetime) -> int:
    """0 = Sunday ... 6 = Saturday."""
    # weekday() is 0 = Monday
    return (value.weekday() + 1) % DAYS_PER_WEEK


def format_week_label(start: datetime) -> str:
    return f"Week of {start.strftime('%b')} {start.day}, {start.year}"
