"""SQLite storage for activity intervals."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterable, Iterator

from .models import ActivityCategory, ActivityInterval


DATETIME_FMT = "%Y-%m-%d %H:%M:%S.%f"


def open_database(path: Path, *, check_same_thread: bool = True) -> sqlite3.Connection:
    """Open (and initialize) the SQLite database."""
    conn = sqlite3.connect(
        path,
        isolation_level=None,
        check_same_thread=check_same_thread,
    )
    conn.row_factory = sqlite3.Row
    initialize_schema(conn)
    return conn


@contextmanager
def database_connection(
    path: Path, *, check_same_thread: bool = True
) -> Iterator[sqlite3.Connection]:
    conn = open_database(path, check_same_thread=check_same_thread)
    try:
        yield conn
    finally:
        conn.close()


def initialize_schema(conn: sqlite3.Connection) -> None:
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS activity_intervals (
            id TEXT PRIMARY KEY,
            end_time TEXT NOT NULL,
            duration_seconds REAL NOT NULL CHECK (duration_seconds >= 0),
            category TEXT NOT NULL DEFAULT 'unknown',
            tier INTEGER NOT NULL DEFAULT 0
        );

        CREATE INDEX IF NOT EXISTS idx_intervals_end_time
            ON activity_intervals(end_time);
        """
    )


def insert_intervals(conn: sqlite3.Connection, intervals: Iterable[ActivityInterval]) -> None:
    """Insert intervals, replacing any existing row with the same id."""
    conn.executemany(
        """
        INSERT INTO activity_intervals (
            id,
            end_time,
            duration_seconds,
            category,
            tier
        ) VALUES (?, ?, ?, ?, ?)
        ON CONFLICT(id) DO UPDATE SET
            end_time = excluded.end_time,
            duration_seconds = excluded.duration_seconds,
            category = excluded.category,
            tier = excluded.tier
        """,
        [
            (
                interval.id,
                interval.end_time.strftime(DATETIME_FMT),
                interval.duration_seconds,
                interval.category.value,
                interval.tier,
            )
            for interval in intervals
        ],
    )


def fetch_intervals(conn: sqlite3.Connection) -> list[ActivityInterval]:
    """Fetch every stored interval ordered by end time."""
    rows = conn.execute(
        """
        SELECT id, end_time, duration_seconds, category, tier
        FROM activity_intervals
        ORDER BY end_time, id;
        """
    )
    return [row_to_interval(row) for row in rows]


def delete_interval(conn: sqlite3.Connection, interval_id: str) -> None:
    cur = conn.execute("DELETE FROM activity_intervals WHERE id = ?", (interval_id,))
    if cur.rowcount == 0:
        raise ValueError(f"No interval found for id={interval_id}")


def row_to_interval(row: sqlite3.Row) -> ActivityInterval:
    return ActivityInterval(
        id=row["id"],
        end_time=datetime.strptime(row["end_time"], DATETIME_FMT),
        duration_seconds=float(row["duration_seconds"]),
        category=ActivityCategory(row["category"]),
        tier=int(row["tier"]),
    )
