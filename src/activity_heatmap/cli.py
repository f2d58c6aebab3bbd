"""Command-line interface for the activity heatmap."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from .config import (
    DEFAULT_END_HOUR,
    DEFAULT_START_HOUR,
    JsonFileConfigStore,
    clear_active_hours,
    load_active_hours,
    save_active_hours,
)
from .db import database_connection, delete_interval, fetch_intervals, insert_intervals
from .models import ActiveHoursDisabled, ActiveHoursEnabled, ActivityInterval, parse_category
from .paths import get_config_path, get_db_path
from .server_runner import LOG_LEVELS, run_dashboard

app = typer.Typer(help="Weekly activity coverage heatmap.")

DATE_FORMAT = "%Y-%m-%d"


@app.callback(no_args_is_help=True)
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs.")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _parse_day(value: str, option: str) -> datetime:
    try:
        return datetime.strptime(value, DATE_FORMAT)
    except ValueError as exc:
        raise typer.BadParameter("Expected YYYY-MM-DD.", param_hint=option) from exc


@app.command()
def add(
    interval_id: str = typer.Argument(..., help="Unique identifier of the interval."),
    end: str = typer.Option(
        ...,
        "--end",
        help="End timestamp, ISO format (e.g. 2024-01-08T14:45:00).",
    ),
    duration: float = typer.Option(
        ..., "--duration", min=0.0, help="Duration in seconds."
    ),
    category: str = typer.Option("unknown", "--category", help="Interval category."),
    tier: int = typer.Option(0, "--tier", min=0, help="Tier of the interval."),
    db_path: Optional[Path] = typer.Option(
        None, "--db", path_type=Path, help="Location of the interval SQLite database."
    ),
) -> None:
    """Record (or replace) a single activity interval."""
    try:
        end_time = datetime.fromisoformat(end)
    except ValueError as exc:
        raise typer.BadParameter("Expected an ISO timestamp.", param_hint="--end") from exc
    if end_time.tzinfo is not None:
        raise typer.BadParameter(
            "Expected a local timestamp without a UTC offset.", param_hint="--end"
        )
    try:
        interval = ActivityInterval(
            id=interval_id,
            end_time=end_time,
            duration_seconds=duration,
            category=category,
            tier=tier,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--duration") from exc
    with database_connection(db_path or get_db_path()) as conn:
        insert_intervals(conn, [interval])
    typer.echo(f"Recorded {interval.id} ({interval.category.value}).")


@app.command()
def remove(
    interval_id: str = typer.Argument(..., help="Identifier of the interval to delete."),
    db_path: Optional[Path] = typer.Option(
        None, "--db", path_type=Path, help="Location of the interval SQLite database."
    ),
) -> None:
    """Delete a recorded interval."""
    with database_connection(db_path or get_db_path()) as conn:
        try:
            delete_interval(conn, interval_id)
        except ValueError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(code=1) from exc
    typer.echo(f"Removed {interval_id}.")


@app.command()
def weeks(
    db_path: Optional[Path] = typer.Option(
        None, "--db", path_type=Path, help="Location of the interval SQLite database."
    ),
) -> None:
    """List the weeks that contain activity, newest first."""
    from .catalog import derive_available_weeks

    with database_connection(db_path or get_db_path()) as conn:
        intervals = fetch_intervals(conn)
    available = derive_available_weeks(intervals)
    if not available:
        typer.echo("No activity recorded.")
        return
    for info in available:
        typer.echo(f"{info.week_start.strftime(DATE_FORMAT)}  {info.label}")


@app.command()
def summary(
    week: Optional[str] = typer.Option(
        None,
        "--week",
        help="Any date (YYYY-MM-DD) in the week to summarize. Defaults to the latest week.",
    ),
    tier: Optional[int] = typer.Option(None, "--tier", min=0, help="Only include this tier."),
    category: Optional[str] = typer.Option(
        None, "--category", help="Only include this category."
    ),
    db_path: Optional[Path] = typer.Option(
        None, "--db", path_type=Path, help="Location of the interval SQLite database."
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", path_type=Path, help="Location of the JSON configuration file."
    ),
) -> None:
    """Print coverage statistics for one week."""
    from .reporting import SummaryPrinter
    from .service import build_heatmap_view

    target = _parse_day(week, "--week") if week else None
    with database_connection(db_path or get_db_path()) as conn:
        intervals = fetch_intervals(conn)
    window = load_active_hours(JsonFileConfigStore(config_path or get_config_path()))
    view = build_heatmap_view(
        intervals,
        week=target,
        tier=tier,
        category=parse_category(category),
        window=window,
    )
    SummaryPrinter().print_view(view)


@app.command("active-hours")
def active_hours(
    start: Optional[int] = typer.Option(
        None, "--start", min=0, max=23, help="First hour of the window (inclusive)."
    ),
    end: Optional[int] = typer.Option(
        None, "--end", min=0, max=23, help="Hour the window ends (exclusive)."
    ),
    disable: bool = typer.Option(False, "--disable", help="Turn the active hours window off."),
    reset: bool = typer.Option(False, "--reset", help="Forget the stored configuration."),
    config_path: Optional[Path] = typer.Option(
        None, "--config", path_type=Path, help="Location of the JSON configuration file."
    ),
) -> None:
    """Show or change the active hours window."""
    store = JsonFileConfigStore(config_path or get_config_path())
    if reset:
        clear_active_hours(store)
    elif disable:
        save_active_hours(store, ActiveHoursDisabled())
    elif start is not None or end is not None:
        current = load_active_hours(store)
        base_start, base_end = (
            (current.start_hour, current.end_hour)
            if isinstance(current, ActiveHoursEnabled)
            else (DEFAULT_START_HOUR, DEFAULT_END_HOUR)
        )
        save_active_hours(
            store,
            ActiveHoursEnabled(
                start_hour=start if start is not None else base_start,
                end_hour=end if end is not None else base_end,
            ),
        )

    window = load_active_hours(store)
    if isinstance(window, ActiveHoursEnabled):
        typer.echo(f"Active hours: {window.start_hour:02d}:00-{window.end_hour:02d}:00")
    else:
        typer.echo("Active hours: disabled")


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind the dashboard."),
    port: int = typer.Option(
        8765, "--port", min=1, max=65535, help="TCP port for the dashboard."
    ),
    db_path: Optional[Path] = typer.Option(
        None, "--db", path_type=Path, help="Location of the interval SQLite database."
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", path_type=Path, help="Location of the JSON configuration file."
    ),
    open_browser: bool = typer.Option(
        True,
        "--open-browser/--no-open-browser",
        help="Automatically launch the dashboard in your default browser.",
    ),
    log_level: str = typer.Option(
        "info", "--log-level", help="Uvicorn log level: " + ", ".join(LOG_LEVELS) + "."
    ),
) -> None:
    """Start the local dashboard."""
    if log_level.lower() not in LOG_LEVELS:
        raise typer.BadParameter(
            f"Expected one of {', '.join(LOG_LEVELS)}.", param_hint="--log-level"
        )
    run_dashboard(
        host=host,
        port=port,
        db_path=db_path or get_db_path(),
        config_path=config_path or get_config_path(),
        open_browser=open_browser,
        log_level=log_level.lower(),
    )
