"""FastAPI application that exposes the heatmap as a local JSON API."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from .catalog import derive_available_weeks, intervals_for_week
from .config import (
    ConfigStore,
    JsonFileConfigStore,
    clear_active_hours,
    load_active_hours_payload,
    save_active_hours,
)
from .db import database_connection, delete_interval, fetch_intervals, insert_intervals
from .labels import category_color, category_label
from .models import (
    ActiveHoursDisabled,
    ActiveHoursEnabled,
    ActivityCategory,
    ActivityInterval,
    HeatmapGrid,
    HeatmapSummary,
    WeekInfo,
    parse_category,
)
from .paths import get_config_path, get_db_path
from .service import build_heatmap_view
from .weeks import week_start

logger = logging.getLogger(__name__)

DATE_FMT = "%Y-%m-%d"


class IntervalPayload(BaseModel):
    id: str = Field(min_length=1)
    end_time: datetime
    duration_seconds: float = Field(ge=0)
    category: str = ActivityCategory.UNKNOWN.value
    tier: int = Field(default=0, ge=0)

    model_config = ConfigDict(extra="forbid")


class ActiveHoursUpdate(BaseModel):
    start_hour: int = Field(ge=0, le=23)
    end_hour: int = Field(ge=0, le=23)
    enabled: bool

    model_config = ConfigDict(extra="forbid")


def create_app(
    *,
    db_path: Optional[Path] = None,
    config_path: Optional[Path] = None,
    config_store: Optional[ConfigStore] = None,
) -> FastAPI:
    """Instantiate the FastAPI application."""
    resolved_db_path = Path(db_path or get_db_path())
    store = config_store or JsonFileConfigStore(config_path or get_config_path())

    app = FastAPI(title="Activity Heatmap", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.db_path = resolved_db_path
    app.state.config_store = store

    @app.on_event("startup")
    async def _startup() -> None:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )

    @app.get("/api/status")
    def status(request: Request) -> Dict[str, Any]:
        with database_connection(request.app.state.db_path) as conn:
            count = conn.execute("SELECT COUNT(*) FROM activity_intervals").fetchone()[0]
        return {
            "database_path": str(request.app.state.db_path),
            "interval_count": count,
        }

    @app.get("/api/weeks")
    def weeks(request: Request) -> Dict[str, Any]:
        with database_connection(request.app.state.db_path) as conn:
            intervals = fetch_intervals(conn)
        return {"weeks": [_week_payload(info) for info in derive_available_weeks(intervals)]}

    @app.get("/api/heatmap")
    def heatmap(
        request: Request,
        week: Optional[str] = Query(
            default=None,
            description="Any date (YYYY-MM-DD) in the target week. Defaults to the latest week.",
        ),
        tier: Optional[int] = Query(default=None, ge=0, description="Tier filter; 0 means all."),
        category: Optional[str] = Query(default=None, description="Category filter."),
    ) -> Dict[str, Any]:
        target = _parse_date(week) if week else None
        with database_connection(request.app.state.db_path) as conn:
            intervals = fetch_intervals(conn)
        payload = load_active_hours_payload(request.app.state.config_store)
        view = build_heatmap_view(
            intervals,
            week=target,
            tier=tier,
            category=parse_category(category),
            window=payload.to_window(),
        )
        return {
            "weeks": [_week_payload(info) for info in view.weeks],
            "selected_week": _week_payload(view.selected_week) if view.selected_week else None,
            "can_go_next": view.can_go_next,
            "can_go_prev": view.can_go_prev,
            "next_week": _week_payload(view.next_week) if view.next_week else None,
            "prev_week": _week_payload(view.prev_week) if view.prev_week else None,
            "available_tiers": view.available_tiers,
            "active_hours": payload.model_dump(),
            "grid": _grid_payload(view.grid) if view.grid else None,
            "summary": _summary_payload(view.summary) if view.summary else None,
        }

    @app.get("/api/intervals")
    def list_intervals(
        request: Request,
        week: Optional[str] = Query(
            default=None,
            description="Only intervals overlapping the week containing this date (YYYY-MM-DD).",
        ),
    ) -> Dict[str, Any]:
        with database_connection(request.app.state.db_path) as conn:
            intervals = fetch_intervals(conn)
        if week:
            intervals = intervals_for_week(intervals, week_start(_parse_date(week)))
        return {"intervals": [_interval_payload(interval) for interval in intervals]}

    @app.post("/api/intervals")
    def create_interval(payload: IntervalPayload, request: Request) -> Dict[str, Any]:
        end_time = payload.end_time
        if end_time.tzinfo is not None:
            raise HTTPException(
                status_code=400, detail="end_time must be a local time without offset"
            )
        try:
            interval = ActivityInterval(
                id=payload.id.strip(),
                end_time=end_time,
                duration_seconds=payload.duration_seconds,
                category=ActivityCategory(payload.category),
                tier=payload.tier,
            )
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        with database_connection(request.app.state.db_path) as conn:
            insert_intervals(conn, [interval])
        logger.info("Stored interval %s.", interval.id)
        return _interval_payload(interval)

    @app.delete("/api/intervals/{interval_id}")
    def remove_interval(interval_id: str, request: Request) -> Dict[str, Any]:
        with database_connection(request.app.state.db_path) as conn:
            try:
                delete_interval(conn, interval_id)
            except ValueError as exc:
                raise HTTPException(status_code=404, detail="Interval not found") from exc
        return {"deleted": interval_id}

    @app.get("/api/active-hours")
    def get_active_hours(request: Request) -> Dict[str, Any]:
        return load_active_hours_payload(request.app.state.config_store).model_dump()

    @app.put("/api/active-hours")
    def put_active_hours(payload: ActiveHoursUpdate, request: Request) -> Dict[str, Any]:
        window = (
            ActiveHoursEnabled(start_hour=payload.start_hour, end_hour=payload.end_hour)
            if payload.enabled
            else ActiveHoursDisabled()
        )
        save_active_hours(request.app.state.config_store, window)
        return load_active_hours_payload(request.app.state.config_store).model_dump()

    @app.delete("/api/active-hours")
    def reset_active_hours(request: Request) -> Dict[str, Any]:
        clear_active_hours(request.app.state.config_store)
        return load_active_hours_payload(request.app.state.config_store).model_dump()

    return app


def _parse_date(value: str) -> datetime:
    try:
        return datetime.strptime(value, DATE_FMT)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Invalid date format") from exc


def _week_payload(info: WeekInfo) -> Dict[str, Any]:
    return {"week_start": info.week_start.strftime(DATE_FMT), "label": info.label}


def _interval_payload(interval: ActivityInterval) -> Dict[str, Any]:
    return {
        "id": interval.id,
        "start_time": interval.start_time.isoformat(),
        "end_time": interval.end_time.isoformat(),
        "duration_seconds": interval.duration_seconds,
        "category": interval.category.value,
        "tier": interval.tier,
    }


def _grid_payload(grid: HeatmapGrid) -> Dict[str, Any]:
    return {
        "week_start": grid.week_start.isoformat(),
        "week_end": grid.week_end.isoformat(),
        "label": grid.label,
        "days": [
            [
                {
                    "hour": cell.hour,
                    "day_index": cell.day_index,
                    "date": cell.date.strftime(DATE_FMT),
                    "total_coverage": cell.total_coverage,
                    "segments": [
                        {
                            "start_fraction": segment.start_fraction,
                            "end_fraction": segment.end_fraction,
                            "category": segment.category.value,
                            "tier": segment.tier,
                            "interval_id": segment.interval_id,
                        }
                        for segment in cell.segments
                    ],
                }
                for cell in day_cells
            ]
            for day_cells in grid.days
        ],
    }


def _summary_payload(summary: HeatmapSummary) -> Dict[str, Any]:
    return {
        "overall_coverage": summary.overall_coverage,
        "daily_coverage": summary.daily_coverage,
        "active_hours_coverage": summary.active_hours_coverage,
        "category_breakdown": {
            category.value: share for category, share in summary.category_breakdown.items()
        },
        "category_stats": {
            category.value: {
                "label": category_label(category),
                "color": category_color(category),
                "coverage": stats.coverage,
                "active_seconds": stats.active_seconds,
                "run_count": stats.run_count,
            }
            for category, stats in summary.category_stats.items()
        },
        "total_active_seconds": summary.total_active_seconds,
        "total_idle_seconds": summary.total_idle_seconds,
        "interval_count": summary.interval_count,
    }
