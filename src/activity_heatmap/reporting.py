"""Formatting helpers and console output for heatmap summaries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .labels import category_color, category_label
from .models import ActivityCategory, HeatmapSummary, Segment
from .service import HeatmapView

DAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


@dataclass(frozen=True, slots=True)
class SummaryEntry:
    label: str
    value: str


@dataclass(frozen=True, slots=True)
class CategoryBreakdownGroup:
    category: ActivityCategory
    label: str
    color: str
    entries: list[SummaryEntry]


def format_duration(seconds: float) -> str:
    """Render whole minutes as ``"8hr 43min"``, or ``"59min"`` under an hour."""
    total_minutes = int(seconds // 60)
    hours, minutes = divmod(total_minutes, 60)
    if hours:
        return f"{hours}hr {minutes}min"
    return f"{minutes}min"


def format_coverage_percent(coverage: float) -> str:
    return f"{coverage * 100:.0f}%"


def format_minute_display(fraction: float) -> str:
    """Minute offset within an hour, e.g. 0.75 -> ``":45"``; capped at ``":59"``."""
    minutes = min(round(fraction * 60), 59)
    return f":{minutes:02d}"


def sort_segments_by_time(segments: Iterable[Segment]) -> list[Segment]:
    return sorted(segments, key=lambda segment: segment.start_fraction)


def build_summary_entries(
    summary: HeatmapSummary, active_hours_enabled: bool
) -> list[SummaryEntry]:
    entries = [
        SummaryEntry("Overall Coverage", format_coverage_percent(summary.overall_coverage)),
        SummaryEntry("Total Active Time", format_duration(summary.total_active_seconds)),
        SummaryEntry("Idle Time", format_duration(summary.total_idle_seconds)),
        SummaryEntry("Intervals This Week", str(summary.interval_count)),
    ]
    if active_hours_enabled:
        entries.append(
            SummaryEntry(
                "Active Hours Coverage",
                format_coverage_percent(summary.active_hours_coverage),
            )
        )
    return entries


def build_category_breakdown_entries(summary: HeatmapSummary) -> list[CategoryBreakdownGroup]:
    """Per-category groups sorted by label; empty unless two or more categories are present."""
    if len(summary.category_stats) < 2:
        return []
    groups = [
        CategoryBreakdownGroup(
            category=category,
            label=category_label(category),
            color=category_color(category),
            entries=[
                SummaryEntry("Coverage", format_coverage_percent(stats.coverage)),
                SummaryEntry("Active Time", format_duration(stats.active_seconds)),
                SummaryEntry("Runs", str(stats.run_count)),
            ],
        )
        for category, stats in summary.category_stats.items()
    ]
    return sorted(groups, key=lambda group: group.label.casefold())


class SummaryPrinter:
    """Render human-readable heatmap summaries in the console."""

    def print_view(self, view: HeatmapView) -> None:
        if view.selected_week is None or view.summary is None:
            print("No activity recorded.")
            return

        summary = view.summary
        print(view.selected_week.label)
        print("-" * 40)
        for entry in build_summary_entries(summary, view.window.enabled):
            print(f"{entry.label + ':':<24} {entry.value}")

        print()
        print("Daily coverage:")
        for name, coverage in zip(DAY_NAMES, summary.daily_coverage):
            print(f"  {name}  {format_coverage_percent(coverage):>5}")

        groups = build_category_breakdown_entries(summary)
        if groups:
            print()
            print("By category:")
            for group in groups:
                values = "  ".join(f"{entry.label}: {entry.value}" for entry in group.entries)
                print(f"  {group.label:<12} {values}")
