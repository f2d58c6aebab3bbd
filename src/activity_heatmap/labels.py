"""Display labels and colours for categories. Presentation only."""

from __future__ import annotations

from .models import ActivityCategory

_LABELS: dict[ActivityCategory, str] = {
    ActivityCategory.FARM: "Farm",
    ActivityCategory.TOURNAMENT: "Tournament",
    ActivityCategory.MILESTONE: "Milestone",
    ActivityCategory.UNKNOWN: "Unknown",
}

_COLORS: dict[ActivityCategory, str] = {
    ActivityCategory.FARM: "#10b981",
    ActivityCategory.TOURNAMENT: "#f59e0b",
    ActivityCategory.MILESTONE: "#8b5cf6",
    ActivityCategory.UNKNOWN: "#888888",
}


def category_label(category: ActivityCategory) -> str:
    return _LABELS[category]


def category_color(category: ActivityCategory) -> str:
    return _COLORS[category]
