"""Helpers for locating application directories."""

from __future__ import annotations

from pathlib import Path

from platformdirs import PlatformDirs


APP_NAME = "ActivityHeatmap"

DB_FILENAME = "intervals.sqlite3"
CONFIG_FILENAME = "config.json"


def get_data_dir() -> Path:
    """Return the base directory for persistent data."""
    # appauthor=False keeps Windows from nesting the app folder under a vendor folder.
    dirs = PlatformDirs(appname=APP_NAME, appauthor=False, roaming=True)
    path = Path(dirs.user_data_path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_db_path() -> Path:
    return get_data_dir() / DB_FILENAME


def get_config_path() -> Path:
    return get_data_dir() / CONFIG_FILENAME
