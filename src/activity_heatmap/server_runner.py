"""Serve the heatmap JSON API with Uvicorn."""

from __future__ import annotations

import logging
import threading
import time
import webbrowser
from pathlib import Path
from typing import Optional

import uvicorn

from .paths import get_config_path, get_db_path
from .webapp import create_app

logger = logging.getLogger(__name__)

LOG_LEVELS = ("critical", "error", "warning", "info", "debug")

_WILDCARD_HOSTS = {"0.0.0.0", "::", ""}


def dashboard_url(host: str, port: int) -> str:
    """URL a local browser can open; wildcard binds are reached through loopback."""
    if host in _WILDCARD_HOSTS:
        host = "127.0.0.1"
    elif ":" in host:
        host = f"[{host}]"
    return f"http://{host}:{port}/api/heatmap"


def run_dashboard(
    *,
    host: str = "127.0.0.1",
    port: int = 8765,
    db_path: Optional[Path] = None,
    config_path: Optional[Path] = None,
    open_browser: bool = True,
    log_level: str = "info",
) -> None:
    """Serve the API for ``db_path`` until interrupted, optionally opening a browser tab."""
    if log_level not in LOG_LEVELS:
        raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
    app = create_app(
        db_path=db_path or get_db_path(),
        config_path=config_path or get_config_path(),
    )

    url = dashboard_url(host, port)
    logger.info("Serving heatmap for %s at %s", app.state.db_path, url)
    if open_browser:
        threading.Thread(
            target=_launch_browser_after_delay, args=(url,), daemon=True
        ).start()

    uvicorn.run(app, host=host, port=port, log_level=log_level)


def _launch_browser_after_delay(url: str) -> None:
    time.sleep(1.0)
    try:
        webbrowser.open(url)
    except Exception:
        logger.exception("Failed to launch browser for %s", url)
