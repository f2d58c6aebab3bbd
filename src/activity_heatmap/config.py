"""Persisted active hours configuration and the key-value stores behind it."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Any, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, ValidationError

from .models import ActiveHoursDisabled, ActiveHoursEnabled, ActiveHoursWindow

logger = logging.getLogger(__name__)

ACTIVE_HOURS_KEY = "activity-heatmap-config"

DEFAULT_START_HOUR = 8
DEFAULT_END_HOUR = 23

Hour = Annotated[StrictInt, Field(ge=0, le=23)]


class ActiveHoursPayload(BaseModel):
    """Stored form of the active hours window."""

    start_hour: Hour = Field(alias="startHour")
    end_hour: Hour = Field(alias="endHour")
    enabled: StrictBool

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    def to_window(self) -> ActiveHoursWindow:
        if not self.enabled:
            return ActiveHoursDisabled()
        return ActiveHoursEnabled(start_hour=self.start_hour, end_hour=self.end_hour)

    @classmethod
    def from_window(cls, window: ActiveHoursWindow) -> "ActiveHoursPayload":
        if isinstance(window, ActiveHoursEnabled):
            return cls(start_hour=window.start_hour, end_hour=window.end_hour, enabled=True)
        return cls(start_hour=DEFAULT_START_HOUR, end_hour=DEFAULT_END_HOUR, enabled=False)


DEFAULT_ACTIVE_HOURS = ActiveHoursPayload(
    start_hour=DEFAULT_START_HOUR, end_hour=DEFAULT_END_HOUR, enabled=False
)


class ConfigStore(Protocol):
    def load(self, key: str) -> Any: ...

    def save(self, key: str, value: Any) -> None: ...

    def clear(self, key: str) -> None: ...


class InMemoryConfigStore:
    """Process-local store, mostly for tests and throwaway sessions."""

    def __init__(self, initial: Optional[dict[str, Any]] = None) -> None:
        self._values: dict[str, Any] = dict(initial or {})

    def load(self, key: str) -> Any:
        return self._values.get(key)

    def save(self, key: str, value: Any) -> None:
        self._values[key] = value

    def clear(self, key: str) -> None:
        self._values.pop(key, None)


class JsonFileConfigStore:
    """Stores every key in one JSON object on disk."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self, key: str) -> Any:
        return self._read().get(key)

    def save(self, key: str, value: Any) -> None:
        data = self._read_for_update()
        if data is None:
            data = {}
        data[key] = value
        self._write(data)

    def clear(self, key: str) -> None:
        data = self._read_for_update()
        if data is None:
            self._write({})
        elif key in data:
            del data[key]
            self._write(data)

    def _read_for_update(self) -> Optional[dict[str, Any]]:
        """Current contents, or ``None`` when the file is unreadable and must be replaced."""
        try:
            return self._read()
        except ValueError:
            logger.warning("Replacing unreadable config file %s.", self.path)
            return None

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, dict):
            raise ValueError(f"Top-level JSON value in {self.path} must be an object")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2, ensure_ascii=False)
            fh.write("\n")


def load_active_hours_payload(store: ConfigStore) -> ActiveHoursPayload:
    """Return the stored settings, or the defaults when the value is missing or invalid.

    A malformed value is rejected as a whole; nothing is partially repaired.
    """
    try:
        raw = store.load(ACTIVE_HOURS_KEY)
    except (ValueError, OSError) as exc:
        logger.warning("Failed to read active hours config: %s; using defaults.", exc)
        return DEFAULT_ACTIVE_HOURS
    if raw is None:
        return DEFAULT_ACTIVE_HOURS
    try:
        return ActiveHoursPayload.model_validate(raw)
    except ValidationError as exc:
        logger.warning(
            "Ignoring invalid active hours config (%d errors); using defaults.",
            exc.error_count(),
        )
        return DEFAULT_ACTIVE_HOURS


def load_active_hours(store: ConfigStore) -> ActiveHoursWindow:
    return load_active_hours_payload(store).to_window()


def save_active_hours(store: ConfigStore, window: ActiveHoursWindow) -> None:
    """Persist ``window``. Failures are logged, never raised."""
    payload = ActiveHoursPayload.from_window(window).model_dump(by_alias=True)
    try:
        store.save(ACTIVE_HOURS_KEY, payload)
    except Exception:
        logger.exception("Failed to save active hours config.")


def clear_active_hours(store: ConfigStore) -> None:
    try:
        store.clear(ACTIVE_HOURS_KEY)
    except Exception:
        logger.exception("Failed to clear active hours config.")
