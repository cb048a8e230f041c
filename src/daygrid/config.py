# src/daygrid/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole engine (normal "settings layer").
- Components still take explicit arguments, Settings only provides defaults.
- Bad numeric values fall back to defaults instead of failing at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "DAYGRID"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int, *, minimum: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        val = int(raw)
    except ValueError:
        return default
    if minimum is not None and val < minimum:
        return default
    return val


def _env_float(name: str, default: float, *, minimum: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    if minimum is not None and val < minimum:
        return default
    return val


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Time zone used for day boundaries ----
    tz: str

    # ---- Time grid geometry ----
    hour_height_px: float
    min_event_height_px: float

    # ---- Mutation constraints ----
    min_duration_min: int
    time_resolution_min: int

    # ---- Deadline urgency thresholds ----
    urgency_high_hours: float
    urgency_medium_hours: float

    # ---- Collaborator calls ----
    store_timeout_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "daygrid") or "daygrid"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/daygrid"))

        tz = _env(_k("TZ"), "local").strip() or "local"

        hour_height_px = _env_float(_k("HOUR_HEIGHT_PX"), 60.0, minimum=1.0)
        min_event_height_px = _env_float(_k("MIN_EVENT_HEIGHT_PX"), 20.0, minimum=0.0)

        min_duration_min = _env_int(_k("MIN_DURATION_MIN"), 15, minimum=1)
        time_resolution_min = _env_int(_k("TIME_RESOLUTION_MIN"), 1, minimum=1)

        urgency_high_hours = _env_float(_k("URGENCY_HIGH_HOURS"), 24.0, minimum=0.0)
        urgency_medium_hours = _env_float(_k("URGENCY_MEDIUM_HOURS"), 72.0, minimum=0.0)
        if urgency_medium_hours < urgency_high_hours:
            urgency_medium_hours = urgency_high_hours

        store_timeout_seconds = _env_float(_k("STORE_TIMEOUT_SECONDS"), 10.0, minimum=0.1)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            tz=tz,
            hour_height_px=hour_height_px,
            min_event_height_px=min_event_height_px,
            min_duration_min=min_duration_min,
            time_resolution_min=time_resolution_min,
            urgency_high_hours=urgency_high_hours,
            urgency_medium_hours=urgency_medium_hours,
            store_timeout_seconds=store_timeout_seconds,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
