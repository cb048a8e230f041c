# tests/conftest.py

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest

from daygrid.calendar.gestures import GestureGate
from daygrid.config import Settings

from .fakes import FakeTaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """
    Deterministic settings for engine tests.

    Built by hand rather than from the environment so a developer's .env or
    DAYGRID_* variables cannot change test outcomes.
    """
    return Settings(
        app_name="daygrid-test",
        log_level="DEBUG",
        data_dir=tmp_path / "daygrid",
        tz="UTC",
        hour_height_px=60.0,
        min_event_height_px=20.0,
        min_duration_min=15,
        time_resolution_min=1,
        urgency_high_hours=24.0,
        urgency_medium_hours=72.0,
        store_timeout_seconds=1.0,
    )


@pytest.fixture()
def fast_timeout_settings(settings: Settings) -> Settings:
    return replace(settings, store_timeout_seconds=0.05)


@pytest.fixture()
def store() -> FakeTaskStore:
    return FakeTaskStore()


@pytest.fixture()
def gate() -> GestureGate:
    return GestureGate()
