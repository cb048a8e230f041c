# src/daygrid/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import Settings

LOG_FILE_NAME = "daygrid.log"

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Gesture controllers log every pointer transition at DEBUG.
_QUIET_ENGINE_LOGGERS: dict[str, int] = {
    "daygrid.calendar.drag": logging.INFO,
    "daygrid.calendar.resize": logging.INFO,
}


class _ConsoleNoiseFilter(logging.Filter):
    """Console gets engine logs (minus gesture chatter) and only errors from anything else."""

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if not name.startswith("daygrid."):
            # Third-party loggers and captured 'py.warnings'.
            return record.levelno >= logging.ERROR
        return record.levelno >= _QUIET_ENGINE_LOGGERS.get(name, logging.NOTSET)


def setup_logging(
    *,
    log_dir: str | Path = ".local/daygrid",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Install a filtered stderr handler and a full `daygrid.log` file handler on
    the root logger, replacing whatever handlers it had.

    Meant for the hosting application's startup. Returns the log file path.
    """
    log_file = Path(log_dir) / LOG_FILE_NAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)

    root.addHandler(console)
    root.addHandler(file_handler)
    logging.captureWarnings(True)

    return log_file


def setup_logging_from_settings(settings: Settings) -> Path:
    """setup_logging() with the console level and log directory taken from Settings."""
    log_file = setup_logging(
        log_dir=settings.data_dir,
        console_level=level_from_name(settings.log_level),
    )
    logging.getLogger(__name__).info("%s logging to %s", settings.app_name, log_file)
    return log_file


def level_from_name(name: str | None, default: int = logging.INFO) -> int:
    """Map a Settings.log_level string ("debug", "WARNING", ...) to a logging level."""
    level_name = str(name or "").strip().upper()
    level = getattr(logging, level_name, None)
    return level if isinstance(level, int) else default
