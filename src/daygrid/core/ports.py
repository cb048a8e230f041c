# src/daygrid/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the engine.

The engine depends on Protocols instead of concrete implementations.
This keeps the task store swappable (IPC bridge, SQLite, in-memory) and makes testing easier.
"""

from datetime import datetime
from typing import Callable, Protocol

from ..tasks.task_models import Task

# Upstream sink for human-readable failure notices (toast/snackbar).
NoticeSink = Callable[[str], None]


class TaskStore(Protocol):
    """
    Store-side port: the only two calls the engine makes across a boundary.

    Both calls may be slow and may fail. Implementations raise on failure; the
    engine wraps any exception into CollaboratorUnavailable.
    """

    async def get_all_tasks(self) -> list[Task]:
        """Full snapshot, no pagination, no filtering."""
        ...

    async def update_schedule_entry(
            self,
            task_id: str,
            entry_id: str,
            new_start: datetime,
            new_end: datetime,
    ) -> None:
        """Atomic per-entry update; no partial application."""
        ...
