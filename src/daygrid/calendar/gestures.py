# src/daygrid/calendar/gestures.py

"""
Per-surface gesture gate and the shared commit path.

A surface owns exactly one GestureGate. Drag and resize controllers both
acquire it on gesture start, so a second start while anything is in flight is
rejected (never queued). The gate stays held while a commit is awaiting the
task store.
"""

from __future__ import annotations

import logging
from enum import Enum

from ..core.errors import CollaboratorUnavailable, ConcurrentGestureRejected
from ..core.ports import TaskStore
from .calendar_models import CalendarEvent, TimeRange

logger = logging.getLogger(__name__)


class GestureKind(str, Enum):
    DRAG = "drag"
    RESIZE = "resize"


class GestureGate:
    def __init__(self) -> None:
        self._session: object | None = None
        self._kind: GestureKind | None = None

    @property
    def active_kind(self) -> GestureKind | None:
        return self._kind

    @property
    def is_active(self) -> bool:
        return self._session is not None

    def holds(self, session: object) -> bool:
        return self._session is not None and self._session is session

    def acquire(self, kind: GestureKind, session: object) -> None:
        if self._session is not None:
            active = self._kind.value if self._kind is not None else "gesture"
            logger.debug("Rejected %s start: %s in flight", kind.value, active)
            raise ConcurrentGestureRejected(kind.value, active)
        self._session = session
        self._kind = kind

    def release(self, session: object) -> None:
        """Release if `session` is the holder; releasing a stale session is a no-op."""
        if self._session is session:
            self._session = None
            self._kind = None


async def commit_range(store: TaskStore, event: CalendarEvent, new_range: TimeRange) -> None:
    """
    Ask the store to move one schedule entry.

    Any store failure becomes CollaboratorUnavailable; the caller's in-memory
    state is left for the caller to revert. Cancellation propagates unchanged.
    """
    task_id, entry_id = event.key
    try:
        await store.update_schedule_entry(task_id, entry_id, new_range.start, new_range.end)
    except Exception as ex:
        logger.exception(
            "update_schedule_entry failed task_id=%s entry_id=%s",
            task_id,
            entry_id,
        )
        raise CollaboratorUnavailable(
            "update schedule entry",
            notice=f'Could not move "{event.task.title}". The schedule was left unchanged.',
        ) from ex

    logger.info(
        "Schedule entry %s of task %s -> %s .. %s",
        entry_id,
        task_id,
        new_range.start.isoformat(),
        new_range.end.isoformat(),
    )
