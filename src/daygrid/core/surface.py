# src/daygrid/core/surface.py

"""
Calendar surface: the composition root a hosting view holds.

- loads the task snapshot once (and again after every committed mutation),
- builds day views: select -> layout -> position -> urgency,
- owns one gesture gate shared by the drag and resize controllers,
- applies the collaborator timeout (a timeout is handled exactly like an error),
- emits one human-readable notice per failed collaborator call.

The pure building blocks live in daygrid.calendar and can be used without a surface.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import date, datetime
from typing import TYPE_CHECKING

from ..calendar.calendar_models import (
    CalendarEvent,
    DayView,
    DeadlineMarker,
    PositionedEvent,
    TimeRange,
)
from ..calendar.drag import DragController, DragSession
from ..calendar.gestures import GestureGate
from ..calendar.layout import layout
from ..calendar.resize import ResizeController, ResizeEdge, ResizePreview, ResizeSession
from ..calendar.selector import select_deadlines_for_date, select_schedules_for_date, week_of
from ..calendar.timemath import position_of, resolve_tz
from ..calendar.urgency import classify, urgency_color
from ..config import get_settings
from ..tasks.task_models import Task
from .errors import CollaboratorUnavailable
from .ports import NoticeSink, TaskStore

if TYPE_CHECKING:
    from ..config import Settings

logger = logging.getLogger(__name__)


class TimeoutTaskStore:
    """TaskStore wrapper that bounds every call with asyncio.wait_for."""

    def __init__(self, inner: TaskStore, timeout_seconds: float) -> None:
        self._inner = inner
        self._timeout = float(timeout_seconds)

    async def get_all_tasks(self) -> list[Task]:
        return await asyncio.wait_for(self._inner.get_all_tasks(), timeout=self._timeout)

    async def update_schedule_entry(
            self,
            task_id: str,
            entry_id: str,
            new_start: datetime,
            new_end: datetime,
    ) -> None:
        await asyncio.wait_for(
            self._inner.update_schedule_entry(task_id, entry_id, new_start, new_end),
            timeout=self._timeout,
        )


class CalendarSurface:
    def __init__(
            self,
            store: TaskStore,
            *,
            settings: Settings | None = None,
            notify: NoticeSink | None = None,
            clock: Callable[[], datetime] | None = None,
    ) -> None:
        if settings is None:
            settings = get_settings()
        self.settings = settings

        self.tz = resolve_tz(settings.tz)
        self.hour_height_px = float(settings.hour_height_px)
        self._notify_sink = notify
        self._clock = clock or (lambda: datetime.now(self.tz))

        self._store = TimeoutTaskStore(store, settings.store_timeout_seconds)
        self.gate = GestureGate()
        self.drag = DragController(
            self._store,
            self.gate,
            resolution_min=settings.time_resolution_min,
            min_duration_min=settings.min_duration_min,
        )
        self.resize = ResizeController(
            self._store,
            self.gate,
            min_duration_min=settings.min_duration_min,
            resolution_min=settings.time_resolution_min,
            min_height_px=settings.min_event_height_px,
        )

        self._tasks: list[Task] = []

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    # ---- loading ----

    async def reload(self) -> list[Task]:
        """Replace the snapshot. On failure the previous snapshot is kept."""
        try:
            tasks = await self._store.get_all_tasks()
        except Exception as ex:
            logger.exception("get_all_tasks failed")
            err = CollaboratorUnavailable(
                "load tasks",
                notice="Could not load tasks. Showing the last loaded schedule.",
            )
            self._notify(err.notice)
            raise err from ex

        self._tasks = list(tasks)
        logger.info("Loaded %d tasks", len(self._tasks))
        return self.tasks

    # ---- views ----

    def day_view(self, day: date) -> DayView:
        s = self.settings
        events = layout(
            select_schedules_for_date(self._tasks, day, tz=self.tz),
            min_duration_min=s.min_duration_min,
        )
        positioned = tuple(
            PositionedEvent(
                event=ev,
                position=position_of(
                    ev,
                    day,
                    self.hour_height_px,
                    tz=self.tz,
                    min_height_px=s.min_event_height_px,
                ),
            )
            for ev in events
        )

        now = self._clock()
        markers = []
        for deadline in select_deadlines_for_date(self._tasks, day, tz=self.tz):
            urgency = classify(
                deadline.due_date_time,
                now,
                high_within_hours=s.urgency_high_hours,
                medium_within_hours=s.urgency_medium_hours,
            )
            markers.append(DeadlineMarker(deadline=deadline, urgency=urgency, color=urgency_color(urgency)))
        markers.sort(key=lambda m: (m.deadline.due_date_time, m.deadline.task.id))

        return DayView(date=day, events=positioned, deadlines=tuple(markers))

    def week_view(self, day: date, *, week_start: int = 6) -> list[DayView]:
        return [self.day_view(d) for d in week_of(day, week_start=week_start)]

    # ---- drag ----

    def start_drag(self, event: CalendarEvent, day: date) -> DragSession:
        return self.drag.start(event, day, self.hour_height_px, tz=self.tz)

    async def drop(self, session: DragSession, pointer_y: float) -> TimeRange:
        try:
            new_range = await self.drag.on_drop(session, pointer_y)
        except CollaboratorUnavailable as err:
            self._notify(err.notice)
            raise
        await self._reload_after_commit()
        return new_range

    def cancel_drag(self, session: DragSession) -> None:
        self.drag.cancel(session)

    # ---- resize ----

    def begin_resize(self, event: CalendarEvent, edge: ResizeEdge, pointer_y: float, day: date) -> ResizeSession:
        return self.resize.begin(event, edge, pointer_y, day, self.hour_height_px, tz=self.tz)

    def resize_move(self, pointer_y: float) -> ResizePreview:
        return self.resize.move(pointer_y)

    async def resize_release(self, pointer_y: float | None = None) -> TimeRange:
        try:
            new_range = await self.resize.release(pointer_y)
        except CollaboratorUnavailable as err:
            self._notify(err.notice)
            raise
        await self._reload_after_commit()
        return new_range

    def cancel_resize(self) -> None:
        self.resize.cancel()

    # ---- helpers ----

    async def _reload_after_commit(self) -> None:
        # The mutation is already durable; a failed reload only leaves the view stale.
        try:
            await self.reload()
        except CollaboratorUnavailable:
            logger.warning("Reload after commit failed; view shows the previous snapshot")

    def _notify(self, notice: str) -> None:
        if self._notify_sink is None:
            return
        try:
            self._notify_sink(notice)
        except Exception:
            logger.exception("Notice sink raised")
