# src/daygrid/calendar/drag.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, tzinfo

from ..core.errors import GestureStateError
from ..core.ports import TaskStore
from .calendar_models import CalendarEvent, TimeRange
from .gestures import GestureGate, GestureKind, commit_range
from .timemath import add_minutes, minutes_between, round_to_resolution, time_at_offset

logger = logging.getLogger(__name__)

MIN_DURATION_MIN = 15


@dataclass(slots=True)
class DragSession:
    target_event: CalendarEvent
    reference_day: date
    hour_height_px: float
    tz: tzinfo


def on_drop(
        event: CalendarEvent,
        pointer_y: float,
        hour_height_px: float,
        reference_day: date,
        *,
        tz: tzinfo,
        resolution_min: int = 1,
        min_duration_min: int = MIN_DURATION_MIN,
) -> TimeRange:
    """
    New range for `event` dropped at `pointer_y` (px from the top of the day grid).

    The start is the pointer's time rounded to `resolution_min`; the entry's
    duration is kept (floored at min_duration_min for malformed entries).
    Offsets outside the 24h grid are clamped onto it.
    """
    grid_height = 24.0 * hour_height_px
    y = min(max(float(pointer_y), 0.0), grid_height)

    new_start = round_to_resolution(
        time_at_offset(reference_day, y, hour_height_px, tz),
        resolution_min,
        tz,
    )

    entry = event.schedule_entry
    duration_min = max(minutes_between(entry.start_time, entry.end_time), float(min_duration_min))
    new_end = add_minutes(new_start, duration_min, tz)
    return TimeRange(start=new_start, end=new_end)


class DragController:
    """
    Whole-event moves for one surface.

    start() -> on_drop() (or cancel()). The gate is held from start until the
    store call has finished, and released whatever the outcome.
    """

    def __init__(
            self,
            store: TaskStore,
            gate: GestureGate,
            *,
            resolution_min: int = 1,
            min_duration_min: int = MIN_DURATION_MIN,
    ) -> None:
        self._store = store
        self._gate = gate
        self._resolution_min = int(resolution_min)
        self._min_duration_min = int(min_duration_min)

    def start(
            self,
            event: CalendarEvent,
            reference_day: date,
            hour_height_px: float,
            *,
            tz: tzinfo,
    ) -> DragSession:
        session = DragSession(
            target_event=event,
            reference_day=reference_day,
            hour_height_px=float(hour_height_px),
            tz=tz,
        )
        self._gate.acquire(GestureKind.DRAG, session)
        logger.debug("Drag started task=%s entry=%s", *event.key)
        return session

    def compute_drop(self, session: DragSession, pointer_y: float) -> TimeRange:
        return on_drop(
            session.target_event,
            pointer_y,
            session.hour_height_px,
            session.reference_day,
            tz=session.tz,
            resolution_min=self._resolution_min,
            min_duration_min=self._min_duration_min,
        )

    async def on_drop(self, session: DragSession, pointer_y: float) -> TimeRange:
        if not self._gate.holds(session):
            raise GestureStateError("drop requested for a drag session that is not active")
        try:
            new_range = self.compute_drop(session, pointer_y)
            await commit_range(self._store, session.target_event, new_range)
            return new_range
        finally:
            self._gate.release(session)

    def cancel(self, session: DragSession) -> None:
        if self._gate.holds(session):
            logger.debug("Drag cancelled task=%s entry=%s", *session.target_event.key)
        self._gate.release(session)
