# src/daygrid/calendar/resize.py

"""
Edge-drag resize as an explicit state machine.

    IDLE --begin--> ACTIVE --move--> ACTIVE
    ACTIVE --release--> COMMITTING --(store done / failed)--> IDLE
    ACTIVE --cancel--> IDLE

Previews are computed from the session and handed back to the caller; they are
never written anywhere. The committed range is recomputed from the last known
pointer position, not from the last preview.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, tzinfo
from enum import Enum

from ..core.errors import ConcurrentGestureRejected, GestureStateError
from ..core.ports import TaskStore
from .calendar_models import CalendarEvent, TimeRange
from .gestures import GestureGate, GestureKind, commit_range
from .timemath import (
    MIN_EVENT_HEIGHT_PX,
    add_minutes,
    minutes_between,
    pixels_to_minutes,
    position_of,
    round_to_resolution,
)

logger = logging.getLogger(__name__)

MIN_DURATION_MIN = 15


class ResizeEdge(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"


class ResizeState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    COMMITTING = "committing"


@dataclass(slots=True)
class ResizeSession:
    target_event: CalendarEvent
    edge: ResizeEdge
    anchor_pointer_y: float
    original_top: float
    original_height: float
    live_pointer_y: float

    reference_day: date
    hour_height_px: float
    tz: tzinfo


@dataclass(slots=True, frozen=True)
class ResizePreview:
    range: TimeRange
    top: float
    height: float


class ResizeController:
    def __init__(
            self,
            store: TaskStore,
            gate: GestureGate,
            *,
            min_duration_min: int = MIN_DURATION_MIN,
            resolution_min: int = 1,
            min_height_px: float = MIN_EVENT_HEIGHT_PX,
    ) -> None:
        self._store = store
        self._gate = gate
        self._min_duration_min = int(min_duration_min)
        self._resolution_min = int(resolution_min)
        self._min_height_px = float(min_height_px)

        self._state = ResizeState.IDLE
        self._session: ResizeSession | None = None

    @property
    def state(self) -> ResizeState:
        return self._state

    @property
    def session(self) -> ResizeSession | None:
        return self._session

    # ---- transitions ----

    def begin(
            self,
            event: CalendarEvent,
            edge: ResizeEdge,
            pointer_y: float,
            reference_day: date,
            hour_height_px: float,
            *,
            tz: tzinfo,
    ) -> ResizeSession:
        if self._state is not ResizeState.IDLE:
            raise ConcurrentGestureRejected(GestureKind.RESIZE.value, GestureKind.RESIZE.value)

        pos = position_of(
            event,
            reference_day,
            hour_height_px,
            tz=tz,
            min_height_px=self._min_height_px,
        )
        session = ResizeSession(
            target_event=event,
            edge=ResizeEdge(edge),
            anchor_pointer_y=float(pointer_y),
            original_top=pos.top,
            original_height=pos.height,
            live_pointer_y=float(pointer_y),
            reference_day=reference_day,
            hour_height_px=float(hour_height_px),
            tz=tz,
        )
        # Raises ConcurrentGestureRejected before any state changes.
        self._gate.acquire(GestureKind.RESIZE, session)

        self._session = session
        self._state = ResizeState.ACTIVE
        logger.debug("Resize started task=%s entry=%s edge=%s", *event.key, session.edge.value)
        return session

    def move(self, pointer_y: float) -> ResizePreview:
        session = self._require_active("move")
        session.live_pointer_y = float(pointer_y)

        candidate = self.candidate_range(session, session.live_pointer_y)
        preview_event = replace(session.target_event, start_time=candidate.start, end_time=candidate.end)
        pos = position_of(
            preview_event,
            session.reference_day,
            session.hour_height_px,
            tz=session.tz,
            min_height_px=self._min_height_px,
        )
        return ResizePreview(range=candidate, top=pos.top, height=pos.height)

    async def release(self, pointer_y: float | None = None) -> TimeRange:
        session = self._require_active("release")
        if pointer_y is not None:
            session.live_pointer_y = float(pointer_y)

        new_range = self.candidate_range(session, session.live_pointer_y)
        self._state = ResizeState.COMMITTING
        try:
            await commit_range(self._store, session.target_event, new_range)
            return new_range
        finally:
            self._reset(session)

    def cancel(self) -> None:
        session = self._session
        if session is None or self._state is not ResizeState.ACTIVE:
            return
        logger.debug("Resize cancelled task=%s entry=%s", *session.target_event.key)
        self._reset(session)

    # ---- math ----

    def candidate_range(self, session: ResizeSession, pointer_y: float) -> TimeRange:
        """Time range implied by `pointer_y`, with the minimum-duration floor applied."""
        entry = session.target_event.schedule_entry
        original_start, original_end = entry.start_time, entry.end_time
        delta_min = pixels_to_minutes(float(pointer_y) - session.anchor_pointer_y, session.hour_height_px)
        floor = float(self._min_duration_min)

        if session.edge is ResizeEdge.TOP:
            start = round_to_resolution(
                add_minutes(original_start, delta_min, session.tz), self._resolution_min, session.tz
            )
            if minutes_between(start, original_end) < floor:
                start = add_minutes(original_end, -floor, session.tz)
            return TimeRange(start=start, end=original_end)

        end = round_to_resolution(
            add_minutes(original_end, delta_min, session.tz), self._resolution_min, session.tz
        )
        if minutes_between(original_start, end) < floor:
            end = add_minutes(original_start, floor, session.tz)
        return TimeRange(start=original_start, end=end)

    # ---- helpers ----

    def _require_active(self, op: str) -> ResizeSession:
        if self._state is not ResizeState.ACTIVE or self._session is None:
            raise GestureStateError(f"cannot {op}: resize is {self._state.value}")
        return self._session

    def _reset(self, session: ResizeSession) -> None:
        self._gate.release(session)
        self._session = None
        self._state = ResizeState.IDLE
