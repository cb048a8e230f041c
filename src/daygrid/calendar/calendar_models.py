# src/daygrid/calendar/calendar_models.py

"""Transient values built per render cycle. Nothing here is persisted."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum

from ..tasks.task_models import ScheduleHistoryEntry, Task


@dataclass(slots=True, frozen=True)
class TimeRange:
    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return timedelta(seconds=self.end.timestamp() - self.start.timestamp())


@dataclass(slots=True, frozen=True)
class CalendarEvent:
    """
    One schedule entry placed on one day.

    column/total_columns are filled in by layout(); the selector leaves them at 0/1.
    """

    task: Task
    schedule_entry: ScheduleHistoryEntry
    start_time: datetime
    end_time: datetime
    column: int = 0
    total_columns: int = 1

    @property
    def key(self) -> tuple[str, str]:
        return (self.task.id, self.schedule_entry.id)

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(start=self.start_time, end=self.end_time)


@dataclass(slots=True, frozen=True)
class Deadline:
    task: Task
    due_date_time: datetime


@dataclass(slots=True, frozen=True)
class EventPosition:
    top: float
    height: float
    starts_before_day: bool
    ends_after_day: bool


class Urgency(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(slots=True, frozen=True)
class PositionedEvent:
    event: CalendarEvent
    position: EventPosition


@dataclass(slots=True, frozen=True)
class DeadlineMarker:
    deadline: Deadline
    urgency: Urgency
    color: str


@dataclass(slots=True, frozen=True)
class DayView:
    """Everything a day column needs to render, in layout order."""

    date: date
    events: tuple[PositionedEvent, ...] = field(default_factory=tuple)
    deadlines: tuple[DeadlineMarker, ...] = field(default_factory=tuple)
