# src/daygrid/calendar/selector.py

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime, timedelta, tzinfo

from ..tasks.task_models import Task, TaskState
from .calendar_models import CalendarEvent, Deadline
from .timemath import end_of_day, local_date, start_of_day

logger = logging.getLogger(__name__)

_HIDDEN_STATES = frozenset({TaskState.REMOVED})


def _entry_touches_date(start: datetime, end: datetime, day: date, tz: tzinfo) -> bool:
    # Starts on `day`, or overlaps its half-open [midnight, next midnight) window.
    if local_date(start, tz) == day:
        return True
    return start < end_of_day(day, tz) and end > start_of_day(day, tz)


def select_schedules_for_date(
        tasks: Iterable[Task],
        day: date,
        *,
        tz: tzinfo,
) -> list[CalendarEvent]:
    """
    Every schedule entry that starts on `day`, ends on `day`, or spans it.
    An entry ending exactly at midnight belongs to the day before only.

    Entries of Removed tasks are skipped. Order follows the input and carries no
    meaning; layout() is responsible for ordering.
    """
    events: list[CalendarEvent] = []

    for task in tasks:
        if task.state in _HIDDEN_STATES:
            continue
        for entry in task.schedule_history:
            if not _entry_touches_date(entry.start_time, entry.end_time, day, tz):
                continue
            events.append(
                CalendarEvent(
                    task=task,
                    schedule_entry=entry,
                    start_time=entry.start_time,
                    end_time=entry.end_time,
                )
            )

    logger.debug("Selected %d schedule entries for %s", len(events), day.isoformat())
    return events


def select_deadlines_for_date(
        tasks: Iterable[Task],
        day: date,
        *,
        tz: tzinfo,
) -> list[Deadline]:
    """Deadlines whose due time falls on `day` in the viewer's zone (Removed tasks excluded)."""
    out: list[Deadline] = []
    for task in tasks:
        due = task.due_date_time
        if due is None or task.state in _HIDDEN_STATES:
            continue
        if local_date(due, tz) != day:
            continue
        out.append(Deadline(task=task, due_date_time=due))
    return out


def week_of(day: date, *, week_start: int = 6) -> list[date]:
    """
    The seven dates of the week containing `day`.

    week_start uses date.weekday() numbering (0=Monday ... 6=Sunday); the
    default gives a Sunday-first week.
    """
    if not 0 <= week_start <= 6:
        raise ValueError(f"week_start must be in 0..6; got {week_start!r}")
    back = (day.weekday() - week_start) % 7
    first = day - timedelta(days=back)
    return [first + timedelta(days=i) for i in range(7)]
