# src/daygrid/calendar/layout.py

"""
Overlap layout for one day column.

Greedy interval colouring over events sorted by (start, end, input index):
each event takes the lowest column whose previous event has already ended,
otherwise opens a new one. Events are then grouped into clusters (runs of
transitively overlapping events) and every event in a cluster gets the
cluster's column count, so unrelated groups on the same day keep full width.

Intervals are half-open: an event ending at 10:00 does not overlap one
starting at 10:00.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime

from .calendar_models import CalendarEvent
from .timemath import add_minutes

logger = logging.getLogger(__name__)

MIN_DURATION_MIN = 15


def _effective_end(event: CalendarEvent, min_duration_min: int) -> datetime:
    """End time with the minimum-duration floor applied to inverted/empty entries."""
    if event.end_time > event.start_time:
        return event.end_time
    logger.warning(
        "Schedule entry %s of task %s has end <= start (%s .. %s); clamping to %d min",
        event.schedule_entry.id,
        event.task.id,
        event.start_time.isoformat(),
        event.end_time.isoformat(),
        min_duration_min,
    )
    return add_minutes(event.start_time, min_duration_min)


def layout(
        events: Sequence[CalendarEvent],
        *,
        min_duration_min: int = MIN_DURATION_MIN,
) -> list[CalendarEvent]:
    """
    Return new CalendarEvents with column/total_columns filled in, in sorted order.

    The result depends only on the events' (start, end) pairs; equal pairs keep
    their input order.
    """
    if not events:
        return []

    indexed = [
        (ev.start_time, _effective_end(ev, min_duration_min), idx, ev)
        for idx, ev in enumerate(events)
    ]
    indexed.sort(key=lambda item: (item[0], item[1], item[2]))

    # Greedy column assignment.
    column_ends: list[datetime] = []
    columns: list[int] = []
    for start, end, _idx, _ev in indexed:
        col = next((c for c, last_end in enumerate(column_ends) if last_end <= start), None)
        if col is None:
            col = len(column_ends)
            column_ends.append(end)
        else:
            column_ends[col] = end
        columns.append(col)

    # Cluster sweep: a cluster closes when the next start is at/after its latest end.
    totals = [1] * len(indexed)
    cluster_begin = 0
    cluster_end: datetime | None = None
    for pos, (start, end, _idx, _ev) in enumerate(indexed):
        if cluster_end is not None and start >= cluster_end:
            _close_cluster(columns, totals, cluster_begin, pos)
            cluster_begin = pos
            cluster_end = None
        cluster_end = end if cluster_end is None else max(cluster_end, end)
    _close_cluster(columns, totals, cluster_begin, len(indexed))

    out = [
        replace(ev, end_time=end, column=columns[pos], total_columns=totals[pos])
        for pos, (_start, end, _idx, ev) in enumerate(indexed)
    ]
    logger.debug("Laid out %d events in %d column(s) max", len(out), max(totals))
    return out


def _close_cluster(columns: list[int], totals: list[int], begin: int, end: int) -> None:
    if end <= begin:
        return
    width = max(columns[begin:end]) + 1
    for pos in range(begin, end):
        totals[pos] = width
