# src/daygrid/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class TaskState(StrEnum):
    """
    Task lifecycle state, owned by the task store.

    Values match the store's JSON snapshot ("Filed", "Scheduled", ...).
    """

    FILED = "Filed"
    SCHEDULED = "Scheduled"
    DOING = "Doing"
    FINISHED = "Finished"
    FAILED = "Failed"
    DEFERRED = "Deferred"
    REMOVED = "Removed"

    @classmethod
    def from_raw(cls, raw: str | None) -> TaskState:
        if not raw:
            return cls.FILED
        try:
            return cls(raw)
        except ValueError:
            # Tolerate lower-case values from hand-written snapshots.
            for member in cls:
                if member.value.lower() == str(raw).strip().lower():
                    return member
            return cls.FILED


@dataclass(slots=True, frozen=True)
class ScheduleHistoryEntry:
    """A concrete time block of work on a task (aware datetimes)."""

    id: str
    start_time: datetime
    end_time: datetime
    created_at: datetime | None = None

    @property
    def duration_minutes(self) -> float:
        return (self.end_time.timestamp() - self.start_time.timestamp()) / 60.0


@dataclass(slots=True, frozen=True)
class Task:
    id: str
    title: str
    state: TaskState

    due_date_time: datetime | None = None
    # Estimate in hours.
    estimated_time: float | None = None
    schedule_history: tuple[ScheduleHistoryEntry, ...] = ()

    description: str = ""

    def find_entry(self, entry_id: str) -> ScheduleHistoryEntry | None:
        for entry in self.schedule_history:
            if entry.id == entry_id:
                return entry
        return None
