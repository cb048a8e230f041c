# src/daygrid/calendar/urgency.py

from __future__ import annotations

from datetime import datetime

from ..tasks.task_models import TaskState
from .calendar_models import Urgency

HIGH_WITHIN_HOURS = 24.0
MEDIUM_WITHIN_HOURS = 72.0

# Color tokens; hosts map them onto their theme (COLOR_HEX is the default palette).
_URGENCY_COLORS: dict[Urgency, str] = {
    Urgency.HIGH: "red",
    Urgency.MEDIUM: "orange",
    Urgency.LOW: "blue",
}

COLOR_HEX: dict[str, str] = {
    "red": "#f44336",
    "orange": "#ff9800",
    "blue": "#2196f3",
}

# Event fill per task state (picked for contrast against a dark theme).
_STATE_COLORS: dict[TaskState, str] = {
    TaskState.FILED: "#9e9e9e",
    TaskState.SCHEDULED: "#5865F2",
    TaskState.DOING: "#FAA61A",
    TaskState.FINISHED: "#43B581",
    TaskState.FAILED: "#ED4245",
    TaskState.DEFERRED: "#9c27b0",
    TaskState.REMOVED: "#757575",
}
_DEFAULT_STATE_COLOR = "#9e9e9e"


def classify(
        due_date_time: datetime,
        now: datetime,
        *,
        high_within_hours: float = HIGH_WITHIN_HOURS,
        medium_within_hours: float = MEDIUM_WITHIN_HOURS,
) -> Urgency:
    """
    HIGH when overdue or due within high_within_hours, MEDIUM within
    medium_within_hours, LOW otherwise.
    """
    hours_until_due = (due_date_time.timestamp() - now.timestamp()) / 3600.0
    if hours_until_due < high_within_hours:
        return Urgency.HIGH
    if hours_until_due < medium_within_hours:
        return Urgency.MEDIUM
    return Urgency.LOW


def urgency_color(urgency: Urgency) -> str:
    return _URGENCY_COLORS[Urgency(urgency)]


def state_color(state: TaskState | str) -> str:
    return _STATE_COLORS.get(TaskState.from_raw(str(state)), _DEFAULT_STATE_COLOR)
