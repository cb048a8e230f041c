# src/daygrid/tasks/task_report.py

"""
Estimate vs. actual reporting.

This is a display concern that sits beside the layout engine: it sums the
whole schedule history of a task (every day, not just the one being viewed)
and compares it with the task's estimate.
"""

from __future__ import annotations

from dataclasses import dataclass

from .task_models import Task, TaskState


@dataclass(slots=True, frozen=True)
class EstimateReport:
    task_id: str
    elapsed_minutes: int
    estimated_minutes: int | None
    progress_pct: float
    exceeds_estimate: bool
    excess_minutes: int
    # False for Finished tasks even when they ran over.
    warn: bool

    @property
    def message(self) -> str | None:
        if not self.warn:
            return None
        return f"Exceeded estimate by {self.excess_minutes} minutes"


def elapsed_minutes(task: Task) -> int:
    """Sum of whole minutes over every schedule entry (inverted entries count as 0)."""
    total = 0
    for entry in task.schedule_history:
        total += max(0, int(entry.duration_minutes))
    return total


def estimate_report(task: Task) -> EstimateReport:
    elapsed = elapsed_minutes(task)

    estimated: int | None = None
    if task.estimated_time is not None and task.estimated_time > 0:
        estimated = int(round(task.estimated_time * 60))

    if not estimated:
        return EstimateReport(
            task_id=task.id,
            elapsed_minutes=elapsed,
            estimated_minutes=None,
            progress_pct=0.0,
            exceeds_estimate=False,
            excess_minutes=0,
            warn=False,
        )

    exceeds = elapsed > estimated
    return EstimateReport(
        task_id=task.id,
        elapsed_minutes=elapsed,
        estimated_minutes=estimated,
        progress_pct=min(100.0, elapsed / estimated * 100.0),
        exceeds_estimate=exceeds,
        excess_minutes=max(0, elapsed - estimated),
        warn=exceeds and task.state is not TaskState.FINISHED,
    )
