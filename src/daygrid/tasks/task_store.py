# src/daygrid/tasks/task_store.py

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime, timezone, tzinfo
from pathlib import Path
from typing import Any

from .task_models import ScheduleHistoryEntry, Task, TaskState

logger = logging.getLogger(__name__)


def _parse_ts(raw: Any, assume_tz: tzinfo) -> datetime | None:
    if raw is None or raw == "":
        return None
    ts = datetime.fromisoformat(str(raw).strip())
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=assume_tz)
    return ts


def _parse_float(raw: Any) -> float | None:
    if raw is None or raw == "":
        return None
    try:
        val = float(raw)
    except (TypeError, ValueError):
        return None
    return val if val > 0 else None


def task_from_dict(data: dict[str, Any], *, assume_tz: tzinfo = timezone.utc) -> Task:
    """
    Build a Task from one record of the task snapshot JSON.

    Keys follow the snapshot's camelCase shape: id, title, state, dueDateTime,
    estimatedTime (hours), scheduleHistory[{id, startTime, endTime, createdAt}].
    Timestamps without an offset are read in `assume_tz`.
    """
    task_id = str(data.get("id") or "").strip()
    if not task_id:
        raise ValueError("task record must include a non-empty id")

    entries: list[ScheduleHistoryEntry] = []
    for raw_entry in data.get("scheduleHistory") or []:
        if not isinstance(raw_entry, dict):
            continue
        start = _parse_ts(raw_entry.get("startTime"), assume_tz)
        end = _parse_ts(raw_entry.get("endTime"), assume_tz)
        if start is None or end is None:
            logger.warning("Skipping schedule entry without start/end on task %s", task_id)
            continue
        entries.append(
            ScheduleHistoryEntry(
                id=str(raw_entry.get("id") or f"{task_id}:{len(entries)}"),
                start_time=start,
                end_time=end,
                created_at=_parse_ts(raw_entry.get("createdAt"), assume_tz),
            )
        )

    return Task(
        id=task_id,
        title=str(data.get("title") or ""),
        state=TaskState.from_raw(data.get("state")),
        due_date_time=_parse_ts(data.get("dueDateTime"), assume_tz),
        estimated_time=_parse_float(data.get("estimatedTime")),
        schedule_history=tuple(entries),
        description=str(data.get("description") or ""),
    )


class InMemoryTaskStore:
    """
    Reference TaskStore adapter holding a snapshot in memory.

    Updates replace the affected Task with a new object, so snapshots handed out
    earlier by get_all_tasks() never change under the caller. Nothing is written
    back to disk.

    Concurrency:
    - an asyncio.Lock serializes updates so each one is applied atomically
    """

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._tasks: dict[str, Task] = {t.id: t for t in tasks}
        self._lock = asyncio.Lock()
        logger.info("InMemoryTaskStore ready total=%s", len(self._tasks))

    @classmethod
    def from_json(cls, path: str | Path, *, assume_tz: tzinfo = timezone.utc) -> InMemoryTaskStore:
        p = Path(path)
        data = json.loads(p.read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise ValueError(f"task snapshot must be a JSON list; got {type(data).__name__}")
        tasks = [task_from_dict(item, assume_tz=assume_tz) for item in data if isinstance(item, dict)]
        logger.info("Loaded %d tasks from %s", len(tasks), p)
        return cls(tasks)

    def count_tasks(self) -> int:
        return len(self._tasks)

    def get_task(self, task_id: str) -> Task | None:
        return self._tasks.get(task_id)

    async def get_all_tasks(self) -> list[Task]:
        return list(self._tasks.values())

    async def update_schedule_entry(
            self,
            task_id: str,
            entry_id: str,
            new_start: datetime,
            new_end: datetime,
    ) -> None:
        if new_end <= new_start:
            raise ValueError("End time must be after start time")

        async with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                raise KeyError(f"Task with ID {task_id} not found")
            if task.find_entry(entry_id) is None:
                raise KeyError(f"Schedule entry {entry_id} not found on task {task_id}")

            history = tuple(
                replace(e, start_time=new_start, end_time=new_end) if e.id == entry_id else e
                for e in task.schedule_history
            )
            self._tasks[task_id] = replace(task, schedule_history=history)

        logger.debug(
            "Entry updated task_id=%s entry_id=%s start=%s end=%s",
            task_id,
            entry_id,
            new_start.isoformat(),
            new_end.isoformat(),
        )
