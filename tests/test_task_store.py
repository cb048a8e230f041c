# tests/test_task_store.py

from __future__ import annotations

import json
from datetime import timedelta, timezone
from pathlib import Path

import pytest

from daygrid.tasks.task_models import TaskState
from daygrid.tasks.task_store import InMemoryTaskStore, task_from_dict

from .fakes import at, make_entry, make_task


def _write_snapshot(tmp_path: Path, payload) -> Path:
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_task_from_dict_reads_snapshot_shape() -> None:
    task = task_from_dict(
        {
            "id": "t1",
            "title": "Write report",
            "state": "doing",
            "dueDateTime": "2024-03-12T17:00:00+00:00",
            "estimatedTime": "1.5",
            "scheduleHistory": [
                {"id": "s1", "startTime": "2024-03-12T09:00:00", "endTime": "2024-03-12T10:00:00"},
                {"id": "broken", "startTime": "2024-03-12T11:00:00"},
            ],
        }
    )
    assert task.state is TaskState.DOING
    assert task.estimated_time == pytest.approx(1.5)
    assert task.due_date_time == at(17)
    assert [e.id for e in task.schedule_history] == ["s1"]
    assert task.schedule_history[0].start_time == at(9)


def test_naive_timestamps_use_assumed_zone() -> None:
    plus1 = timezone(timedelta(hours=1))
    task = task_from_dict(
        {"id": "t", "scheduleHistory": [{"id": "s", "startTime": "2024-03-12T10:00", "endTime": "2024-03-12T11:00"}]},
        assume_tz=plus1,
    )
    assert task.schedule_history[0].start_time == at(9)


def test_task_from_dict_requires_id() -> None:
    with pytest.raises(ValueError):
        task_from_dict({"title": "no id"})


def test_from_json(tmp_path: Path) -> None:
    path = _write_snapshot(
        tmp_path,
        [
            {"id": "a", "title": "A", "state": "Scheduled"},
            {"id": "b", "title": "B", "state": "Removed"},
            "not a record",
        ],
    )
    store = InMemoryTaskStore.from_json(path)
    assert store.count_tasks() == 2
    assert store.get_task("b").state is TaskState.REMOVED


def test_from_json_rejects_non_list(tmp_path: Path) -> None:
    path = _write_snapshot(tmp_path, {"id": "a"})
    with pytest.raises(ValueError):
        InMemoryTaskStore.from_json(path)


@pytest.mark.asyncio
async def test_update_replaces_task_without_touching_old_snapshot() -> None:
    original = make_task("t1", make_entry("s1", at(9), at(10)), make_entry("s2", at(13), at(14)))
    store = InMemoryTaskStore([original])

    before = await store.get_all_tasks()
    await store.update_schedule_entry("t1", "s1", at(14, 15), at(15, 15))
    after = await store.get_all_tasks()

    assert before[0] is original
    assert original.find_entry("s1").start_time == at(9)

    updated = after[0]
    assert updated.find_entry("s1").start_time == at(14, 15)
    assert updated.find_entry("s1").end_time == at(15, 15)
    assert updated.find_entry("s2") == original.find_entry("s2")


@pytest.mark.asyncio
async def test_update_errors() -> None:
    store = InMemoryTaskStore([make_task("t1", make_entry("s1", at(9), at(10)))])

    with pytest.raises(KeyError, match="Task with ID missing not found"):
        await store.update_schedule_entry("missing", "s1", at(9), at(10))
    with pytest.raises(KeyError):
        await store.update_schedule_entry("t1", "nope", at(9), at(10))
    with pytest.raises(ValueError, match="End time must be after start time"):
        await store.update_schedule_entry("t1", "s1", at(10), at(10))
