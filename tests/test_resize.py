# tests/test_resize.py

from __future__ import annotations

import asyncio
from datetime import timedelta, timezone

import pytest

from daygrid.calendar.drag import DragController
from daygrid.calendar.gestures import GestureGate, GestureKind
from daygrid.calendar.resize import ResizeController, ResizeEdge, ResizeState
from daygrid.core.errors import CollaboratorUnavailable, ConcurrentGestureRejected, GestureStateError

from .fakes import DAY, UTC, FakeTaskStore, at, make_event


def _begin(ctl: ResizeController, ev, edge: ResizeEdge, pointer_y: float):
    return ctl.begin(ev, edge, pointer_y, DAY, 60.0, tz=UTC)


@pytest.mark.asyncio
async def test_bottom_edge_respects_minimum_duration(store: FakeTaskStore, gate: GestureGate) -> None:
    ctl = ResizeController(store, gate)
    ev = make_event(at(9), at(9, 10))
    _begin(ctl, ev, ResizeEdge.BOTTOM, 550)

    preview = ctl.move(520)
    assert preview.range.start == at(9)
    assert preview.range.end == at(9, 15)

    new = await ctl.release()
    assert (new.start, new.end) == (at(9), at(9, 15))
    assert store.updates[0].new_end == at(9, 15)


@pytest.mark.asyncio
async def test_top_edge_moves_start_only(store: FakeTaskStore, gate: GestureGate) -> None:
    ctl = ResizeController(store, gate)
    ev = make_event(at(9), at(10))
    _begin(ctl, ev, ResizeEdge.TOP, 540)

    new = await ctl.release(510)
    assert (new.start, new.end) == (at(8, 30), at(10))


def test_top_edge_floor(store: FakeTaskStore, gate: GestureGate) -> None:
    ctl = ResizeController(store, gate)
    ev = make_event(at(9), at(10))
    _begin(ctl, ev, ResizeEdge.TOP, 540)

    preview = ctl.move(700)  # would put the start after the end
    assert preview.range.start == at(9, 45)
    assert preview.range.end == at(10)
    assert preview.height == pytest.approx(20.0)


def test_preview_tracks_pointer_and_store_is_untouched(store: FakeTaskStore, gate: GestureGate) -> None:
    ctl = ResizeController(store, gate)
    ev = make_event(at(9), at(10))
    _begin(ctl, ev, ResizeEdge.BOTTOM, 600)

    p1 = ctl.move(630)
    assert p1.range.end == at(10, 30)
    assert p1.top == pytest.approx(540.0)
    assert p1.height == pytest.approx(90.0)

    p2 = ctl.move(660)
    assert p2.range.end == at(11)
    assert store.updates == []
    assert ctl.state is ResizeState.ACTIVE


@pytest.mark.asyncio
async def test_commit_uses_last_pointer_position(store: FakeTaskStore, gate: GestureGate) -> None:
    ctl = ResizeController(store, gate)
    ev = make_event(at(9), at(10))
    _begin(ctl, ev, ResizeEdge.BOTTOM, 600)
    ctl.move(630)
    ctl.move(645)

    new = await ctl.release()
    assert new.end == at(10, 45)
    assert ctl.state is ResizeState.IDLE
    assert ctl.session is None
    assert not gate.is_active


@pytest.mark.asyncio
async def test_failed_commit_returns_to_idle(store: FakeTaskStore, gate: GestureGate) -> None:
    store.fail_with = ConnectionError("offline")
    ctl = ResizeController(store, gate)
    ev = make_event(at(9), at(10))
    _begin(ctl, ev, ResizeEdge.BOTTOM, 600)

    with pytest.raises(CollaboratorUnavailable):
        await ctl.release(660)

    assert ctl.state is ResizeState.IDLE
    assert not gate.is_active
    assert (ev.start_time, ev.end_time) == (at(9), at(10))

    # Ready for the next gesture.
    _begin(ctl, ev, ResizeEdge.TOP, 540)
    assert ctl.state is ResizeState.ACTIVE


def test_cancel_discards_session(store: FakeTaskStore, gate: GestureGate) -> None:
    ctl = ResizeController(store, gate)
    _begin(ctl, make_event(at(9), at(10)), ResizeEdge.BOTTOM, 600)
    ctl.move(700)
    ctl.cancel()

    assert ctl.state is ResizeState.IDLE
    assert not gate.is_active
    assert store.updates == []
    ctl.cancel()  # no-op while idle


def test_transitions_out_of_order_raise(store: FakeTaskStore, gate: GestureGate) -> None:
    ctl = ResizeController(store, gate)
    with pytest.raises(GestureStateError):
        ctl.move(100)

    _begin(ctl, make_event(at(9), at(10)), ResizeEdge.BOTTOM, 600)
    with pytest.raises(ConcurrentGestureRejected):
        _begin(ctl, make_event(at(11), at(12)), ResizeEdge.TOP, 660)
    assert ctl.session.target_event.start_time == at(9)


@pytest.mark.asyncio
async def test_second_resize_rejected_while_committing(store: FakeTaskStore, gate: GestureGate) -> None:
    store.delay = 0.05
    ctl = ResizeController(store, gate)
    _begin(ctl, make_event(at(9), at(10)), ResizeEdge.BOTTOM, 600)

    pending = asyncio.create_task(ctl.release(660))
    await asyncio.sleep(0)
    assert ctl.state is ResizeState.COMMITTING

    with pytest.raises(ConcurrentGestureRejected):
        _begin(ctl, make_event(at(11), at(12)), ResizeEdge.TOP, 660)

    new = await pending
    assert new.end == at(11)
    assert ctl.state is ResizeState.IDLE
    assert len(store.updates) == 1


def test_resize_and_drag_share_one_gate(store: FakeTaskStore, gate: GestureGate) -> None:
    drag = DragController(store, gate)
    resize = ResizeController(store, gate)

    session = drag.start(make_event(at(9), at(10)), DAY, 60.0, tz=UTC)
    with pytest.raises(ConcurrentGestureRejected):
        _begin(resize, make_event(at(11), at(12)), ResizeEdge.BOTTOM, 720)
    assert resize.state is ResizeState.IDLE

    drag.cancel(session)
    _begin(resize, make_event(at(11), at(12)), ResizeEdge.BOTTOM, 720)
    assert gate.active_kind is GestureKind.RESIZE
    with pytest.raises(ConcurrentGestureRejected):
        drag.start(make_event(at(9), at(10)), DAY, 60.0, tz=UTC)


def test_resize_snaps_to_local_grid_in_half_hour_zone(store: FakeTaskStore, gate: GestureGate) -> None:
    ist = timezone(timedelta(hours=5, minutes=30))
    ctl = ResizeController(store, gate, resolution_min=60)
    ev = make_event(at(9, tz=ist), at(10, tz=ist))
    ctl.begin(ev, ResizeEdge.BOTTOM, 600, DAY, 60.0, tz=ist)

    preview = ctl.move(640)
    assert preview.range.end == at(11, tz=ist)
