# tests/test_timer_session.py

from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import timedelta
from uuid import uuid4

import pytest

from tracker.domain.errors import FetchError, NotFoundError, ValidationError
from tracker.domain.value_objects import TaskId, TaskStatus

from .fakes import T0, FailingTimeEntryRepository, make_task


@pytest.fixture()
def task(tasks_repo):
    t = make_task()
    tasks_repo.tasks[t.id] = t
    return t


@pytest.mark.asyncio
async def test_open_unknown_task_raises(context) -> None:
    with pytest.raises(NotFoundError):
        async with context.timer_session(TaskId(uuid4())):
            pass


@pytest.mark.asyncio
async def test_open_uses_task_estimate_when_no_local_target(context, tasks_repo) -> None:
    t = make_task(estimate=1200)
    await tasks_repo.create(t)

    async with context.timer_session(t.id) as session:
        assert session.target_seconds == 1200
        assert session.display().remaining == 1200
        assert session.ticking

    assert not session.ticking


@pytest.mark.asyncio
async def test_local_target_wins_over_estimate(context, tasks_repo, targets) -> None:
    t = make_task(estimate=1200)
    await tasks_repo.create(t)
    targets.set(t.id, 600)

    async with context.timer_session(t.id) as session:
        assert session.target_seconds == 600


@pytest.mark.asyncio
async def test_start_without_target_is_rejected(context, task, entries) -> None:
    async with context.timer_session(task.id) as session:
        with pytest.raises(ValidationError):
            await session.start()
    assert entries.inserts == 0


@pytest.mark.asyncio
async def test_set_target_rejects_non_positive(context, task) -> None:
    async with context.timer_session(task.id) as session:
        with pytest.raises(ValidationError):
            await session.set_target(0)


@pytest.mark.asyncio
async def test_start_captures_entry_and_counts_down(context, task, entries, clock, targets) -> None:
    entries.add(task.id, T0 - timedelta(hours=1), T0 - timedelta(minutes=30), 1800)

    async with context.timer_session(task.id) as session:
        await session.set_target(3600)
        result = await session.start()

        assert result.created
        assert session.snapshot.base_seconds == 1800
        assert session.snapshot.running_entry == result.entry
        assert targets.get(task.id) == 3600

        clock.advance(300)
        value = session.display()
        assert value.running_segment == 300
        assert value.remaining == 1500


@pytest.mark.asyncio
async def test_display_loop_reads_captured_state_only(context, task, entries, clock) -> None:
    async with context.timer_session(task.id) as session:
        await session.set_target(600)
        await session.start()

        # a row written behind the session's back is not seen until reload
        entries.add(task.id, T0 - timedelta(hours=2), T0 - timedelta(hours=1), 3600)
        clock.advance(60)
        await asyncio.sleep(0.05)

        assert session.last_display is not None
        assert session.last_display.elapsed == 60
        assert session.last_display.remaining == 540

        await session.reload()
        assert session.display().remaining == 0


@pytest.mark.asyncio
async def test_start_when_target_reached_completes_task(context, task, entries, tasks_repo) -> None:
    entries.add(task.id, T0 - timedelta(hours=1), T0, 3600)

    async with context.timer_session(task.id) as session:
        await session.set_target(1800)
        result = await session.start()

    assert result.completed
    assert entries.inserts == 0
    assert tasks_repo.tasks[task.id].status == TaskStatus.COMPLETED


@pytest.mark.asyncio
async def test_start_persists_target_to_task_when_asked(context, task, tasks_repo) -> None:
    async with context.timer_session(task.id) as session:
        await session.set_target(900)
        await session.start(persist_to_task=True)

    assert tasks_repo.tasks[task.id].estimated_duration_seconds == 900


@pytest.mark.asyncio
async def test_closing_session_keeps_entry_running(context, task, entries) -> None:
    async with context.timer_session(task.id) as session:
        await session.set_target(900)
        result = await session.start()

    running = await entries.list_running(task.id)
    assert [e.id for e in running] == [result.entry.id]


@pytest.mark.asyncio
async def test_stop_closes_running_entry(context, task, entries, clock) -> None:
    async with context.timer_session(task.id) as session:
        await session.set_target(900)
        await session.start()
        clock.advance(45)
        stopped = await session.stop()

        assert stopped is not None
        assert stopped.duration_seconds == 45
        assert session.snapshot.running_entry is None
        assert session.snapshot.base_seconds == 45
        assert await session.stop() is None


@pytest.mark.asyncio
async def test_finish_stops_and_completes(context, task, entries, clock, tasks_repo) -> None:
    async with context.timer_session(task.id) as session:
        await session.set_target(900)
        await session.start()
        clock.advance(10)
        await session.finish()

        assert not session.ticking

    assert await entries.list_running(task.id) == []
    assert tasks_repo.tasks[task.id].status == TaskStatus.COMPLETED


@pytest.mark.asyncio
async def test_clear_target_falls_back_to_elapsed(context, task, targets) -> None:
    async with context.timer_session(task.id) as session:
        await session.set_target(900)
        await session.clear_target()

        assert targets.get(task.id) is None
        assert session.display().remaining is None


@pytest.mark.asyncio
async def test_session_surfaces_fetch_warning_and_refuses_start(context, task, targets) -> None:
    context = replace(context, entries=FailingTimeEntryRepository())
    targets.set(task.id, 600)

    async with context.timer_session(task.id) as session:
        assert session.snapshot.warnings == ["entries_fetch_error"]
        with pytest.raises(FetchError):
            await session.start()


@pytest.mark.asyncio
async def test_started_entry_is_listed_in_snapshot(context, task) -> None:
    async with context.timer_session(task.id) as session:
        await session.set_target(900)
        result = await session.start()

        assert session.snapshot.is_running
        assert [e.id for e in session.snapshot.entries] == [result.entry.id]


@pytest.mark.asyncio
async def test_actions_after_close_do_not_restart_display_loop(context, task, clock) -> None:
    async with context.timer_session(task.id) as session:
        await session.set_target(900)
        await session.start()

    clock.advance(30)
    stopped = await session.stop()
    assert stopped is not None
    assert not session.ticking
    assert not session.snapshot.is_running

    await session.reload()
    await session.set_target(1200)
    assert not session.ticking
    assert session.display().remaining == 1170


@pytest.mark.asyncio
async def test_reopening_restarts_display_loop(context, task) -> None:
    session = context.timer_session(task.id)
    await session.open()
    session.close()
    await session.reload()
    assert not session.ticking

    await session.open()
    assert session.ticking
    session.close()
