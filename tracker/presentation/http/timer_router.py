from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from tracker.application.timer.display import duration_human, format_hms
from tracker.application.timer.session import TimerSession
from tracker.domain.time_entry import TimeEntry
from tracker.domain.value_objects import TaskId, TimeEntryId
from tracker.presentation.context import TrackerContext, get_context

router = APIRouter(
    prefix="/timer",
    tags=["timer"],
)


# ---------- Schemas ----------


class TimeEntryResponse(BaseModel):
    id: UUID
    task_id: UUID
    start_at: datetime
    end_at: Optional[datetime] = Field(
        None,
        description="Absent while the entry is running",
    )
    duration_seconds: Optional[int] = None
    duration_label: Optional[str] = Field(
        None,
        description="Human readable duration, e.g. 1h 5m",
        examples=["1h 5m"],
    )

    @classmethod
    def from_entry(cls, entry: TimeEntry) -> "TimeEntryResponse":
        return cls(
            id=entry.id,
            task_id=entry.task_id,
            start_at=entry.start_at,
            end_at=entry.end_at,
            duration_seconds=entry.duration_seconds,
            duration_label=(
                duration_human(entry.duration_seconds)
                if entry.duration_seconds is not None
                else None
            ),
        )


class TimerStateResponse(BaseModel):
    task_id: UUID
    base_seconds: int = Field(
        ...,
        description="Sum of finished entry durations",
    )
    running_entry: Optional[TimeEntryResponse] = None
    target_seconds: Optional[int] = None
    elapsed_seconds: int
    remaining_seconds: Optional[int] = Field(
        None,
        description="Countdown value; null when no target is set",
    )
    display: str = Field(
        ...,
        description="Timer face, HH:MM:SS (remaining in target mode, elapsed otherwise)",
        examples=["00:25:00"],
    )
    entries: List[TimeEntryResponse]
    warnings: List[str]


class StartTimerRequest(BaseModel):
    target_seconds: Optional[int] = Field(
        None,
        gt=0,
        description="Sets the countdown target before starting; omitted uses the stored target",
        examples=[3600],
    )
    persist_to_task: bool = Field(
        False,
        description="Also save the target as the task's estimated duration",
    )


class StartTimerResponse(BaseModel):
    completed: bool = Field(
        ...,
        description="True when the target was already reached and no entry was created",
    )
    created: bool
    base_seconds: int
    entry: Optional[TimeEntryResponse] = None
    warnings: List[str]
    state: TimerStateResponse


class StopTimerRequest(BaseModel):
    end_at: Optional[datetime] = Field(
        None,
        description="Explicit end time (ISO 8601); defaults to now. Naive values are read as UTC",
    )


class SetTargetRequest(BaseModel):
    seconds: int = Field(..., gt=0, examples=[5400])
    persist_to_task: bool = False


def _state(session: TimerSession) -> TimerStateResponse:
    snap = session.snapshot
    value = session.display()
    return TimerStateResponse(
        task_id=session.task_id,
        base_seconds=snap.base_seconds,
        running_entry=(
            TimeEntryResponse.from_entry(snap.running_entry)
            if snap.running_entry is not None
            else None
        ),
        target_seconds=snap.target_seconds,
        elapsed_seconds=value.elapsed,
        remaining_seconds=value.remaining,
        display=format_hms(value.seconds),
        entries=[TimeEntryResponse.from_entry(e) for e in snap.entries],
        warnings=snap.warnings,
    )


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


# ---------- Endpoints ----------


@router.get(
    "/tasks/{task_id}",
    response_model=TimerStateResponse,
    summary="Timer state of a task",
    description=(
        "Aggregates the task's time entries: finished total, the running entry "
        "and the countdown against the stored target."
    ),
)
async def get_timer_state(
    task_id: UUID,
    ctx: TrackerContext = Depends(get_context),
) -> TimerStateResponse:
    async with ctx.timer_session(TaskId(task_id)) as session:
        return _state(session)


@router.post(
    "/tasks/{task_id}/start",
    response_model=StartTimerResponse,
    summary="Start or resume the timer",
    description=(
        "Re-reads the finished total, completes the task when the target is "
        "already reached, otherwise creates a running entry or returns the "
        "one that is already running."
    ),
)
async def start_timer(
    task_id: UUID,
    payload: StartTimerRequest,
    ctx: TrackerContext = Depends(get_context),
) -> StartTimerResponse:
    async with ctx.timer_session(TaskId(task_id)) as session:
        if payload.target_seconds is not None:
            await session.set_target(payload.target_seconds)
        result = await session.start(persist_to_task=payload.persist_to_task)
        if not result.completed:
            await session.reload()

        return StartTimerResponse(
            completed=result.completed,
            created=result.created,
            base_seconds=result.base_seconds,
            entry=TimeEntryResponse.from_entry(result.entry) if result.entry else None,
            warnings=result.warnings,
            state=_state(session),
        )


@router.post(
    "/entries/{entry_id}/stop",
    response_model=TimeEntryResponse,
    summary="Stop a time entry",
    description="Writes end_at and duration_seconds. Repeating the call with the same end_at gives the same result.",
)
async def stop_entry(
    entry_id: UUID,
    payload: Optional[StopTimerRequest] = None,
    ctx: TrackerContext = Depends(get_context),
) -> TimeEntryResponse:
    end_at = _as_utc(payload.end_at) if payload is not None else None
    entry = await ctx.aggregator.stop(TimeEntryId(entry_id), end_at)
    return TimeEntryResponse.from_entry(entry)


@router.post(
    "/tasks/{task_id}/finish",
    response_model=TimerStateResponse,
    summary="Finish a task",
    description="Stops the running entry, if any, and marks the task completed.",
)
async def finish_task(
    task_id: UUID,
    ctx: TrackerContext = Depends(get_context),
) -> TimerStateResponse:
    async with ctx.timer_session(TaskId(task_id)) as session:
        await session.finish()
        return _state(session)


@router.put(
    "/tasks/{task_id}/target",
    response_model=TimerStateResponse,
    summary="Set the countdown target",
)
async def set_target(
    task_id: UUID,
    payload: SetTargetRequest,
    ctx: TrackerContext = Depends(get_context),
) -> TimerStateResponse:
    async with ctx.timer_session(TaskId(task_id)) as session:
        await session.set_target(payload.seconds, persist_to_task=payload.persist_to_task)
        return _state(session)


@router.delete(
    "/tasks/{task_id}/target",
    response_model=TimerStateResponse,
    summary="Clear the local countdown target",
    description="The task's stored estimate is left untouched.",
)
async def clear_target(
    task_id: UUID,
    ctx: TrackerContext = Depends(get_context),
) -> TimerStateResponse:
    async with ctx.timer_session(TaskId(task_id)) as session:
        await session.clear_target()
        return _state(session)
