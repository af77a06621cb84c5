from __future__ import annotations

import datetime as dt
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field

from tracker.application.timer.display import duration_human
from tracker.domain.task import Task, TaskDraft
from tracker.domain.value_objects import PRESET_CATEGORIES, TaskId, TeamId, UserId
from tracker.presentation.context import TrackerContext, get_context

router = APIRouter(
    prefix="/tasks",
    tags=["tasks"],
)


# ---------- Schemas ----------


class TaskFields(BaseModel):
    title: str = Field(
        "",
        description="Empty titles are stored as 'Untitled'",
        examples=["Write weekly report"],
    )
    date: dt.date
    time_from: str = Field("09:00", examples=["09:00"])
    time_to: str = Field("10:00", examples=["10:30"])
    description: str = ""
    category: str = Field(
        "",
        description="Preset category; 'other' is replaced by custom_category",
        examples=["work"],
    )
    custom_category: str = ""
    team_id: Optional[UUID] = None
    estimated_duration_seconds: Optional[int] = Field(
        None,
        ge=0,
        description="Countdown target; 0 means no estimate",
    )

    def to_draft(self) -> TaskDraft:
        return TaskDraft(
            title=self.title,
            date=self.date,
            time_from=self.time_from,
            time_to=self.time_to,
            description=self.description,
            category=self.category,
            custom_category=self.custom_category,
            team_id=TeamId(self.team_id) if self.team_id else None,
            estimated_duration_seconds=self.estimated_duration_seconds,
        )


class CreateTasksRequest(TaskFields):
    user_id: UUID = Field(..., description="Owner when no members are selected")
    member_ids: List[UUID] = Field(
        default_factory=list,
        description="Creates one copy of the task per selected team member",
    )


class TaskResponse(BaseModel):
    id: UUID
    user_id: UUID
    title: str
    date: dt.date
    time_from: str
    time_to: str
    status: str
    team_id: Optional[UUID] = None
    description: str
    category: str
    estimated_duration_seconds: Optional[int] = None
    created_at: Optional[dt.datetime] = None

    @classmethod
    def from_task(cls, task: Task) -> "TaskResponse":
        return cls(
            id=task.id,
            user_id=task.user_id,
            title=task.title,
            date=task.date,
            time_from=task.time_from,
            time_to=task.time_to,
            status=task.status.value,
            team_id=task.team_id,
            description=task.description,
            category=task.category,
            estimated_duration_seconds=task.estimated_duration_seconds,
            created_at=task.created_at,
        )


class DayTasksResponse(BaseModel):
    pending: List[TaskResponse]
    completed: List[TaskResponse]


class DayTotalResponse(BaseModel):
    total_seconds: int
    label: str = Field(..., examples=["2h 15m"])


class TaskProgressResponse(BaseModel):
    time_spent: int = Field(..., description="Tracked seconds, running entries included")
    planned_seconds: int
    percent: int = Field(..., ge=0, le=100)


# ---------- Endpoints ----------


@router.post(
    "",
    response_model=List[TaskResponse],
    status_code=201,
    summary="Create a task",
    description="Creates the task for user_id, or one copy per member in member_ids.",
)
async def create_tasks(
    payload: CreateTasksRequest,
    ctx: TrackerContext = Depends(get_context),
) -> List[TaskResponse]:
    created = await ctx.tasks.create_tasks(
        UserId(payload.user_id),
        payload.to_draft(),
        member_ids=[UserId(m) for m in payload.member_ids],
    )
    return [TaskResponse.from_task(t) for t in created]


@router.get(
    "",
    response_model=DayTasksResponse,
    summary="Tasks of a user for one day",
    description="Split into pending and completed; category and query narrow the list.",
)
async def list_day_tasks(
    user_id: UUID,
    day: dt.date = Query(..., alias="date"),
    category: Optional[str] = None,
    query: Optional[str] = Query(None, description="Case-insensitive title fragment"),
    ctx: TrackerContext = Depends(get_context),
) -> DayTasksResponse:
    tasks = await ctx.tasks.list_day(UserId(user_id), day, category=category, title_query=query)
    return DayTasksResponse(
        pending=[TaskResponse.from_task(t) for t in tasks.pending],
        completed=[TaskResponse.from_task(t) for t in tasks.completed],
    )


@router.get(
    "/day-total",
    response_model=DayTotalResponse,
    summary="Tracked time of a user for one day",
)
async def day_total(
    user_id: UUID,
    day: dt.date = Query(..., alias="date"),
    ctx: TrackerContext = Depends(get_context),
) -> DayTotalResponse:
    total = await ctx.tasks.day_total_seconds(UserId(user_id), day)
    return DayTotalResponse(total_seconds=total, label=duration_human(total))


@router.get(
    "/categories",
    response_model=List[str],
    summary="Preset task categories",
    description="'other' lets the client send its own label in custom_category.",
)
async def list_categories() -> List[str]:
    return list(PRESET_CATEGORIES)


@router.get(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Get a task",
)
async def get_task(
    task_id: UUID,
    ctx: TrackerContext = Depends(get_context),
) -> TaskResponse:
    task = await ctx.tasks.get_task(TaskId(task_id))
    return TaskResponse.from_task(task)


@router.put(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Edit a task",
)
async def update_task(
    task_id: UUID,
    payload: TaskFields,
    ctx: TrackerContext = Depends(get_context),
) -> TaskResponse:
    task = await ctx.tasks.update_task(TaskId(task_id), payload.to_draft())
    return TaskResponse.from_task(task)


@router.delete(
    "/{task_id}",
    status_code=204,
    summary="Delete a task",
    description="Time entries of the task are deleted first.",
)
async def delete_task(
    task_id: UUID,
    ctx: TrackerContext = Depends(get_context),
) -> Response:
    await ctx.tasks.delete_task(TaskId(task_id))
    return Response(status_code=204)


@router.post(
    "/{task_id}/complete",
    response_model=TaskResponse,
    summary="Mark a task completed",
)
async def complete_task(
    task_id: UUID,
    ctx: TrackerContext = Depends(get_context),
) -> TaskResponse:
    await ctx.tasks.mark_complete(TaskId(task_id))
    task = await ctx.tasks.get_task(TaskId(task_id))
    return TaskResponse.from_task(task)


@router.get(
    "/{task_id}/progress",
    response_model=TaskProgressResponse,
    summary="Tracked time against the planned window",
)
async def task_progress(
    task_id: UUID,
    ctx: TrackerContext = Depends(get_context),
) -> TaskProgressResponse:
    progress = await ctx.tasks.progress(TaskId(task_id))
    return TaskProgressResponse(
        time_spent=progress.time_spent,
        planned_seconds=progress.planned_seconds,
        percent=progress.percent,
    )
