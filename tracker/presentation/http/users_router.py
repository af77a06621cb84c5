from __future__ import annotations

import datetime as dt
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from tracker.domain.value_objects import UserId
from tracker.presentation.context import TrackerContext, get_context
from tracker.presentation.http.tasks_router import TaskResponse
from tracker.presentation.http.teams_router import UserResponse

router = APIRouter(
    prefix="/users",
    tags=["users"],
)


@router.get(
    "",
    response_model=List[UserResponse],
    summary="Search users by username",
    description="Case-insensitive fragment match; an empty query returns nothing.",
)
async def search_users(
    query: str = Query("", description="Username fragment"),
    ctx: TrackerContext = Depends(get_context),
) -> List[UserResponse]:
    users = await ctx.users.search(query)
    return [UserResponse.from_user(u) for u in users]


@router.get(
    "/{user_id}/tasks",
    response_model=List[TaskResponse],
    summary="Another user's tasks for one day",
)
async def user_tasks(
    user_id: UUID,
    day: dt.date = Query(..., alias="date"),
    ctx: TrackerContext = Depends(get_context),
) -> List[TaskResponse]:
    tasks = await ctx.users.tasks_for_day(UserId(user_id), day)
    return [TaskResponse.from_task(t) for t in tasks]
