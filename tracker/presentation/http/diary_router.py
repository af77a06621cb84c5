from __future__ import annotations

import datetime as dt
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field

from tracker.domain.diary import Diary
from tracker.domain.value_objects import DiaryId, UserId
from tracker.presentation.context import TrackerContext, get_context

router = APIRouter(
    prefix="/diary",
    tags=["diary"],
)


# ---------- Schemas ----------


class DiaryResponse(BaseModel):
    id: UUID
    user_id: UUID
    diary_date: dt.date
    content: str

    @classmethod
    def from_diary(cls, diary: Diary) -> "DiaryResponse":
        return cls(
            id=diary.id,
            user_id=diary.user_id,
            diary_date=diary.diary_date,
            content=diary.content,
        )


class SaveDiaryRequest(BaseModel):
    user_id: UUID
    diary_date: dt.date
    content: str = Field("", description="Replaces the stored text of that day")


# ---------- Endpoints ----------


@router.get(
    "",
    response_model=Optional[DiaryResponse],
    summary="Diary of a user for one day",
    description="Returns null when nothing was written that day.",
)
async def get_diary(
    user_id: UUID,
    day: dt.date = Query(..., alias="date"),
    ctx: TrackerContext = Depends(get_context),
) -> Optional[DiaryResponse]:
    diary = await ctx.diaries.get(UserId(user_id), day)
    return DiaryResponse.from_diary(diary) if diary is not None else None


@router.get(
    "/month",
    response_model=List[DiaryResponse],
    summary="Diaries of a user for one month",
)
async def list_month(
    user_id: UUID,
    year: int,
    month: int,
    ctx: TrackerContext = Depends(get_context),
) -> List[DiaryResponse]:
    diaries = await ctx.diaries.list_for_month(UserId(user_id), year, month)
    return [DiaryResponse.from_diary(d) for d in diaries]


@router.put(
    "",
    response_model=DiaryResponse,
    summary="Save the diary of a day",
    description="Creates the entry on first save and overwrites its text afterwards.",
)
async def save_diary(
    payload: SaveDiaryRequest,
    ctx: TrackerContext = Depends(get_context),
) -> DiaryResponse:
    diary = await ctx.diaries.upsert(UserId(payload.user_id), payload.diary_date, payload.content)
    return DiaryResponse.from_diary(diary)


@router.delete(
    "/{diary_id}",
    status_code=204,
    summary="Delete a diary entry",
)
async def delete_diary(
    diary_id: UUID,
    ctx: TrackerContext = Depends(get_context),
) -> Response:
    await ctx.diaries.delete(DiaryId(diary_id))
    return Response(status_code=204)
