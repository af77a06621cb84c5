from __future__ import annotations

import calendar
import logging
from datetime import date
from typing import List, Optional

from tracker.domain.diary import Diary
from tracker.domain.errors import NotFoundError, ValidationError
from tracker.domain.repositories.diary_repository import DiaryRepository
from tracker.domain.value_objects import DiaryId, UserId

logger = logging.getLogger(__name__)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    if not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12.")
    if year < 1:
        raise ValidationError("Year must be positive.")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


class DiaryService:
    """
    One diary text per user per day.
    """

    def __init__(self, diaries: DiaryRepository) -> None:
        self._diaries = diaries

    async def get(self, user_id: UserId, diary_date: date) -> Optional[Diary]:
        self._require_args(user_id, diary_date)
        return await self._diaries.find(user_id, diary_date)

    async def upsert(self, user_id: UserId, diary_date: date, content: str) -> Diary:
        self._require_args(user_id, diary_date)
        content = content or ""

        existing = await self._diaries.find(user_id, diary_date)
        if existing is None:
            diary = await self._diaries.create(user_id, diary_date, content)
            logger.info("Diary created for %s on %s", user_id, diary_date)
            return diary

        updated = await self._diaries.update_content(existing.id, content)
        if updated is None:
            raise NotFoundError(f"Diary {existing.id} not found")
        return updated

    async def delete(self, diary_id: DiaryId) -> None:
        if not diary_id:
            raise ValidationError("Diary id is required.")
        await self._diaries.delete(diary_id)

    async def list_for_month(self, user_id: UserId, year: int, month: int) -> List[Diary]:
        if not user_id:
            raise ValidationError("User id is required.")
        start, end = month_bounds(year, month)
        return await self._diaries.list_between(user_id, start, end)

    @staticmethod
    def _require_args(user_id: UserId, diary_date: date) -> None:
        if not user_id or diary_date is None:
            raise ValidationError("User id and date are required.")
