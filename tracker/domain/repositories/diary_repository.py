from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional

from tracker.domain.diary import Diary
from tracker.domain.value_objects import DiaryId, UserId


class DiaryRepository(ABC):

    @abstractmethod
    async def find(self, user_id: UserId, diary_date: date) -> Optional[Diary]:
        raise NotImplementedError

    @abstractmethod
    async def create(self, user_id: UserId, diary_date: date, content: str) -> Diary:
        raise NotImplementedError

    @abstractmethod
    async def update_content(self, diary_id: DiaryId, content: str) -> Optional[Diary]:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, diary_id: DiaryId) -> None:
        raise NotImplementedError

    @abstractmethod
    async def list_between(self, user_id: UserId, start: date, end: date) -> List[Diary]:
        """
        Diaries with start <= diary_date <= end, ascending by date.
        """
        raise NotImplementedError
