from __future__ import annotations

from datetime import date
from typing import List, Optional

from asyncpg import Record

from tracker.domain.diary import Diary
from tracker.domain.repositories.diary_repository import DiaryRepository
from tracker.domain.value_objects import DiaryId, UserId
from tracker.infrastructure.db.postgres import PostgresDatabase


class DiaryPostgresRepository(DiaryRepository):
    def __init__(self, db: PostgresDatabase) -> None:
        self._db = db

    async def find(self, user_id: UserId, diary_date: date) -> Optional[Diary]:
        sql = """
        SELECT id, user_id, diary_date, content
        FROM diaries
        WHERE user_id = $1 AND diary_date = $2;
        """
        row = await self._db.fetchrow(sql, user_id, diary_date)
        if row is None:
            return None
        return self._map(row)

    async def create(self, user_id: UserId, diary_date: date, content: str) -> Diary:
        sql = """
        INSERT INTO diaries (user_id, diary_date, content)
        VALUES ($1, $2, $3)
        RETURNING id, user_id, diary_date, content;
        """
        row = await self._db.fetchrow(sql, user_id, diary_date, content)
        return self._map(row)

    async def update_content(self, diary_id: DiaryId, content: str) -> Optional[Diary]:
        sql = """
        UPDATE diaries
        SET content = $2,
            updated_at = NOW()
        WHERE id = $1
        RETURNING id, user_id, diary_date, content;
        """
        row = await self._db.fetchrow(sql, diary_id, content)
        if row is None:
            return None
        return self._map(row)

    async def delete(self, diary_id: DiaryId) -> None:
        await self._db.execute("DELETE FROM diaries WHERE id = $1;", diary_id)

    async def list_between(self, user_id: UserId, start: date, end: date) -> List[Diary]:
        sql = """
        SELECT id, user_id, diary_date, content
        FROM diaries
        WHERE user_id = $1
          AND diary_date >= $2
          AND diary_date <= $3
        ORDER BY diary_date ASC;
        """
        rows = await self._db.fetch(sql, user_id, start, end)
        return [self._map(row) for row in rows]

    @staticmethod
    def _map(row: Record) -> Diary:
        return Diary(
            id=DiaryId(row["id"]),
            user_id=UserId(row["user_id"]),
            diary_date=row["diary_date"],
            content=row["content"] or "",
        )
