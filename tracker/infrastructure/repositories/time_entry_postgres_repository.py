from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence

from asyncpg import Record

from tracker.domain.repositories.time_entry_repository import TimeEntryRepository
from tracker.domain.time_entry import TimeEntry
from tracker.domain.value_objects import TaskId, TimeEntryId
from tracker.infrastructure.db.postgres import PostgresDatabase

_COLUMNS = "id, task_id, start_at, end_at, duration_seconds"


class TimeEntryPostgresRepository(TimeEntryRepository):
    """
    PostgreSQL implementation of TimeEntryRepository (table time_entries).
    """

    def __init__(self, db: PostgresDatabase) -> None:
        self._db = db

    async def list_by_task(self, task_id: TaskId) -> List[TimeEntry]:
        sql = f"""
        SELECT {_COLUMNS}
        FROM time_entries
        WHERE task_id = $1
        ORDER BY start_at ASC, id ASC;
        """
        rows = await self._db.fetch(sql, task_id)
        return [self._map(row) for row in rows]

    async def list_running(self, task_id: TaskId) -> List[TimeEntry]:
        sql = f"""
        SELECT {_COLUMNS}
        FROM time_entries
        WHERE task_id = $1 AND end_at IS NULL
        ORDER BY start_at ASC, id ASC;
        """
        rows = await self._db.fetch(sql, task_id)
        return [self._map(row) for row in rows]

    async def list_by_tasks(self, task_ids: Sequence[TaskId]) -> List[TimeEntry]:
        if not task_ids:
            return []
        sql = f"""
        SELECT {_COLUMNS}
        FROM time_entries
        WHERE task_id = ANY($1::uuid[])
        ORDER BY start_at ASC, id ASC;
        """
        rows = await self._db.fetch(sql, list(task_ids))
        return [self._map(row) for row in rows]

    async def find_by_id(self, entry_id: TimeEntryId) -> Optional[TimeEntry]:
        sql = f"""
        SELECT {_COLUMNS}
        FROM time_entries
        WHERE id = $1;
        """
        row = await self._db.fetchrow(sql, entry_id)
        if row is None:
            return None
        return self._map(row)

    async def insert(self, task_id: TaskId, start_at: datetime) -> TimeEntry:
        sql = f"""
        INSERT INTO time_entries (task_id, start_at)
        VALUES ($1, $2)
        RETURNING {_COLUMNS};
        """
        row = await self._db.fetchrow(sql, task_id, start_at)
        return self._map(row)

    async def update(
        self,
        entry_id: TimeEntryId,
        end_at: datetime,
        duration_seconds: int,
    ) -> Optional[TimeEntry]:
        sql = f"""
        UPDATE time_entries
        SET end_at = $2,
            duration_seconds = $3
        WHERE id = $1
        RETURNING {_COLUMNS};
        """
        row = await self._db.fetchrow(sql, entry_id, end_at, duration_seconds)
        if row is None:
            return None
        return self._map(row)

    async def delete(self, entry_id: TimeEntryId) -> None:
        await self._db.execute("DELETE FROM time_entries WHERE id = $1;", entry_id)

    async def delete_by_task(self, task_id: TaskId) -> None:
        await self._db.execute("DELETE FROM time_entries WHERE task_id = $1;", task_id)

    @staticmethod
    def _map(row: Record) -> TimeEntry:
        return TimeEntry(
            id=TimeEntryId(row["id"]),
            task_id=TaskId(row["task_id"]),
            start_at=row["start_at"],
            end_at=row["end_at"],
            duration_seconds=row["duration_seconds"],
        )
