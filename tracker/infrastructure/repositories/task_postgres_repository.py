from __future__ import annotations

from datetime import date
from typing import List, Optional, Sequence

from asyncpg import Record

from tracker.domain.repositories.task_repository import TaskRepository
from tracker.domain.task import Task
from tracker.domain.value_objects import TaskId, TaskStatus, TeamId, UserId
from tracker.infrastructure.db.postgres import PostgresDatabase

_COLUMNS = """
    id, user_id, team_id, title, description, date, time_from, time_to,
    category, estimated_duration_seconds, status, created_at
"""

_INSERT_SQL = """
INSERT INTO tasks (
    id, user_id, team_id, title, description, date, time_from, time_to,
    category, estimated_duration_seconds, status, created_at
)
VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, COALESCE($12, NOW()));
"""


def _like(fragment: str) -> str:
    escaped = fragment.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class TaskPostgresRepository(TaskRepository):
    """
    PostgreSQL-based implementation of TaskRepository.
    """

    def __init__(self, db: PostgresDatabase) -> None:
        self._db = db

    async def create(self, task: Task) -> None:
        await self._db.execute(_INSERT_SQL, *self._params(task))

    async def create_many(self, tasks: Sequence[Task]) -> None:
        await self._db.executemany(_INSERT_SQL, [self._params(t) for t in tasks])

    async def find_by_id(self, task_id: TaskId) -> Optional[Task]:
        sql = f"SELECT {_COLUMNS} FROM tasks WHERE id = $1;"
        row = await self._db.fetchrow(sql, task_id)
        if row is None:
            return None
        return self._map(row)

    async def list_for_user_date(
        self,
        user_id: UserId,
        day: date,
        category: Optional[str] = None,
        title_query: Optional[str] = None,
    ) -> List[Task]:
        conditions = ["user_id = $1", "date = $2"]
        args: list = [user_id, day]

        if category:
            args.append(_like(category))
            conditions.append(f"category ILIKE ${len(args)}")
        if title_query:
            args.append(_like(title_query))
            conditions.append(f"title ILIKE ${len(args)}")

        sql = f"""
        SELECT {_COLUMNS}
        FROM tasks
        WHERE {" AND ".join(conditions)}
        ORDER BY time_from ASC, created_at ASC;
        """
        rows = await self._db.fetch(sql, *args)
        return [self._map(row) for row in rows]

    async def update(self, task: Task) -> None:
        sql = """
        UPDATE tasks
        SET title = $2,
            description = $3,
            date = $4,
            time_from = $5,
            time_to = $6,
            category = $7,
            team_id = $8,
            estimated_duration_seconds = $9
        WHERE id = $1;
        """
        await self._db.execute(
            sql,
            task.id,
            task.title,
            task.description,
            task.date,
            task.time_from,
            task.time_to,
            task.category,
            task.team_id,
            task.estimated_duration_seconds,
        )

    async def set_status(self, task_id: TaskId, status: TaskStatus) -> None:
        await self._db.execute(
            "UPDATE tasks SET status = $2 WHERE id = $1;",
            task_id,
            status.value,
        )

    async def set_estimate(self, task_id: TaskId, seconds: Optional[int]) -> None:
        await self._db.execute(
            "UPDATE tasks SET estimated_duration_seconds = $2 WHERE id = $1;",
            task_id,
            seconds,
        )

    async def delete(self, task_id: TaskId) -> None:
        await self._db.execute("DELETE FROM tasks WHERE id = $1;", task_id)

    @staticmethod
    def _params(task: Task) -> tuple:
        return (
            task.id,
            task.user_id,
            task.team_id,
            task.title,
            task.description,
            task.date,
            task.time_from,
            task.time_to,
            task.category,
            task.estimated_duration_seconds,
            task.status.value,
            task.created_at,
        )

    @staticmethod
    def _map(row: Record) -> Task:
        return Task(
            id=TaskId(row["id"]),
            user_id=UserId(row["user_id"]),
            team_id=TeamId(row["team_id"]) if row["team_id"] is not None else None,
            title=row["title"],
            description=row["description"] or "",
            date=row["date"],
            time_from=row["time_from"],
            time_to=row["time_to"],
            category=row["category"] or "",
            estimated_duration_seconds=row["estimated_duration_seconds"],
            status=TaskStatus(row["status"]),
            created_at=row["created_at"],
        )
