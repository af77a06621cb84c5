from __future__ import annotations

from typing import List, Optional

from asyncpg import Record

from tracker.domain.repositories.user_repository import UserRepository
from tracker.domain.team import User
from tracker.domain.value_objects import UserId
from tracker.infrastructure.db.postgres import PostgresDatabase
from tracker.infrastructure.repositories.task_postgres_repository import _like


class UserPostgresRepository(UserRepository):
    """
    Reads app_users; password hashes never leave this query layer.
    """

    def __init__(self, db: PostgresDatabase) -> None:
        self._db = db

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        row = await self._db.fetchrow(
            "SELECT id, username, display_name FROM app_users WHERE id = $1;",
            user_id,
        )
        if row is None:
            return None
        return self._map(row)

    async def find_by_username(self, username: str) -> Optional[User]:
        row = await self._db.fetchrow(
            "SELECT id, username, display_name FROM app_users WHERE username = $1;",
            username,
        )
        if row is None:
            return None
        return self._map(row)

    async def search(self, fragment: str) -> List[User]:
        sql = """
        SELECT id, username, display_name
        FROM app_users
        WHERE username ILIKE $1
        ORDER BY username ASC
        LIMIT 50;
        """
        rows = await self._db.fetch(sql, _like(fragment))
        return [self._map(row) for row in rows]

    @staticmethod
    def _map(row: Record) -> User:
        return User(
            id=UserId(row["id"]),
            username=row["username"],
            display_name=row["display_name"],
        )
