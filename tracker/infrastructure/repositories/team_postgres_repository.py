from __future__ import annotations

from typing import List, Optional

from asyncpg import Record

from tracker.domain.repositories.team_repository import TeamRepository
from tracker.domain.team import Team, TeamMember, User
from tracker.domain.value_objects import TeamId, TeamMemberId, UserId
from tracker.infrastructure.db.postgres import PostgresDatabase


class TeamPostgresRepository(TeamRepository):
    def __init__(self, db: PostgresDatabase) -> None:
        self._db = db

    async def create(self, name: str) -> Team:
        sql = """
        INSERT INTO teams (name)
        VALUES ($1)
        RETURNING id, name, created_at;
        """
        row = await self._db.fetchrow(sql, name)
        return self._map(row)

    async def find_by_id(self, team_id: TeamId) -> Optional[Team]:
        row = await self._db.fetchrow(
            "SELECT id, name, created_at FROM teams WHERE id = $1;",
            team_id,
        )
        if row is None:
            return None
        return self._map(row)

    async def list_all(self) -> List[Team]:
        sql = """
        SELECT id, name, created_at
        FROM teams
        ORDER BY created_at DESC;
        """
        rows = await self._db.fetch(sql)
        return [self._map(row) for row in rows]

    async def add_member(self, team_id: TeamId, user_id: UserId) -> None:
        sql = """
        INSERT INTO team_members (team_id, user_id)
        VALUES ($1, $2)
        ON CONFLICT (team_id, user_id) DO NOTHING;
        """
        await self._db.execute(sql, team_id, user_id)

    async def remove_member(self, member_id: TeamMemberId) -> None:
        await self._db.execute("DELETE FROM team_members WHERE id = $1;", member_id)

    async def list_members(self, team_id: TeamId) -> List[TeamMember]:
        sql = """
        SELECT m.id, m.team_id, u.id AS user_id, u.username, u.display_name
        FROM team_members m
        JOIN app_users u ON u.id = m.user_id
        WHERE m.team_id = $1
        ORDER BY m.created_at ASC;
        """
        rows = await self._db.fetch(sql, team_id)
        return [self._map_member(row) for row in rows]

    @staticmethod
    def _map(row: Record) -> Team:
        return Team(
            id=TeamId(row["id"]),
            name=row["name"],
            created_at=row["created_at"],
        )

    @staticmethod
    def _map_member(row: Record) -> TeamMember:
        return TeamMember(
            id=TeamMemberId(row["id"]),
            team_id=TeamId(row["team_id"]),
            user=User(
                id=UserId(row["user_id"]),
                username=row["username"],
                display_name=row["display_name"],
            ),
        )
