from __future__ import annotations

import logging
from datetime import date
from typing import List

from tracker.domain.errors import NotFoundError, ValidationError
from tracker.domain.repositories.task_repository import TaskRepository
from tracker.domain.repositories.team_repository import TeamRepository
from tracker.domain.repositories.user_repository import UserRepository
from tracker.domain.task import Task
from tracker.domain.team import Team, TeamMember, User
from tracker.domain.value_objects import TeamId, TeamMemberId, UserId

logger = logging.getLogger(__name__)


def normalise_username(username: str) -> str:
    return (username or "").strip().lower()


class TeamService:
    def __init__(self, teams: TeamRepository, users: UserRepository) -> None:
        self._teams = teams
        self._users = users

    async def create_team(self, name: str, creator_id: UserId) -> Team:
        """
        Creates the team and makes its creator the first member.
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Team name cannot be empty.")
        if not creator_id:
            raise ValidationError("Creator id is required.")

        team = await self._teams.create(name)
        await self._teams.add_member(team.id, creator_id)
        logger.info("Team %s (%s) created by %s", team.id, name, creator_id)
        return team

    async def list_teams(self) -> List[Team]:
        return await self._teams.list_all()

    async def add_member_by_username(self, team_id: TeamId, username: str) -> User:
        username = normalise_username(username)
        if not username:
            raise ValidationError("Username is required.")
        await self._require_team(team_id)

        user = await self._users.find_by_username(username)
        if user is None:
            raise NotFoundError(f"User {username!r} not found")

        await self._teams.add_member(team_id, user.id)
        logger.info("User %s added to team %s", user.id, team_id)
        return user

    async def remove_member(self, member_id: TeamMemberId) -> None:
        await self._teams.remove_member(member_id)

    async def list_members(self, team_id: TeamId) -> List[TeamMember]:
        await self._require_team(team_id)
        return await self._teams.list_members(team_id)

    async def _require_team(self, team_id: TeamId) -> Team:
        team = await self._teams.find_by_id(team_id)
        if team is None:
            raise NotFoundError(f"Team {team_id} not found")
        return team


class UserService:
    """
    Lookup of other users and their day plans.
    """

    def __init__(self, users: UserRepository, tasks: TaskRepository) -> None:
        self._users = users
        self._tasks = tasks

    async def search(self, query: str) -> List[User]:
        fragment = normalise_username(query)
        if not fragment:
            return []
        return await self._users.search(fragment)

    async def tasks_for_day(self, user_id: UserId, day: date) -> List[Task]:
        if await self._users.find_by_id(user_id) is None:
            raise NotFoundError(f"User {user_id} not found")
        return await self._tasks.list_for_user_date(user_id, day)
