from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from tracker.domain.team import Team, TeamMember
from tracker.domain.value_objects import TeamId, TeamMemberId, UserId


class TeamRepository(ABC):

    @abstractmethod
    async def create(self, name: str) -> Team:
        raise NotImplementedError

    @abstractmethod
    async def find_by_id(self, team_id: TeamId) -> Optional[Team]:
        raise NotImplementedError

    @abstractmethod
    async def list_all(self) -> List[Team]:
        """
        Newest teams first.
        """
        raise NotImplementedError

    @abstractmethod
    async def add_member(self, team_id: TeamId, user_id: UserId) -> None:
        """
        Adding an existing member is a no-op.
        """
        raise NotImplementedError

    @abstractmethod
    async def remove_member(self, member_id: TeamMemberId) -> None:
        raise NotImplementedError

    @abstractmethod
    async def list_members(self, team_id: TeamId) -> List[TeamMember]:
        raise NotImplementedError
