from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .value_objects import TeamId, TeamMemberId, UserId


@dataclass(frozen=True)
class User:
    id: UserId
    username: str
    display_name: Optional[str] = None


@dataclass(frozen=True)
class Team:
    id: TeamId
    name: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class TeamMember:
    id: TeamMemberId
    team_id: TeamId
    user: User
