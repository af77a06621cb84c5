from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field

from tracker.domain.team import Team, TeamMember, User
from tracker.domain.value_objects import TeamId, TeamMemberId, UserId
from tracker.presentation.context import TrackerContext, get_context

router = APIRouter(
    prefix="/teams",
    tags=["teams"],
)


# ---------- Schemas ----------


class UserResponse(BaseModel):
    id: UUID
    username: str
    display_name: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(id=user.id, username=user.username, display_name=user.display_name)


class TeamResponse(BaseModel):
    id: UUID
    name: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_team(cls, team: Team) -> "TeamResponse":
        return cls(id=team.id, name=team.name, created_at=team.created_at)


class TeamMemberResponse(BaseModel):
    id: UUID = Field(..., description="Membership id, used to remove the member")
    team_id: UUID
    user: UserResponse

    @classmethod
    def from_member(cls, member: TeamMember) -> "TeamMemberResponse":
        return cls(
            id=member.id,
            team_id=member.team_id,
            user=UserResponse.from_user(member.user),
        )


class CreateTeamRequest(BaseModel):
    name: str = Field(..., examples=["Platform"])
    creator_id: UUID = Field(..., description="Becomes the first member of the team")


class AddMemberRequest(BaseModel):
    username: str = Field(..., examples=["alex"])


# ---------- Endpoints ----------


@router.get(
    "",
    response_model=List[TeamResponse],
    summary="List teams",
)
async def list_teams(ctx: TrackerContext = Depends(get_context)) -> List[TeamResponse]:
    teams = await ctx.teams.list_teams()
    return [TeamResponse.from_team(t) for t in teams]


@router.post(
    "",
    response_model=TeamResponse,
    status_code=201,
    summary="Create a team",
)
async def create_team(
    payload: CreateTeamRequest,
    ctx: TrackerContext = Depends(get_context),
) -> TeamResponse:
    team = await ctx.teams.create_team(payload.name, UserId(payload.creator_id))
    return TeamResponse.from_team(team)


@router.delete(
    "/members/{member_id}",
    status_code=204,
    summary="Remove a team member",
)
async def remove_member(
    member_id: UUID,
    ctx: TrackerContext = Depends(get_context),
) -> Response:
    await ctx.teams.remove_member(TeamMemberId(member_id))
    return Response(status_code=204)


@router.get(
    "/{team_id}/members",
    response_model=List[TeamMemberResponse],
    summary="Members of a team",
)
async def list_members(
    team_id: UUID,
    ctx: TrackerContext = Depends(get_context),
) -> List[TeamMemberResponse]:
    members = await ctx.teams.list_members(TeamId(team_id))
    return [TeamMemberResponse.from_member(m) for m in members]


@router.post(
    "/{team_id}/members",
    response_model=UserResponse,
    status_code=201,
    summary="Add a member by username",
    description="Adding a user who is already a member is a no-op.",
)
async def add_member(
    team_id: UUID,
    payload: AddMemberRequest,
    ctx: TrackerContext = Depends(get_context),
) -> UserResponse:
    user = await ctx.teams.add_member_by_username(TeamId(team_id), payload.username)
    return UserResponse.from_user(user)
