# tests/test_team_service.py

from __future__ import annotations

from datetime import date
from uuid import uuid4

import pytest

from tracker.application.teams.team_service import TeamService, UserService
from tracker.domain.errors import NotFoundError, ValidationError
from tracker.domain.value_objects import TeamId, UserId

from .fakes import InMemoryTaskRepository, InMemoryTeamRepository, InMemoryUserRepository, make_task


@pytest.fixture()
def users() -> InMemoryUserRepository:
    repo = InMemoryUserRepository()
    repo.add("alice", "Alice A.")
    repo.add("bob")
    repo.add("bobby")
    return repo


@pytest.fixture()
def teams(users: InMemoryUserRepository) -> TeamService:
    return TeamService(InMemoryTeamRepository(users), users)


@pytest.mark.asyncio
async def test_create_team_adds_creator(teams: TeamService, users: InMemoryUserRepository) -> None:
    alice = await users.find_by_username("alice")

    team = await teams.create_team("  Platform ", alice.id)
    members = await teams.list_members(team.id)

    assert team.name == "Platform"
    assert [m.user.id for m in members] == [alice.id]


@pytest.mark.asyncio
async def test_create_team_requires_name(teams: TeamService) -> None:
    with pytest.raises(ValidationError):
        await teams.create_team("   ", UserId(uuid4()))


@pytest.mark.asyncio
async def test_add_member_by_username_is_case_insensitive_and_idempotent(
    teams: TeamService, users: InMemoryUserRepository
) -> None:
    alice = await users.find_by_username("alice")
    team = await teams.create_team("Platform", alice.id)

    bob = await teams.add_member_by_username(team.id, " BOB ")
    await teams.add_member_by_username(team.id, "bob")

    members = await teams.list_members(team.id)
    assert bob.username == "bob"
    assert sorted(m.user.username for m in members) == ["alice", "bob"]


@pytest.mark.asyncio
async def test_add_unknown_user_or_team(teams: TeamService, users: InMemoryUserRepository) -> None:
    alice = await users.find_by_username("alice")
    team = await teams.create_team("Platform", alice.id)

    with pytest.raises(NotFoundError):
        await teams.add_member_by_username(team.id, "carol")
    with pytest.raises(NotFoundError):
        await teams.add_member_by_username(TeamId(uuid4()), "bob")
    with pytest.raises(ValidationError):
        await teams.add_member_by_username(team.id, "")


@pytest.mark.asyncio
async def test_remove_member(teams: TeamService, users: InMemoryUserRepository) -> None:
    alice = await users.find_by_username("alice")
    team = await teams.create_team("Platform", alice.id)
    await teams.add_member_by_username(team.id, "bob")

    bob_membership = next(m for m in await teams.list_members(team.id) if m.user.username == "bob")
    await teams.remove_member(bob_membership.id)

    assert [m.user.username for m in await teams.list_members(team.id)] == ["alice"]


@pytest.mark.asyncio
async def test_list_teams_newest_first(teams: TeamService) -> None:
    creator = UserId(uuid4())
    first = await teams.create_team("First", creator)
    second = await teams.create_team("Second", creator)

    assert [t.id for t in await teams.list_teams()] == [second.id, first.id]


@pytest.mark.asyncio
async def test_user_search_and_day_plan(users: InMemoryUserRepository) -> None:
    tasks = InMemoryTaskRepository()
    service = UserService(users, tasks)
    bob = await users.find_by_username("bob")
    day = date(2025, 3, 10)
    await tasks.create(make_task(bob.id, day=day))

    assert [u.username for u in await service.search("BOB")] == ["bob", "bobby"]
    assert await service.search("   ") == []
    assert len(await service.tasks_for_day(bob.id, day)) == 1

    with pytest.raises(NotFoundError):
        await service.tasks_for_day(UserId(uuid4()), day)
