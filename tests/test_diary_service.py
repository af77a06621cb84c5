# tests/test_diary_service.py

from __future__ import annotations

from datetime import date
from uuid import uuid4

import pytest

from tracker.application.diary.diary_service import DiaryService, month_bounds
from tracker.domain.errors import ValidationError
from tracker.domain.value_objects import UserId

from .fakes import InMemoryDiaryRepository


@pytest.fixture()
def repo() -> InMemoryDiaryRepository:
    return InMemoryDiaryRepository()


@pytest.fixture()
def service(repo: InMemoryDiaryRepository) -> DiaryService:
    return DiaryService(repo)


def test_month_bounds() -> None:
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds(2025, 12) == (date(2025, 12, 1), date(2025, 12, 31))
    with pytest.raises(ValidationError):
        month_bounds(2025, 13)


@pytest.mark.asyncio
async def test_upsert_creates_then_overwrites(service: DiaryService, repo: InMemoryDiaryRepository) -> None:
    user = UserId(uuid4())
    day = date(2025, 3, 10)

    first = await service.upsert(user, day, "Slept well")
    second = await service.upsert(user, day, "Slept well. Ran 5k.")

    assert first.id == second.id
    assert second.content == "Slept well. Ran 5k."
    assert len(repo.diaries) == 1
    assert (await service.get(user, day)).content == "Slept well. Ran 5k."


@pytest.mark.asyncio
async def test_get_missing_day_returns_none(service: DiaryService) -> None:
    assert await service.get(UserId(uuid4()), date(2025, 1, 1)) is None


@pytest.mark.asyncio
async def test_list_for_month_stays_inside_month(service: DiaryService) -> None:
    user = UserId(uuid4())
    await service.upsert(user, date(2025, 2, 28), "feb")
    await service.upsert(user, date(2025, 3, 31), "end")
    await service.upsert(user, date(2025, 3, 1), "start")
    await service.upsert(UserId(uuid4()), date(2025, 3, 2), "someone else")

    march = await service.list_for_month(user, 2025, 3)

    assert [d.content for d in march] == ["start", "end"]


@pytest.mark.asyncio
async def test_delete(service: DiaryService, repo: InMemoryDiaryRepository) -> None:
    user = UserId(uuid4())
    diary = await service.upsert(user, date(2025, 3, 10), "x")

    await service.delete(diary.id)

    assert repo.diaries == {}


@pytest.mark.asyncio
async def test_missing_arguments_rejected(service: DiaryService) -> None:
    with pytest.raises(ValidationError):
        await service.upsert(None, date(2025, 3, 10), "x")
    with pytest.raises(ValidationError):
        await service.get(UserId(uuid4()), None)
