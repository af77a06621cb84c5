# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from tracker.config import Settings
from tracker.presentation.context import TrackerContext

from .fakes import (
    FakeClock,
    InMemoryDiaryRepository,
    InMemoryTargetRepository,
    InMemoryTaskRepository,
    InMemoryTeamRepository,
    InMemoryTimeEntryRepository,
    InMemoryUserRepository,
)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def entries() -> InMemoryTimeEntryRepository:
    return InMemoryTimeEntryRepository()


@pytest.fixture()
def tasks_repo() -> InMemoryTaskRepository:
    return InMemoryTaskRepository()


@pytest.fixture()
def users_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def targets() -> InMemoryTargetRepository:
    return InMemoryTargetRepository()


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """
    Settings built by hand so tests never read the developer's .env.
    """
    return Settings(
        app_host="127.0.0.1",
        app_port=0,
        timer_tick_seconds=0.01,
        targets_path=tmp_path / "targets.json",
        log_dir=tmp_path,
        log_level="DEBUG",
        cors_origins=["*"],
    )


@pytest.fixture()
def context(
    settings: Settings,
    clock: FakeClock,
    entries: InMemoryTimeEntryRepository,
    tasks_repo: InMemoryTaskRepository,
    users_repo: InMemoryUserRepository,
    targets: InMemoryTargetRepository,
) -> TrackerContext:
    """
    Full service graph over in-memory repositories and a fixed clock.
    """
    return TrackerContext(
        settings=settings,
        entries=entries,
        tasks_repo=tasks_repo,
        teams_repo=InMemoryTeamRepository(users_repo),
        users_repo=users_repo,
        diaries_repo=InMemoryDiaryRepository(),
        targets=targets,
        clock=clock,
    )
