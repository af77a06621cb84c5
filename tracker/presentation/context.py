from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from fastapi import Request

from tracker.application.clock import Clock, utc_now
from tracker.application.diary.diary_service import DiaryService
from tracker.application.tasks.task_service import TaskService
from tracker.application.teams.team_service import TeamService, UserService
from tracker.application.timer.aggregator import TimerAggregator
from tracker.application.timer.display import DisplayValue
from tracker.application.timer.session import TimerSession
from tracker.config import Settings
from tracker.domain.repositories import (
    DiaryRepository,
    TargetRepository,
    TaskRepository,
    TeamRepository,
    TimeEntryRepository,
    UserRepository,
)
from tracker.domain.value_objects import TaskId
from tracker.infrastructure.db.postgres import PostgresDatabase
from tracker.infrastructure.local.json_target_repository import JsonFileTargetRepository
from tracker.infrastructure.repositories import (
    DiaryPostgresRepository,
    TaskPostgresRepository,
    TeamPostgresRepository,
    TimeEntryPostgresRepository,
    UserPostgresRepository,
)


@dataclass
class TrackerContext:
    """
    Everything a request needs, built once per application and passed
    explicitly; there is no module-level client or store.
    """
    settings: Settings
    entries: TimeEntryRepository
    tasks_repo: TaskRepository
    teams_repo: TeamRepository
    users_repo: UserRepository
    diaries_repo: DiaryRepository
    targets: TargetRepository
    clock: Clock = utc_now
    db: Optional[PostgresDatabase] = None

    aggregator: TimerAggregator = field(init=False)
    tasks: TaskService = field(init=False)
    teams: TeamService = field(init=False)
    users: UserService = field(init=False)
    diaries: DiaryService = field(init=False)

    def __post_init__(self) -> None:
        self.aggregator = TimerAggregator(self.entries, clock=self.clock)
        self.tasks = TaskService(self.tasks_repo, self.entries, clock=self.clock)
        self.teams = TeamService(self.teams_repo, self.users_repo)
        self.users = UserService(self.users_repo, self.tasks_repo)
        self.diaries = DiaryService(self.diaries_repo)

    def timer_session(
        self,
        task_id: TaskId,
        on_display: Optional[Callable[[DisplayValue], None]] = None,
    ) -> TimerSession:
        return TimerSession(
            task_id,
            self.aggregator,
            self.targets,
            self.tasks,
            clock=self.clock,
            tick_seconds=self.settings.timer_tick_seconds,
            on_display=on_display,
        )


def build_postgres_context(settings: Settings, db: PostgresDatabase) -> TrackerContext:
    return TrackerContext(
        settings=settings,
        entries=TimeEntryPostgresRepository(db),
        tasks_repo=TaskPostgresRepository(db),
        teams_repo=TeamPostgresRepository(db),
        users_repo=UserPostgresRepository(db),
        diaries_repo=DiaryPostgresRepository(db),
        targets=JsonFileTargetRepository(settings.targets_path),
        db=db,
    )


def get_context(request: Request) -> TrackerContext:
    return request.app.state.context
