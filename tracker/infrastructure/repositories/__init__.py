from .diary_postgres_repository import DiaryPostgresRepository
from .task_postgres_repository import TaskPostgresRepository
from .team_postgres_repository import TeamPostgresRepository
from .time_entry_postgres_repository import TimeEntryPostgresRepository
from .user_postgres_repository import UserPostgresRepository

__all__ = [
    "TimeEntryPostgresRepository",
    "TaskPostgresRepository",
    "TeamPostgresRepository",
    "UserPostgresRepository",
    "DiaryPostgresRepository",
]
