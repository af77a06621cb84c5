from .diary_repository import DiaryRepository
from .target_repository import TargetRepository
from .task_repository import TaskRepository
from .team_repository import TeamRepository
from .time_entry_repository import TimeEntryRepository
from .user_repository import UserRepository

__all__ = [
    "TimeEntryRepository",
    "TaskRepository",
    "TeamRepository",
    "UserRepository",
    "DiaryRepository",
    "TargetRepository",
]
