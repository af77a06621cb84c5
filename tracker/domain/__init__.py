from .aggregate import TimerAggregate
from .diary import Diary
from .errors import FetchError, NotFoundError, StoreError, TrackerError, ValidationError
from .task import Task, TaskDraft
from .team import Team, TeamMember, User
from .time_entry import TimeEntry
from .value_objects import (
    DiaryId,
    TaskId,
    TaskStatus,
    TeamId,
    TeamMemberId,
    TimeEntryId,
    UserId,
)

__all__ = [
    "TaskId",
    "TimeEntryId",
    "UserId",
    "TeamId",
    "TeamMemberId",
    "DiaryId",
    "TaskStatus",
    "Task",
    "TaskDraft",
    "TimeEntry",
    "TimerAggregate",
    "Team",
    "TeamMember",
    "User",
    "Diary",
    "TrackerError",
    "ValidationError",
    "NotFoundError",
    "StoreError",
    "FetchError",
]
