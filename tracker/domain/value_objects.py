from __future__ import annotations

from enum import Enum
from typing import NewType
from uuid import UUID

TaskId = NewType("TaskId", UUID)
TimeEntryId = NewType("TimeEntryId", UUID)
UserId = NewType("UserId", UUID)
TeamId = NewType("TeamId", UUID)
TeamMemberId = NewType("TeamMemberId", UUID)
DiaryId = NewType("DiaryId", UUID)


class TaskStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


PRESET_CATEGORIES = (
    "programming",
    "sports",
    "academics",
    "music",
    "assignments",
    "other",
)
