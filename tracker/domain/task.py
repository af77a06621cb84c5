from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from .value_objects import TaskId, TaskStatus, TeamId, UserId


@dataclass(frozen=True)
class Task:
    """
    A unit of planned work for one user on one day.

    time_from / time_to       : planned window, "HH:MM"
    estimated_duration_seconds: optional server-side countdown target
    """
    id: TaskId
    user_id: UserId
    title: str
    date: date
    time_from: str
    time_to: str
    status: TaskStatus = TaskStatus.PENDING
    team_id: Optional[TeamId] = None
    description: str = ""
    category: str = ""
    estimated_duration_seconds: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED


@dataclass(frozen=True)
class TaskDraft:
    """
    User-editable fields of a task, as submitted by the task form.
    """
    title: str
    date: date
    time_from: str = "09:00"
    time_to: str = "10:00"
    description: str = ""
    category: str = ""
    custom_category: str = ""
    team_id: Optional[TeamId] = None
    estimated_duration_seconds: Optional[int] = None
