from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .value_objects import TaskId, TimeEntryId


@dataclass(frozen=True)
class TimeEntry:
    """
    One timing segment of a task.

    start_at        : set on creation, never changed
    end_at          : None while the segment is running; written once on stop
    duration_seconds: whole seconds between start_at and end_at, written together with end_at
    """
    id: TimeEntryId
    task_id: TaskId
    start_at: datetime
    end_at: Optional[datetime] = None
    duration_seconds: Optional[int] = None

    @property
    def is_running(self) -> bool:
        return self.end_at is None
