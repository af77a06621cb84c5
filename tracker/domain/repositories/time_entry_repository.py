from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence

from tracker.domain.time_entry import TimeEntry
from tracker.domain.value_objects import TaskId, TimeEntryId


class TimeEntryRepository(ABC):
    """
    Storage of time entries. Every method raises StoreError when the
    backend fails.
    """

    @abstractmethod
    async def list_by_task(self, task_id: TaskId) -> List[TimeEntry]:
        """
        All entries of the task, ascending by start_at.
        """
        raise NotImplementedError

    @abstractmethod
    async def list_running(self, task_id: TaskId) -> List[TimeEntry]:
        """
        Entries of the task with no end_at, ascending by start_at.
        """
        raise NotImplementedError

    @abstractmethod
    async def list_by_tasks(self, task_ids: Sequence[TaskId]) -> List[TimeEntry]:
        raise NotImplementedError

    @abstractmethod
    async def find_by_id(self, entry_id: TimeEntryId) -> Optional[TimeEntry]:
        raise NotImplementedError

    @abstractmethod
    async def insert(self, task_id: TaskId, start_at: datetime) -> TimeEntry:
        """
        Creates a running entry and returns it with its assigned id.
        """
        raise NotImplementedError

    @abstractmethod
    async def update(
        self,
        entry_id: TimeEntryId,
        end_at: datetime,
        duration_seconds: int,
    ) -> Optional[TimeEntry]:
        """
        Writes end_at and duration_seconds together.
        Returns None when the entry no longer exists.
        """
        raise NotImplementedError

    @abstractmethod
    async def delete(self, entry_id: TimeEntryId) -> None:
        raise NotImplementedError

    @abstractmethod
    async def delete_by_task(self, task_id: TaskId) -> None:
        raise NotImplementedError
