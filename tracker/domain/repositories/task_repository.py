from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional, Sequence

from tracker.domain.task import Task
from tracker.domain.value_objects import TaskId, TaskStatus, UserId


class TaskRepository(ABC):
    """
    Abstraction over task storage.
    """

    @abstractmethod
    async def create(self, task: Task) -> None:
        raise NotImplementedError

    @abstractmethod
    async def create_many(self, tasks: Sequence[Task]) -> None:
        """
        Persists all tasks or none of them.
        """
        raise NotImplementedError

    @abstractmethod
    async def find_by_id(self, task_id: TaskId) -> Optional[Task]:
        raise NotImplementedError

    @abstractmethod
    async def list_for_user_date(
        self,
        user_id: UserId,
        day: date,
        category: Optional[str] = None,
        title_query: Optional[str] = None,
    ) -> List[Task]:
        """
        Tasks of the user on the given day ordered by time_from.
        category and title_query are case-insensitive substring filters.
        """
        raise NotImplementedError

    @abstractmethod
    async def update(self, task: Task) -> None:
        raise NotImplementedError

    @abstractmethod
    async def set_status(self, task_id: TaskId, status: TaskStatus) -> None:
        raise NotImplementedError

    @abstractmethod
    async def set_estimate(self, task_id: TaskId, seconds: Optional[int]) -> None:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, task_id: TaskId) -> None:
        raise NotImplementedError
