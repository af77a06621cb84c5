from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from tracker.domain.value_objects import TaskId


class TargetRepository(ABC):
    """
    Local key-value slot holding the countdown target of a task, in seconds.

    Lives next to the client, not in the database; a stored value takes
    precedence over the task's estimated_duration_seconds.
    """

    @abstractmethod
    def get(self, task_id: TaskId) -> Optional[int]:
        """
        Positive number of seconds, or None when no target is set.
        """
        raise NotImplementedError

    @abstractmethod
    def set(self, task_id: TaskId, seconds: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def clear(self, task_id: TaskId) -> None:
        raise NotImplementedError
