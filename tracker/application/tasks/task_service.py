from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence
from uuid import uuid4

from tracker.application.clock import Clock, utc_now
from tracker.application.timer.display import parse_time_to_seconds, running_segment
from tracker.domain.errors import NotFoundError, ValidationError
from tracker.domain.repositories.task_repository import TaskRepository
from tracker.domain.repositories.time_entry_repository import TimeEntryRepository
from tracker.domain.task import Task, TaskDraft
from tracker.domain.time_entry import TimeEntry
from tracker.domain.value_objects import TaskId, TaskStatus, UserId

logger = logging.getLogger(__name__)

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
DEFAULT_TITLE = "Untitled"


@dataclass(frozen=True)
class DayTasks:
    all: List[Task]
    pending: List[Task]
    completed: List[Task]


@dataclass(frozen=True)
class TaskProgress:
    time_spent: int
    planned_seconds: int
    percent: int


def resolve_category(category: str, custom_category: str = "") -> str:
    """
    "other" is replaced by the custom label when one is given; an empty
    preset falls back to the custom label.
    """
    category = (category or "").strip().lower()
    custom = (custom_category or "").strip()
    if category == "other":
        return custom or category
    return category or custom


def tracked_seconds(entries: Iterable[TimeEntry], now: datetime) -> int:
    """
    Finished durations plus the live part of running entries.
    """
    total = 0
    for entry in entries:
        if entry.duration_seconds:
            total += entry.duration_seconds
        elif entry.is_running:
            total += running_segment(entry, now)
    return total


def planned_seconds(task: Task) -> int:
    span = parse_time_to_seconds(task.time_to) - parse_time_to_seconds(task.time_from)
    if span > 0:
        return span
    return task.estimated_duration_seconds or 0


class TaskService:
    def __init__(
        self,
        tasks: TaskRepository,
        entries: TimeEntryRepository,
        clock: Clock = utc_now,
    ) -> None:
        self._tasks = tasks
        self._entries = entries
        self._clock = clock

    # ---- create / edit ----

    async def create_tasks(
        self,
        user_id: UserId,
        draft: TaskDraft,
        member_ids: Optional[Sequence[UserId]] = None,
    ) -> List[Task]:
        """
        Creates the task for the user, or one copy per selected team member
        when member_ids is non-empty.
        """
        if not user_id:
            raise ValidationError("User id is required.")
        fields = self._normalise(draft)
        now = self._clock()

        owners = list(dict.fromkeys(member_ids)) if member_ids else [user_id]
        created = [
            Task(
                id=TaskId(uuid4()),
                user_id=owner,
                status=TaskStatus.PENDING,
                created_at=now,
                **fields,
            )
            for owner in owners
        ]

        if len(created) == 1:
            await self._tasks.create(created[0])
        else:
            await self._tasks.create_many(created)

        logger.info("Created %d task(s) %r for %s", len(created), fields["title"], owners)
        return created

    async def update_task(self, task_id: TaskId, draft: TaskDraft) -> Task:
        task = await self.get_task(task_id)
        updated = replace(task, **self._normalise(draft))
        await self._tasks.update(updated)
        return updated

    async def get_task(self, task_id: TaskId) -> Task:
        task = await self._tasks.find_by_id(task_id)
        if task is None:
            raise NotFoundError(f"Task {task_id} not found")
        return task

    async def mark_complete(self, task_id: TaskId) -> None:
        await self.get_task(task_id)
        await self._tasks.set_status(task_id, TaskStatus.COMPLETED)
        logger.info("Task %s marked completed", task_id)

    async def set_estimate(self, task_id: TaskId, seconds: Optional[int]) -> None:
        if seconds is not None and (isinstance(seconds, bool) or seconds <= 0):
            raise ValidationError("Estimate must be a positive number of seconds.")
        await self.get_task(task_id)
        await self._tasks.set_estimate(task_id, seconds)

    async def delete_task(self, task_id: TaskId) -> None:
        await self.get_task(task_id)
        await self._entries.delete_by_task(task_id)
        await self._tasks.delete(task_id)
        logger.info("Task %s deleted with its time entries", task_id)

    # ---- queries ----

    async def list_day(
        self,
        user_id: UserId,
        day: date,
        category: Optional[str] = None,
        title_query: Optional[str] = None,
    ) -> DayTasks:
        tasks = await self._tasks.list_for_user_date(
            user_id,
            day,
            category=(category or "").strip() or None,
            title_query=(title_query or "").strip() or None,
        )
        return DayTasks(
            all=tasks,
            pending=[t for t in tasks if not t.is_completed],
            completed=[t for t in tasks if t.is_completed],
        )

    async def time_spent(self, task_id: TaskId) -> int:
        entries = await self._entries.list_by_task(task_id)
        return tracked_seconds(entries, self._clock())

    async def progress(self, task_id: TaskId) -> TaskProgress:
        task = await self.get_task(task_id)
        spent = await self.time_spent(task_id)
        planned = planned_seconds(task)
        percent = min(100, round(spent / planned * 100)) if planned > 0 else 0
        return TaskProgress(time_spent=spent, planned_seconds=planned, percent=percent)

    async def day_total_seconds(self, user_id: UserId, day: date) -> int:
        tasks = await self._tasks.list_for_user_date(user_id, day)
        if not tasks:
            return 0
        entries = await self._entries.list_by_tasks([t.id for t in tasks])
        return tracked_seconds(entries, self._clock())

    @staticmethod
    def _normalise(draft: TaskDraft) -> dict:
        if draft.date is None:
            raise ValidationError("Task date is required.")
        for label, value in (("time_from", draft.time_from), ("time_to", draft.time_to)):
            if not _TIME_RE.match(value or ""):
                raise ValidationError(f"{label} must look like HH:MM.")
        if parse_time_to_seconds(draft.time_to) < parse_time_to_seconds(draft.time_from):
            raise ValidationError("time_to cannot be earlier than time_from.")

        estimate = draft.estimated_duration_seconds
        if estimate is not None and (isinstance(estimate, bool) or estimate < 0):
            raise ValidationError("Estimate cannot be negative.")

        return {
            "title": (draft.title or "").strip() or DEFAULT_TITLE,
            "description": draft.description or "",
            "date": draft.date,
            "time_from": draft.time_from,
            "time_to": draft.time_to,
            "category": resolve_category(draft.category, draft.custom_category),
            "team_id": draft.team_id,
            "estimated_duration_seconds": estimate or None,
        }
