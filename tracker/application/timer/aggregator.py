from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from tracker.application.clock import Clock, seconds_between, utc_now
from tracker.application.timer.aggregation import aggregate_entries, latest_running
from tracker.domain.aggregate import TimerAggregate, multiple_running_warning
from tracker.domain.errors import FetchError, NotFoundError, StoreError, ValidationError
from tracker.domain.repositories.time_entry_repository import TimeEntryRepository
from tracker.domain.time_entry import TimeEntry
from tracker.domain.value_objects import TaskId, TimeEntryId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StartResult:
    """
    Outcome of TimerAggregator.start.

    completed   : the target was already covered by finished entries; nothing was written
    entry       : the running entry to time against (new or pre-existing)
    created     : True when entry was inserted by this call
    base_seconds: finished time read before the entry was created or reused
    """
    completed: bool
    base_seconds: int
    entry: Optional[TimeEntry] = None
    created: bool = False
    warnings: List[str] = field(default_factory=list)


def validate_target(target_seconds: object) -> float:
    if isinstance(target_seconds, bool) or not isinstance(target_seconds, (int, float)):
        raise ValidationError("Set a target duration before starting the timer.")
    if not math.isfinite(target_seconds) or target_seconds <= 0:
        raise ValidationError("Target duration must be a positive number of seconds.")
    return float(target_seconds)


class TimerAggregator:
    """
    Turns the time-entry log of a task into totals and drives start/stop
    against a countdown target.

    "At most one running entry per task" is kept by re-reading open entries
    right before an insert; two clients racing can still both insert, which
    shows up later as a multiple_running_entries warning.
    """

    def __init__(self, entries: TimeEntryRepository, clock: Clock = utc_now) -> None:
        self._entries = entries
        self._clock = clock

    async def get_aggregate(self, task_id: TaskId) -> TimerAggregate:
        try:
            rows = await self._entries.list_by_task(task_id)
        except StoreError as exc:
            logger.warning("Listing time entries failed for task %s: %s", task_id, exc)
            error = FetchError(f"Could not load time entries for task {task_id}")
            error.__cause__ = exc
            return TimerAggregate.failed(error)

        aggregate = aggregate_entries(rows)
        if aggregate.warnings:
            logger.warning("Task %s aggregate warnings: %s", task_id, aggregate.warnings)
        return aggregate

    async def start(self, task_id: TaskId, target_seconds: object) -> StartResult:
        if not task_id:
            raise ValidationError("Task id is required.")
        target = validate_target(target_seconds)

        aggregate = await self.get_aggregate(task_id)
        if aggregate.error is not None:
            raise aggregate.error
        base_seconds = aggregate.base_seconds

        if target - base_seconds <= 0:
            logger.info(
                "Task %s already has %ss of %ss; not creating an entry",
                task_id,
                base_seconds,
                target,
            )
            return StartResult(completed=True, base_seconds=base_seconds)

        running = await self._entries.list_running(task_id)
        if running:
            warnings: List[str] = []
            if len(running) > 1:
                warnings.append(multiple_running_warning(len(running)))
                logger.warning(
                    "Task %s has %d running entries; reusing the latest",
                    task_id,
                    len(running),
                )
            return StartResult(
                completed=False,
                base_seconds=base_seconds,
                entry=latest_running(running),
                created=False,
                warnings=warnings,
            )

        entry = await self._entries.insert(task_id, self._clock())
        logger.info("Started entry %s for task %s", entry.id, task_id)
        return StartResult(
            completed=False,
            base_seconds=base_seconds,
            entry=entry,
            created=True,
        )

    async def stop(
        self,
        entry_id: TimeEntryId,
        end_at: Optional[datetime] = None,
    ) -> TimeEntry:
        """
        Closes an entry. Re-running it recomputes the duration from the
        immutable start_at, so a repeated call with the same end_at gives
        the same row.
        """
        if not entry_id:
            raise ValidationError("Entry id is required.")

        existing = await self._entries.find_by_id(entry_id)
        if existing is None:
            raise NotFoundError(f"Time entry {entry_id} not found")

        end = end_at if end_at is not None else self._clock()
        duration = max(0, seconds_between(existing.start_at, end))

        updated = await self._entries.update(entry_id, end, duration)
        if updated is None:
            raise NotFoundError(f"Time entry {entry_id} not found")

        logger.info("Stopped entry %s after %ss", entry_id, duration)
        return updated
