from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from tracker.application.clock import Clock, utc_now
from tracker.application.tasks.task_service import TaskService
from tracker.application.timer.aggregator import StartResult, TimerAggregator
from tracker.application.timer.display import DisplayValue, compute_display
from tracker.application.timer.ticker import DEFAULT_TICK_SECONDS, DisplayTicker
from tracker.domain.errors import ValidationError
from tracker.domain.repositories.target_repository import TargetRepository
from tracker.domain.task import Task
from tracker.domain.time_entry import TimeEntry
from tracker.domain.value_objects import TaskId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimerSnapshot:
    """
    Values captured at the last authoritative reload (or at start). The
    display loop reads only these, never the store.
    """
    base_seconds: int = 0
    running_entry: Optional[TimeEntry] = None
    target_seconds: Optional[int] = None
    entries: List[TimeEntry] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_running(self) -> bool:
        return self.running_entry is not None


class TimerSession:
    """
    Timer state for one task while its timer view is open.

    Closing the session only stops the display loop. A running entry keeps
    running until stop() or finish() is called.
    """

    def __init__(
        self,
        task_id: TaskId,
        aggregator: TimerAggregator,
        targets: TargetRepository,
        tasks: TaskService,
        *,
        clock: Clock = utc_now,
        tick_seconds: float = DEFAULT_TICK_SECONDS,
        on_display: Optional[Callable[[DisplayValue], None]] = None,
    ) -> None:
        self.task_id = task_id
        self._aggregator = aggregator
        self._targets = targets
        self._tasks = tasks
        self._clock = clock
        self._ticker: DisplayTicker[DisplayValue] = DisplayTicker(tick_seconds)
        self._on_display = on_display
        self._target: Optional[int] = None
        self._task: Optional[Task] = None
        self._closed = True
        self.snapshot = TimerSnapshot()
        self.last_display: Optional[DisplayValue] = None

    async def __aenter__(self) -> "TimerSession":
        await self.open()
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()

    @property
    def ticking(self) -> bool:
        return self._ticker.active

    @property
    def target_seconds(self) -> Optional[int]:
        return self._target

    # ---- lifecycle ----

    async def open(self) -> TimerSnapshot:
        self._task = await self._tasks.get_task(self.task_id)
        self._target = self._targets.get(self.task_id) or self._task.estimated_duration_seconds
        self._closed = False
        return await self.reload()

    async def reload(self) -> TimerSnapshot:
        aggregate = await self._aggregator.get_aggregate(self.task_id)
        self._capture(
            TimerSnapshot(
                base_seconds=aggregate.base_seconds,
                running_entry=aggregate.running_entry,
                target_seconds=self._target,
                entries=list(aggregate.entries),
                warnings=list(aggregate.warnings),
            )
        )
        return self.snapshot

    def close(self) -> None:
        # later actions still refresh the snapshot but never restart the loop
        self._closed = True
        self._ticker.cancel()

    def display(self) -> DisplayValue:
        return self._display_for(self.snapshot)

    # ---- target ----

    def effective_target(self) -> Optional[int]:
        if self._target is not None:
            return self._target
        stored = self._targets.get(self.task_id)
        if stored is not None:
            return stored
        if self._task is not None:
            return self._task.estimated_duration_seconds
        return None

    async def set_target(self, seconds: int, persist_to_task: bool = False) -> DisplayValue:
        if isinstance(seconds, bool) or not isinstance(seconds, int) or seconds <= 0:
            raise ValidationError("Please enter a positive target.")

        self._target = seconds
        self._targets.set(self.task_id, seconds)
        if persist_to_task:
            await self._tasks.set_estimate(self.task_id, seconds)

        snap = self.snapshot
        self._capture(
            TimerSnapshot(
                base_seconds=snap.base_seconds,
                running_entry=snap.running_entry,
                target_seconds=seconds,
                entries=snap.entries,
                warnings=snap.warnings,
            )
        )
        return self.display()

    async def clear_target(self) -> TimerSnapshot:
        self._target = None
        self._targets.clear(self.task_id)
        return await self.reload()

    # ---- actions ----

    async def start(self, persist_to_task: bool = False) -> StartResult:
        target = self.effective_target()
        if not target:
            raise ValidationError("Please set a target duration before starting.")

        result = await self._aggregator.start(self.task_id, target)

        if result.completed:
            await self._tasks.mark_complete(self.task_id)
            await self.reload()
            return result

        if result.warnings:
            logger.warning("Start of task %s returned warnings: %s", self.task_id, result.warnings)

        self._target = int(target)
        entries = list(self.snapshot.entries)
        if result.created and result.entry is not None:
            entries.append(result.entry)
        self._capture(
            TimerSnapshot(
                base_seconds=result.base_seconds,
                running_entry=result.entry,
                target_seconds=self._target,
                entries=entries,
                warnings=list(result.warnings),
            )
        )

        self._targets.set(self.task_id, self._target)
        if persist_to_task:
            await self._tasks.set_estimate(self.task_id, self._target)
        return result

    async def stop(self) -> Optional[TimeEntry]:
        if not self.snapshot.is_running:
            return None
        stopped = await self._aggregator.stop(self.snapshot.running_entry.id)
        await self.reload()
        return stopped

    async def finish(self) -> None:
        if self.snapshot.is_running:
            await self._aggregator.stop(self.snapshot.running_entry.id)
        await self._tasks.mark_complete(self.task_id)
        await self.reload()
        self.close()

    # ---- internals ----

    def _display_for(self, snap: TimerSnapshot) -> DisplayValue:
        return compute_display(
            snap.running_entry,
            snap.base_seconds,
            snap.target_seconds,
            self._clock(),
        )

    def _capture(self, snapshot: TimerSnapshot) -> None:
        self.snapshot = snapshot
        if self._closed:
            return
        self._ticker.start(lambda: self._display_for(snapshot), self._emit)

    def _emit(self, value: DisplayValue) -> None:
        self.last_display = value
        if self._on_display is not None:
            self._on_display(value)
