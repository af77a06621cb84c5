from __future__ import annotations

import asyncio
import logging
from typing import Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TICK_SECONDS = 0.4


class TickerHandle:
    """
    Handle of one running display loop. cancel() may be called any number
    of times.
    """

    def __init__(self, task: "asyncio.Task[None]") -> None:
        self._task = task

    @property
    def active(self) -> bool:
        return not self._task.done()

    def cancel(self) -> None:
        if not self._task.done():
            self._task.cancel()

    async def wait_cancelled(self) -> None:
        self.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass


class DisplayTicker(Generic[T]):
    """
    Periodically recomputes a display value and hands it to a callback.

    The loop does no I/O: compute() must work on values already captured by
    the caller. Starting again replaces the previous loop.
    """

    def __init__(self, interval_seconds: float = DEFAULT_TICK_SECONDS) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.interval_seconds = float(interval_seconds)
        self._handle: Optional[TickerHandle] = None

    @property
    def active(self) -> bool:
        return self._handle is not None and self._handle.active

    def start(
        self,
        compute: Callable[[], T],
        on_tick: Callable[[T], None],
    ) -> TickerHandle:
        self.cancel()
        self._emit(compute, on_tick)
        task = asyncio.get_running_loop().create_task(self._run(compute, on_tick))
        self._handle = TickerHandle(task)
        return self._handle

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    async def _run(self, compute: Callable[[], T], on_tick: Callable[[T], None]) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            self._emit(compute, on_tick)

    @staticmethod
    def _emit(compute: Callable[[], T], on_tick: Callable[[T], None]) -> None:
        try:
            on_tick(compute())
        except Exception:
            logger.exception("Display tick failed")
