from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .errors import FetchError
from .time_entry import TimeEntry

WARNING_ENTRIES_FETCH_ERROR = "entries_fetch_error"
WARNING_MULTIPLE_RUNNING_PREFIX = "multiple_running_entries"


def multiple_running_warning(count: int) -> str:
    return f"{WARNING_MULTIPLE_RUNNING_PREFIX}:{count}"


@dataclass(frozen=True)
class TimerAggregate:
    """
    Derived view over the time entries of one task. Never persisted.
    """
    base_seconds: int
    running_entry: Optional[TimeEntry]
    entries: List[TimeEntry] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    error: Optional[FetchError] = None

    @classmethod
    def failed(cls, error: FetchError) -> "TimerAggregate":
        return cls(
            base_seconds=0,
            running_entry=None,
            entries=[],
            warnings=[WARNING_ENTRIES_FETCH_ERROR],
            error=error,
        )
