from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from tracker.application.clock import seconds_between
from tracker.domain.time_entry import TimeEntry


@dataclass(frozen=True)
class DisplayValue:
    elapsed: int
    remaining: Optional[int]
    running_segment: int

    @property
    def target_mode(self) -> bool:
        return self.remaining is not None

    @property
    def seconds(self) -> int:
        """
        What the timer face shows: the countdown when a target is set,
        the elapsed total otherwise.
        """
        return self.remaining if self.remaining is not None else self.elapsed


def running_segment(entry: Optional[TimeEntry], now: datetime) -> int:
    if entry is None or not entry.is_running:
        return 0
    return max(0, seconds_between(entry.start_at, now))


def compute_display(
    entry: Optional[TimeEntry],
    base_seconds: int,
    target_seconds: Optional[int],
    now: datetime,
) -> DisplayValue:
    segment = running_segment(entry, now)
    elapsed = base_seconds + segment

    remaining = None
    if target_seconds is not None:
        remaining = max(0, target_seconds - elapsed)

    return DisplayValue(elapsed=elapsed, remaining=remaining, running_segment=segment)


def format_hms(seconds: float) -> str:
    s = max(0, int(seconds))
    hh = s // 3600
    mm = (s % 3600) // 60
    ss = s % 60
    return f"{hh:02d}:{mm:02d}:{ss:02d}"


def duration_human(seconds: int) -> str:
    h = seconds // 3600
    m = (seconds % 3600) // 60
    s = seconds % 60
    if h:
        return f"{h}h {m}m"
    if m:
        return f"{m}m {s}s"
    return f"{s}s"


def parse_time_to_seconds(value: Optional[str]) -> int:
    """
    "HH:MM" -> seconds since midnight. Empty input gives 0.
    """
    if not value:
        return 0
    parts = value.split(":")
    try:
        hours = int(parts[0]) if parts[0] else 0
        minutes = int(parts[1]) if len(parts) > 1 and parts[1] else 0
    except ValueError:
        return 0
    return hours * 3600 + minutes * 60
