from __future__ import annotations

from typing import List, Optional, Sequence

from tracker.domain.aggregate import TimerAggregate, multiple_running_warning
from tracker.domain.time_entry import TimeEntry


def latest_running(entries: Sequence[TimeEntry]) -> Optional[TimeEntry]:
    """
    The open entry with the greatest start_at. On equal start_at the one
    that comes later in the sequence wins.
    """
    latest: Optional[TimeEntry] = None
    for entry in entries:
        if not entry.is_running:
            continue
        if latest is None or entry.start_at >= latest.start_at:
            latest = entry
    return latest


def completed_seconds(entries: Sequence[TimeEntry]) -> int:
    # closed rows without a recorded duration count as zero
    total = 0
    for entry in entries:
        if entry.end_at is None:
            continue
        duration = entry.duration_seconds
        if isinstance(duration, int) and not isinstance(duration, bool):
            total += duration
    return total


def aggregate_entries(entries: Sequence[TimeEntry]) -> TimerAggregate:
    ordered: List[TimeEntry] = list(entries)
    running = [e for e in ordered if e.is_running]

    warnings: List[str] = []
    if len(running) > 1:
        warnings.append(multiple_running_warning(len(running)))

    return TimerAggregate(
        base_seconds=completed_seconds(ordered),
        running_entry=latest_running(running),
        entries=ordered,
        warnings=warnings,
    )
