from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def seconds_between(start: datetime, end: datetime) -> int:
    """
    Whole seconds from start to end, halves rounded up. Can be negative.
    """
    return int(math.floor((end - start).total_seconds() + 0.5))
