from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from .value_objects import DiaryId, UserId


@dataclass(frozen=True)
class Diary:
    id: DiaryId
    user_id: UserId
    diary_date: date
    content: str
