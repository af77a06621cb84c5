from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional

from tracker.domain.repositories.target_repository import TargetRepository
from tracker.domain.value_objects import TaskId

logger = logging.getLogger(__name__)


def _positive_int(value: object) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int) and value > 0:
        return value
    if isinstance(value, float) and value.is_integer() and value > 0:
        return int(value)
    return None


class JsonFileTargetRepository(TargetRepository):
    """
    Countdown targets kept in a small JSON file: {"<task id>": seconds}.

    A missing or unreadable file behaves as an empty store; writes replace
    the file atomically.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def get(self, task_id: TaskId) -> Optional[int]:
        return _positive_int(self._load().get(str(task_id)))

    def set(self, task_id: TaskId, seconds: int) -> None:
        value = _positive_int(seconds)
        if value is None:
            raise ValueError("target must be a positive number of seconds")
        data = self._load()
        data[str(task_id)] = value
        self._save(data)

    def clear(self, task_id: TaskId) -> None:
        data = self._load()
        if data.pop(str(task_id), None) is not None:
            self._save(data)

    def _load(self) -> Dict[str, object]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError:
            logger.warning("Cannot read targets file %s", self.path, exc_info=True)
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Targets file %s is corrupt; ignoring it", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=".targets-", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, sort_keys=True)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
