# tests/test_target_store.py

from __future__ import annotations

import json
from pathlib import Path
from uuid import uuid4

import pytest

from tracker.domain.value_objects import TaskId
from tracker.infrastructure.local.json_target_repository import JsonFileTargetRepository


def test_missing_file_reads_as_empty(tmp_path: Path) -> None:
    store = JsonFileTargetRepository(tmp_path / "nope" / "targets.json")

    assert store.get(TaskId(uuid4())) is None


def test_set_get_clear(tmp_path: Path) -> None:
    path = tmp_path / "state" / "targets.json"
    store = JsonFileTargetRepository(path)
    task = TaskId(uuid4())

    store.set(task, 1500)
    assert store.get(task) == 1500
    assert json.loads(path.read_text(encoding="utf-8")) == {str(task): 1500}

    # a second instance sees the same value
    assert JsonFileTargetRepository(path).get(task) == 1500

    store.clear(task)
    assert store.get(task) is None


@pytest.mark.parametrize("value", [0, -10, True])
def test_set_rejects_non_positive(tmp_path: Path, value) -> None:
    store = JsonFileTargetRepository(tmp_path / "targets.json")

    with pytest.raises(ValueError):
        store.set(TaskId(uuid4()), value)


def test_corrupt_file_is_ignored(tmp_path: Path) -> None:
    path = tmp_path / "targets.json"
    path.write_text("{not json", encoding="utf-8")
    store = JsonFileTargetRepository(path)
    task = TaskId(uuid4())

    assert store.get(task) is None
    store.set(task, 60)
    assert store.get(task) == 60


def test_garbage_values_read_as_unset(tmp_path: Path) -> None:
    path = tmp_path / "targets.json"
    good, bad, negative = TaskId(uuid4()), TaskId(uuid4()), TaskId(uuid4())
    path.write_text(
        json.dumps({str(good): 90.0, str(bad): "soon", str(negative): -3}),
        encoding="utf-8",
    )
    store = JsonFileTargetRepository(path)

    assert store.get(good) == 90
    assert store.get(bad) is None
    assert store.get(negative) is None
