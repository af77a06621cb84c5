# tests/test_http_api.py

from __future__ import annotations

from dataclasses import replace
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from tracker.presentation.http.app import create_app

from .fakes import FailingTimeEntryRepository

DAY = "2025-03-10"


@pytest.fixture()
def client(context):
    with TestClient(create_app(context)) as c:
        yield c


def _create_task(client: TestClient, user_id: str, **fields) -> dict:
    payload = {"user_id": user_id, "title": "Write report", "date": DAY, **fields}
    response = client.post("/tasks", json=payload)
    assert response.status_code == 201, response.text
    return response.json()[0]


def test_task_crud(client: TestClient) -> None:
    user = str(uuid4())
    task = _create_task(client, user, category="other", custom_category="Chores")
    assert task["category"] == "Chores"
    assert task["status"] == "pending"

    listed = client.get("/tasks", params={"user_id": user, "date": DAY}).json()
    assert [t["id"] for t in listed["pending"]] == [task["id"]]
    assert listed["completed"] == []

    edited = client.put(
        f"/tasks/{task['id']}",
        json={"title": "Renamed", "date": DAY, "time_from": "10:00", "time_to": "11:30"},
    )
    assert edited.status_code == 200
    assert edited.json()["title"] == "Renamed"

    done = client.post(f"/tasks/{task['id']}/complete")
    assert done.json()["status"] == "completed"

    assert client.delete(f"/tasks/{task['id']}").status_code == 204
    assert client.get(f"/tasks/{task['id']}").status_code == 404


def test_categories_listed_before_task_lookup(client: TestClient) -> None:
    response = client.get("/tasks/categories")

    assert response.status_code == 200
    assert "other" in response.json()


def test_invalid_task_fields_return_422(client: TestClient) -> None:
    response = client.post(
        "/tasks",
        json={"user_id": str(uuid4()), "date": DAY, "time_from": "11:00", "time_to": "10:00"},
    )

    assert response.status_code == 422
    assert "time_to" in response.json()["detail"]


def test_timer_flow(client: TestClient, clock) -> None:
    user = str(uuid4())
    task = _create_task(client, user)
    task_id = task["id"]

    state = client.get(f"/timer/tasks/{task_id}").json()
    assert state["running_entry"] is None
    assert state["remaining_seconds"] is None
    assert state["display"] == "00:00:00"

    start = client.post(f"/timer/tasks/{task_id}/start", json={"target_seconds": 900})
    assert start.status_code == 200, start.text
    body = start.json()
    assert body["completed"] is False
    assert body["created"] is True
    assert body["state"]["display"] == "00:15:00"
    entry_id = body["entry"]["id"]

    # a second start reuses the running entry
    again = client.post(f"/timer/tasks/{task_id}/start", json={}).json()
    assert again["created"] is False
    assert again["entry"]["id"] == entry_id

    clock.advance(60)
    state = client.get(f"/timer/tasks/{task_id}").json()
    assert state["target_seconds"] == 900
    assert state["elapsed_seconds"] == 60
    assert state["display"] == "00:14:00"

    stopped = client.post(f"/timer/entries/{entry_id}/stop", json={"end_at": "2025-03-10T09:02:00"})
    assert stopped.status_code == 200
    assert stopped.json()["duration_seconds"] == 120
    assert stopped.json()["duration_label"] == "2m 0s"

    state = client.get(f"/timer/tasks/{task_id}").json()
    assert state["base_seconds"] == 120
    assert state["running_entry"] is None

    progress = client.get(f"/tasks/{task_id}/progress").json()
    assert progress == {"time_spent": 120, "planned_seconds": 3600, "percent": 3}

    total = client.get("/tasks/day-total", params={"user_id": user, "date": DAY}).json()
    assert total == {"total_seconds": 120, "label": "2m 0s"}


def test_start_without_target_is_422(client: TestClient) -> None:
    task = _create_task(client, str(uuid4()))

    response = client.post(f"/timer/tasks/{task['id']}/start", json={})

    assert response.status_code == 422


def test_start_when_target_reached_completes_task(client: TestClient, entries, clock) -> None:
    task = _create_task(client, str(uuid4()))
    client.post(f"/timer/tasks/{task['id']}/start", json={"target_seconds": 60})
    clock.advance(90)
    running = client.get(f"/timer/tasks/{task['id']}").json()["running_entry"]
    client.post(f"/timer/entries/{running['id']}/stop", json={})

    body = client.post(f"/timer/tasks/{task['id']}/start", json={}).json()

    assert body["completed"] is True
    assert body["entry"] is None
    assert client.get(f"/tasks/{task['id']}").json()["status"] == "completed"
    assert len(entries.rows) == 1


def test_finish_and_target_endpoints(client: TestClient, targets) -> None:
    task = _create_task(client, str(uuid4()))
    task_id = task["id"]

    state = client.put(
        f"/timer/tasks/{task_id}/target",
        json={"seconds": 1800, "persist_to_task": True},
    ).json()
    assert state["target_seconds"] == 1800
    assert client.get(f"/tasks/{task_id}").json()["estimated_duration_seconds"] == 1800

    client.post(f"/timer/tasks/{task_id}/start", json={})
    finished = client.post(f"/timer/tasks/{task_id}/finish").json()
    assert finished["running_entry"] is None
    assert client.get(f"/tasks/{task_id}").json()["status"] == "completed"

    cleared = client.delete(f"/timer/tasks/{task_id}/target").json()
    assert cleared["target_seconds"] is None
    assert len(targets.values) == 0

    # a new session falls back to the task estimate
    assert client.get(f"/timer/tasks/{task_id}").json()["target_seconds"] == 1800


def test_stop_unknown_entry_is_404(client: TestClient) -> None:
    response = client.post(f"/timer/entries/{uuid4()}/stop", json={})

    assert response.status_code == 404


def test_store_failure_maps_to_503(context) -> None:
    broken = replace(context, entries=FailingTimeEntryRepository())

    with TestClient(create_app(broken)) as client:
        task = _create_task(client, str(uuid4()))
        state = client.get(f"/timer/tasks/{task['id']}").json()
        assert state["warnings"] == ["entries_fetch_error"]

        response = client.post(f"/timer/tasks/{task['id']}/start", json={"target_seconds": 60})

    assert response.status_code == 503


def test_teams_users_and_diary(client: TestClient, users_repo) -> None:
    alice = users_repo.add("alice")
    users_repo.add("bob")

    team = client.post("/teams", json={"name": "Platform", "creator_id": str(alice.id)})
    assert team.status_code == 201
    team_id = team.json()["id"]

    added = client.post(f"/teams/{team_id}/members", json={"username": "Bob"})
    assert added.status_code == 201
    assert added.json()["username"] == "bob"
    assert client.post(f"/teams/{team_id}/members", json={"username": "nobody"}).status_code == 404

    members = client.get(f"/teams/{team_id}/members").json()
    assert sorted(m["user"]["username"] for m in members) == ["alice", "bob"]
    bob_member = next(m for m in members if m["user"]["username"] == "bob")
    assert client.delete(f"/teams/members/{bob_member['id']}").status_code == 204
    assert len(client.get(f"/teams/{team_id}/members").json()) == 1
    assert [t["name"] for t in client.get("/teams").json()] == ["Platform"]

    assert [u["username"] for u in client.get("/users", params={"query": "AL"}).json()] == ["alice"]
    _create_task(client, str(alice.id))
    plan = client.get(f"/users/{alice.id}/tasks", params={"date": DAY}).json()
    assert len(plan) == 1
    assert client.get(f"/users/{uuid4()}/tasks", params={"date": DAY}).status_code == 404

    assert client.get("/diary", params={"user_id": str(alice.id), "date": DAY}).json() is None
    saved = client.put(
        "/diary",
        json={"user_id": str(alice.id), "diary_date": DAY, "content": "Shipped it"},
    ).json()
    month = client.get(
        "/diary/month",
        params={"user_id": str(alice.id), "year": 2025, "month": 3},
    ).json()
    assert [d["content"] for d in month] == ["Shipped it"]
    assert client.get(
        "/diary/month",
        params={"user_id": str(alice.id), "year": 2025, "month": 13},
    ).status_code == 422
    assert client.delete(f"/diary/{saved['id']}").status_code == 204
