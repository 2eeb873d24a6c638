"""
End-to-end journey through the API using only HTTP calls.

Registers a user, logs in, creates a task and checks the statistics,
then walks the task through its lifecycle.  No fixture writes to the
database directly, so this is the closest test to a real client session.
"""

from __future__ import annotations

import pytest

from tests.helpers import auth_headers

pytestmark = pytest.mark.integration


def test_register_login_create_and_stats(client, db_session):
    """Test the register -> login -> create -> stats scenario."""
    # Arrange
    register = client.post(
        "/api/users/register",
        json={"name": "Alice", "email": "alice@example.com", "password": "secret1"},
    )
    assert register.status_code == 201

    login = client.post(
        "/api/users/login", json={"email": "alice@example.com", "password": "secret1"}
    )
    assert login.status_code == 200
    headers = auth_headers(login.get_json()["token"])

    # Act
    created = client.post("/api/tasks", json={"title": "Buy milk"}, headers=headers)
    stats = client.get("/api/tasks/stats", headers=headers)

    # Assert
    assert created.status_code == 201
    assert created.get_json()["task"]["status"] == "pending"
    assert stats.status_code == 200
    assert stats.get_json() == {"total": 1, "pending": 1, "in_progress": 0, "completed": 0}


def test_task_lifecycle(client, db_session):
    register = client.post(
        "/api/users/register",
        json={"name": "Carol", "email": "carol@example.com", "password": "secret1"},
    )
    headers = auth_headers(register.get_json()["token"])

    task_id = client.post(
        "/api/tasks", json={"title": "Draft plan"}, headers=headers
    ).get_json()["task"]["id"]

    client.put(f"/api/tasks/{task_id}", json={"status": "in_progress"}, headers=headers)
    assert client.get("/api/tasks/stats", headers=headers).get_json()["in_progress"] == 1

    client.put(f"/api/tasks/{task_id}", json={"status": "completed"}, headers=headers)
    assert client.get("/api/tasks?status=completed", headers=headers).get_json()[0]["id"] == task_id

    assert client.delete(f"/api/tasks/{task_id}", headers=headers).status_code == 200
    assert client.get("/api/tasks/stats", headers=headers).get_json()["total"] == 0
