"""
Security tests for owner scoping of task endpoints.

User B must never be able to read, modify or delete user A's tasks; every
attempt must look exactly like a request for a task that does not exist.

Key SDET Concepts Demonstrated:
- Horizontal privilege-escalation probes (OWASP A01 - Broken Access Control)
- Comparing cross-tenant responses against genuine not-found responses
- Verifying that failed attempts leave the victim's data untouched
"""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.security


@pytest.fixture
def alice_task(user, task_factory):
    return task_factory(user_id=user.id, title="Alice's task", description="private")


def test_other_user_cannot_read_task(client, db_session, alice_task, second_user_headers):
    """Test that B's GET of A's task id is a 404, never A's task."""
    # Act
    response = client.get(f"/api/tasks/{alice_task.id}", headers=second_user_headers)
    missing = client.get("/api/tasks/99999", headers=second_user_headers)

    # Assert
    assert response.status_code == 404
    assert response.get_json() == missing.get_json()


def test_other_user_cannot_update_task(
    client, db_session, alice_task, api_headers, second_user_headers
):
    task_id = alice_task.id

    response = client.put(
        f"/api/tasks/{task_id}", json={"title": "Hijacked"}, headers=second_user_headers
    )

    assert response.status_code == 404
    owner_view = client.get(f"/api/tasks/{task_id}", headers=api_headers).get_json()
    assert owner_view["title"] == "Alice's task"


def test_other_user_cannot_delete_task(
    client, db_session, alice_task, api_headers, second_user_headers
):
    task_id = alice_task.id

    response = client.delete(f"/api/tasks/{task_id}", headers=second_user_headers)

    assert response.status_code == 404
    assert client.get(f"/api/tasks/{task_id}", headers=api_headers).status_code == 200


def test_other_user_list_and_stats_exclude_task(
    client, db_session, alice_task, second_user_headers
):
    listing = client.get("/api/tasks?searchTerm=private", headers=second_user_headers)
    stats = client.get("/api/tasks/stats", headers=second_user_headers)

    assert listing.get_json() == []
    assert stats.get_json()["total"] == 0


def test_update_cannot_reassign_owner(client, db_session, alice_task, user, second_user, api_headers):
    response = client.put(
        f"/api/tasks/{alice_task.id}",
        json={"title": "Still mine", "user_id": second_user.id},
        headers=api_headers,
    )

    assert response.status_code == 200
    assert response.get_json()["task"]["user_id"] == user.id
