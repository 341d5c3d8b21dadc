"""
Task endpoint tests - CRUD, lifecycle actions and response envelopes
"""

from uuid import uuid4

import pytest

from task_tracker.models import UserRole
from tests.conftest import API

pytestmark = pytest.mark.unit


@pytest.fixture()
def create_task(client, admin, auth_headers):
    def _create(**fields):
        payload = {"title": "Quarterly report", **fields}
        response = client.post(f"{API}/tasks", json=payload, headers=auth_headers(admin))
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create


def act(client, task_id, action, headers):
    return client.post(f"{API}/tasks/{task_id}/{action}", headers=headers)


class TestCreateAndRead:
    def test_round_trip(self, client, admin, member, auth_headers, create_task):
        created = create_task(
            title="  Quarterly report  ",
            description="Numbers for Q3",
            deadline="2030-01-15T17:00:00Z",
            user_id=str(member.id),
        )
        assert created["title"] == "Quarterly report"
        assert created["status"] == "pending"
        assert created["owner_user_id"] == str(member.id)
        assert created["started_at"] is None
        assert created["completed_at"] is None
        assert created["time_spent_minutes"] is None
        assert created["deadline"].startswith("2030-01-15T17:00:00")

        response = client.get(f"{API}/tasks/{created['id']}", headers=auth_headers(member))
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["id"] == created["id"]
        assert body["data"]["description"] == "Numbers for Q3"

    def test_users_cannot_create(self, client, member, auth_headers):
        response = client.post(f"{API}/tasks", json={"title": "Mine"}, headers=auth_headers(member))
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    def test_blank_title_rejected(self, client, admin, auth_headers):
        response = client.post(f"{API}/tasks", json={"title": "   "}, headers=auth_headers(admin))
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_unknown_owner_rejected(self, client, admin, auth_headers):
        response = client.post(
            f"{API}/tasks", json={"title": "Orphan", "user_id": str(uuid4())}, headers=auth_headers(admin)
        )
        assert response.status_code == 400

    def test_requires_token(self, client):
        assert client.get(f"{API}/tasks").status_code == 401

    def test_forbidden_vs_not_found(self, client, member, auth_headers, create_task):
        other_task = create_task(title="Someone else's")
        assert client.get(f"{API}/tasks/{other_task['id']}", headers=auth_headers(member)).status_code == 403
        assert client.get(f"{API}/tasks/{uuid4()}", headers=auth_headers(member)).status_code == 404

    def test_malformed_id(self, client, admin, auth_headers):
        assert client.get(f"{API}/tasks/not-a-uuid", headers=auth_headers(admin)).status_code == 400


class TestList:
    def test_scoped_by_role(self, client, admin, member, auth_headers, create_task):
        create_task(title="Uma's", user_id=str(member.id))
        create_task(title="Unassigned")

        mine = client.get(f"{API}/tasks", headers=auth_headers(member)).json()
        assert mine["data"]["total"] == 1
        assert mine["meta"]["total"] == 1
        assert [t["title"] for t in mine["data"]["tasks"]] == ["Uma's"]

        everything = client.get(f"{API}/tasks", headers=auth_headers(admin)).json()
        assert everything["data"]["total"] == 2


class TestUpdateAndDelete:
    def test_patch_three_states(self, client, admin, member, auth_headers, create_task):
        task = create_task(description="Keep me", deadline="2030-01-15T17:00:00", user_id=str(member.id))
        response = client.patch(
            f"{API}/tasks/{task['id']}",
            json={"title": "Renamed", "deadline": None},
            headers=auth_headers(admin),
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "Renamed"
        assert data["deadline"] is None
        assert data["description"] == "Keep me"
        assert data["owner_user_id"] == str(member.id)

    def test_null_title_rejected(self, client, admin, auth_headers, create_task):
        task = create_task()
        response = client.patch(f"{API}/tasks/{task['id']}", json={"title": None}, headers=auth_headers(admin))
        assert response.status_code == 400

    def test_status_patch_has_no_lifecycle_side_effects(self, client, admin, auth_headers, create_task):
        task = create_task()
        data = client.patch(
            f"{API}/tasks/{task['id']}", json={"status": "completed"}, headers=auth_headers(admin)
        ).json()["data"]
        assert data["status"] == "completed"
        assert data["started_at"] is None
        assert data["time_spent_minutes"] is None

    def test_users_cannot_patch_own_task(self, client, member, auth_headers, create_task):
        task = create_task(user_id=str(member.id))
        response = client.patch(f"{API}/tasks/{task['id']}", json={"title": "x"}, headers=auth_headers(member))
        assert response.status_code == 403

    def test_delete(self, client, admin, auth_headers, create_task):
        task = create_task()
        response = client.delete(f"{API}/tasks/{task['id']}", headers=auth_headers(admin))
        assert response.status_code == 200
        assert response.json()["data"] == {"id": task["id"], "message": "Task deleted successfully"}
        assert client.get(f"{API}/tasks/{task['id']}", headers=auth_headers(admin)).status_code == 404

    def test_delete_missing(self, client, admin, auth_headers):
        assert client.delete(f"{API}/tasks/{uuid4()}", headers=auth_headers(admin)).status_code == 404


class TestLifecycle:
    def test_owner_and_admin_workflow(self, client, admin, member, auth_headers, create_task):
        task = create_task(user_id=str(member.id))
        owner, reviewer = auth_headers(member), auth_headers(admin)

        started = act(client, task["id"], "start", owner).json()["data"]
        assert started["status"] == "in_progress"
        assert started["started_at"] is not None

        submitted = act(client, task["id"], "complete", owner).json()["data"]
        assert submitted["status"] == "pending_review"
        assert submitted["completed_at"] is not None
        assert submitted["time_spent_minutes"] == 0

        rejected = act(client, task["id"], "reject", reviewer).json()["data"]
        assert rejected["status"] == "in_progress"
        assert rejected["started_at"] == started["started_at"]
        assert rejected["completed_at"] is None
        assert rejected["time_spent_minutes"] is None

        act(client, task["id"], "complete", owner)
        approved = act(client, task["id"], "approve", reviewer).json()["data"]
        assert approved["status"] == "completed"
        assert approved["time_spent_minutes"] == 0

    def test_wrong_status(self, client, admin, auth_headers, create_task):
        task = create_task()
        response = act(client, task["id"], "approve", auth_headers(admin))
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "INVALID_OPERATION"
        assert error["message"] == "Only tasks pending review can be approved"

    def test_owner_cannot_approve(self, client, member, auth_headers, create_task):
        task = create_task(user_id=str(member.id))
        act(client, task["id"], "start", auth_headers(member))
        act(client, task["id"], "complete", auth_headers(member))
        assert act(client, task["id"], "approve", auth_headers(member)).status_code == 403

    def test_other_user_cannot_start(self, client, member, make_user, auth_headers, create_task):
        task = create_task(user_id=str(member.id))
        intruder = make_user(UserRole.USER, email="ivan@example.com")
        assert act(client, task["id"], "start", auth_headers(intruder)).status_code == 403

    def test_missing_task(self, client, member, auth_headers):
        assert act(client, uuid4(), "start", auth_headers(member)).status_code == 404

    def test_complete_imported_in_progress_task(self, client, admin, auth_headers, create_task):
        task = create_task(status="in_progress")
        response = act(client, task["id"], "complete", auth_headers(admin))
        assert response.status_code == 500
        assert response.json()["error"]["code"] == "INTERNAL_ERROR"
