"""Tests for task and comment endpoints."""

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from taskflow.models.comment import Comment


def _create_task(client: TestClient, headers: dict, **overrides) -> dict:
    body = {"title": "Write report", "description": "Quarterly numbers for the board", "tags": ["finance"]}
    body.update(overrides)
    response = client.post("/api/tasks/", json=body, headers=headers)
    assert response.status_code == 201, response.json()
    return response.json()["task"]


class TestTaskCreation:
    """Tests for creating tasks."""

    def test_create_task(self, client: TestClient, test_user: dict):
        task = _create_task(client, test_user["headers"])
        assert task["status"] == "pending"
        assert task["createdBy"]["id"] == test_user["user_id"]
        assert task["assignedTo"] is None
        assert task["tags"] == ["finance"]

    def test_create_task_assigned(self, client: TestClient, test_user: dict, other_user: dict):
        task = _create_task(client, test_user["headers"], assignedTo=other_user["user_id"])
        assert task["assignedTo"]["email"] == "other@example.com"

    def test_create_task_validation(self, client: TestClient, test_user: dict):
        """Every violation is reported."""
        response = client.post(
            "/api/tasks/",
            json={"title": "x", "description": "shrt", "status": "done", "assignedTo": "ghost"},
            headers=test_user["headers"],
        )
        assert response.status_code == 400
        fields = {e["field"] for e in response.json()["errors"]}
        assert fields == {"title", "description", "status", "assignedTo"}

    def test_create_task_requires_auth(self, client: TestClient):
        response = client.post("/api/tasks/", json={"title": "Title", "description": "Description"})
        assert response.status_code == 401


class TestTaskVisibility:
    """Tests for listing and viewing tasks."""

    def test_list_only_own_and_assigned(self, client: TestClient, test_user: dict, other_user: dict):
        mine = _create_task(client, test_user["headers"], title="Mine")
        assigned = _create_task(client, other_user["headers"], title="For test user", assignedTo=test_user["user_id"])
        _create_task(client, other_user["headers"], title="Private")

        response = client.get("/api/tasks/", headers=test_user["headers"])
        ids = {t["id"] for t in response.json()["tasks"]}
        assert ids == {mine["id"], assigned["id"]}

    def test_list_filters(self, client: TestClient, test_user: dict):
        _create_task(client, test_user["headers"], title="Fix login bug", status="in-progress")
        _create_task(client, test_user["headers"], title="Plan offsite", description="Book the venue early")

        by_status = client.get("/api/tasks/?status=in-progress", headers=test_user["headers"]).json()["tasks"]
        assert [t["title"] for t in by_status] == ["Fix login bug"]

        by_search = client.get("/api/tasks/?search=VENUE", headers=test_user["headers"]).json()["tasks"]
        assert [t["title"] for t in by_search] == ["Plan offsite"]

        ignored = client.get("/api/tasks/?status=bogus", headers=test_user["headers"]).json()["tasks"]
        assert len(ignored) == 2

    def test_search_does_not_widen_visibility(self, client: TestClient, test_user: dict, other_user: dict):
        _create_task(client, other_user["headers"], title="Secret roadmap")
        response = client.get("/api/tasks/?search=roadmap", headers=test_user["headers"])
        assert response.json()["tasks"] == []

    def test_get_task_forbidden(self, client: TestClient, test_user: dict, other_user: dict):
        task = _create_task(client, other_user["headers"])
        response = client.get(f"/api/tasks/{task['id']}", headers=test_user["headers"])
        assert response.status_code == 403

    def test_get_task_missing(self, client: TestClient, test_user: dict):
        response = client.get("/api/tasks/missing", headers=test_user["headers"])
        assert response.status_code == 404


class TestTaskUpdates:
    """Tests for updating and deleting tasks."""

    def test_assignee_can_update_status(self, client: TestClient, test_user: dict, other_user: dict):
        task = _create_task(client, test_user["headers"], assignedTo=other_user["user_id"])
        response = client.put(f"/api/tasks/{task['id']}", json={"status": "completed"}, headers=other_user["headers"])
        assert response.status_code == 200
        updated = response.json()["task"]
        assert updated["status"] == "completed"
        assert updated["title"] == task["title"]
        assert updated["assignedTo"]["id"] == other_user["user_id"]

    def test_unassign(self, client: TestClient, test_user: dict, other_user: dict):
        task = _create_task(client, test_user["headers"], assignedTo=other_user["user_id"])
        response = client.put(f"/api/tasks/{task['id']}", json={"assignedTo": None}, headers=test_user["headers"])
        assert response.json()["task"]["assignedTo"] is None

    def test_stranger_cannot_update(self, client: TestClient, test_user: dict, other_user: dict):
        task = _create_task(client, test_user["headers"])
        response = client.put(f"/api/tasks/{task['id']}", json={"status": "completed"}, headers=other_user["headers"])
        assert response.status_code == 403

    def test_invalid_status_update(self, client: TestClient, test_user: dict):
        task = _create_task(client, test_user["headers"])
        response = client.put(f"/api/tasks/{task['id']}", json={"status": "archived"}, headers=test_user["headers"])
        assert response.status_code == 400

    def test_only_creator_deletes(self, client: TestClient, test_user: dict, other_user: dict, db_session: Session):
        task = _create_task(client, test_user["headers"], assignedTo=other_user["user_id"])
        client.post(f"/api/comments/task/{task['id']}", json={"content": "On it"}, headers=other_user["headers"])

        response = client.delete(f"/api/tasks/{task['id']}", headers=other_user["headers"])
        assert response.status_code == 403

        response = client.delete(f"/api/tasks/{task['id']}", headers=test_user["headers"])
        assert response.status_code == 200
        assert client.get(f"/api/tasks/{task['id']}", headers=test_user["headers"]).status_code == 404
        assert db_session.query(Comment).count() == 0


class TestComments:
    """Tests for task comments."""

    def test_create_and_list(self, client: TestClient, test_user: dict):
        task = _create_task(client, test_user["headers"])
        first = client.post(f"/api/comments/task/{task['id']}", json={"content": "First"}, headers=test_user["headers"])
        assert first.status_code == 201
        assert first.json()["comment"]["user"]["id"] == test_user["user_id"]
        client.post(f"/api/comments/task/{task['id']}", json={"content": "Second"}, headers=test_user["headers"])

        response = client.get(f"/api/comments/task/{task['id']}", headers=test_user["headers"])
        contents = [c["content"] for c in response.json()["comments"]]
        assert sorted(contents) == ["First", "Second"]

    def test_empty_comment(self, client: TestClient, test_user: dict):
        task = _create_task(client, test_user["headers"])
        response = client.post(f"/api/comments/task/{task['id']}", json={"content": "  "}, headers=test_user["headers"])
        assert response.status_code == 400

    def test_comment_on_missing_task(self, client: TestClient, test_user: dict):
        response = client.post("/api/comments/task/missing", json={"content": "Hi"}, headers=test_user["headers"])
        assert response.status_code == 404

    def test_stranger_cannot_read_comments(self, client: TestClient, test_user: dict, other_user: dict):
        task = _create_task(client, test_user["headers"])
        response = client.get(f"/api/comments/task/{task['id']}", headers=other_user["headers"])
        assert response.status_code == 403

    def test_only_author_updates(self, client: TestClient, test_user: dict, other_user: dict):
        task = _create_task(client, test_user["headers"], assignedTo=other_user["user_id"])
        comment = client.post(
            f"/api/comments/task/{task['id']}", json={"content": "Draft"}, headers=other_user["headers"]
        ).json()["comment"]

        response = client.put(f"/api/comments/{comment['id']}", json={"content": "Hijack"}, headers=test_user["headers"])
        assert response.status_code == 403

        response = client.put(f"/api/comments/{comment['id']}", json={"content": "Final"}, headers=other_user["headers"])
        assert response.status_code == 200
        assert response.json()["comment"]["content"] == "Final"

    def test_task_creator_can_delete_any_comment(self, client: TestClient, test_user: dict, other_user: dict):
        task = _create_task(client, test_user["headers"], assignedTo=other_user["user_id"])
        comment = client.post(
            f"/api/comments/task/{task['id']}", json={"content": "Noise"}, headers=other_user["headers"]
        ).json()["comment"]

        response = client.delete(f"/api/comments/{comment['id']}", headers=test_user["headers"])
        assert response.status_code == 200

        response = client.delete(f"/api/comments/{comment['id']}", headers=test_user["headers"])
        assert response.status_code == 404
