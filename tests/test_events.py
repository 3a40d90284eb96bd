"""Tests for the notifier and the WebSocket event streams."""

import asyncio

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import QueuePool
from starlette.websockets import WebSocketDisconnect

from taskflow.database import Base, get_db
from taskflow.services.auth import get_auth_service
from taskflow.services.notifier import Notifier


class TestNotifier:
    """Delivery semantics of the in-process notifier."""

    def test_publish_delivers_to_subscriber(self):
        notifier = Notifier()

        async def scenario():
            sub = notifier.subscribe("admin")
            assert notifier.publish("admin", "password_reset.requested", {"userId": "u1"}) == 1
            return await asyncio.wait_for(sub.get(), timeout=1)

        event = asyncio.run(scenario())
        assert event.type == "password_reset.requested"
        assert event.to_dict()["data"] == {"userId": "u1"}

    def test_publish_without_subscribers(self):
        assert Notifier().publish("admin", "anything", {}) == 0

    def test_channels_are_isolated(self):
        notifier = Notifier()

        async def scenario():
            sub = notifier.subscribe("task:a")
            notifier.publish("task:b", "comment.created", {})
            await asyncio.sleep(0)
            return sub.queue.qsize()

        assert asyncio.run(scenario()) == 0

    def test_full_queue_drops_events(self):
        notifier = Notifier(max_pending=1)

        async def scenario():
            sub = notifier.subscribe("admin")
            notifier.publish("admin", "first", {})
            notifier.publish("admin", "second", {})
            await asyncio.sleep(0)
            return sub.queue.qsize(), (await sub.get()).type

        size, first_type = asyncio.run(scenario())
        assert size == 1
        assert first_type == "first"

    def test_closed_loop_is_dropped_silently(self):
        notifier = Notifier()
        loop = asyncio.new_event_loop()

        async def subscribe():
            return notifier.subscribe("admin")

        loop.run_until_complete(subscribe())
        loop.close()

        assert notifier.publish("admin", "password_reset.requested", {}) == 0
        assert notifier.subscriber_count("admin") == 0

    def test_unsubscribe(self):
        notifier = Notifier()

        async def scenario():
            sub = notifier.subscribe("admin")
            notifier.unsubscribe(sub)
            return notifier.publish("admin", "x", {})

        assert asyncio.run(scenario()) == 0


class TestAdminStream:
    """Tests for /ws/admin."""

    def test_rejects_missing_token(self, client: TestClient):
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with client.websocket_connect("/ws/admin") as ws:
                ws.receive_json()
        assert exc_info.value.code == 4401

    def test_rejects_regular_user(self, client: TestClient, test_user: dict):
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with client.websocket_connect(f"/ws/admin?token={test_user['token']}") as ws:
                ws.receive_json()
        assert exc_info.value.code == 4403

    def test_receives_reset_link_event(self, client: TestClient, admin_user: dict, test_user: dict):
        with client.websocket_connect(f"/ws/admin?token={admin_user['token']}") as ws:
            response = client.post(
                f"/api/admin/users/{test_user['user_id']}/reset-password-email",
                headers=admin_user["headers"],
            )
            assert response.status_code == 200
            event = ws.receive_json()

        assert event["type"] == "password_reset.requested"
        assert event["data"]["userId"] == test_user["user_id"]
        assert event["data"]["requestedBy"] == "admin"


class TestTaskStream:
    """Tests for /ws/tasks/{task_id}."""

    def _task_id(self, client: TestClient, headers: dict) -> str:
        response = client.post(
            "/api/tasks/",
            json={"title": "Ship release", "description": "Tag and publish the build"},
            headers=headers,
        )
        return response.json()["task"]["id"]

    def test_rejects_stranger(self, client: TestClient, test_user: dict, other_user: dict):
        task_id = self._task_id(client, test_user["headers"])
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with client.websocket_connect(f"/ws/tasks/{task_id}?token={other_user['token']}") as ws:
                ws.receive_json()
        assert exc_info.value.code == 4403

    def test_rejects_missing_task(self, client: TestClient, test_user: dict):
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with client.websocket_connect(f"/ws/tasks/missing?token={test_user['token']}") as ws:
                ws.receive_json()
        assert exc_info.value.code == 4404

    def test_receives_comment_event(self, client: TestClient, test_user: dict):
        task_id = self._task_id(client, test_user["headers"])
        with client.websocket_connect(f"/ws/tasks/{task_id}?token={test_user['token']}") as ws:
            client.post(f"/api/comments/task/{task_id}", json={"content": "Looks good"}, headers=test_user["headers"])
            event = ws.receive_json()

        assert event["type"] == "comment.created"
        assert event["data"]["content"] == "Looks good"


class TestStreamConnections:
    """Open streams must not hold on to pooled database connections."""

    def test_http_request_served_while_stream_open(self, tmp_path):
        from main import app
        from taskflow.rate_limit import limiter

        engine = create_engine(
            f"sqlite:///{tmp_path / 'streams.db'}",
            connect_args={"check_same_thread": False},
            poolclass=QueuePool,
            pool_size=1,
            max_overflow=0,
            pool_timeout=1,
        )
        Base.metadata.create_all(bind=engine)
        session_factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)

        def override_get_db():
            db = session_factory()
            try:
                yield db
            finally:
                db.close()

        with session_factory() as db:
            token = get_auth_service().register(db, "Stream User", "stream@example.com", "password123").token
        headers = {"Authorization": f"Bearer {token}"}

        app.dependency_overrides[get_db] = override_get_db
        limiter.enabled = False
        try:
            with TestClient(app) as client:
                task_id = client.post(
                    "/api/tasks/",
                    json={"title": "Watch me", "description": "Stream this task"},
                    headers=headers,
                ).json()["task"]["id"]

                with client.websocket_connect(f"/ws/tasks/{task_id}?token={token}"):
                    response = client.get("/api/tasks/", headers=headers)
                    assert response.status_code == 200
                    assert [t["id"] for t in response.json()["tasks"]] == [task_id]
        finally:
            limiter.enabled = True
            app.dependency_overrides.clear()
            engine.dispose()
