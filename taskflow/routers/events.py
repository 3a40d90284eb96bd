"""WebSocket endpoints streaming notifier events to connected clients."""

import asyncio
import logging

from fastapi import APIRouter, Depends, WebSocket
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from taskflow.database import get_db
from taskflow.dependencies import authenticate_token, authorize_admin
from taskflow.exceptions import TaskFlowError
from taskflow.services.notifier import ADMIN_CHANNEL, get_notifier, task_channel
from taskflow.services.task import get_task_service

logger = logging.getLogger("taskflow")

router = APIRouter(prefix="/ws", tags=["Events"])


def close_code_for(error: TaskFlowError) -> int:
    """Application close codes mirror HTTP statuses: 4401, 4403, 4404."""
    return 4000 + error.status_code


async def _wait_for_disconnect(websocket: WebSocket) -> None:
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return


async def stream_channel(websocket: WebSocket, channel: str) -> None:
    """Forward every event published on ``channel`` until the client goes away."""
    notifier = get_notifier()
    sub = notifier.subscribe(channel)
    await websocket.accept()
    disconnected = asyncio.ensure_future(_wait_for_disconnect(websocket))
    try:
        while True:
            next_event = asyncio.ensure_future(sub.get())
            done, _ = await asyncio.wait({next_event, disconnected}, return_when=asyncio.FIRST_COMPLETED)
            if disconnected in done:
                next_event.cancel()
                return
            await websocket.send_json(next_event.result().to_dict())
    finally:
        disconnected.cancel()
        notifier.unsubscribe(sub)


async def reject(websocket: WebSocket, error: TaskFlowError) -> None:
    """Accept, then close with an application code.

    A close sent before accept() reaches the client as an HTTP 403 instead.
    """
    await websocket.accept()
    await websocket.close(code=close_code_for(error))


def _check_admin(token: str | None, db: Session) -> None:
    try:
        authorize_admin(authenticate_token(token), db)
    finally:
        db.close()


def _check_task_visible(token: str | None, task_id: str, db: Session) -> None:
    try:
        user = authenticate_token(token)
        get_task_service().get_task(db, task_id, user.user_id)
    finally:
        db.close()


# Handshake checks run in the threadpool and release their connection before
# streaming starts, so an open stream never holds a pooled connection.
@router.websocket("/admin")
async def admin_events(websocket: WebSocket, token: str | None = None, db: Session = Depends(get_db)) -> None:
    """Password-reset and other account events for administrators."""
    try:
        await run_in_threadpool(_check_admin, token, db)
    except TaskFlowError as e:
        await reject(websocket, e)
        return
    await stream_channel(websocket, ADMIN_CHANNEL)


@router.websocket("/tasks/{task_id}")
async def task_events(
    websocket: WebSocket, task_id: str, token: str | None = None, db: Session = Depends(get_db)
) -> None:
    """Task and comment changes for users who can see the task."""
    try:
        await run_in_threadpool(_check_task_visible, token, task_id, db)
    except TaskFlowError as e:
        await reject(websocket, e)
        return
    await stream_channel(websocket, task_channel(task_id))
