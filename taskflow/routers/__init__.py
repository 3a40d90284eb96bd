"""API routers."""

from taskflow.routers.admin import router as admin_router
from taskflow.routers.auth import router as auth_router
from taskflow.routers.comments import router as comments_router
from taskflow.routers.events import router as events_router
from taskflow.routers.tasks import router as tasks_router

__all__ = ["auth_router", "admin_router", "tasks_router", "comments_router", "events_router"]
