"""Pydantic schemas for tasks."""

from datetime import datetime

from taskflow.schemas.base import CamelModel
from taskflow.schemas.user import UserSummary


class TaskCreateRequest(CamelModel):
    title: str
    description: str
    status: str = "pending"
    assigned_to: str | None = None
    tags: list[str] | None = None


class TaskUpdateRequest(CamelModel):
    title: str | None = None
    description: str | None = None
    status: str | None = None
    assigned_to: str | None = None
    tags: list[str] | None = None


class TaskResponse(CamelModel):
    id: str
    title: str
    description: str
    status: str
    created_by: UserSummary
    assigned_to: UserSummary | None = None
    tags: list[str]
    created_at: datetime
    updated_at: datetime


class TaskDetailResponse(CamelModel):
    task: TaskResponse


class TaskListResponse(CamelModel):
    tasks: list[TaskResponse]
