"""Pydantic schemas for task comments."""

from datetime import datetime

from taskflow.schemas.base import CamelModel
from taskflow.schemas.user import UserSummary


class CommentRequest(CamelModel):
    content: str


class CommentResponse(CamelModel):
    id: str
    task_id: str
    user: UserSummary
    content: str
    created_at: datetime
    updated_at: datetime


class CommentDetailResponse(CamelModel):
    comment: CommentResponse


class CommentListResponse(CamelModel):
    comments: list[CommentResponse]
