"""Pydantic schemas for user records."""

from datetime import datetime

from taskflow.schemas.base import CamelModel


class UserResponse(CamelModel):
    """Public view of a user. Never includes the password hash or reset token."""

    id: str
    name: str
    email: str
    role: str
    force_password_change: bool
    password_reset_requested: bool
    created_at: datetime
    updated_at: datetime


class UserSummary(CamelModel):
    """Compact user reference embedded in tasks and comments."""

    id: str
    name: str
    email: str
