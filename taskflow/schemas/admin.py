"""Pydantic schemas for administrator endpoints."""

from taskflow.schemas.base import CamelModel
from taskflow.schemas.user import UserResponse


class UserListResponse(CamelModel):
    users: list[UserResponse]


class UserDetailResponse(CamelModel):
    user: UserResponse


class UpdateRoleRequest(CamelModel):
    role: str


class UpdateRoleResponse(CamelModel):
    message: str
    user: UserResponse


class AdminResetPasswordRequest(CamelModel):
    password: str


class ResetLinkResponse(CamelModel):
    """Reset-link issuance result. ``token`` and ``reset_url`` are withheld in production."""

    message: str
    email_sent: bool | str
    token: str | None = None
    reset_url: str | None = None
