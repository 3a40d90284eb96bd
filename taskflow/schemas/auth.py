"""Pydantic schemas for authentication endpoints."""

from taskflow.schemas.base import CamelModel
from taskflow.schemas.user import UserResponse


class RegisterRequest(CamelModel):
    name: str
    email: str
    password: str


class LoginRequest(CamelModel):
    email: str
    password: str


class ChangePasswordRequest(CamelModel):
    current_password: str
    new_password: str


class ForgotPasswordRequest(CamelModel):
    email: str


class ResetPasswordRequest(CamelModel):
    token: str
    new_password: str


class RegisterResponse(CamelModel):
    user: UserResponse
    token: str


class LoginResponse(CamelModel):
    user: UserResponse
    token: str
    force_password_change: bool


class ProfileResponse(CamelModel):
    user: UserResponse


class MessageResponse(CamelModel):
    message: str
