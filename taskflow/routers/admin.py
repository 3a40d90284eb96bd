"""Administrator API endpoints. Every route requires an admin."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from taskflow.database import get_db
from taskflow.dependencies import CurrentUser, require_admin
from taskflow.schemas.admin import (
    AdminResetPasswordRequest,
    ResetLinkResponse,
    UpdateRoleRequest,
    UpdateRoleResponse,
    UserDetailResponse,
    UserListResponse,
)
from taskflow.schemas.auth import MessageResponse
from taskflow.schemas.user import UserResponse
from taskflow.services.admin import get_admin_service

router = APIRouter(prefix="/api/admin", tags=["Administration"])


@router.get("/users", response_model=UserListResponse)
def list_users(
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
) -> UserListResponse:
    """List every user."""
    users = get_admin_service().list_users(db)
    return UserListResponse(users=[UserResponse.model_validate(u) for u in users])


@router.get("/users/{user_id}", response_model=UserDetailResponse)
def get_user(
    user_id: str,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
) -> UserDetailResponse:
    """Get a single user by ID."""
    user = get_admin_service().get_user(db, user_id)
    return UserDetailResponse(user=UserResponse.model_validate(user))


@router.put("/users/{user_id}/role", response_model=UpdateRoleResponse)
def update_role(
    user_id: str,
    body: UpdateRoleRequest,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
) -> UpdateRoleResponse:
    """Change a user's role."""
    user = get_admin_service().update_role(db, user_id, body.role)
    return UpdateRoleResponse(message=f"Role updated for {user.email}", user=UserResponse.model_validate(user))


@router.put("/users/{user_id}/password", response_model=MessageResponse)
def reset_password(
    user_id: str,
    body: AdminResetPasswordRequest,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Set a new password for a user and force them to change it."""
    user = get_admin_service().reset_password(db, user_id, body.password)
    return MessageResponse(message=f"Password reset for user {user.email}")


@router.post("/users/{user_id}/reset-password-email", response_model=ResetLinkResponse, response_model_exclude_none=True)
def send_reset_link(
    request: Request,
    user_id: str,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
) -> ResetLinkResponse:
    """Issue a password reset link for a user."""
    service = get_admin_service()
    link = service.request_password_reset_link(db, user_id, str(request.base_url))
    return ResetLinkResponse(
        message=f"Reset link sent to {link.user.email}",
        email_sent=True if service.settings.is_production else "Simulated in development environment",
        token=link.token,
        reset_url=link.reset_url,
    )
