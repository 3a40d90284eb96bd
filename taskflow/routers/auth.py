"""Authentication API endpoints."""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from taskflow.database import get_db
from taskflow.dependencies import CurrentUser, get_current_user
from taskflow.rate_limit import limiter
from taskflow.schemas.auth import (
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ProfileResponse,
    RegisterRequest,
    RegisterResponse,
    ResetPasswordRequest,
)
from taskflow.schemas.user import UserResponse
from taskflow.services.auth import get_auth_service

logger = logging.getLogger("taskflow")

router = APIRouter(prefix="/api/auth", tags=["Authentication"])

FORGOT_PASSWORD_MESSAGE = "If an account exists with that email, a reset link has been generated."


@router.post("/register", response_model=RegisterResponse, status_code=201)
@limiter.limit("5/minute")
def register(request: Request, body: RegisterRequest, db: Session = Depends(get_db)) -> RegisterResponse:
    """Register a new user account."""
    session = get_auth_service().register(db, body.name, body.email, body.password)
    return RegisterResponse(user=UserResponse.model_validate(session.user), token=session.token)


@router.post("/login", response_model=LoginResponse)
@limiter.limit("10/minute")
def login(request: Request, body: LoginRequest, db: Session = Depends(get_db)) -> LoginResponse:
    """Authenticate and receive a JWT token."""
    session = get_auth_service().login(db, body.email, body.password)
    return LoginResponse(
        user=UserResponse.model_validate(session.user),
        token=session.token,
        force_password_change=session.force_password_change,
    )


@router.get("/profile", response_model=ProfileResponse)
def get_profile(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProfileResponse:
    """Return the authenticated user's profile."""
    profile = get_auth_service().get_profile(db, user.user_id)
    return ProfileResponse(user=UserResponse.model_validate(profile))


@router.put("/change-password", response_model=MessageResponse)
def change_password(
    body: ChangePasswordRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Change the authenticated user's password."""
    get_auth_service().change_password(db, user.user_id, body.current_password, body.new_password)
    return MessageResponse(message="Password updated successfully")


@router.post("/forgot-password", response_model=MessageResponse)
@limiter.limit("3/minute")
def forgot_password(request: Request, body: ForgotPasswordRequest, db: Session = Depends(get_db)) -> MessageResponse:
    """Request a password reset. The answer is the same whether or not the email is known."""
    auth_service = get_auth_service()
    token = auth_service.request_password_reset(db, body.email)

    if token and not auth_service.settings.is_production:
        base_url = str(request.base_url).rstrip("/")
        logger.info("PASSWORD RESET: %s/reset-password/%s", base_url, token)

    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post("/reset-password", response_model=LoginResponse)
@limiter.limit("5/minute")
def reset_password(request: Request, body: ResetPasswordRequest, db: Session = Depends(get_db)) -> LoginResponse:
    """Reset password using a valid token. Returns a JWT for auto-login."""
    session = get_auth_service().reset_password(db, body.token, body.new_password)
    return LoginResponse(
        user=UserResponse.model_validate(session.user),
        token=session.token,
        force_password_change=session.force_password_change,
    )
