"""Authentication and authorization dependencies for FastAPI routes."""

import logging
from dataclasses import dataclass, replace

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from taskflow.database import get_db
from taskflow.exceptions import AuthenticationFailure, AuthorizationFailure, TokenError, UserNotFound
from taskflow.models.user import ROLE_ADMIN, User
from taskflow.services.jwt import get_jwt_service

logger = logging.getLogger("taskflow")


@dataclass(frozen=True)
class CurrentUser:
    """Authenticated identity, as of the token's issuance."""

    user_id: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def authenticate_token(token: str | None) -> CurrentUser:
    """Turn a raw bearer token into a CurrentUser. Never touches the database."""
    if not token:
        raise AuthenticationFailure("No token, authorization denied")

    try:
        claims = get_jwt_service().verify(token)
    except TokenError as e:
        logger.warning("Rejected bearer token: %s", type(e).__name__)
        raise AuthenticationFailure("Token is not valid") from None

    return CurrentUser(user_id=claims.user_id, role=claims.role)


def get_current_user(request: Request) -> CurrentUser:
    """Extract and validate user from the Bearer token. Raises 401 if missing or invalid."""
    token: str | None = None
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header[7:].strip()
    return authenticate_token(token)


def authorize_admin(user: CurrentUser, db: Session) -> CurrentUser:
    """Admit administrators.

    A token whose role claim is already admin is trusted without a lookup.
    Otherwise the stored role decides, which admits users promoted after
    their token was issued. A demoted admin keeps access until the token
    expires, because the claim short-circuits the lookup.
    """
    if user.is_admin:
        return user

    stored = db.get(User, user.user_id)
    if not stored:
        raise UserNotFound()
    if not stored.is_admin:
        raise AuthorizationFailure()
    return replace(user, role=ROLE_ADMIN)


def require_admin(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> CurrentUser:
    """Require an authenticated administrator. Raises 403 for everyone else."""
    return authorize_admin(user, db)
