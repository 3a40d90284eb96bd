"""Administrator operations on user accounts."""

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from taskflow.config import Settings, get_settings
from taskflow.exceptions import InvalidRole, UserNotFound
from taskflow.models.user import ROLES, User
from taskflow.services.auth import issue_reset_token, notify_reset_requested
from taskflow.services.notifier import Notifier, get_notifier
from taskflow.services.password import PasswordHasher, get_password_hasher
from taskflow.validation import check_password, raise_if_errors

logger = logging.getLogger("taskflow")


@dataclass
class ResetLink:
    """Outcome of issuing a reset link.

    ``token`` and ``reset_url`` are None in production: the link is only
    meant to travel by email there, and email delivery is not wired up.
    """

    user: User
    expires: datetime
    token: str | None = None
    reset_url: str | None = None


class AdminService:
    """Handles user listing, role changes and administrator password resets."""

    def __init__(self, settings: Settings, hasher: PasswordHasher, notifier: Notifier) -> None:
        self.settings = settings
        self.hasher = hasher
        self.notifier = notifier

    def list_users(self, db: Session) -> list[User]:
        return db.query(User).order_by(User.created_at.asc()).all()

    def get_user(self, db: Session, user_id: str) -> User:
        user = db.get(User, user_id)
        if not user:
            raise UserNotFound()
        return user

    def update_role(self, db: Session, user_id: str, role: str) -> User:
        """Set a user's role. Tokens already issued keep their old role claim."""
        if role not in ROLES:
            raise InvalidRole()

        user = self.get_user(db, user_id)
        user.role = role
        db.commit()
        db.refresh(user)

        logger.info("Role for user %s set to %s", user.id, role)
        return user

    def reset_password(self, db: Session, user_id: str, new_password: str) -> User:
        """Override a user's password without the current one.

        The user is flagged to pick a new password on their next sign-in.
        """
        errors: list[dict[str, str]] = []
        check_password(errors, new_password)
        raise_if_errors(errors)

        user = self.get_user(db, user_id)
        user.password_hash = self.hasher.hash(new_password)
        user.force_password_change = True
        user.password_reset_requested = False
        db.commit()
        db.refresh(user)

        logger.info("Administrator reset the password of user %s", user.id)
        return user

    def request_password_reset_link(self, db: Session, user_id: str, base_url: str) -> ResetLink:
        """Issue a one-hour reset token for a user and alert connected administrators."""
        user = self.get_user(db, user_id)
        token = issue_reset_token(db, user, self.settings.RESET_TOKEN_EXPIRE_MINUTES)
        reset_url = f"{base_url.rstrip('/')}/reset-password/{token}"

        notify_reset_requested(self.notifier, user, requested_by="admin")

        if self.settings.is_production:
            logger.info("Reset link issued for user %s", user.id)
            return ResetLink(user=user, expires=user.reset_password_expires)

        logger.info("PASSWORD RESET: %s", reset_url)
        return ResetLink(user=user, expires=user.reset_password_expires, token=token, reset_url=reset_url)


_admin_service: AdminService | None = None


def get_admin_service() -> AdminService:
    """Get singleton admin service instance."""
    global _admin_service
    if _admin_service is None:
        _admin_service = AdminService(get_settings(), get_password_hasher(), get_notifier())
    return _admin_service
