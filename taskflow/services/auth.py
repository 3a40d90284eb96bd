"""Account service: registration, login, profile and self-service passwords."""

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from taskflow.config import Settings, get_settings
from taskflow.exceptions import (
    DuplicateEmail,
    InvalidCredentials,
    InvalidCurrentPassword,
    InvalidResetToken,
    ResetTokenExpired,
    UserNotFound,
)
from taskflow.models.user import ROLE_USER, User
from taskflow.services.jwt import JWTService, get_jwt_service
from taskflow.services.notifier import ADMIN_CHANNEL, Notifier, get_notifier
from taskflow.services.password import PasswordHasher, get_password_hasher
from taskflow.validation import (
    check_email,
    check_name,
    check_password,
    check_required,
    raise_if_errors,
)

logger = logging.getLogger("taskflow")


@dataclass
class AuthSession:
    """A user together with a freshly issued bearer token."""

    user: User
    token: str

    @property
    def force_password_change(self) -> bool:
        return bool(self.user.force_password_change)


def issue_reset_token(db: Session, user: User, expire_minutes: int) -> str:
    """Store a new single-use reset token on the user and flag the request."""
    token = secrets.token_hex(32)
    user.reset_password_token = token
    user.reset_password_expires = datetime.utcnow() + timedelta(minutes=expire_minutes)
    user.password_reset_requested = True
    db.commit()
    db.refresh(user)
    return token


def notify_reset_requested(notifier: Notifier, user: User, requested_by: str) -> None:
    """Tell connected administrators that a reset is pending for ``user``."""
    notifier.publish(
        ADMIN_CHANNEL,
        "password_reset.requested",
        {"userId": user.id, "email": user.email, "requestedBy": requested_by},
    )


class AuthService:
    """Handles user registration, authentication and password changes."""

    def __init__(
        self,
        settings: Settings,
        hasher: PasswordHasher,
        jwt_service: JWTService,
        notifier: Notifier,
    ) -> None:
        self.settings = settings
        self.hasher = hasher
        self.jwt_service = jwt_service
        self.notifier = notifier

    def _session_for(self, user: User) -> AuthSession:
        return AuthSession(user=user, token=self.jwt_service.issue(user.id, user.role))

    def register(self, db: Session, name: str, email: str, password: str) -> AuthSession:
        """Register a new user with the default role and sign them in."""
        errors: list[dict[str, str]] = []
        check_name(errors, name)
        check_email(errors, email)
        check_password(errors, password)
        raise_if_errors(errors)

        email = email.strip()
        if db.query(User).filter(User.email == email).first():
            raise DuplicateEmail()

        user = User(
            name=name.strip(),
            email=email,
            password_hash=self.hasher.hash(password),
            role=ROLE_USER,
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # Another registration took the email after the check above
            db.rollback()
            raise DuplicateEmail() from None
        db.refresh(user)

        logger.info("Registered user %s", user.id)
        return self._session_for(user)

    def login(self, db: Session, email: str, password: str) -> AuthSession:
        """Authenticate by email and password.

        Unknown emails and wrong passwords raise the same InvalidCredentials
        so the response never reveals which accounts exist.
        """
        errors: list[dict[str, str]] = []
        check_email(errors, email)
        check_required(errors, password, "password", "Password is required")
        raise_if_errors(errors)

        user = db.query(User).filter(User.email == email.strip()).first()
        if not user or not self.hasher.verify(password, user.password_hash):
            logger.warning("Failed login attempt")
            raise InvalidCredentials()

        return self._session_for(user)

    def get_profile(self, db: Session, user_id: str) -> User:
        user = db.get(User, user_id)
        if not user:
            raise UserNotFound()
        return user

    def change_password(self, db: Session, user_id: str, current_password: str, new_password: str) -> User:
        """Replace the caller's password and clear any forced-change flag."""
        errors: list[dict[str, str]] = []
        check_required(errors, current_password, "currentPassword", "Current password is required")
        check_password(errors, new_password, field="newPassword")
        raise_if_errors(errors)

        user = self.get_profile(db, user_id)
        if not self.hasher.verify(current_password, user.password_hash):
            raise InvalidCurrentPassword()

        user.password_hash = self.hasher.hash(new_password)
        user.force_password_change = False
        db.commit()
        db.refresh(user)

        logger.info("User %s changed their password", user.id)
        return user

    def request_password_reset(self, db: Session, email: str) -> str | None:
        """Generate a password reset token for the given email.

        Returns the token if the user exists, None otherwise.
        Caller should not reveal whether the user was found.
        """
        user = db.query(User).filter(User.email == email.strip()).first()
        if not user:
            return None

        token = issue_reset_token(db, user, self.settings.RESET_TOKEN_EXPIRE_MINUTES)
        notify_reset_requested(self.notifier, user, requested_by="user")
        logger.info("Password reset requested by user %s", user.id)
        return token

    def reset_password(self, db: Session, token: str, new_password: str) -> AuthSession:
        """Consume a reset token, set the new password and sign the user in."""
        errors: list[dict[str, str]] = []
        check_required(errors, token, "token", "Reset token is required")
        check_password(errors, new_password, field="newPassword")
        raise_if_errors(errors)

        user = db.query(User).filter(User.reset_password_token == token).first()
        if not user:
            raise InvalidResetToken()

        if not user.reset_password_expires or user.reset_password_expires < datetime.utcnow():
            user.reset_password_token = None
            user.reset_password_expires = None
            db.commit()
            raise ResetTokenExpired()

        user.password_hash = self.hasher.hash(new_password)
        user.reset_password_token = None
        user.reset_password_expires = None
        user.password_reset_requested = False
        user.force_password_change = False
        db.commit()
        db.refresh(user)

        logger.info("User %s completed a password reset", user.id)
        return self._session_for(user)


_auth_service: AuthService | None = None


def get_auth_service() -> AuthService:
    """Get singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService(get_settings(), get_password_hasher(), get_jwt_service(), get_notifier())
    return _auth_service
