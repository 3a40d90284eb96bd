"""Domain exceptions.

Each exception carries the HTTP status it maps to; the handlers registered in
``main.py`` turn them into ``{"message": ..., "errors": ...}`` JSON bodies.
Services raise these and never build HTTP responses themselves.
"""

from typing import Any


class TaskFlowError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message}


class ValidationError(TaskFlowError):
    """Malformed input. Carries every violation, not just the first."""

    status_code = 400
    message = "Validation error"

    def __init__(self, errors: list[dict[str, str]], message: str | None = None) -> None:
        super().__init__(message)
        self.errors = errors

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "errors": self.errors}


class DuplicateEmail(TaskFlowError):
    status_code = 400
    message = "User already exists with this email"


class InvalidCredentials(TaskFlowError):
    """Unknown email and wrong password share this exact message."""

    status_code = 401
    message = "Invalid email or password"


class InvalidCurrentPassword(TaskFlowError):
    status_code = 400
    message = "Current password is incorrect"


class AuthenticationFailure(TaskFlowError):
    status_code = 401
    message = "Token is not valid"


class AuthorizationFailure(TaskFlowError):
    status_code = 403
    message = "Access denied: administrator role required"


class NotFound(TaskFlowError):
    status_code = 404
    message = "Not found"


class UserNotFound(NotFound):
    message = "User not found"


class TaskNotFound(NotFound):
    message = "Task not found"


class CommentNotFound(NotFound):
    message = "Comment not found"


class TaskAccessDenied(AuthorizationFailure):
    message = "Not authorized to access this task"


class CommentAccessDenied(AuthorizationFailure):
    message = "Not authorized to modify this comment"


class InvalidRole(TaskFlowError):
    status_code = 400
    message = "Invalid role. Allowed values are: user, admin"


class InvalidResetToken(TaskFlowError):
    status_code = 400
    message = "Invalid or expired reset link"


class ResetTokenExpired(InvalidResetToken):
    message = "Reset link has expired. Please request a new one."


class HashingError(TaskFlowError):
    """The password hashing primitive failed (entropy or resource exhaustion)."""

    status_code = 500
    message = "Password hashing failed"


class TokenError(Exception):
    """A bearer token could not be verified."""


class MalformedToken(TokenError):
    pass


class InvalidSignature(TokenError):
    pass


class TokenExpired(TokenError):
    pass
