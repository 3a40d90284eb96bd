"""Input shape checks shared by the services.

Each ``check_*`` helper appends ``{"field", "message"}`` entries to an error
list so a caller can report every violation at once via ``raise_if_errors``.
"""

import re

from taskflow.exceptions import ValidationError

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_NAME_LENGTH = 2
MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_BYTES = 72  # bcrypt input limit

Errors = list[dict[str, str]]


def check_name(errors: Errors, name: str) -> None:
    if len(name.strip()) < MIN_NAME_LENGTH:
        errors.append({"field": "name", "message": f"Name must be at least {MIN_NAME_LENGTH} characters"})


def check_email(errors: Errors, email: str) -> None:
    if not EMAIL_PATTERN.match(email.strip()):
        errors.append({"field": "email", "message": "Invalid email format"})


def check_password(errors: Errors, password: str, field: str = "password") -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        errors.append({"field": field, "message": f"Password must be at least {MIN_PASSWORD_LENGTH} characters"})
    elif len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        errors.append({"field": field, "message": f"Password must be at most {MAX_PASSWORD_BYTES} bytes"})


def check_required(errors: Errors, value: str, field: str, message: str) -> None:
    if not value:
        errors.append({"field": field, "message": message})


def check_min_length(errors: Errors, value: str, field: str, minimum: int, label: str) -> None:
    if len(value.strip()) < minimum:
        errors.append({"field": field, "message": f"{label} must be at least {minimum} characters"})


def raise_if_errors(errors: Errors) -> None:
    if errors:
        raise ValidationError(errors)
