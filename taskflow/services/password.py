"""Password hashing with bcrypt."""

import logging

import bcrypt

from taskflow.exceptions import HashingError

logger = logging.getLogger("taskflow")


class PasswordHasher:
    """Salted, deliberately slow one-way password hashing."""

    def hash(self, plaintext: str) -> str:
        try:
            return bcrypt.hashpw(plaintext.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")
        except (OSError, ValueError) as e:
            logger.error("Password hashing failed: %s", type(e).__name__)
            raise HashingError() from e

    def verify(self, plaintext: str, hashed: str) -> bool:
        """Check a password against a stored hash. A malformed hash never matches."""
        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            return False


_password_hasher: PasswordHasher | None = None


def get_password_hasher() -> PasswordHasher:
    """Get singleton password hasher instance."""
    global _password_hasher
    if _password_hasher is None:
        _password_hasher = PasswordHasher()
    return _password_hasher
