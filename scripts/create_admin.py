"""Create or promote the bootstrap administrator.

Usage:
    TASKFLOW_ADMIN_EMAIL=admin@example.com TASKFLOW_ADMIN_PASSWORD=... python scripts/create_admin.py

If a user with that email already exists, their password is replaced and
their role set to admin.
"""

import logging
import os
import sys
from pathlib import Path

from sqlalchemy.orm import Session

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from taskflow.database import SessionLocal
from taskflow.exceptions import ValidationError
from taskflow.models.user import ROLE_ADMIN, User
from taskflow.services.password import PasswordHasher, get_password_hasher
from taskflow.validation import check_email, check_name, check_password, raise_if_errors

logger = logging.getLogger("taskflow")


def create_admin(db: Session, name: str, email: str, password: str, hasher: PasswordHasher) -> tuple[User, bool]:
    """Return the admin user and whether it was newly created."""
    errors: list[dict[str, str]] = []
    check_name(errors, name)
    check_email(errors, email)
    check_password(errors, password)
    raise_if_errors(errors)

    user = db.query(User).filter(User.email == email).first()
    created = user is None
    if created:
        user = User(name=name, email=email, password_hash=hasher.hash(password), role=ROLE_ADMIN)
        db.add(user)
    else:
        user.password_hash = hasher.hash(password)
        user.role = ROLE_ADMIN
    db.commit()
    db.refresh(user)
    return user, created


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    email = os.getenv("TASKFLOW_ADMIN_EMAIL")
    password = os.getenv("TASKFLOW_ADMIN_PASSWORD")
    name = os.getenv("TASKFLOW_ADMIN_NAME", "Administrator")
    if not email or not password:
        logger.error("TASKFLOW_ADMIN_EMAIL and TASKFLOW_ADMIN_PASSWORD must be set")
        return 1

    db = SessionLocal()
    try:
        user, created = create_admin(db, name, email, password, get_password_hasher())
    except ValidationError as e:
        for error in e.errors:
            logger.error("%s: %s", error["field"], error["message"])
        return 1
    finally:
        db.close()

    logger.info("Administrator %s %s (id %s)", user.email, "created" if created else "updated", user.id)
    return 0


if __name__ == "__main__":
    sys.exit(main())
