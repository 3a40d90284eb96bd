"""User model."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, String

from taskflow.database import Base

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLES = (ROLE_USER, ROLE_ADMIN)


def new_id() -> str:
    """Opaque identifier for new rows."""
    return uuid.uuid4().hex


class User(Base):
    """Application user and credential record."""

    __tablename__ = "user"

    id = Column(String(32), primary_key=True, default=new_id)
    email = Column(String(256), unique=True, nullable=False, index=True)
    name = Column(String(256), nullable=False)
    password_hash = Column(String(256), nullable=False)
    role = Column(String(16), nullable=False, default=ROLE_USER)
    force_password_change = Column(Boolean, nullable=False, default=False)
    password_reset_requested = Column(Boolean, nullable=False, default=False)
    reset_password_token = Column(String(128), nullable=True, index=True)
    reset_password_expires = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
