"""Task model."""

from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from taskflow.database import Base
from taskflow.models.user import new_id

TASK_STATUSES = ("pending", "in-progress", "completed")


class Task(Base):
    """A unit of work created by one user and optionally assigned to another."""

    __tablename__ = "task"

    id = Column(String(32), primary_key=True, default=new_id)
    title = Column(String(256), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(String(32), nullable=False, default="pending")  # pending, in-progress, completed
    created_by_id = Column(String(32), ForeignKey("user.id"), nullable=False, index=True)
    assigned_to_id = Column(String(32), ForeignKey("user.id"), nullable=True, index=True)
    tags = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    created_by = relationship("User", foreign_keys=[created_by_id])
    assigned_to = relationship("User", foreign_keys=[assigned_to_id])
    comments = relationship("Comment", back_populates="task", cascade="all, delete-orphan")
