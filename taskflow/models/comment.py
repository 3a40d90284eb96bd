"""Comment model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from taskflow.database import Base
from taskflow.models.user import new_id


class Comment(Base):
    """A comment left on a task."""

    __tablename__ = "comment"

    id = Column(String(32), primary_key=True, default=new_id)
    task_id = Column(String(32), ForeignKey("task.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(32), ForeignKey("user.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    task = relationship("Task", back_populates="comments")
    user = relationship("User")
