"""Task service for creation, assignment and CRUD."""

from typing import Any

from sqlalchemy import or_
from sqlalchemy.orm import Session

from taskflow.exceptions import TaskAccessDenied, TaskNotFound, ValidationError
from taskflow.models.task import TASK_STATUSES, Task
from taskflow.models.user import User
from taskflow.services.notifier import Notifier, get_notifier, task_channel
from taskflow.validation import check_min_length, raise_if_errors

UPDATABLE_FIELDS = ("title", "description", "status", "assigned_to", "tags")


def can_view(task: Task, user_id: str) -> bool:
    """Only the creator and the assignee may see a task."""
    return task.created_by_id == user_id or task.assigned_to_id == user_id


class TaskService:
    """Handles tasks created by or assigned to the current user."""

    def __init__(self, notifier: Notifier) -> None:
        self.notifier = notifier

    def _validate(
        self, db: Session, title: str, description: str, status: str, assigned_to: str | None, tags: list[str]
    ) -> None:
        errors: list[dict[str, str]] = []
        check_min_length(errors, title, "title", 2, "Title")
        check_min_length(errors, description, "description", 5, "Description")
        if status not in TASK_STATUSES:
            errors.append({"field": "status", "message": f"Status must be one of: {', '.join(TASK_STATUSES)}"})
        if assigned_to and not db.get(User, assigned_to):
            errors.append({"field": "assignedTo", "message": "Assigned user does not exist"})
        if any(not isinstance(tag, str) for tag in tags):
            errors.append({"field": "tags", "message": "Tags must be strings"})
        raise_if_errors(errors)

    def list_tasks(
        self,
        db: Session,
        user_id: str,
        status: str | None = None,
        assigned_to: str | None = None,
        search: str | None = None,
    ) -> list[Task]:
        """Tasks visible to the user, newest first. An unknown status filter is ignored."""
        query = db.query(Task).filter(or_(Task.created_by_id == user_id, Task.assigned_to_id == user_id))
        if status in TASK_STATUSES:
            query = query.filter(Task.status == status)
        if assigned_to:
            query = query.filter(Task.assigned_to_id == assigned_to)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(Task.title.ilike(pattern), Task.description.ilike(pattern)))
        return query.order_by(Task.created_at.desc()).all()

    def get_task(self, db: Session, task_id: str, user_id: str) -> Task:
        task = db.get(Task, task_id)
        if not task:
            raise TaskNotFound()
        if not can_view(task, user_id):
            raise TaskAccessDenied("Not authorized to view this task")
        return task

    def create_task(
        self,
        db: Session,
        user_id: str,
        title: str,
        description: str,
        status: str = "pending",
        assigned_to: str | None = None,
        tags: list[str] | None = None,
    ) -> Task:
        tags = tags or []
        self._validate(db, title, description, status, assigned_to, tags)

        task = Task(
            title=title.strip(),
            description=description,
            status=status,
            created_by_id=user_id,
            assigned_to_id=assigned_to or None,
            tags=tags,
        )
        db.add(task)
        db.commit()
        db.refresh(task)
        return task

    def update_task(self, db: Session, task_id: str, user_id: str, **fields: Any) -> Task:
        """Apply the given fields; anything omitted keeps its current value."""
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError([{"field": name, "message": "Unknown field"} for name in sorted(unknown)])

        task = db.get(Task, task_id)
        if not task:
            raise TaskNotFound()
        if not can_view(task, user_id):
            raise TaskAccessDenied("Not authorized to update this task")

        title = fields.get("title") or task.title
        description = fields.get("description") or task.description
        status = fields.get("status") or task.status
        assigned_to = fields["assigned_to"] if "assigned_to" in fields else task.assigned_to_id
        tags = fields["tags"] if fields.get("tags") is not None else list(task.tags or [])
        self._validate(db, title, description, status, assigned_to, tags)

        task.title = title.strip()
        task.description = description
        task.status = status
        task.assigned_to_id = assigned_to or None
        task.tags = tags
        db.commit()
        db.refresh(task)

        self.notifier.publish(task_channel(task.id), "task.updated", {"taskId": task.id, "status": task.status})
        return task

    def delete_task(self, db: Session, task_id: str, user_id: str) -> None:
        """Delete a task and its comments. Only the creator may do this."""
        task = db.get(Task, task_id)
        if not task:
            raise TaskNotFound()
        if task.created_by_id != user_id:
            raise TaskAccessDenied("Not authorized to delete this task")

        db.delete(task)
        db.commit()

        self.notifier.publish(task_channel(task_id), "task.deleted", {"taskId": task_id})


_task_service: TaskService | None = None


def get_task_service() -> TaskService:
    """Get singleton task service instance."""
    global _task_service
    if _task_service is None:
        _task_service = TaskService(get_notifier())
    return _task_service
