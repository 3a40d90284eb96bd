"""Comment service for task discussions."""

from sqlalchemy.orm import Session

from taskflow.exceptions import CommentAccessDenied, CommentNotFound, TaskAccessDenied, TaskNotFound
from taskflow.models.comment import Comment
from taskflow.models.task import Task
from taskflow.services.notifier import Notifier, get_notifier, task_channel
from taskflow.services.task import can_view
from taskflow.validation import check_min_length, raise_if_errors


def _comment_event(comment: Comment) -> dict:
    return {"commentId": comment.id, "taskId": comment.task_id, "userId": comment.user_id, "content": comment.content}


class CommentService:
    """Handles comments on tasks the user can see."""

    def __init__(self, notifier: Notifier) -> None:
        self.notifier = notifier

    def _visible_task(self, db: Session, task_id: str, user_id: str) -> Task:
        task = db.get(Task, task_id)
        if not task:
            raise TaskNotFound()
        if not can_view(task, user_id):
            raise TaskAccessDenied("Not authorized to view comments for this task")
        return task

    def _validate(self, content: str) -> None:
        errors: list[dict[str, str]] = []
        check_min_length(errors, content, "content", 1, "Comment content")
        raise_if_errors(errors)

    def list_comments(self, db: Session, task_id: str, user_id: str) -> list[Comment]:
        self._visible_task(db, task_id, user_id)
        return db.query(Comment).filter(Comment.task_id == task_id).order_by(Comment.created_at.desc()).all()

    def create_comment(self, db: Session, task_id: str, user_id: str, content: str) -> Comment:
        self._validate(content)
        self._visible_task(db, task_id, user_id)

        comment = Comment(task_id=task_id, user_id=user_id, content=content)
        db.add(comment)
        db.commit()
        db.refresh(comment)

        self.notifier.publish(task_channel(task_id), "comment.created", _comment_event(comment))
        return comment

    def update_comment(self, db: Session, comment_id: str, user_id: str, content: str) -> Comment:
        """Edit a comment. Only its author may do this."""
        self._validate(content)

        comment = db.get(Comment, comment_id)
        if not comment:
            raise CommentNotFound()
        if comment.user_id != user_id:
            raise CommentAccessDenied("Not authorized to update this comment")

        comment.content = content
        db.commit()
        db.refresh(comment)

        self.notifier.publish(task_channel(comment.task_id), "comment.updated", _comment_event(comment))
        return comment

    def delete_comment(self, db: Session, comment_id: str, user_id: str) -> None:
        """Delete a comment. Its author and the task's creator may do this."""
        comment = db.get(Comment, comment_id)
        if not comment:
            raise CommentNotFound()

        task = db.get(Task, comment.task_id)
        is_task_creator = task is not None and task.created_by_id == user_id
        if comment.user_id != user_id and not is_task_creator:
            raise CommentAccessDenied("Not authorized to delete this comment")

        task_id = comment.task_id
        db.delete(comment)
        db.commit()

        self.notifier.publish(task_channel(task_id), "comment.deleted", {"commentId": comment_id, "taskId": task_id})


_comment_service: CommentService | None = None


def get_comment_service() -> CommentService:
    """Get singleton comment service instance."""
    global _comment_service
    if _comment_service is None:
        _comment_service = CommentService(get_notifier())
    return _comment_service
