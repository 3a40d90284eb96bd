"""Comment API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from taskflow.database import get_db
from taskflow.dependencies import CurrentUser, get_current_user
from taskflow.schemas.auth import MessageResponse
from taskflow.schemas.comment import (
    CommentDetailResponse,
    CommentListResponse,
    CommentRequest,
    CommentResponse,
)
from taskflow.services.comment import get_comment_service

router = APIRouter(prefix="/api/comments", tags=["Comments"])


@router.get("/task/{task_id}", response_model=CommentListResponse)
def list_comments(
    task_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> CommentListResponse:
    """List comments on a task, newest first."""
    comments = get_comment_service().list_comments(db, task_id, user.user_id)
    return CommentListResponse(comments=[CommentResponse.model_validate(c) for c in comments])


@router.post("/task/{task_id}", response_model=CommentDetailResponse, status_code=201)
def create_comment(
    task_id: str,
    body: CommentRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> CommentDetailResponse:
    """Add a comment to a task."""
    comment = get_comment_service().create_comment(db, task_id, user.user_id, body.content)
    return CommentDetailResponse(comment=CommentResponse.model_validate(comment))


@router.put("/{comment_id}", response_model=CommentDetailResponse)
def update_comment(
    comment_id: str,
    body: CommentRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> CommentDetailResponse:
    """Edit one of the current user's comments."""
    comment = get_comment_service().update_comment(db, comment_id, user.user_id, body.content)
    return CommentDetailResponse(comment=CommentResponse.model_validate(comment))


@router.delete("/{comment_id}", response_model=MessageResponse)
def delete_comment(
    comment_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Delete a comment."""
    get_comment_service().delete_comment(db, comment_id, user.user_id)
    return MessageResponse(message="Comment deleted successfully")
