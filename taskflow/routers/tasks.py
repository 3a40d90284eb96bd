"""Task API endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from taskflow.database import get_db
from taskflow.dependencies import CurrentUser, get_current_user
from taskflow.schemas.auth import MessageResponse
from taskflow.schemas.task import (
    TaskCreateRequest,
    TaskDetailResponse,
    TaskListResponse,
    TaskResponse,
    TaskUpdateRequest,
)
from taskflow.services.task import get_task_service

router = APIRouter(prefix="/api/tasks", tags=["Tasks"])


@router.get("/", response_model=TaskListResponse)
def list_tasks(
    status: str | None = None,
    assigned_to: str | None = Query(default=None, alias="assignedTo"),
    search: str | None = None,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TaskListResponse:
    """List tasks created by or assigned to the current user."""
    tasks = get_task_service().list_tasks(db, user.user_id, status=status, assigned_to=assigned_to, search=search)
    return TaskListResponse(tasks=[TaskResponse.model_validate(t) for t in tasks])


@router.get("/{task_id}", response_model=TaskDetailResponse)
def get_task(
    task_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TaskDetailResponse:
    """Get a single task by ID."""
    task = get_task_service().get_task(db, task_id, user.user_id)
    return TaskDetailResponse(task=TaskResponse.model_validate(task))


@router.post("/", response_model=TaskDetailResponse, status_code=201)
def create_task(
    body: TaskCreateRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TaskDetailResponse:
    """Create a task owned by the current user."""
    task = get_task_service().create_task(
        db,
        user.user_id,
        title=body.title,
        description=body.description,
        status=body.status,
        assigned_to=body.assigned_to,
        tags=body.tags,
    )
    return TaskDetailResponse(task=TaskResponse.model_validate(task))


@router.put("/{task_id}", response_model=TaskDetailResponse)
def update_task(
    task_id: str,
    body: TaskUpdateRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TaskDetailResponse:
    """Update the fields present in the request body."""
    fields = body.model_dump(include=body.model_fields_set)
    task = get_task_service().update_task(db, task_id, user.user_id, **fields)
    return TaskDetailResponse(task=TaskResponse.model_validate(task))


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Delete a task created by the current user."""
    get_task_service().delete_task(db, task_id, user.user_id)
    return MessageResponse(message="Task deleted successfully")
