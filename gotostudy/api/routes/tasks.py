"""Task routes, nested under their owning user."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from ...core.errors import NoTasksFoundError
from ...schemas.models import Task
from ...services import TaskService
from ..dependencies import get_task_service
from ..schemas import TaskCreateRequest, TaskReplaceRequest


logger = logging.getLogger(__name__)
router = APIRouter(prefix="/users/{user_id}/tasks", tags=["tasks"])


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
def create_task(
    user_id: UUID,
    payload: TaskCreateRequest,
    service: TaskService = Depends(get_task_service),
) -> Task:
    """Create a task for an existing user."""
    return service.create_task(user_id, Task(**payload.model_dump()))


@router.get("", response_model=list[Task])
def list_tasks(
    user_id: UUID, service: TaskService = Depends(get_task_service)
) -> list[Task]:
    """List a user's tasks; a user without tasks gets an empty list."""
    try:
        return service.find_user_tasks(user_id)
    except NoTasksFoundError:
        logger.debug(f"User {user_id} has no tasks")
        return []


@router.get("/{task_id}", response_model=Task)
def get_task(
    user_id: UUID, task_id: UUID, service: TaskService = Depends(get_task_service)
) -> Task:
    """Fetch one task of a user."""
    return service.find_task_by_id(user_id, task_id)


@router.put("/{task_id}", response_model=Task)
def replace_task(
    user_id: UUID,
    task_id: UUID,
    payload: TaskReplaceRequest,
    service: TaskService = Depends(get_task_service),
) -> Task:
    """Overwrite a task's title, description and completion flag."""
    service.update_task(user_id, task_id, Task(**payload.model_dump()))
    return service.find_task_by_id(user_id, task_id)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    user_id: UUID, task_id: UUID, service: TaskService = Depends(get_task_service)
) -> Response:
    """Delete one task of a user."""
    service.delete_task(user_id, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
