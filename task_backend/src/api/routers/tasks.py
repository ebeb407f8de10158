from __future__ import annotations

import logging
from typing import Callable, Dict, List

from fastapi import APIRouter, Depends, Request, status

from ..errors import TaskNotFoundError
from ..repositories import Repository
from ..schemas import ErrorOut, TaskCreate, TaskOut, TaskUpdate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/tasks",
    tags=["tasks"],
)

_ERROR_RESPONSES = {
    404: {"model": ErrorOut, "description": "Task not found"},
    500: {"model": ErrorOut, "description": "Storage failure"},
}


def _get_repo(request: Request) -> Repository:
    """
    Dependency returning the store handle created in the application lifespan.
    """
    return request.app.state.repository


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TaskOut],
    summary="List Tasks",
    description="Return every task in the store.",
    responses={
        200: {"description": "List retrieved successfully"},
        500: _ERROR_RESPONSES[500],
    },
)
def list_tasks(repo: Repository = Depends(_get_repo)) -> List[TaskOut]:
    """
    List all tasks.
    """
    return [TaskOut(**it) for it in repo.list()]  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TaskOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    description="Create a new task. New tasks always start as not completed.",
    responses={
        201: {"description": "Task created successfully"},
        400: {"model": ErrorOut, "description": "Malformed JSON or missing title/description"},
        500: _ERROR_RESPONSES[500],
    },
)
def create_task(payload: TaskCreate, repo: Repository = Depends(_get_repo)) -> TaskOut:
    """
    Create a new Task.
    """
    created = repo.create(payload)
    logger.debug("Created task id=%s", created["id"])
    return TaskOut(**created)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.get(
    "/{task_id}",
    response_model=TaskOut,
    summary="Get Task",
    description="Get a single task by ID.",
    responses={
        200: {"description": "Task found"},
        **_ERROR_RESPONSES,
    },
)
def get_task(task_id: int, repo: Repository = Depends(_get_repo)) -> TaskOut:
    """
    Retrieve a single Task by its ID.
    """
    item = repo.get(task_id)
    if item is None:
        raise TaskNotFoundError(task_id)
    return TaskOut(**item)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.put(
    "/{task_id}",
    response_model=TaskOut,
    summary="Replace Task",
    description=(
        "Replace title, description and completed of an existing task. All three fields "
        "are required; completed=false is a valid value."
    ),
    responses={
        200: {"description": "Task updated"},
        400: {"model": ErrorOut, "description": "Malformed JSON or missing fields"},
        **_ERROR_RESPONSES,
    },
)
def update_task(task_id: int, payload: TaskUpdate, repo: Repository = Depends(_get_repo)) -> TaskOut:
    """
    Full update (replace) of a Task. The store's not-found result is the only
    existence check, so lookup and write happen in one atomic store call.
    """
    updated = repo.update(task_id, payload)
    if updated is None:
        raise TaskNotFoundError(task_id)
    logger.debug("Updated task id=%s completed=%s", task_id, updated["completed"])
    return TaskOut(**updated)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Task",
    description="Delete a task by ID.",
    responses={
        204: {"description": "Task deleted"},
        **_ERROR_RESPONSES,
    },
)
def delete_task(task_id: int, repo: Repository = Depends(_get_repo)) -> None:
    """
    Delete a Task. Returns 204 on success, 404 if not found.
    """
    if not repo.delete(task_id):
        raise TaskNotFoundError(task_id)
    logger.debug("Deleted task id=%s", task_id)
    return None


# Error messages for request bodies that fail schema validation, per endpoint.
BODY_VALIDATION_MESSAGES: Dict[Callable, str] = {
    create_task: "Título y descripción son obligatorios",
    update_task: "Título, descripción y completado son obligatorios",
}
