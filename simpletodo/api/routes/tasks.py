"""Task CRUD endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from simpletodo.api.dependencies import (
    get_prompting_service,
    get_task_service,
    get_wip_limit_service,
    valid_task_id,
)
from simpletodo.api.schemas import TaskTextRequest
from simpletodo.errors import TaskNotFoundError, TaskStateError, TaskValidationError
from simpletodo.models.task import TaskStatus
from simpletodo.services.prompting_service import PromptingService
from simpletodo.services.task_service import TaskService
from simpletodo.services.wip_limit_service import WIPLimitService

router = APIRouter(prefix="/api/tasks", tags=["Tasks"])
logger = logging.getLogger(__name__)

TEXT_REQUIRED = "Task text is required and must be a string"


def _require_text(payload: Optional[TaskTextRequest]) -> str:
    if payload is None or not isinstance(payload.text, str):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=TEXT_REQUIRED)
    return payload.text.strip()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_task(
    payload: Optional[TaskTextRequest] = None,
    task_service: TaskService = Depends(get_task_service),
    wip_limit_service: WIPLimitService = Depends(get_wip_limit_service),
    prompting_service: PromptingService = Depends(get_prompting_service),
):
    """Create a task. Rejected with 409 once the WIP limit is reached."""
    text = _require_text(payload)

    if not wip_limit_service.can_add_task():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "error": "WIP limit reached",
                "wipLimitMessage": wip_limit_service.get_wip_limit_message(),
            },
        )

    try:
        task = task_service.create_task(text)
    except TaskValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    prompting_service.record_user_activity()
    return task.to_dict()


@router.get("")
def list_tasks(
    status_filter: Optional[str] = Query(None, alias="status"),
    task_service: TaskService = Depends(get_task_service),
):
    """List tasks, optionally filtered by ``?status=active|completed``."""
    if status_filter and status_filter not in {s.value for s in TaskStatus}:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Invalid status parameter. Must be "active" or "completed"',
        )
    return [task.to_dict() for task in task_service.get_all_tasks(status_filter or None)]


@router.get("/{task_id}")
def get_task(
    task_id: str = Depends(valid_task_id),
    task_service: TaskService = Depends(get_task_service),
):
    task = task_service.get_task_by_id(task_id)
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return task.to_dict()


@router.put("/{task_id}")
def update_task(
    task_id: str = Depends(valid_task_id),
    payload: Optional[TaskTextRequest] = None,
    task_service: TaskService = Depends(get_task_service),
    prompting_service: PromptingService = Depends(get_prompting_service),
):
    """Replace the text of an active task."""
    text = _require_text(payload)
    try:
        task = task_service.update_task(task_id, text)
    except TaskNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except (TaskValidationError, TaskStateError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    prompting_service.record_user_activity()
    return task.to_dict()


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: str = Depends(valid_task_id),
    task_service: TaskService = Depends(get_task_service),
    prompting_service: PromptingService = Depends(get_prompting_service),
):
    try:
        task_service.delete_task(task_id)
    except TaskNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    prompting_service.cancel_snooze(task_id)
    prompting_service.record_user_activity()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{task_id}/complete")
def complete_task(
    task_id: str = Depends(valid_task_id),
    task_service: TaskService = Depends(get_task_service),
    prompting_service: PromptingService = Depends(get_prompting_service),
):
    """Mark a task completed. Any snoozed prompt for it is cancelled."""
    try:
        task = task_service.complete_task(task_id)
    except TaskNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except TaskStateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    prompting_service.cancel_snooze(task_id)
    prompting_service.record_user_activity()
    return task.to_dict()
