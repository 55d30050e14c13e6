"""Task creation factory for simpletodo.

This module centralizes task creation and text validation so the service
layer and tests build tasks the same way.
"""

import uuid
from datetime import datetime
from typing import Optional

from simpletodo.errors import TaskValidationError
from simpletodo.models.constants import MAX_TASK_TEXT_LENGTH
from simpletodo.models.task import Task, TaskStatus
from simpletodo.models.task_helpers import utc_now


def validate_task_text(text: str) -> str:
    """Validate task text.

    Args:
        text: Task description, already trimmed by the caller

    Returns:
        The text unchanged

    Raises:
        TaskValidationError: If text is empty/whitespace or longer than 500 characters
    """
    if not text or not text.strip():
        raise TaskValidationError("Task text cannot be empty")
    if len(text) > MAX_TASK_TEXT_LENGTH:
        raise TaskValidationError(
            f"Task text exceeds maximum length ({MAX_TASK_TEXT_LENGTH} characters)"
        )
    return text


def create_task_base(
    text: str,
    status: TaskStatus = TaskStatus.ACTIVE,
    created_at: Optional[datetime] = None,
    completed_at: Optional[datetime] = None,
    task_id: Optional[str] = None,
) -> Task:
    """Create a task with defaults, allowing overrides.

    Args:
        text: Task description (required)
        status: Initial status (defaults to active)
        created_at: Creation timestamp (defaults to now)
        completed_at: Completion timestamp (only meaningful for completed tasks)
        task_id: Explicit ID (defaults to a fresh UUID v4)

    Returns:
        Task object with defaults applied
    """
    return Task(
        id=task_id or str(uuid.uuid4()),
        text=text,
        status=status,
        created_at=created_at or utc_now(),
        completed_at=completed_at,
    )
