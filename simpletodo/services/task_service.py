"""Task CRUD operations backed by the JSON data files."""

import logging
from typing import List, Optional

from simpletodo.errors import (
    StorageError,
    TaskNotFoundError,
    TaskServiceError,
    TaskStateError,
)
from simpletodo.models.task import Task, TaskStatus
from simpletodo.models.task_factory import create_task_base, validate_task_text
from simpletodo.models.task_helpers import utc_now
from simpletodo.storage.data_service import DataService

logger = logging.getLogger(__name__)


class TaskService:
    """Business logic for tasks.

    Every call reloads tasks.json so concurrent writers (scheduler threads,
    other requests) are seen; saves are last-write-wins.
    """

    def __init__(self, data_service: DataService):
        self.data_service = data_service

    def _load(self, operation: str) -> List[Task]:
        try:
            return self.data_service.load_tasks()
        except StorageError as e:
            logger.error(f"Failed to {operation}: {str(e)}")
            raise TaskServiceError(f"Failed to {operation}") from e

    def _save(self, tasks: List[Task], operation: str) -> None:
        try:
            self.data_service.save_tasks(tasks)
        except StorageError as e:
            logger.error(f"Failed to {operation}: {str(e)}")
            raise TaskServiceError(f"Failed to {operation}") from e

    @staticmethod
    def _find_index(tasks: List[Task], task_id: str) -> int:
        for index, task in enumerate(tasks):
            if task.id == task_id:
                return index
        raise TaskNotFoundError()

    def create_task(self, text: str) -> Task:
        """Create a new active task.

        Raises:
            TaskValidationError: If the trimmed text is empty or longer than 500 characters
            TaskServiceError: If the task could not be persisted
        """
        trimmed = validate_task_text((text or "").strip())
        tasks = self._load("create task")
        task = create_task_base(trimmed)
        tasks.append(task)
        self._save(tasks, "create task")
        logger.debug(f"Created task {task.id}: {task.text[:50]}")
        return task

    def get_all_tasks(self, status: Optional[str] = None) -> List[Task]:
        """Get all tasks, optionally filtered by status."""
        tasks = self._load("retrieve tasks")
        if status is None:
            return tasks
        status_value = TaskStatus(status).value
        return [task for task in tasks if task.status == status_value]

    def get_task_by_id(self, task_id: str) -> Optional[Task]:
        """Get a task by ID, or None if it does not exist."""
        tasks = self._load("retrieve task")
        return next((task for task in tasks if task.id == task_id), None)

    def update_task(self, task_id: str, text: str) -> Task:
        """Replace the text of an active task.

        Raises:
            TaskValidationError: If the trimmed text is invalid
            TaskNotFoundError: If no task has this ID
            TaskStateError: If the task is already completed
        """
        trimmed = validate_task_text((text or "").strip())
        tasks = self._load("update task")
        index = self._find_index(tasks, task_id)

        if tasks[index].status == TaskStatus.COMPLETED.value:
            raise TaskStateError("Cannot update completed tasks")

        updated = tasks[index].model_copy(update={"text": trimmed})
        tasks[index] = updated
        self._save(tasks, "update task")
        logger.debug(f"Updated task {task_id}")
        return updated

    def delete_task(self, task_id: str) -> None:
        """Delete a task.

        Raises:
            TaskNotFoundError: If no task has this ID
        """
        tasks = self._load("delete task")
        index = self._find_index(tasks, task_id)
        del tasks[index]
        self._save(tasks, "delete task")
        logger.debug(f"Deleted task {task_id}")

    def complete_task(self, task_id: str) -> Task:
        """Mark a task as completed and stamp completedAt.

        Raises:
            TaskNotFoundError: If no task has this ID
            TaskStateError: If the task is already completed
        """
        tasks = self._load("complete task")
        index = self._find_index(tasks, task_id)

        if tasks[index].status == TaskStatus.COMPLETED.value:
            raise TaskStateError("Task is already completed")

        completed = tasks[index].model_copy(
            update={"status": TaskStatus.COMPLETED.value, "completed_at": utc_now()}
        )
        tasks[index] = completed
        self._save(tasks, "complete task")
        logger.debug(f"Completed task {task_id}")
        return completed

    def get_active_task_count(self) -> int:
        """Number of tasks with status active."""
        tasks = self._load("count active tasks")
        return sum(1 for task in tasks if task.status == TaskStatus.ACTIVE.value)
