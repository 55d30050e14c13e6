"""Tests for TaskService."""

import pytest

from simpletodo.errors import (
    StorageError,
    TaskNotFoundError,
    TaskServiceError,
    TaskStateError,
    TaskValidationError,
)
from simpletodo.models.task import TaskStatus
from simpletodo.models.task_helpers import is_valid_iso_timestamp


class TestCreateTask:
    """Test task creation and validation."""

    def test_create_task(self, task_service):
        task = task_service.create_task("Buy milk")

        assert task.text == "Buy milk"
        assert task.status == "active"
        assert task.completed_at is None
        assert is_valid_iso_timestamp(task.to_dict()["createdAt"])
        assert task_service.get_task_by_id(task.id).text == "Buy milk"

    def test_text_is_trimmed(self, task_service):
        assert task_service.create_task("  padded  ").text == "padded"

    def test_empty_text_rejected(self, task_service):
        with pytest.raises(TaskValidationError, match="Task text cannot be empty"):
            task_service.create_task("   ")

    def test_text_length_limit(self, task_service):
        """Test 500 characters is accepted and 501 is rejected."""
        assert len(task_service.create_task("x" * 500).text) == 500
        with pytest.raises(TaskValidationError, match=r"exceeds maximum length \(500 characters\)"):
            task_service.create_task("x" * 501)

    def test_tasks_get_unique_ids(self, task_service):
        ids = {task_service.create_task(f"Task {i}").id for i in range(5)}
        assert len(ids) == 5


class TestQueries:
    """Test task listing and lookup."""

    def test_filter_by_status(self, task_service):
        first = task_service.create_task("First")
        task_service.create_task("Second")
        task_service.complete_task(first.id)

        assert [t.text for t in task_service.get_all_tasks("active")] == ["Second"]
        assert [t.text for t in task_service.get_all_tasks("completed")] == ["First"]
        assert len(task_service.get_all_tasks()) == 2

    def test_get_missing_task_returns_none(self, task_service):
        assert task_service.get_task_by_id("00000000-0000-4000-8000-000000000000") is None

    def test_active_task_count(self, task_service):
        a = task_service.create_task("A")
        task_service.create_task("B")
        task_service.complete_task(a.id)
        assert task_service.get_active_task_count() == 1


class TestMutations:
    """Test update, complete and delete."""

    def test_update_task(self, task_service):
        task = task_service.create_task("Old")
        updated = task_service.update_task(task.id, " New ")
        assert updated.text == "New"
        assert task_service.get_task_by_id(task.id).text == "New"

    def test_update_missing_task(self, task_service):
        with pytest.raises(TaskNotFoundError, match="Task not found"):
            task_service.update_task("00000000-0000-4000-8000-000000000000", "text")

    def test_update_completed_task_rejected(self, task_service):
        task = task_service.create_task("Done soon")
        task_service.complete_task(task.id)
        with pytest.raises(TaskStateError, match="Cannot update completed tasks"):
            task_service.update_task(task.id, "changed")

    def test_complete_task(self, task_service):
        task = task_service.create_task("Finish")
        completed = task_service.complete_task(task.id)

        assert completed.status == TaskStatus.COMPLETED.value
        assert completed.completed_at is not None
        assert completed.completed_at >= completed.created_at

    def test_complete_twice_rejected(self, task_service):
        task = task_service.create_task("Once")
        task_service.complete_task(task.id)
        with pytest.raises(TaskStateError, match="Task is already completed"):
            task_service.complete_task(task.id)

    def test_delete_task(self, task_service):
        task = task_service.create_task("Remove me")
        task_service.delete_task(task.id)
        assert task_service.get_task_by_id(task.id) is None

    def test_delete_missing_task(self, task_service):
        with pytest.raises(TaskNotFoundError):
            task_service.delete_task("00000000-0000-4000-8000-000000000000")


class TestStorageFailures:
    """Test storage errors are wrapped in a generic service error."""

    def test_load_failure_wrapped(self, task_service, monkeypatch):
        def broken_load():
            raise StorageError("Failed to load tasks: Corrupted JSON file")

        monkeypatch.setattr(task_service.data_service, "load_tasks", broken_load)
        with pytest.raises(TaskServiceError, match="Failed to retrieve tasks"):
            task_service.get_all_tasks()

    def test_save_failure_wrapped(self, task_service, monkeypatch):
        def broken_save(tasks):
            raise StorageError("Failed to save tasks")

        monkeypatch.setattr(task_service.data_service, "save_tasks", broken_save)
        with pytest.raises(TaskServiceError, match="Failed to create task"):
            task_service.create_task("Will not persist")
