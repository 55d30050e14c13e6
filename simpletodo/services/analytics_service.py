"""On-demand statistics over stored tasks and prompt events."""

import logging
from typing import Dict, Optional

from simpletodo.models.prompt import PromptResponse
from simpletodo.models.task import Task, TaskStatus
from simpletodo.models.task_helpers import ONE_MILLISECOND, get_duration
from simpletodo.services.task_service import TaskService
from simpletodo.storage.data_service import DataService

logger = logging.getLogger(__name__)


class AnalyticsService:
    """Derived task and prompt statistics. Nothing is cached."""

    def __init__(self, task_service: TaskService, data_service: Optional[DataService] = None):
        self.task_service = task_service
        self.data_service = data_service or task_service.data_service

    # Task metrics

    def get_completion_rate(self) -> float:
        """Percentage (0-100) of all tasks that are completed."""
        tasks = self.task_service.get_all_tasks()
        if not tasks:
            return 0
        completed = sum(1 for t in tasks if t.status == TaskStatus.COMPLETED.value)
        return completed / len(tasks) * 100

    def get_average_task_lifetime(self) -> Optional[float]:
        """Mean milliseconds from creation to completion, None without completed tasks."""
        tasks = self.task_service.get_all_tasks()
        durations = [
            get_duration(t.created_at, t.completed_at)
            for t in tasks
            if t.status == TaskStatus.COMPLETED.value
        ]
        durations = [d for d in durations if d is not None]
        if not durations:
            return None
        return sum(durations) / len(durations)

    def get_task_count_by_status(self) -> Dict[str, int]:
        tasks = self.task_service.get_all_tasks()
        return {
            "active": sum(1 for t in tasks if t.status == TaskStatus.ACTIVE.value),
            "completed": sum(1 for t in tasks if t.status == TaskStatus.COMPLETED.value),
        }

    def get_oldest_active_task(self) -> Optional[Task]:
        active = self.task_service.get_all_tasks(TaskStatus.ACTIVE.value)
        if not active:
            return None
        return min(active, key=lambda t: t.created_at)

    # Prompt metrics

    def get_prompt_response_rate(self) -> float:
        """Percentage (0-100) of prompts that got any response other than timeout."""
        events = self.data_service.load_prompt_events()
        if not events:
            return 0
        responded = sum(1 for e in events if e.response != PromptResponse.TIMEOUT.value)
        return responded / len(events) * 100

    def get_prompt_response_breakdown(self) -> Dict[str, int]:
        breakdown = {response.value: 0 for response in PromptResponse}
        for event in self.data_service.load_prompt_events():
            breakdown[event.response] += 1
        return breakdown

    def get_average_response_time(self) -> float:
        """Mean milliseconds between prompt and response, 0 without responses."""
        response_times = [
            (e.responded_at - e.prompted_at) / ONE_MILLISECOND
            for e in self.data_service.load_prompt_events()
            if e.response != PromptResponse.TIMEOUT.value and e.responded_at is not None
        ]
        if not response_times:
            return 0
        return sum(response_times) / len(response_times)
