"""Domain services for simpletodo.

``build_services`` wires one shared instance of each service around a
single data directory. The API uses one container per app so the SSE
endpoint and the scheduler see the same ``PromptingService``.
"""

from dataclasses import dataclass
from typing import Optional

from simpletodo.storage.data_service import DataService
from simpletodo.services.task_service import TaskService
from simpletodo.services.wip_limit_service import WIPLimitService
from simpletodo.services.celebration_service import CelebrationService
from simpletodo.services.prompting_service import PromptingService
from simpletodo.services.analytics_service import AnalyticsService


@dataclass
class ServiceContainer:
    data_service: DataService
    task_service: TaskService
    wip_limit_service: WIPLimitService
    celebration_service: CelebrationService
    prompting_service: PromptingService
    analytics_service: AnalyticsService


def build_services(data_dir: Optional[str] = None, **prompting_options) -> ServiceContainer:
    """Create the service graph for a data directory.

    Extra keyword arguments (clock, rng, timer_factory) go to PromptingService.
    """
    data_service = DataService(data_dir)
    task_service = TaskService(data_service)
    return ServiceContainer(
        data_service=data_service,
        task_service=task_service,
        wip_limit_service=WIPLimitService(task_service, data_service),
        celebration_service=CelebrationService(task_service),
        prompting_service=PromptingService(task_service, data_service, **prompting_options),
        analytics_service=AnalyticsService(task_service, data_service),
    )


__all__ = [
    "ServiceContainer",
    "build_services",
    "DataService",
    "TaskService",
    "WIPLimitService",
    "CelebrationService",
    "PromptingService",
    "AnalyticsService",
]
