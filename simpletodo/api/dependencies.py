"""FastAPI dependencies shared by the route modules."""

import re

from fastapi import Depends, HTTPException, Request, status

from simpletodo.services import ServiceContainer
from simpletodo.services.analytics_service import AnalyticsService
from simpletodo.services.celebration_service import CelebrationService
from simpletodo.services.prompting_service import PromptingService
from simpletodo.services.task_service import TaskService
from simpletodo.services.wip_limit_service import WIPLimitService
from simpletodo.storage.data_service import DataService

# UUID versions 1-5, RFC 4122 variant, any case
UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def is_valid_uuid(value) -> bool:
    return isinstance(value, str) and UUID_PATTERN.match(value) is not None


def get_services(request: Request) -> ServiceContainer:
    """The service container attached to the running app."""
    return request.app.state.services


def get_data_service(services: ServiceContainer = Depends(get_services)) -> DataService:
    return services.data_service


def get_task_service(services: ServiceContainer = Depends(get_services)) -> TaskService:
    return services.task_service


def get_wip_limit_service(services: ServiceContainer = Depends(get_services)) -> WIPLimitService:
    return services.wip_limit_service


def get_celebration_service(services: ServiceContainer = Depends(get_services)) -> CelebrationService:
    return services.celebration_service


def get_prompting_service(services: ServiceContainer = Depends(get_services)) -> PromptingService:
    return services.prompting_service


def get_analytics_service(services: ServiceContainer = Depends(get_services)) -> AnalyticsService:
    return services.analytics_service


def valid_task_id(task_id: str) -> str:
    """Path parameter check for task routes.

    Raises:
        HTTPException: 400 if the ID is not a UUID
    """
    if not is_valid_uuid(task_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid task ID format")
    return task_id
