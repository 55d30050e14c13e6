"""Work-in-progress limit enforcement."""

import logging
from numbers import Real

from simpletodo.errors import WIPLimitError
from simpletodo.models.constants import MAX_WIP_LIMIT, MIN_WIP_LIMIT
from simpletodo.services.task_service import TaskService
from simpletodo.storage.data_service import DataService

logger = logging.getLogger(__name__)


class WIPLimitService:
    """Caps the number of active tasks at the configured WIP limit."""

    def __init__(self, task_service: TaskService, data_service: DataService):
        self.task_service = task_service
        self.data_service = data_service

    def get_wip_limit(self) -> int:
        return self.data_service.load_config().wip_limit

    def set_wip_limit(self, limit) -> None:
        """Persist a new WIP limit.

        Raises:
            WIPLimitError: If limit is not a number or is outside 5-10
        """
        if isinstance(limit, bool) or not isinstance(limit, Real) or limit != limit:
            raise WIPLimitError("WIP limit must be a number")
        if limit < MIN_WIP_LIMIT or limit > MAX_WIP_LIMIT:
            raise WIPLimitError(f"WIP limit must be between {MIN_WIP_LIMIT} and {MAX_WIP_LIMIT}")

        config = self.data_service.load_config()
        self.data_service.save_config(config.model_copy(update={"wip_limit": int(limit)}))
        logger.info(f"WIP limit set to {int(limit)}")

    def get_current_wip_count(self) -> int:
        return self.task_service.get_active_task_count()

    def can_add_task(self) -> bool:
        """True while the active count is below the limit."""
        return self.get_current_wip_count() < self.get_wip_limit()

    def get_wip_limit_message(self) -> str:
        count = self.get_current_wip_count()
        return f"You have {count} active tasks - complete one before adding more to maintain focus!"
