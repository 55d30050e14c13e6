"""Completion celebration messages with rotation."""

import logging
import random
from collections import deque
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from simpletodo.models.celebration import CelebrationMessage, CelebrationVariant
from simpletodo.models.constants import RECENT_CELEBRATIONS_TRACKED
from simpletodo.models.task import TaskStatus
from simpletodo.models.task_helpers import utc_now

logger = logging.getLogger(__name__)

DATA_DRIVEN_TEMPLATE = "Task completed! That's [N] this week!"
DATA_DRIVEN_FALLBACK = "Task completed! Great progress!"

MESSAGE_POOL: List[CelebrationMessage] = [
    CelebrationMessage(message="Amazing! You crushed it! 🎉", variant=CelebrationVariant.ENTHUSIASTIC),
    CelebrationMessage(message="Boom! Another one bites the dust! ✨", variant=CelebrationVariant.ENTHUSIASTIC),
    CelebrationMessage(message="Crushed it! Keep going! 🚀", variant=CelebrationVariant.ENTHUSIASTIC),
    CelebrationMessage(message="One more done! You're making progress.", variant=CelebrationVariant.SUPPORTIVE),
    CelebrationMessage(message="Great work! That's progress!", variant=CelebrationVariant.SUPPORTIVE),
    CelebrationMessage(message="Task complete! Nice job staying focused.", variant=CelebrationVariant.SUPPORTIVE),
    CelebrationMessage(message="Progress made! You're doing great.", variant=CelebrationVariant.SUPPORTIVE),
    CelebrationMessage(message="Task completed! Keep the momentum going!", variant=CelebrationVariant.MOTIVATIONAL),
    CelebrationMessage(message="Well done! You're on a roll!", variant=CelebrationVariant.MOTIVATIONAL),
    CelebrationMessage(message="Excellent! You're building momentum!", variant=CelebrationVariant.MOTIVATIONAL),
    CelebrationMessage(message=DATA_DRIVEN_TEMPLATE, variant=CelebrationVariant.DATA_DRIVEN),
]


def start_of_week(now: datetime) -> datetime:
    """Sunday 00:00 of the week containing ``now``, in local time."""
    local_now = now.astimezone()
    days_since_sunday = (local_now.weekday() + 1) % 7
    start = local_now - timedelta(days=days_since_sunday)
    return start.replace(hour=0, minute=0, second=0, microsecond=0)


class CelebrationService:
    """Picks celebration messages, avoiding the most recently shown ones."""

    def __init__(
        self,
        task_service=None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.task_service = task_service
        self.message_pool = list(MESSAGE_POOL)
        self._rng = rng or random.Random()
        self._clock = clock
        self._recent_messages = deque(maxlen=RECENT_CELEBRATIONS_TRACKED)

    def get_celebration_message(self, task_id: Optional[str] = None) -> CelebrationMessage:
        """Return a random celebration message.

        The pool is filtered against the last five messages shown; if that
        leaves nothing, the full pool is used.
        """
        available = [m for m in self.message_pool if m.message not in self._recent_messages]
        candidates = available or self.message_pool
        selected = self._rng.choice(candidates)

        result = selected.model_copy()
        if selected.variant == CelebrationVariant.DATA_DRIVEN.value:
            result = self._data_driven_message(selected)

        self._recent_messages.append(selected.message)
        return result

    def _data_driven_message(self, template: CelebrationMessage) -> CelebrationMessage:
        if self.task_service is None:
            return template.model_copy(update={"message": DATA_DRIVEN_FALLBACK})
        try:
            count = self.get_completed_tasks_this_week()
        except Exception as e:
            logger.warning(f"Falling back to generic celebration: {type(e).__name__}: {str(e)}")
            return template.model_copy(update={"message": DATA_DRIVEN_FALLBACK})
        return template.model_copy(update={"message": template.message.replace("[N]", str(count))})

    def get_completed_tasks_this_week(self) -> int:
        """Count tasks completed since Sunday 00:00 local time."""
        if self.task_service is None:
            return 0
        week_start = start_of_week(self._clock())
        return sum(
            1
            for task in self.task_service.get_all_tasks()
            if task.status == TaskStatus.COMPLETED.value
            and task.completed_at is not None
            and task.completed_at >= week_start
        )
