"""Proactive prompting scheduler.

Periodically picks an active task and pushes a ``ProactivePrompt`` to
subscribers (the SSE endpoint). Timers are ``threading.Timer`` instances;
all mutable state is guarded by one re-entrant lock because timer
callbacks and request handlers run on different threads.
"""

import logging
import random
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from simpletodo.errors import PromptingError, StorageError, TaskNotFoundError
from simpletodo.models.config import AppConfig
from simpletodo.models.constants import (
    FIRST_PROMPT_DELAY_SECONDS,
    PROMPT_COOLDOWN_CLEANUP_SECONDS,
    PROMPT_MIN_INTERVAL_RATIO,
    PROMPT_RANDOM_OFFSET_MINUTES,
    PROMPT_RESPONSE_TIMEOUT_SECONDS,
    PROMPT_SNOOZE_SECONDS,
    PROMPT_TASK_COOLDOWN_SECONDS,
    USER_ACTIVITY_WINDOW_SECONDS,
)
from simpletodo.models.prompt import ProactivePrompt, PromptEvent, PromptResponse
from simpletodo.models.task import Task, TaskStatus
from simpletodo.models.task_helpers import utc_now
from simpletodo.services.task_service import TaskService
from simpletodo.storage.data_service import DataService

logger = logging.getLogger(__name__)

FIRST_PROMPT_COMPLETE_MESSAGE = "Great! You engaged with your first proactive prompt."
FIRST_PROMPT_DISMISS_MESSAGE = "Not ready? You can snooze or disable prompts in Settings."

PromptListener = Callable[[ProactivePrompt], None]


@dataclass
class PendingPrompt:
    """A prompt awaiting a user response (or its 30 s timeout)."""
    event: PromptEvent
    timer: object
    is_first_prompt: bool = False


def parse_clock_time(value: str) -> int:
    """Convert ``HH:MM`` into minutes after midnight."""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


class PromptingService:
    """Schedules proactive prompts and tracks the user's responses."""

    def __init__(
        self,
        task_service: TaskService,
        data_service: DataService,
        clock: Callable[[], datetime] = utc_now,
        rng: Optional[random.Random] = None,
        timer_factory=threading.Timer,
    ):
        self.task_service = task_service
        self.data_service = data_service
        self._clock = clock
        self._rng = rng or random.Random()
        self._timer_factory = timer_factory
        self._lock = threading.RLock()

        self._scheduler_timer = None
        self._cleanup_timer = None
        self._interval_seconds: Optional[float] = None
        self.last_prompt_time: Optional[datetime] = None
        self.app_start_time: datetime = self._clock()
        self.last_user_activity_time: Optional[datetime] = None
        self._snoozed: Dict[str, object] = {}
        self._recently_prompted: Dict[str, datetime] = {}
        self._pending: Dict[str, PendingPrompt] = {}
        self._listeners: List[PromptListener] = []

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------

    def _start_timer(self, delay_seconds: float, function, *args):
        timer = self._timer_factory(delay_seconds, function, args=args)
        timer.daemon = True
        timer.start()
        return timer

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._scheduler_timer is not None

    def start_scheduler(self) -> None:
        """Start interval-based prompting if enabled in config.

        The interval is the configured frequency shifted by a uniform random
        offset of up to 15 minutes either way, fixed until the next restart.
        """
        config = self._load_config()
        if not config.prompting_enabled:
            logger.info("Prompting is disabled, scheduler will not start")
            return

        offset_minutes = self._rng.uniform(-PROMPT_RANDOM_OFFSET_MINUTES, PROMPT_RANDOM_OFFSET_MINUTES)
        interval_seconds = config.prompting_frequency_hours * 3600 + offset_minutes * 60

        with self._lock:
            self._cancel_repeating_timers()
            self._interval_seconds = interval_seconds
            self._scheduler_timer = self._start_timer(interval_seconds, self._on_scheduler_timer)
            self._cleanup_timer = self._start_timer(
                PROMPT_COOLDOWN_CLEANUP_SECONDS, self._on_cleanup_timer
            )

        logger.info(
            f"Prompting scheduler started (frequency={config.prompting_frequency_hours}h, "
            f"interval={interval_seconds:.0f}s)"
        )

    def stop_scheduler(self) -> None:
        """Cancel every timer: scheduler, cleanup, snoozes and pending timeouts."""
        with self._lock:
            self._cancel_repeating_timers()

            for timer in self._snoozed.values():
                timer.cancel()
            self._snoozed.clear()

            for pending in self._pending.values():
                pending.timer.cancel()
            self._pending.clear()

        logger.info("Prompting scheduler stopped")

    def _cancel_repeating_timers(self) -> None:
        if self._scheduler_timer is not None:
            self._scheduler_timer.cancel()
            self._scheduler_timer = None
        if self._cleanup_timer is not None:
            self._cleanup_timer.cancel()
            self._cleanup_timer = None
        self._interval_seconds = None

    def _on_scheduler_timer(self) -> None:
        with self._lock:
            if self._scheduler_timer is None:
                return
            # Re-arm first so a failing tick does not stop the scheduler
            self._scheduler_timer = self._start_timer(self._interval_seconds, self._on_scheduler_timer)
        try:
            self.on_scheduled_prompt()
        except Exception as e:
            logger.error(f"Scheduled prompt failed: {type(e).__name__}: {str(e)}")

    def _on_cleanup_timer(self) -> None:
        with self._lock:
            if self._cleanup_timer is None:
                return
            self._cleanup_timer = self._start_timer(
                PROMPT_COOLDOWN_CLEANUP_SECONDS, self._on_cleanup_timer
            )
        self.cleanup_recently_prompted_tasks()

    # ------------------------------------------------------------------
    # Scheduling decisions
    # ------------------------------------------------------------------

    def on_scheduled_prompt(self) -> Optional[ProactivePrompt]:
        """Run one scheduler tick.

        Returns:
            The emitted prompt, or None when the tick was skipped
        """
        config = self._load_config()

        if self.is_within_quiet_hours(config):
            logger.info("Skipping prompt - within quiet hours")
            return None

        if self.is_user_actively_working():
            logger.info("Skipping prompt - user is actively working")
            return None

        is_first_prompt = not config.has_seen_prompt_education
        if is_first_prompt and not self.has_minimum_delay_passed():
            logger.info("Skipping first prompt - minimum delay since app start not reached")
            return None

        with self._lock:
            last_prompt_time = self.last_prompt_time
        if last_prompt_time is not None:
            elapsed = self._clock() - last_prompt_time
            min_interval = timedelta(
                hours=config.prompting_frequency_hours * PROMPT_MIN_INTERVAL_RATIO
            )
            if elapsed < min_interval:
                logger.info(
                    f"Skipping prompt - minimum interval not reached "
                    f"(elapsed={elapsed.total_seconds():.0f}s, min={min_interval.total_seconds():.0f}s)"
                )
                return None

        if self.task_service.get_active_task_count() == 0:
            logger.info("No active tasks, skipping scheduled prompt")
            return None

        prompt = self.generate_prompt(is_first_prompt=is_first_prompt)
        if prompt is None:
            logger.warning("Failed to generate scheduled prompt")
            return None

        logger.info(f"Scheduled prompt triggered for task {prompt.task_id}")
        self._emit(prompt)
        return prompt

    def select_task_for_prompt(self) -> Optional[Task]:
        """Pick a random active task that was not prompted in the last 24 hours."""
        active_tasks = self.task_service.get_all_tasks(TaskStatus.ACTIVE.value)
        if not active_tasks:
            logger.info("No active tasks available for prompting")
            return None

        now = self._clock()
        cooldown = timedelta(seconds=PROMPT_TASK_COOLDOWN_SECONDS)
        with self._lock:
            eligible = [
                task for task in active_tasks
                if task.id not in self._recently_prompted
                or now - self._recently_prompted[task.id] > cooldown
            ]

        if not eligible:
            logger.info("No eligible tasks for prompting (all recently prompted)")
            return None

        selected = self._rng.choice(eligible)
        logger.info(f"Task selected for prompt: {selected.id}")
        return selected

    def generate_prompt(self, is_first_prompt: bool = False) -> Optional[ProactivePrompt]:
        """Create a prompt for a selected task and start tracking its response.

        Returns:
            The prompt, or None when no task is eligible
        """
        task = self.select_task_for_prompt()
        if task is None:
            return None
        prompt = self._track_prompt(task, is_first_prompt)
        logger.info(f"Prompt generated: {prompt.prompt_id} for task {task.id}")
        return prompt

    def _track_prompt(self, task: Task, is_first_prompt: bool) -> ProactivePrompt:
        prompted_at = self._clock()
        prompt = ProactivePrompt(
            prompt_id=str(uuid.uuid4()),
            task_id=task.id,
            task_text=task.text,
            prompted_at=prompted_at,
            is_first_prompt=is_first_prompt,
        )
        event = PromptEvent(
            prompt_id=prompt.prompt_id,
            task_id=task.id,
            prompted_at=prompted_at,
            response=PromptResponse.TIMEOUT,
            responded_at=None,
        )
        with self._lock:
            timer = self._start_timer(
                PROMPT_RESPONSE_TIMEOUT_SECONDS, self.record_prompt_timeout, prompt.prompt_id
            )
            self._pending[prompt.prompt_id] = PendingPrompt(
                event=event, timer=timer, is_first_prompt=is_first_prompt
            )
            self.last_prompt_time = prompted_at
            self._recently_prompted[task.id] = prompted_at
        return prompt

    def cleanup_recently_prompted_tasks(self) -> int:
        """Forget cooldown entries older than 24 hours. Returns how many were removed."""
        now = self._clock()
        cooldown = timedelta(seconds=PROMPT_TASK_COOLDOWN_SECONDS)
        with self._lock:
            expired = [
                task_id for task_id, prompted_at in self._recently_prompted.items()
                if now - prompted_at > cooldown
            ]
            for task_id in expired:
                del self._recently_prompted[task_id]
        if expired:
            logger.info(f"Cleaned up {len(expired)} recently prompted tasks")
        return len(expired)

    # ------------------------------------------------------------------
    # Snooze
    # ------------------------------------------------------------------

    def snooze_prompt(self, task_id: str) -> None:
        """Re-prompt the task in one hour, replacing any existing snooze.

        Raises:
            TaskNotFoundError: If the task does not exist
        """
        if self.task_service.get_task_by_id(task_id) is None:
            raise TaskNotFoundError()

        with self._lock:
            existing = self._snoozed.pop(task_id, None)
            if existing is not None:
                existing.cancel()
                logger.info(f"Cancelled existing snooze for task {task_id}")
            self._snoozed[task_id] = self._start_timer(
                PROMPT_SNOOZE_SECONDS, self.on_snoozed_prompt, task_id
            )
        logger.info(f"Prompt snoozed for 1 hour: task {task_id}")

    def on_snoozed_prompt(self, task_id: str) -> Optional[ProactivePrompt]:
        """Fire a snoozed prompt if the task still exists and is active."""
        with self._lock:
            self._snoozed.pop(task_id, None)

        try:
            task = self.task_service.get_task_by_id(task_id)
        except Exception as e:
            logger.error(f"Snoozed prompt failed for task {task_id}: {type(e).__name__}: {str(e)}")
            return None

        if task is None:
            logger.info(f"Snoozed task {task_id} no longer exists, skipping prompt")
            return None
        if task.status != TaskStatus.ACTIVE.value:
            logger.info(f"Snoozed task {task_id} is no longer active, skipping prompt")
            return None

        prompt = self._track_prompt(task, is_first_prompt=False)
        logger.info(f"Snoozed prompt triggered for task {task_id}")
        self._emit(prompt)
        return prompt

    def cancel_snooze(self, task_id: str) -> None:
        """Drop a pending snooze, used when a task is completed or deleted."""
        with self._lock:
            timer = self._snoozed.pop(task_id, None)
        if timer is not None:
            timer.cancel()
            logger.info(f"Snoozed prompt cancelled for task {task_id}")

    def is_snoozed(self, task_id: str) -> bool:
        with self._lock:
            return task_id in self._snoozed

    # ------------------------------------------------------------------
    # Responses
    # ------------------------------------------------------------------

    def record_prompt_response(self, prompt_id: str, response: str) -> Optional[PendingPrompt]:
        """Persist the user's response to a pending prompt.

        An unknown prompt ID (e.g. a response arriving after the timeout)
        is logged and ignored.

        Raises:
            PromptingError: If the event could not be persisted
        """
        with self._lock:
            pending = self._pending.pop(prompt_id, None)
        if pending is None:
            logger.warning(f"Prompt {prompt_id} not found in pending prompts (response={response})")
            return None

        pending.timer.cancel()
        pending.event = pending.event.model_copy(
            update={"response": PromptResponse(response).value, "responded_at": self._clock()}
        )
        try:
            self.data_service.append_prompt_event(pending.event)
        except StorageError as e:
            logger.error(f"Failed to record prompt response for {prompt_id}: {str(e)}")
            raise PromptingError("Failed to record prompt response") from e

        logger.info(f"Prompt response recorded: {prompt_id} -> {response}")
        return pending

    def record_prompt_timeout(self, prompt_id: str) -> None:
        """Persist a prompt that got no response within 30 seconds."""
        with self._lock:
            pending = self._pending.pop(prompt_id, None)
        if pending is None:
            return
        try:
            self.data_service.append_prompt_event(pending.event)
        except StorageError as e:
            logger.error(f"Failed to record prompt timeout for {prompt_id}: {str(e)}")
            return
        logger.info(f"Prompt timeout recorded: {prompt_id} (task {pending.event.task_id})")

    def log_prompt_response(
        self, task_id: str, response: str, prompt_id: Optional[str] = None
    ) -> Optional[PendingPrompt]:
        """Record a response by task ID.

        Resolves ``prompt_id`` when it is pending for this task, otherwise the
        first pending prompt for the task. With no pending prompt an orphan event with a
        fresh prompt ID is appended.

        Returns:
            The resolved pending prompt, or None for an orphan event

        Raises:
            PromptingError: If the event could not be persisted
        """
        with self._lock:
            pending = self._pending.get(prompt_id) if prompt_id is not None else None
            if pending is None or pending.event.task_id != task_id:
                prompt_id = next(
                    (pid for pid, candidate in self._pending.items() if candidate.event.task_id == task_id),
                    None,
                )

        if prompt_id is not None:
            return self.record_prompt_response(prompt_id, response)

        now = self._clock()
        orphan = PromptEvent(
            prompt_id=str(uuid.uuid4()),
            task_id=task_id,
            prompted_at=now,
            response=PromptResponse(response),
            responded_at=now,
        )
        try:
            self.data_service.append_prompt_event(orphan)
        except StorageError as e:
            logger.error(f"Failed to log prompt response for task {task_id}: {str(e)}")
            raise PromptingError("Failed to log prompt response") from e
        logger.warning(f"Created orphan prompt event for task {task_id} (response={response})")
        return None

    def get_pending_prompt_ids(self) -> List[str]:
        with self._lock:
            return list(self._pending)

    @staticmethod
    def get_follow_up_message(is_first_prompt: bool, response: str) -> Optional[str]:
        """Message shown after the user answers their first prompt."""
        if not is_first_prompt:
            return None
        if response == PromptResponse.COMPLETE.value:
            return FIRST_PROMPT_COMPLETE_MESSAGE
        if response == PromptResponse.DISMISS.value:
            return FIRST_PROMPT_DISMISS_MESSAGE
        return None

    # ------------------------------------------------------------------
    # User activity and quiet hours
    # ------------------------------------------------------------------

    def record_user_activity(self) -> None:
        with self._lock:
            self.last_user_activity_time = self._clock()

    def is_user_actively_working(self) -> bool:
        """True if the user touched a task in the last 5 minutes."""
        with self._lock:
            last_activity = self.last_user_activity_time
        if last_activity is None:
            return False
        return self._clock() - last_activity < timedelta(seconds=USER_ACTIVITY_WINDOW_SECONDS)

    def is_within_quiet_hours(self, config: Optional[AppConfig] = None) -> bool:
        """Check the current local time against the quiet hours window.

        A window whose start is after its end spans midnight (22:00-08:00).
        Equal start and end times mean quiet all day.
        """
        config = config or self._load_config()
        if not config.quiet_hours_enabled:
            return False

        local_now = self._clock().astimezone()
        now_minutes = local_now.hour * 60 + local_now.minute
        start = parse_clock_time(config.quiet_hours_start)
        end = parse_clock_time(config.quiet_hours_end)

        if start == end:
            return True
        if start < end:
            return start <= now_minutes < end
        return now_minutes >= start or now_minutes < end

    def has_minimum_delay_passed(self) -> bool:
        """True once 15 minutes have passed since the app started."""
        return self._clock() - self.app_start_time >= timedelta(seconds=FIRST_PROMPT_DELAY_SECONDS)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def _load_config(self) -> AppConfig:
        try:
            return self.data_service.load_config()
        except StorageError as e:
            logger.error(f"Failed to load prompting configuration: {str(e)}")
            raise PromptingError("Failed to load prompting configuration") from e

    def update_prompting_config(self, enabled: bool, frequency_hours: float) -> None:
        """Persist prompting settings and restart the scheduler.

        Raises:
            PromptingError: If the configuration could not be saved
        """
        try:
            self.stop_scheduler()
            config = self.data_service.load_config()
            self.data_service.save_config(
                config.model_copy(
                    update={"prompting_enabled": enabled, "prompting_frequency_hours": frequency_hours}
                )
            )
            logger.info(f"Prompting configuration updated (enabled={enabled}, frequency={frequency_hours}h)")
            if enabled:
                self.start_scheduler()
        except (StorageError, PromptingError) as e:
            logger.error(f"Failed to update prompting configuration: {str(e)}")
            raise PromptingError("Failed to update prompting configuration") from e

    def trigger_immediate_prompt(self) -> Optional[ProactivePrompt]:
        """Generate and emit a prompt now, outside the regular schedule."""
        prompt = self.generate_prompt()
        if prompt is None:
            logger.info("No active tasks available for immediate prompt")
            return None
        self._emit(prompt)
        logger.info(f"Immediate prompt triggered for task {prompt.task_id}")
        return prompt

    def get_next_prompt_time(self) -> Optional[datetime]:
        """Estimated next prompt (last prompt + frequency), or None if disabled or never prompted."""
        config = self._load_config()
        if not config.prompting_enabled:
            return None
        with self._lock:
            last_prompt_time = self.last_prompt_time
        if last_prompt_time is None:
            return None
        return last_prompt_time + timedelta(hours=config.prompting_frequency_hours)

    # ------------------------------------------------------------------
    # Subscribers
    # ------------------------------------------------------------------

    def subscribe(self, listener: PromptListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def unsubscribe(self, listener: PromptListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def _emit(self, prompt: ProactivePrompt) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(prompt)
            except Exception as e:
                logger.error(f"Prompt listener failed: {type(e).__name__}: {str(e)}")
