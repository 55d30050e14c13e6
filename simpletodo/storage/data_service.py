"""JSON file persistence for simpletodo.

All state lives in a single data directory:
- tasks.json          list of tasks
- config.json         user preferences
- prompt-events.json  prompt analytics records

Writes go to a temp file first and are renamed into place, so a crash
mid-write leaves either the old or the new file, never a partial one.
Concurrent writers follow last-write-wins.
"""

import json
import logging
import os
import threading
from typing import Any, List, Optional

from pydantic import ValidationError

from simpletodo import settings
from simpletodo.errors import StorageError
from simpletodo.models.config import AppConfig, DEFAULT_CONFIG
from simpletodo.models.prompt import PromptEvent
from simpletodo.models.task import Task

logger = logging.getLogger(__name__)

TASKS_FILE = "tasks.json"
CONFIG_FILE = "config.json"
PROMPT_EVENTS_FILE = "prompt-events.json"


class DataService:
    """Reads and writes the JSON data files."""

    def __init__(self, data_dir: Optional[str] = None):
        self.data_dir = data_dir or settings.DATA_DIR
        self.tasks_file_path = os.path.join(self.data_dir, TASKS_FILE)
        self.config_file_path = os.path.join(self.data_dir, CONFIG_FILE)
        self.prompt_events_file_path = os.path.join(self.data_dir, PROMPT_EVENTS_FILE)
        # Request handlers and scheduler timers run on different threads
        self._lock = threading.RLock()

    # -- low-level helpers -------------------------------------------------

    def _ensure_file(self, path: str, default_content: str) -> None:
        """Create the data directory and the file (with default content) if missing."""
        try:
            os.makedirs(self.data_dir, exist_ok=True)
            if not os.path.exists(path):
                with open(path, "w", encoding="utf-8") as f:
                    f.write(default_content)
        except OSError as e:
            logger.error(f"Failed to ensure data file {path} exists: {type(e).__name__}: {str(e)}")
            raise StorageError("Failed to ensure data file exists") from e

    def _read_json(self, path: str, default_content: str, label: str) -> Any:
        with self._lock:
            self._ensure_file(path, default_content)
            try:
                with open(path, "r", encoding="utf-8") as f:
                    content = f.read()
            except UnicodeDecodeError as e:
                logger.error(f"Failed to load {label}: {path} is not valid UTF-8: {str(e)}")
                raise StorageError(f"Failed to load {label}: Corrupted JSON file") from e
            except OSError as e:
                logger.error(f"Failed to load {label}: {type(e).__name__}: {str(e)}")
                raise StorageError(f"Failed to load {label}: File system error") from e

        if not content.strip():
            return json.loads(default_content)

        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to load {label}: corrupted JSON in {path}: {str(e)}")
            raise StorageError(f"Failed to load {label}: Corrupted JSON file") from e

    def _write_json(self, path: str, payload: Any, label: str) -> None:
        temp_path = f"{path}.tmp"
        with self._lock:
            try:
                os.makedirs(self.data_dir, exist_ok=True)
                with open(temp_path, "w", encoding="utf-8") as f:
                    json.dump(payload, f, indent=2, ensure_ascii=False)
                os.replace(temp_path, path)
            except (OSError, TypeError, ValueError) as e:
                try:
                    os.remove(temp_path)
                except OSError:
                    pass
                logger.error(f"Failed to save {label}: {type(e).__name__}: {str(e)}")
                raise StorageError(f"Failed to save {label}") from e

    # -- tasks ---------------------------------------------------------------

    def load_tasks(self) -> List[Task]:
        """Load all tasks.

        Returns:
            List of tasks, empty if the file is missing or empty

        Raises:
            StorageError: If the file is corrupted or cannot be read
        """
        raw = self._read_json(self.tasks_file_path, "[]", "tasks")
        if not isinstance(raw, list):
            logger.error(f"Invalid tasks data in {self.tasks_file_path}: expected array")
            raise StorageError("Failed to load tasks: Corrupted JSON file")
        try:
            return [Task.model_validate(item) for item in raw]
        except ValidationError as e:
            logger.error(f"Invalid task record in {self.tasks_file_path}: {str(e)}")
            raise StorageError("Failed to load tasks: Corrupted JSON file") from e

    def save_tasks(self, tasks: List[Task]) -> None:
        """Persist the full task list atomically."""
        self._write_json(self.tasks_file_path, [task.to_dict() for task in tasks], "tasks")
        logger.debug(f"Saved {len(tasks)} tasks")

    # -- config --------------------------------------------------------------

    def load_config(self) -> AppConfig:
        """Load configuration, creating config.json with defaults on first launch.

        Keys missing from an existing file fall back to their defaults.
        """
        default_content = json.dumps(DEFAULT_CONFIG.to_dict(), indent=2)
        raw = self._read_json(self.config_file_path, default_content, "config")
        if not isinstance(raw, dict):
            logger.error(f"Invalid config data in {self.config_file_path}: expected object")
            raise StorageError("Failed to load config: Corrupted JSON file")
        try:
            return AppConfig.model_validate({**DEFAULT_CONFIG.to_dict(), **raw})
        except ValidationError as e:
            logger.error(f"Invalid config values in {self.config_file_path}: {str(e)}")
            raise StorageError("Failed to load config: Corrupted JSON file") from e

    def save_config(self, config: AppConfig) -> None:
        """Persist configuration atomically."""
        self._write_json(self.config_file_path, config.to_dict(), "config")
        logger.debug("Saved config")

    # -- prompt events -------------------------------------------------------

    def load_prompt_events(self) -> List[PromptEvent]:
        """Load the prompt analytics log."""
        raw = self._read_json(self.prompt_events_file_path, "[]", "prompt events")
        if not isinstance(raw, list):
            logger.error(f"Invalid prompt events in {self.prompt_events_file_path}: expected array")
            raise StorageError("Failed to load prompt events: Corrupted JSON file")
        try:
            return [PromptEvent.model_validate(item) for item in raw]
        except ValidationError as e:
            logger.error(f"Invalid prompt event in {self.prompt_events_file_path}: {str(e)}")
            raise StorageError("Failed to load prompt events: Corrupted JSON file") from e

    def save_prompt_events(self, events: List[PromptEvent]) -> None:
        """Persist the prompt analytics log atomically."""
        self._write_json(
            self.prompt_events_file_path, [event.to_dict() for event in events], "prompt events"
        )

    def append_prompt_event(self, event: PromptEvent) -> None:
        """Append one prompt event (load, append, save under the write lock)."""
        with self._lock:
            events = self.load_prompt_events()
            events.append(event)
            self.save_prompt_events(events)
