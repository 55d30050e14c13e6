"""Data models for simpletodo."""

from simpletodo.models.task import Task, TaskStatus
from simpletodo.models.config import AppConfig, DEFAULT_CONFIG
from simpletodo.models.prompt import ProactivePrompt, PromptEvent, PromptResponse
from simpletodo.models.celebration import CelebrationMessage, CelebrationVariant

__all__ = [
    "Task",
    "TaskStatus",
    "AppConfig",
    "DEFAULT_CONFIG",
    "ProactivePrompt",
    "PromptEvent",
    "PromptResponse",
    "CelebrationMessage",
    "CelebrationVariant",
]
