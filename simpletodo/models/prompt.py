"""Proactive prompt and prompt event models for simpletodo."""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_serializer, field_validator

from simpletodo.models.task_helpers import ensure_utc, format_timestamp


class PromptResponse(str, Enum):
    """How the user reacted to a prompt."""
    COMPLETE = "complete"
    DISMISS = "dismiss"
    SNOOZE = "snooze"
    TIMEOUT = "timeout"  # No reaction within the response window


class ProactivePrompt(BaseModel):
    """Prompt pushed to connected clients over SSE."""

    prompt_id: str = Field(..., alias="promptId")
    task_id: str = Field(..., alias="taskId")
    task_text: str = Field(..., alias="taskText")
    prompted_at: datetime = Field(..., alias="promptedAt")
    is_first_prompt: bool = Field(False, alias="isFirstPrompt")

    @field_serializer("prompted_at")
    def _serialize_timestamp(self, value: datetime) -> str:
        return format_timestamp(value)

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)

    class Config:
        """Pydantic configuration."""
        populate_by_name = True


class PromptEvent(BaseModel):
    """Analytics record of a prompt and its outcome (prompt-events.json)."""

    prompt_id: str = Field(..., alias="promptId")
    task_id: str = Field(..., alias="taskId")
    prompted_at: datetime = Field(..., alias="promptedAt")
    response: PromptResponse = Field(PromptResponse.TIMEOUT)
    responded_at: Optional[datetime] = Field(None, alias="respondedAt")

    @field_validator("prompted_at", "responded_at")
    @classmethod
    def _as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value) if value is not None else None

    @field_serializer("prompted_at", "responded_at")
    def _serialize_timestamp(self, value: Optional[datetime]) -> Optional[str]:
        return format_timestamp(value) if value is not None else None

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)

    class Config:
        """Pydantic configuration."""
        populate_by_name = True
        use_enum_values = True
