"""Task data model for simpletodo."""

from datetime import datetime
from typing import Optional
from enum import Enum
from pydantic import BaseModel, Field, field_serializer, field_validator

from simpletodo.models.task_helpers import ensure_utc, format_timestamp


class TaskStatus(str, Enum):
    """Task status enumeration."""
    ACTIVE = "active"
    COMPLETED = "completed"


class Task(BaseModel):
    """Canonical Task model.

    Field names are snake_case in Python and camelCase on the wire and on disk.
    """

    id: str = Field(..., description="Unique task identifier (UUID v4)")
    text: str = Field(..., description="Task description (1-500 characters)")
    status: TaskStatus = Field(TaskStatus.ACTIVE, description="Task status")
    created_at: datetime = Field(..., alias="createdAt", description="Task creation timestamp")
    completed_at: Optional[datetime] = Field(
        None, alias="completedAt", description="Completion timestamp (null while active)"
    )

    @field_validator("created_at", "completed_at")
    @classmethod
    def _as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value) if value is not None else None

    @field_serializer("created_at", "completed_at")
    def _serialize_timestamp(self, value: Optional[datetime]) -> Optional[str]:
        return format_timestamp(value) if value is not None else None

    def to_dict(self) -> dict:
        """Wire/disk representation (camelCase keys, ISO timestamps)."""
        return self.model_dump(by_alias=True)

    class Config:
        """Pydantic configuration."""
        populate_by_name = True
        use_enum_values = True
