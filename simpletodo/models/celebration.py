"""Celebration message model for simpletodo."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class CelebrationVariant(str, Enum):
    """Tone of a celebration message, used by the UI for styling."""
    ENTHUSIASTIC = "enthusiastic"
    SUPPORTIVE = "supportive"
    MOTIVATIONAL = "motivational"
    DATA_DRIVEN = "data-driven"


class CelebrationMessage(BaseModel):
    """Message shown when a task is completed."""

    message: str
    variant: CelebrationVariant
    duration: Optional[int] = Field(None, description="Display duration override in milliseconds")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
