"""Request and response models for the JSON API.

Request bodies use camelCase keys. Numbers and booleans are strict, so
``"7"`` is not accepted where an integer is expected (``7.0`` is).
"""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field, StrictBool, StrictFloat, StrictInt, field_validator, model_validator
from pydantic_core import PydanticCustomError

from simpletodo.models.constants import (
    MAX_CELEBRATION_DURATION_SECONDS,
    MAX_PROMPTING_FREQUENCY_HOURS,
    MAX_WIP_LIMIT,
    MIN_CELEBRATION_DURATION_SECONDS,
    MIN_PROMPTING_FREQUENCY_HOURS,
    MIN_WIP_LIMIT,
)

CLOCK_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

StrictNumber = Union[StrictInt, StrictFloat]


def _check_range(value, minimum, maximum, too_small: str, too_big: str):
    if value is None:
        return value
    if value < minimum:
        raise PydanticCustomError("too_small", too_small)
    if value > maximum:
        raise PydanticCustomError("too_big", too_big)
    return value


def _whole_number(value):
    """Accept integral floats such as 7.0 (JSON does not distinguish them from 7)."""
    if isinstance(value, float):
        if not value.is_integer():
            raise PydanticCustomError("int_type", "Expected integer, received float")
        return int(value)
    return value


def check_wip_limit(value):
    return _check_range(
        _whole_number(value),
        MIN_WIP_LIMIT,
        MAX_WIP_LIMIT,
        f"WIP limit must be at least {MIN_WIP_LIMIT}",
        f"WIP limit must be at most {MAX_WIP_LIMIT}",
    )


def check_frequency(value):
    return _check_range(
        value,
        MIN_PROMPTING_FREQUENCY_HOURS,
        MAX_PROMPTING_FREQUENCY_HOURS,
        f"Prompting frequency must be at least {MIN_PROMPTING_FREQUENCY_HOURS} hour",
        f"Prompting frequency must be at most {MAX_PROMPTING_FREQUENCY_HOURS} hours",
    )


def check_celebration_duration(value):
    return _check_range(
        _whole_number(value),
        MIN_CELEBRATION_DURATION_SECONDS,
        MAX_CELEBRATION_DURATION_SECONDS,
        f"Celebration duration must be at least {MIN_CELEBRATION_DURATION_SECONDS} seconds",
        f"Celebration duration must be at most {MAX_CELEBRATION_DURATION_SECONDS} seconds",
    )


class RequestModel(BaseModel):
    class Config:
        """Pydantic configuration."""
        populate_by_name = True


# Tasks

class TaskTextRequest(RequestModel):
    """Body for creating or renaming a task. Type checks happen in the route."""
    text: Any = None


# Prompts

class PromptActionRequest(RequestModel):
    """Body for snooze/complete/dismiss. ``taskId`` is checked in the route."""
    task_id: Any = Field(None, alias="taskId")
    prompt_id: Optional[str] = Field(None, alias="promptId")


# Config

class UpdateWipLimitRequest(RequestModel):
    limit: StrictNumber

    validate_limit = field_validator("limit")(check_wip_limit)


class UpdateEducationRequest(RequestModel):
    has_seen_wip_limit_education: StrictBool = Field(..., alias="hasSeenWIPLimitEducation")


class UpdateCelebrationsRequest(RequestModel):
    celebrations_enabled: StrictBool = Field(..., alias="celebrationsEnabled")
    celebration_duration_seconds: StrictNumber = Field(..., alias="celebrationDurationSeconds")

    validate_duration = field_validator("celebration_duration_seconds")(check_celebration_duration)


class UpdatePromptingRequest(RequestModel):
    enabled: StrictBool
    frequency_hours: StrictNumber = Field(..., alias="frequencyHours")

    validate_frequency = field_validator("frequency_hours")(check_frequency)


class UpdateBrowserNotificationsRequest(RequestModel):
    enabled: StrictBool


class UpdateQuietHoursRequest(RequestModel):
    enabled: StrictBool
    start_time: str = Field(..., alias="startTime", pattern=CLOCK_TIME_PATTERN)
    end_time: str = Field(..., alias="endTime", pattern=CLOCK_TIME_PATTERN)


class UpdateConfigRequest(RequestModel):
    """Partial config update; at least one known field must be present."""

    wip_limit: Optional[StrictNumber] = Field(None, alias="wipLimit")
    prompting_enabled: Optional[StrictBool] = Field(None, alias="promptingEnabled")
    prompting_frequency_hours: Optional[StrictNumber] = Field(None, alias="promptingFrequencyHours")
    celebrations_enabled: Optional[StrictBool] = Field(None, alias="celebrationsEnabled")
    celebration_duration_seconds: Optional[StrictNumber] = Field(None, alias="celebrationDurationSeconds")
    browser_notifications_enabled: Optional[StrictBool] = Field(None, alias="browserNotificationsEnabled")
    has_completed_setup: Optional[StrictBool] = Field(None, alias="hasCompletedSetup")
    has_seen_prompt_education: Optional[StrictBool] = Field(None, alias="hasSeenPromptEducation")
    has_seen_wip_limit_education: Optional[StrictBool] = Field(None, alias="hasSeenWIPLimitEducation")

    validate_limit = field_validator("wip_limit")(check_wip_limit)
    validate_frequency = field_validator("prompting_frequency_hours")(check_frequency)
    validate_duration = field_validator("celebration_duration_seconds")(check_celebration_duration)

    @model_validator(mode="after")
    def require_one_field(self):
        if not self.changes():
            raise PydanticCustomError("empty_update", "At least one field must be provided for update")
        return self

    def changes(self) -> Dict[str, Any]:
        """Fields supplied in the request (snake_case), ignoring nulls."""
        return self.model_dump(exclude_unset=True, exclude_none=True)
