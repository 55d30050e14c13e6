"""Application configuration model for simpletodo."""

from pydantic import BaseModel, Field


class AppConfig(BaseModel):
    """User preferences persisted in config.json.

    Defaults apply on first launch and fill any keys missing from an older file.
    """

    wip_limit: int = Field(7, alias="wipLimit", description="WIP limit (5-10)")
    prompting_enabled: bool = Field(True, alias="promptingEnabled")
    prompting_frequency_hours: float = Field(
        2.5, alias="promptingFrequencyHours", description="Prompting frequency in hours (1-6)"
    )
    celebrations_enabled: bool = Field(True, alias="celebrationsEnabled")
    celebration_duration_seconds: int = Field(
        7, alias="celebrationDurationSeconds", description="Celebration display duration (3-10)"
    )
    browser_notifications_enabled: bool = Field(False, alias="browserNotificationsEnabled")
    has_completed_setup: bool = Field(False, alias="hasCompletedSetup")
    has_seen_prompt_education: bool = Field(False, alias="hasSeenPromptEducation")
    has_seen_wip_limit_education: bool = Field(False, alias="hasSeenWIPLimitEducation")
    quiet_hours_enabled: bool = Field(False, alias="quietHoursEnabled")
    quiet_hours_start: str = Field("22:00", alias="quietHoursStart", description="HH:MM, 24h")
    quiet_hours_end: str = Field("08:00", alias="quietHoursEnd", description="HH:MM, 24h")

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)

    class Config:
        """Pydantic configuration."""
        populate_by_name = True


DEFAULT_CONFIG = AppConfig()
