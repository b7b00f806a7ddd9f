from typing import Literal

from loguru import logger
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LOG_LEVELS = frozenset({"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"})


def normalize_log_level(value: str, *, source: str = "log level") -> str:
    """Upper-case a loguru level name, falling back to INFO with a warning."""
    upper_value = str(value or "").strip().upper()
    if upper_value not in LOG_LEVELS:
        logger.warning(
            f"Invalid {source} '{value}'. Valid levels are: {', '.join(sorted(LOG_LEVELS))}. Defaulting to INFO."
        )
        return "INFO"
    return upper_value


class Settings(BaseSettings):
    log_level: str = Field(default="INFO", validation_alias="WEEKPLAN_LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="WEEKPLAN_LOG_FILE")
    log_rotation: str = Field(
        default="10 MB",
        validation_alias="WEEKPLAN_LOG_ROTATION",
        description="loguru rotation condition for the file sink, e.g. \"10 MB\" or \"1 week\"",
    )
    log_retention: str = Field(default="14 days", validation_alias="WEEKPLAN_LOG_RETENTION")

    calendar_day_start_min: int = Field(
        default=6 * 60,
        validation_alias="WEEKPLAN_CALENDAR_DAY_START_MIN",
        description="Start of the fixed full-day calendar window (minutes since midnight)",
    )
    calendar_day_end_min: int = Field(
        default=23 * 60,
        validation_alias="WEEKPLAN_CALENDAR_DAY_END_MIN",
        description="End of the fixed full-day calendar window (minutes since midnight)",
    )
    calendar_slot_min: int = Field(default=30, validation_alias="WEEKPLAN_CALENDAR_SLOT_MIN")
    calendar_time_snap_min: int = Field(default=15, validation_alias="WEEKPLAN_CALENDAR_TIME_SNAP_MIN")
    auto_window_pad_min: int = Field(default=30, validation_alias="WEEKPLAN_AUTO_WINDOW_PAD_MIN")
    auto_window_min_span_min: int = Field(default=180, validation_alias="WEEKPLAN_AUTO_WINDOW_MIN_SPAN_MIN")

    identifier_gated_teams: str = Field(
        default="U18,HOL,1RLH",
        validation_alias="WEEKPLAN_IDENTIFIER_GATED_TEAMS",
        description="Comma-separated squad codes whose games require a participant license number",
    )
    weekday_locale: Literal["de", "en"] = Field(default="de", validation_alias="WEEKPLAN_WEEKDAY_LOCALE")

    resize_min_duration_min: int = Field(default=30, validation_alias="WEEKPLAN_RESIZE_MIN_DURATION_MIN")
    pre_block_max_min: int = Field(default=240, validation_alias="WEEKPLAN_PRE_BLOCK_MAX_MIN")
    pre_block_step_min: int = Field(default=5, validation_alias="WEEKPLAN_PRE_BLOCK_STEP_MIN")
    pre_block_toggle_min: int = Field(default=30, validation_alias="WEEKPLAN_PRE_BLOCK_TOGGLE_MIN")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        return normalize_log_level(value, source="WEEKPLAN_LOG_LEVEL")

    @model_validator(mode="after")
    def validate_calendar_grid(self) -> "Settings":
        if not 0 <= self.calendar_day_start_min < self.calendar_day_end_min <= 24 * 60:
            raise ValueError(
                "calendar day window must satisfy 0 <= start < end <= 1440, "
                f"got {self.calendar_day_start_min}..{self.calendar_day_end_min}"
            )
        if min(self.calendar_slot_min, self.calendar_time_snap_min, self.pre_block_step_min) <= 0:
            raise ValueError("slot, snap and pre-block step granularities must be positive")
        return self

    @property
    def gated_teams(self) -> frozenset[str]:
        """Squad codes requiring an identifier before game assignment, upper-cased."""
        return frozenset(part.strip().upper() for part in self.identifier_gated_teams.split(",") if part.strip())


settings = Settings()
