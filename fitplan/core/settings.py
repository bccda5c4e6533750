from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    default_session_time: str = Field(default="08:00", validation_alias="FITPLAN_DEFAULT_SESSION_TIME")
    default_session_duration_minutes: int = Field(
        default=60,
        validation_alias="FITPLAN_DEFAULT_SESSION_DURATION_MINUTES",
    )
    # Bounds enforced by the API layer only; the scheduling engine accepts any value.
    min_session_duration_minutes: int = Field(default=5, validation_alias="FITPLAN_MIN_SESSION_DURATION_MINUTES")
    max_session_duration_minutes: int = Field(default=480, validation_alias="FITPLAN_MAX_SESSION_DURATION_MINUTES")
    log_level: str = Field(default="INFO", validation_alias="FITPLAN_LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="FITPLAN_LOG_FILE")
    log_json: bool = Field(default=False, validation_alias="FITPLAN_LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="FITPLAN_",
        extra="ignore",
    )

    @field_validator("default_session_time")
    @classmethod
    def validate_session_time(cls, value: str) -> str:
        parts = value.strip().split(":")
        if len(parts) != 2 or not all(p.isdigit() for p in parts):
            raise ValueError(f"FITPLAN_DEFAULT_SESSION_TIME must be HH:mm, got {value!r}")
        hour, minute = int(parts[0]), int(parts[1])
        if not (0 <= hour <= 23 and 0 <= minute <= 59):
            raise ValueError(f"FITPLAN_DEFAULT_SESSION_TIME out of range: {value!r}")
        return f"{hour:02d}:{minute:02d}"

    @field_validator("default_session_duration_minutes", "min_session_duration_minutes", "max_session_duration_minutes")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError(f"Session duration settings must be positive, got {value}")
        return value


settings = Settings()
