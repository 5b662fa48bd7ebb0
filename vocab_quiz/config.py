"""
Configuration management for the vocabulary quiz service
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SRS_INTERVALS = [0, 1, 3, 7, 14, 30, 90, 180]


def validate_srs_intervals(intervals: list[int]) -> list[int]:
    """Interval table must be a non-empty, non-decreasing list of day counts"""
    if not intervals:
        raise ValueError("srs_intervals must contain at least one entry")
    if any(days < 0 for days in intervals):
        raise ValueError("srs_intervals must not contain negative values")
    if any(later < earlier for earlier, later in zip(intervals, intervals[1:])):
        raise ValueError("srs_intervals must be non-decreasing")
    return intervals


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Database Configuration
    database_url: str = Field(default="sqlite:///data/quiz.db")

    # Application Configuration
    log_level: str = Field(default="INFO")
    timezone: str = Field(default="UTC")

    # Grading Configuration
    xp_per_correct: int = Field(default=10, ge=0)
    srs_intervals: list[int] = Field(
        default_factory=lambda: list(DEFAULT_SRS_INTERVALS)
    )

    # Service Configuration
    set_cache_ttl_seconds: int = Field(default=600, ge=0)
    history_limit: int = Field(default=20, ge=1)
    leaderboard_limit: int = Field(default=10, ge=1)
    public_sets_limit: int = Field(default=9, ge=1)
    submission_lock_timeout_minutes: int = Field(default=5, ge=1)

    @field_validator("srs_intervals")
    @classmethod
    def check_srs_intervals(cls, value: list[int]) -> list[int]:
        return validate_srs_intervals(value)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


def get_database_path() -> str:
    """Get the database file path from URL"""
    settings = get_settings()
    if settings.database_url.startswith("sqlite:///"):
        return settings.database_url.replace("sqlite:///", "")
    return "data/quiz.db"
