"""
Configuration management for Talent-Triage.

Uses Pydantic Settings for type-safe configuration with environment variable support.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from talent_triage.utils.constants import (
    DEFAULT_AUTO_REJECT_THRESHOLD,
    DEFAULT_AUTO_SHORTLIST_THRESHOLD,
    DEFAULT_SKILL_VOCABULARY_VERSION,
    MAX_RECOMMENDED_SKILLS,
    NEUTRAL_SKILLS_SCORE,
    SKILL_VOCABULARIES,
)


# Base paths
ROOT_DIR = Path(__file__).parent.parent.parent


class DatabaseSettings(BaseSettings):
    """MongoDB database configuration."""

    model_config = SettingsConfigDict(env_prefix="DB_")

    host: str = "localhost"
    port: int = 27017
    name: str = "talent_triage"
    username: str | None = None
    password: str | None = None


class MatchingSettings(BaseSettings):
    """Resume/job matching configuration."""

    model_config = SettingsConfigDict(env_prefix="MATCHING_")

    skill_vocabulary_version: str = DEFAULT_SKILL_VOCABULARY_VERSION

    # Component weights of the overall score
    skills_weight: float = Field(default=0.50, ge=0, le=1)
    experience_weight: float = Field(default=0.35, ge=0, le=1)
    education_weight: float = Field(default=0.15, ge=0, le=1)

    neutral_skills_score: int = Field(default=NEUTRAL_SKILLS_SCORE, ge=0, le=100)
    max_recommended_skills: int = Field(default=MAX_RECOMMENDED_SKILLS, ge=1)

    @field_validator("skill_vocabulary_version")
    @classmethod
    def validate_vocabulary_version(cls, v: str) -> str:
        """Only vocabularies shipped with the application can be selected."""
        if v not in SKILL_VOCABULARIES:
            known = ", ".join(sorted(SKILL_VOCABULARIES))
            raise ValueError(f"Unknown skill vocabulary version {v!r} (known: {known})")
        return v

    @model_validator(mode="after")
    def validate_weights(self) -> "MatchingSettings":
        """Weights must add up to 1 so the overall score stays within 0-100."""
        total = self.skills_weight + self.experience_weight + self.education_weight
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Scoring weights must sum to 1.0, got {total:.3f}")
        return self

    def weights(self) -> dict[str, float]:
        """Weights keyed the same way as DEFAULT_SCORING_WEIGHTS."""
        return {
            "skills_match": self.skills_weight,
            "experience_match": self.experience_weight,
            "education_match": self.education_weight,
        }


class AutomationSettings(BaseSettings):
    """Defaults applied to jobs that never stored an automation config."""

    model_config = SettingsConfigDict(env_prefix="AUTOMATION_")

    default_reject_threshold: int = Field(default=DEFAULT_AUTO_REJECT_THRESHOLD, ge=0, le=100)
    default_shortlist_threshold: int = Field(default=DEFAULT_AUTO_SHORTLIST_THRESHOLD, ge=0, le=100)


class NotificationSettings(BaseSettings):
    """Candidate notification configuration."""

    model_config = SettingsConfigDict(env_prefix="NOTIFY_")

    enabled: bool = True
    max_workers: int = Field(default=2, ge=1)


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: str = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"
    file_path: Path = ROOT_DIR / "logs" / "talent_triage.log"
    rotation: str = "10 MB"
    retention: str = "30 days"
    console_output: bool = True
    file_output: bool = True


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    name: str = "Talent-Triage"
    version: str = "0.1.0"
    description: str = "Candidate matching and automated triage engine"
    debug: bool = False

    # Environment
    environment: Literal["development", "production", "testing"] = "development"

    # Nested settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    matching: MatchingSettings = Field(default_factory=MatchingSettings)
    automation: AutomationSettings = Field(default_factory=AutomationSettings)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# Global settings instance (singleton pattern)
_settings: AppSettings | None = None


def get_settings() -> AppSettings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings()
    return _settings


def reload_settings() -> AppSettings:
    """Force reload settings from environment."""
    global _settings
    _settings = AppSettings()
    return _settings
