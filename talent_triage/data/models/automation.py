"""
Automation configuration models for Talent-Triage.

A job posting owns at most one automation config. Jobs that never stored
one behave as if every rule were disabled.
"""

from typing import Optional

from pydantic import BaseModel, Field

from talent_triage.utils.constants import (
    DEFAULT_AUTO_REJECT_THRESHOLD,
    DEFAULT_AUTO_SHORTLIST_THRESHOLD,
    AutomationAction,
)

from .base import ApiModel, BaseDocument
from .batch import BatchResult


class AutomationConfig(BaseDocument):
    """Per-job thresholds that trigger status changes without human review."""

    job_id: str
    auto_reject_enabled: bool = False
    auto_reject_threshold: int = Field(default=DEFAULT_AUTO_REJECT_THRESHOLD, ge=0, le=100)
    auto_shortlist_enabled: bool = False
    auto_shortlist_threshold: int = Field(default=DEFAULT_AUTO_SHORTLIST_THRESHOLD, ge=0, le=100)

    @classmethod
    def disabled(
        cls,
        job_id: str,
        reject_threshold: int = DEFAULT_AUTO_REJECT_THRESHOLD,
        shortlist_threshold: int = DEFAULT_AUTO_SHORTLIST_THRESHOLD,
    ) -> "AutomationConfig":
        """Config used for jobs that never stored one."""
        return cls(
            job_id=job_id,
            auto_reject_threshold=reject_threshold,
            auto_shortlist_threshold=shortlist_threshold,
        )

    @property
    def is_active(self) -> bool:
        """Check if any automation rule is switched on."""
        return self.auto_reject_enabled or self.auto_shortlist_enabled

    class Settings:
        """MongoDB collection settings."""

        name = "job_automation_settings"
        indexes: list[str] = []
        unique_indexes = ["job_id"]


class AutomationConfigUpdate(BaseModel):
    """Schema for writing a job's automation config (omitted fields take defaults)."""

    auto_reject_enabled: bool = False
    auto_reject_threshold: Optional[int] = Field(None, ge=0, le=100)
    auto_shortlist_enabled: bool = False
    auto_shortlist_threshold: Optional[int] = Field(None, ge=0, le=100)


class TriageReport(ApiModel):
    """Outcome of running a job's automation over its new applications."""

    job_id: str
    scored: int = 0
    skipped: int = 0
    decisions: dict[str, AutomationAction] = Field(default_factory=dict)
    results: tuple[BatchResult, ...] = ()

    @property
    def changed_count(self) -> int:
        """Applications whose status automation actually changed."""
        return sum(result.updated_count for result in self.results)
