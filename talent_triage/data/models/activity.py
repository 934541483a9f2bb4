"""
Application activity log models for Talent-Triage.

Every status change made by the triage engine, whether requested by a
recruiter or decided by automation, leaves one entry per application.
"""

from typing import Any, Optional

from pydantic import Field

from talent_triage.utils.constants import ApplicationKind, ApplicationStatus

from .base import BaseDocument


SYSTEM_ACTOR = "system:automation"


class ApplicationActivityLog(BaseDocument):
    """A single status change of one application."""

    application_id: str  # raw id in the variant's collection
    application_kind: ApplicationKind
    job_id: str
    action: ApplicationStatus
    performed_by: str = SYSTEM_ACTOR
    details: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_automated(self) -> bool:
        """Check if automation, not a recruiter, made the change."""
        return self.performed_by == SYSTEM_ACTOR

    @property
    def client_application_id(self) -> str:
        """Prefixed application id as shown to clients."""
        return f"{ApplicationKind(self.application_kind).id_prefix}{self.application_id}"

    class Settings:
        """MongoDB collection settings."""

        name = "application_activity_logs"
        indexes = ["application_id", "job_id", "action", "created_at"]


def create_status_change_activity(
    application_id: str,
    application_kind: ApplicationKind,
    job_id: str,
    status: ApplicationStatus,
    performed_by: Optional[str] = None,
    **details: Any,
) -> ApplicationActivityLog:
    """Build the activity entry for a status change."""
    return ApplicationActivityLog(
        application_id=application_id,
        application_kind=application_kind,
        job_id=job_id,
        action=status,
        performed_by=performed_by or SYSTEM_ACTOR,
        details=details,
    )
