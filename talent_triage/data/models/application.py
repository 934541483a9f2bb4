"""
Application data models for Talent-Triage.

An application is either a CandidateApplication (submitted by a registered
user) or a PublicApplication (anonymous submission tied only to a job).
Both expose the same surface: kind, ref, status, job_id, belongs_to_job().
"""

from datetime import datetime
from typing import ClassVar, Optional

from pydantic import Field

from talent_triage.core.application_ref import ApplicationRef
from talent_triage.utils.constants import ApplicationKind, ApplicationStatus

from .base import ApiModel, BaseDocument, utcnow
from .match import MatchResult


class ApplicationBase(BaseDocument):
    """Fields and behaviour shared by both application variants."""

    kind: ClassVar[ApplicationKind]
    # Name of the job reference in this variant's collection
    job_field: ClassVar[str]

    job_id: str
    status: ApplicationStatus = ApplicationStatus.NEW
    resume_text: Optional[str] = None
    ai_analysis: Optional[MatchResult] = None
    is_read: bool = False

    @property
    def ref(self) -> ApplicationRef:
        """Reference addressing this application."""
        if self.id is None:
            raise ValueError("Application has not been stored yet")
        return ApplicationRef(kind=self.kind, raw_id=self.id)

    @property
    def display_name(self) -> str:
        return "Unknown Applicant"

    @property
    def contact_email(self) -> Optional[str]:
        return None

    @property
    def ai_score(self) -> int:
        """Overall score of the last analysis, 0 if never analysed."""
        return self.ai_analysis.overall_score if self.ai_analysis else 0

    def belongs_to_job(self, job_id: object) -> bool:
        """Check if this application was submitted to the given job."""
        return self.job_id == str(job_id)

    def with_status(self, status: ApplicationStatus) -> "ApplicationBase":
        """Copy of this application moved to another status."""
        return self.model_copy(
            update={"status": ApplicationStatus(status).value, "updated_at": utcnow()}
        )

    def to_summary(self) -> "ApplicationSummary":
        """Variant-independent view used in application listings."""
        return ApplicationSummary(
            id=str(self.ref),
            kind=self.kind,
            job_id=self.job_id,
            status=ApplicationStatus(self.status),
            candidate_name=self.display_name,
            candidate_email=self.contact_email,
            ai_score=self.ai_score,
            is_read=self.is_read,
            created_at=self.created_at,
        )


class CandidateApplication(ApplicationBase):
    """Application submitted by a registered user account."""

    kind: ClassVar[ApplicationKind] = ApplicationKind.CANDIDATE
    job_field: ClassVar[str] = "job_posting_id"

    job_id: str = Field(alias="job_posting_id")
    user_id: str
    candidate_name: Optional[str] = None
    candidate_email: Optional[str] = None
    cover_letter: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.candidate_name or "Unknown Candidate"

    @property
    def contact_email(self) -> Optional[str]:
        return self.candidate_email

    class Settings:
        """MongoDB collection settings."""

        name = "candidate_applications"
        indexes = ["job_posting_id", "user_id", "status", "created_at"]


class PublicApplication(ApplicationBase):
    """Anonymous application tied only to a job posting."""

    kind: ClassVar[ApplicationKind] = ApplicationKind.PUBLIC
    job_field: ClassVar[str] = "job_id"

    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.full_name or "Anonymous Applicant"

    @property
    def contact_email(self) -> Optional[str]:
        return self.email

    class Settings:
        """MongoDB collection settings."""

        name = "public_applications"
        indexes = ["job_id", "status", "created_at"]


class ApplicationSummary(ApiModel):
    """Summary view of an application for list displays."""

    id: str
    kind: ApplicationKind
    job_id: str
    status: ApplicationStatus
    candidate_name: str
    candidate_email: Optional[str] = None
    ai_score: int = 0
    is_read: bool = False
    created_at: datetime


class ApplicationListing(ApiModel):
    """All applications of one job, both variants merged, newest first."""

    job_id: str
    applications: tuple[ApplicationSummary, ...] = ()
    candidate_count: int = 0
    public_count: int = 0
    by_status: dict[str, int] = Field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.applications)
