"""
Job posting and recruiter models for Talent-Triage.

Only the fields the triage engine needs are modelled: ownership (which
recruiter posted the job) and the description text used for scoring.
"""

from typing import Optional

from pydantic import Field

from talent_triage.utils.constants import JobStatus

from .base import BaseDocument


class Recruiter(BaseDocument):
    """Recruiter profile linked to a user account."""

    user_id: str
    company_name: Optional[str] = None

    class Settings:
        """MongoDB collection settings."""

        name = "recruiters"
        indexes = ["user_id"]


class JobPosting(BaseDocument):
    """A job posting owned by a recruiter."""

    recruiter_id: str
    title: str = Field(..., min_length=1, max_length=200)
    company: Optional[str] = None
    description: str = ""
    requirements: list[str] = Field(default_factory=list)
    status: JobStatus = JobStatus.OPEN

    @property
    def scoring_text(self) -> str:
        """Text the resume is scored against: title, description and requirements."""
        parts = [self.title, self.description, *self.requirements]
        return "\n".join(p for p in parts if p)

    def is_owned_by(self, recruiter_id: str) -> bool:
        """Check if the recruiter posted this job."""
        return self.recruiter_id == recruiter_id

    class Settings:
        """MongoDB collection settings."""

        name = "job_postings"
        indexes = ["recruiter_id", "status", "created_at"]
