"""
Job posting and recruiter repositories for Talent-Triage.

A user may act on a job only if their recruiter profile posted it. Both
lookups answer "not found" for jobs of other recruiters so callers never
learn whether such a job exists.
"""

from typing import Optional

from talent_triage.data.models.job import JobPosting, Recruiter
from talent_triage.utils.logger import get_logger

from .base import BaseRepository

logger = get_logger(__name__)


class RecruiterRepository(BaseRepository[Recruiter]):
    """Repository for recruiter profiles."""

    @property
    def collection_name(self) -> str:
        return Recruiter.Settings.name

    @property
    def model_class(self) -> type[Recruiter]:
        return Recruiter

    def get_by_user_id(self, user_id: str) -> Optional[Recruiter]:
        return self.find_one({"user_id": str(user_id)})

    async def get_by_user_id_async(self, user_id: str) -> Optional[Recruiter]:
        return await self.find_one_async({"user_id": str(user_id)})


class JobRepository(BaseRepository[JobPosting]):
    """Repository for job postings, with recruiter ownership checks."""

    def __init__(self, recruiters: Optional[RecruiterRepository] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.recruiters = recruiters or RecruiterRepository(db_manager=self._db_manager)

    @property
    def collection_name(self) -> str:
        return JobPosting.Settings.name

    @property
    def model_class(self) -> type[JobPosting]:
        return JobPosting

    def get_owned(self, job_id: str, user_id: str) -> Optional[JobPosting]:
        """
        Get a job if the user's recruiter profile posted it.

        Returns:
            The job, or None if it does not exist, the user has no
            recruiter profile, or another recruiter owns it
        """
        recruiter = self.recruiters.get_by_user_id(user_id)
        if recruiter is None:
            logger.warning(f"User {user_id} has no recruiter profile")
            return None
        return self.find_one({"_id": str(job_id), "recruiter_id": recruiter.id})

    def is_owned_by(self, job_id: str, user_id: str) -> bool:
        """Check if the user's recruiter profile posted the job."""
        recruiter = self.recruiters.get_by_user_id(user_id)
        if recruiter is None:
            return False
        return self.exists({"_id": str(job_id), "recruiter_id": recruiter.id})

    async def is_owned_by_async(self, job_id: str, user_id: str) -> bool:
        """Async variant of is_owned_by."""
        recruiter = await self.recruiters.get_by_user_id_async(user_id)
        if recruiter is None:
            return False
        return await self.exists_async({"_id": str(job_id), "recruiter_id": recruiter.id})


# Singleton instances
_recruiter_repository: Optional[RecruiterRepository] = None
_job_repository: Optional[JobRepository] = None


def get_recruiter_repository() -> RecruiterRepository:
    """Get the recruiter repository singleton instance."""
    global _recruiter_repository
    if _recruiter_repository is None:
        _recruiter_repository = RecruiterRepository()
    return _recruiter_repository


def get_job_repository() -> JobRepository:
    """Get the job repository singleton instance."""
    global _job_repository
    if _job_repository is None:
        _job_repository = JobRepository(recruiters=get_recruiter_repository())
    return _job_repository
