"""
Application repositories for Talent-Triage.

Each application variant lives in its own collection and names its job
reference differently; the shared base builds every job-scoped query from
the model's ``job_field``.
"""

from typing import Any, Generic, Optional, Sequence, TypeVar

from talent_triage.data.models.application import (
    ApplicationBase,
    CandidateApplication,
    PublicApplication,
)
from talent_triage.data.models.match import MatchResult
from talent_triage.utils.constants import ApplicationKind, ApplicationStatus
from talent_triage.utils.logger import get_logger

from .base import BaseRepository

logger = get_logger(__name__)

A = TypeVar("A", bound=ApplicationBase)


class ApplicationRepository(BaseRepository[A], Generic[A]):
    """Job-scoped operations shared by both application collections."""

    @property
    def collection_name(self) -> str:
        return self.model_class.Settings.name

    @property
    def kind(self) -> ApplicationKind:
        return self.model_class.kind

    def _job_query(self, job_id: str, **extra: Any) -> dict[str, Any]:
        return {self.model_class.job_field: str(job_id), **extra}

    def _bucket_query(self, raw_ids: Sequence[str], job_id: str) -> dict[str, Any]:
        # Ids from another job match nothing
        return self._job_query(job_id, _id={"$in": [str(i) for i in raw_ids]})

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_in_job(self, raw_id: str, job_id: str) -> Optional[A]:
        """Get an application only if it belongs to the job."""
        return self.find_one(self._job_query(job_id, _id=str(raw_id)))

    def list_for_job(
        self,
        job_id: str,
        status: Optional[ApplicationStatus] = None,
        limit: int = 1000,
    ) -> list[A]:
        """Applications of a job, newest first."""
        query = self._job_query(job_id)
        if status is not None:
            query["status"] = ApplicationStatus(status).value
        return self.find(query, limit=limit)

    def ids_in_job(self, raw_ids: Sequence[str], job_id: str) -> set[str]:
        """Subset of raw_ids that belong to the job."""
        if not raw_ids:
            return set()
        found = self._get_sync_collection().distinct("_id", self._bucket_query(raw_ids, job_id))
        return {str(i) for i in found}

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def bulk_update_status(
        self, raw_ids: Sequence[str], job_id: str, status: ApplicationStatus
    ) -> int:
        """
        Move applications of a job to a status in one update.

        Only documents whose id is in raw_ids AND that belong to job_id are
        touched.

        Returns:
            Number of documents modified
        """
        if not raw_ids:
            return 0
        updated = self.update_many(
            self._bucket_query(raw_ids, job_id),
            {"status": ApplicationStatus(status).value},
        )
        logger.info(
            f"Moved {updated}/{len(raw_ids)} {self.kind.value} applications "
            f"of job {job_id} to {ApplicationStatus(status).value}"
        )
        return updated

    async def bulk_update_status_async(
        self, raw_ids: Sequence[str], job_id: str, status: ApplicationStatus
    ) -> int:
        """Async variant of bulk_update_status."""
        if not raw_ids:
            return 0
        updated = await self.update_many_async(
            self._bucket_query(raw_ids, job_id),
            {"status": ApplicationStatus(status).value},
        )
        logger.info(
            f"Moved {updated}/{len(raw_ids)} {self.kind.value} applications "
            f"of job {job_id} to {ApplicationStatus(status).value}"
        )
        return updated

    def set_ai_analysis(self, raw_id: str, analysis: MatchResult) -> Optional[A]:
        """Store the latest match result on an application."""
        return self.update(raw_id, {"ai_analysis": analysis.model_dump()})


class CandidateApplicationRepository(ApplicationRepository[CandidateApplication]):
    """Repository for applications submitted by registered users."""

    @property
    def model_class(self) -> type[CandidateApplication]:
        return CandidateApplication


class PublicApplicationRepository(ApplicationRepository[PublicApplication]):
    """Repository for anonymous applications."""

    @property
    def model_class(self) -> type[PublicApplication]:
        return PublicApplication


# Singleton instances
_candidate_repository: Optional[CandidateApplicationRepository] = None
_public_repository: Optional[PublicApplicationRepository] = None


def get_candidate_application_repository() -> CandidateApplicationRepository:
    """Get the candidate application repository singleton instance."""
    global _candidate_repository
    if _candidate_repository is None:
        _candidate_repository = CandidateApplicationRepository()
    return _candidate_repository


def get_public_application_repository() -> PublicApplicationRepository:
    """Get the public application repository singleton instance."""
    global _public_repository
    if _public_repository is None:
        _public_repository = PublicApplicationRepository()
    return _public_repository
