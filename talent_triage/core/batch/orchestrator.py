"""
Batch status transition orchestrator.

Moves a set of applications of one job to a new status. The ids are split
into one bucket per application variant; every bucket is a single bulk
update restricted to the job, and a failing bucket never aborts the other.
"""

import asyncio
from typing import Any, Iterable, Mapping, Optional, Protocol, Sequence

from talent_triage.core.application_ref import (
    ApplicationRef,
    parse_application_ids,
    partition_by_kind,
)
from talent_triage.core.exceptions import InputError, JobNotFoundError, UnknownActionError
from talent_triage.data.models.batch import BatchResult, BucketOutcome
from talent_triage.utils.constants import (
    BATCH_ACTIONS,
    ApplicationKind,
    ApplicationStatus,
    AuditAction,
)
from talent_triage.utils.logger import LoggerMixin, audit_log


class ApplicationStore(Protocol):
    """Bulk status updates for one application variant."""

    def bulk_update_status(
        self, raw_ids: Sequence[str], job_id: str, status: ApplicationStatus
    ) -> int:
        """Update applications whose id is in raw_ids AND that belong to job_id; return rows changed."""
        ...

    async def bulk_update_status_async(
        self, raw_ids: Sequence[str], job_id: str, status: ApplicationStatus
    ) -> int:
        ...


class JobAccess(Protocol):
    """Answers whether a user may act on a job."""

    def is_owned_by(self, job_id: str, user_id: str) -> bool:
        ...

    async def is_owned_by_async(self, job_id: str, user_id: str) -> bool:
        ...


class Notifier(Protocol):
    """Schedules a candidate notification without waiting for it."""

    def dispatch(self, application_ids: Sequence[str], action: str) -> Any:
        ...


def parse_batch_action(action: object) -> ApplicationStatus:
    """
    Validate a batch action.

    Raises:
        UnknownActionError: If the action is missing or not a batch status
    """
    if isinstance(action, ApplicationStatus):
        status = action
    else:
        try:
            status = ApplicationStatus(action)
        except ValueError:
            raise UnknownActionError(action) from None
    if status not in BATCH_ACTIONS:
        raise UnknownActionError(action)
    return status


class BatchStatusOrchestrator(LoggerMixin):
    """Applies one status to many applications of a job, variant by variant."""

    def __init__(
        self,
        stores: Mapping[ApplicationKind, ApplicationStore],
        job_access: JobAccess,
        notifier: Optional[Notifier] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            stores: One store per application variant
            job_access: Ownership check for jobs
            notifier: Receives rejection notifications (none sent if omitted)
        """
        missing = [kind.value for kind in ApplicationKind if kind not in stores]
        if missing:
            raise ValueError(f"No application store configured for: {', '.join(missing)}")
        self.stores = dict(stores)
        self.job_access = job_access
        self.notifier = notifier

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    @staticmethod
    def validate_request(
        application_ids: Optional[Sequence[str]], action: object
    ) -> tuple[list[ApplicationRef], ApplicationStatus]:
        """
        Check a batch request before anything touches the store.

        Raises:
            InputError: Empty or malformed id list
            UnknownActionError: Action outside the batch action set
        """
        if not application_ids or isinstance(application_ids, str):
            raise InputError("No applications selected", field="applicationIds")
        status = parse_batch_action(action)
        refs = parse_application_ids(application_ids)
        return refs, status

    # -------------------------------------------------------------------------
    # Synchronous API
    # -------------------------------------------------------------------------

    def apply_batch_action(
        self,
        job_id: str,
        application_ids: Sequence[str],
        action: object,
        requester: str,
    ) -> BatchResult:
        """
        Move the given applications of a job to a new status.

        Args:
            job_id: Job the applications must belong to
            application_ids: Prefixed client ids ("candidate-12", "public-7")
            action: Target status, one of the batch actions
            requester: User id of the recruiter making the request

        Returns:
            BatchResult with the number of rows changed and any failed buckets

        Raises:
            InputError: Empty or malformed id list
            UnknownActionError: Action outside the batch action set
            JobNotFoundError: Requester does not own the job
        """
        refs, status = self.validate_request(application_ids, action)
        job_id = str(job_id)
        if not self.job_access.is_owned_by(job_id, requester):
            raise JobNotFoundError(job_id)
        return self.apply_to_refs(job_id, refs, status, requester=requester)

    def apply_to_refs(
        self,
        job_id: str,
        refs: Iterable[ApplicationRef],
        status: ApplicationStatus,
        requester: Optional[str] = None,
    ) -> BatchResult:
        """Apply a status to already validated refs of a job whose ownership was checked."""
        refs = list(refs)
        buckets = partition_by_kind(refs)
        outcomes = [
            self._update_bucket(kind, raw_ids, job_id, status)
            for kind, raw_ids in buckets.items()
        ]
        return self._finish(job_id, refs, status, outcomes, requester)

    def _update_bucket(
        self,
        kind: ApplicationKind,
        raw_ids: list[str],
        job_id: str,
        status: ApplicationStatus,
    ) -> BucketOutcome:
        try:
            updated = self.stores[kind].bulk_update_status(raw_ids, job_id, status)
        except Exception as e:
            return self._bucket_failed(kind, raw_ids, job_id, status, e)
        return BucketOutcome(kind=kind, raw_ids=tuple(raw_ids), updated_count=updated)

    # -------------------------------------------------------------------------
    # Asynchronous API
    # -------------------------------------------------------------------------

    async def apply_batch_action_async(
        self,
        job_id: str,
        application_ids: Sequence[str],
        action: object,
        requester: str,
    ) -> BatchResult:
        """Async variant of apply_batch_action; bucket updates run concurrently."""
        refs, status = self.validate_request(application_ids, action)
        job_id = str(job_id)
        if not await self.job_access.is_owned_by_async(job_id, requester):
            raise JobNotFoundError(job_id)
        return await self.apply_to_refs_async(job_id, refs, status, requester=requester)

    async def apply_to_refs_async(
        self,
        job_id: str,
        refs: Iterable[ApplicationRef],
        status: ApplicationStatus,
        requester: Optional[str] = None,
    ) -> BatchResult:
        """Async variant of apply_to_refs."""
        refs = list(refs)
        buckets = partition_by_kind(refs)
        outcomes = await asyncio.gather(
            *(
                self._update_bucket_async(kind, raw_ids, job_id, status)
                for kind, raw_ids in buckets.items()
            )
        )
        return self._finish(job_id, refs, status, outcomes, requester)

    async def _update_bucket_async(
        self,
        kind: ApplicationKind,
        raw_ids: list[str],
        job_id: str,
        status: ApplicationStatus,
    ) -> BucketOutcome:
        try:
            updated = await self.stores[kind].bulk_update_status_async(raw_ids, job_id, status)
        except Exception as e:
            return self._bucket_failed(kind, raw_ids, job_id, status, e)
        return BucketOutcome(kind=kind, raw_ids=tuple(raw_ids), updated_count=updated)

    # -------------------------------------------------------------------------
    # Shared
    # -------------------------------------------------------------------------

    def _bucket_failed(
        self,
        kind: ApplicationKind,
        raw_ids: list[str],
        job_id: str,
        status: ApplicationStatus,
        error: Exception,
    ) -> BucketOutcome:
        self.logger.opt(exception=error).error(
            f"Error updating {kind.value} applications of job {job_id} to {status.value}"
        )
        audit_log(
            AuditAction.BATCH_BUCKET_FAILED.value,
            {
                "job_id": job_id,
                "kind": kind.value,
                "application_ids": list(raw_ids),
                "status": status.value,
                "error": str(error),
            },
            audit_type="FAILURE",
        )
        return BucketOutcome(kind=kind, raw_ids=tuple(raw_ids), error=error)

    def _finish(
        self,
        job_id: str,
        refs: list[ApplicationRef],
        status: ApplicationStatus,
        outcomes: Iterable[BucketOutcome],
        requester: Optional[str],
    ) -> BatchResult:
        result = BatchResult.reduce(status, outcomes)

        audit_log(
            AuditAction.APPLICATION_STATUS_CHANGED.value,
            {
                "job_id": job_id,
                "status": status.value,
                "requested": len(refs),
                "updated": result.updated_count,
                "failed_buckets": [e.kind for e in result.errors],
                "performed_by": requester or "system",
            },
        )
        self.logger.info(result.message)

        if status is ApplicationStatus.REJECTED and self.notifier is not None:
            try:
                self.notifier.dispatch([str(ref) for ref in refs], status.value)
            except Exception as e:
                # The rows are already updated; a lost notification is only logged
                self.logger.opt(exception=e).error(
                    f"Failed to dispatch {status.value} notifications for job {job_id}"
                )

        return result
