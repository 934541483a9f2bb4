"""
Triage service for Talent-Triage.

Request-level operations a recruiter performs on a job: scoring resumes,
configuring and running automation, batch and single status changes, and
listing applications. Ownership of the job is checked on every call that
names one; status changes are recorded in the activity log.
"""

import asyncio
from typing import Any, Iterable, Mapping, Optional, Sequence

from pydantic import ValidationError

from talent_triage.core.application_ref import ApplicationRef, parse_application_ids
from talent_triage.core.automation import AutomationRuleEngine
from talent_triage.core.batch import BatchStatusOrchestrator
from talent_triage.core.exceptions import ApplicationNotFoundError, InputError, JobNotFoundError
from talent_triage.core.matching import MatchingEngine, get_matching_engine
from talent_triage.data.models import (
    ApplicationActivityLog,
    ApplicationBase,
    ApplicationListing,
    AutomationConfig,
    AutomationConfigUpdate,
    BatchRequest,
    BatchResult,
    JobPosting,
    MatchResult,
    TriageReport,
    create_status_change_activity,
)
from talent_triage.data.repositories import (
    ActivityLogRepository,
    ApplicationRepository,
    AutomationConfigRepository,
    JobRepository,
    get_activity_log_repository,
    get_automation_config_repository,
    get_candidate_application_repository,
    get_job_repository,
    get_public_application_repository,
)
from talent_triage.services.notification_service import (
    NotificationDispatcher,
    get_notification_dispatcher,
)
from talent_triage.utils.config import get_settings
from talent_triage.utils.constants import (
    ApplicationKind,
    ApplicationStatus,
    AuditAction,
    AutomationAction,
)
from talent_triage.utils.logger import LoggerMixin, audit_log


class TriageService(LoggerMixin):
    """
    Recruiter-facing triage operations.

    All collaborators are injectable; omitted ones default to the shared
    MongoDB repositories, the shared matching engine and the notification
    dispatcher.
    """

    def __init__(
        self,
        jobs: Optional[JobRepository] = None,
        applications: Optional[Mapping[ApplicationKind, ApplicationRepository]] = None,
        automation: Optional[AutomationConfigRepository] = None,
        activity: Optional[ActivityLogRepository] = None,
        engine: Optional[MatchingEngine] = None,
        notifier: Optional[NotificationDispatcher] = None,
    ):
        self.jobs = jobs or get_job_repository()
        self.applications = dict(
            applications
            or {
                ApplicationKind.CANDIDATE: get_candidate_application_repository(),
                ApplicationKind.PUBLIC: get_public_application_repository(),
            }
        )
        self.automation = automation or get_automation_config_repository()
        self.activity = activity or get_activity_log_repository()
        self.engine = engine or get_matching_engine()
        self.notifier = notifier or get_notification_dispatcher()
        self.orchestrator = BatchStatusOrchestrator(
            stores=self.applications,
            job_access=self.jobs,
            notifier=self.notifier,
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _require_job(self, job_id: str, requester: str) -> JobPosting:
        job = self.jobs.get_owned(str(job_id), requester)
        if job is None:
            raise JobNotFoundError(job_id)
        return job

    def _require_application(self, job_id: str, application_id: str) -> ApplicationBase:
        ref = ApplicationRef.parse(application_id)
        application = self.applications[ref.kind].get_in_job(ref.raw_id, str(job_id))
        if application is None:
            raise ApplicationNotFoundError(application_id)
        return application

    def _record_activity(self, entries: list[ApplicationActivityLog]) -> None:
        # The status change already happened; a lost history entry is only logged
        try:
            self.activity.record(entries)
        except Exception as e:
            self.logger.opt(exception=e).error(
                f"Failed to record {len(entries)} activity entries"
            )

    def _batch_activity(
        self,
        job_id: str,
        refs: Iterable[ApplicationRef],
        result: BatchResult,
        performed_by: Optional[str],
        details: Optional[Mapping[str, dict[str, Any]]] = None,
    ) -> list[ApplicationActivityLog]:
        """One entry per application the batch actually moved."""
        failed = {error.kind for error in result.errors}
        buckets: dict[ApplicationKind, list[str]] = {}
        for ref in refs:
            if ref.kind.value not in failed:
                buckets.setdefault(ref.kind, []).append(ref.raw_id)

        entries = []
        for kind, raw_ids in buckets.items():
            for raw_id in sorted(self.applications[kind].ids_in_job(raw_ids, job_id)):
                extra = (details or {}).get(f"{kind.id_prefix}{raw_id}", {})
                entries.append(
                    create_status_change_activity(
                        application_id=raw_id,
                        application_kind=kind,
                        job_id=job_id,
                        status=ApplicationStatus(result.action),
                        performed_by=performed_by,
                        batch=True,
                        **extra,
                    )
                )
        return entries

    def _record_batch_activity(
        self,
        job_id: str,
        refs: Iterable[ApplicationRef],
        result: BatchResult,
        performed_by: Optional[str],
        details: Optional[Mapping[str, dict[str, Any]]] = None,
    ) -> None:
        # Runs after the updates; the caller gets its BatchResult regardless
        try:
            entries = self._batch_activity(job_id, refs, result, performed_by, details)
        except Exception as e:
            self.logger.opt(exception=e).error(
                f"Failed to build activity entries for job {job_id}"
            )
            return
        if entries:
            self._record_activity(entries)

    # -------------------------------------------------------------------------
    # Scoring
    # -------------------------------------------------------------------------

    def score_texts(self, resume_text: str, job_description_text: str) -> MatchResult:
        """Score a resume against a job description without touching any job."""
        result = self.engine.score(resume_text, job_description_text)
        self.logger.info(f"Scored resume: overall {result.overall_score}")
        return result

    def analyze_application(
        self, job_id: str, application_id: str, requester: str
    ) -> MatchResult:
        """
        Score one application against its job and store the result.

        Raises:
            JobNotFoundError: Requester does not own the job
            InputError: Malformed id, or the application has no resume text
            ApplicationNotFoundError: The application is not under the job
        """
        job = self._require_job(job_id, requester)
        application = self._require_application(job.id, application_id)

        result = self.engine.score(application.resume_text, job.scoring_text)
        self.applications[application.kind].set_ai_analysis(application.id, result)

        audit_log(
            AuditAction.APPLICATION_SCORED.value,
            {
                "job_id": job.id,
                "application_id": application_id,
                "overall_score": result.overall_score,
                "performed_by": requester,
            },
        )
        return result

    # -------------------------------------------------------------------------
    # Automation
    # -------------------------------------------------------------------------

    def _automation_config(self, job_id: str) -> AutomationConfig:
        stored = self.automation.get_for_job(job_id)
        if stored is not None:
            return stored
        defaults = get_settings().automation
        return AutomationConfig.disabled(
            job_id=job_id,
            reject_threshold=defaults.default_reject_threshold,
            shortlist_threshold=defaults.default_shortlist_threshold,
        )

    def get_automation_config(self, job_id: str, requester: str) -> AutomationConfig:
        """The job's automation config; defaults (all rules off) if none was stored."""
        job = self._require_job(job_id, requester)
        return self._automation_config(job.id)

    def configure_automation(
        self, job_id: str, requester: str, **fields: Any
    ) -> AutomationConfig:
        """
        Create or replace a job's automation config.

        Omitted thresholds take the configured defaults; omitted switches
        are off.

        Raises:
            InputError: A threshold outside 0-100 or a malformed field
            JobNotFoundError: Requester does not own the job
        """
        try:
            update = AutomationConfigUpdate(**fields)
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or None
            raise InputError(f"Invalid automation settings: {first['msg']}", field=field) from e

        job = self._require_job(job_id, requester)
        defaults = get_settings().automation

        config = AutomationConfig(
            job_id=job.id,
            auto_reject_enabled=update.auto_reject_enabled,
            auto_reject_threshold=(
                defaults.default_reject_threshold
                if update.auto_reject_threshold is None
                else update.auto_reject_threshold
            ),
            auto_shortlist_enabled=update.auto_shortlist_enabled,
            auto_shortlist_threshold=(
                defaults.default_shortlist_threshold
                if update.auto_shortlist_threshold is None
                else update.auto_shortlist_threshold
            ),
        )
        saved = self.automation.upsert_for_job(config)

        audit_log(
            AuditAction.AUTOMATION_CONFIGURED.value,
            {
                "job_id": job.id,
                "auto_reject": [saved.auto_reject_enabled, saved.auto_reject_threshold],
                "auto_shortlist": [saved.auto_shortlist_enabled, saved.auto_shortlist_threshold],
                "performed_by": requester,
            },
        )
        return saved

    def run_automation(self, job_id: str, requester: str) -> TriageReport:
        """
        Score every new application of a job and apply its automation rules.

        Applications without resume text are skipped. Decided statuses are
        applied as one batch per action.
        """
        job = self._require_job(job_id, requester)
        config = self._automation_config(job.id)

        scores: dict[str, int] = {}
        skipped = 0
        for kind, repository in self.applications.items():
            for application in repository.list_for_job(job.id, status=ApplicationStatus.NEW):
                if not (application.resume_text or "").strip():
                    skipped += 1
                    continue
                result = self.engine.score(application.resume_text, job.scoring_text)
                repository.set_ai_analysis(application.id, result)
                scores[str(application.ref)] = result.overall_score

        rules = AutomationRuleEngine(config)
        decisions = rules.decide_many(scores)

        results = []
        for action, application_ids in rules.group_by_action(decisions).items():
            refs = parse_application_ids(application_ids)
            result = self.orchestrator.apply_to_refs(job.id, refs, action.target_status)
            details = {
                app_id: {"automation_action": action.value, "score": scores[app_id]}
                for app_id in application_ids
            }
            self._record_batch_activity(job.id, refs, result, None, details)
            results.append(result)

        audit_log(
            AuditAction.AUTOMATION_DECIDED.value,
            {
                "job_id": job.id,
                "scored": len(scores),
                "skipped": skipped,
                "shortlisted": sum(a is AutomationAction.AUTO_SHORTLIST for a in decisions.values()),
                "rejected": sum(a is AutomationAction.AUTO_REJECT for a in decisions.values()),
                "performed_by": requester,
            },
        )
        return TriageReport(
            job_id=job.id,
            scored=len(scores),
            skipped=skipped,
            decisions=decisions,
            results=tuple(results),
        )

    # -------------------------------------------------------------------------
    # Status changes
    # -------------------------------------------------------------------------

    def apply_batch(
        self,
        job_id: str,
        application_ids: Sequence[str],
        action: object,
        requester: str,
    ) -> BatchResult:
        """Move several applications of a job to one status (see BatchStatusOrchestrator)."""
        result = self.orchestrator.apply_batch_action(job_id, application_ids, action, requester)
        self._record_batch_activity(
            str(job_id), parse_application_ids(application_ids), result, requester
        )
        return result

    def apply_request(self, job_id: str, request: BatchRequest, requester: str) -> BatchResult:
        """apply_batch for a BatchRequest record."""
        return self.apply_batch(job_id, request.application_ids, request.action, requester)

    async def apply_batch_async(
        self,
        job_id: str,
        application_ids: Sequence[str],
        action: object,
        requester: str,
    ) -> BatchResult:
        """Async variant of apply_batch; the two variant updates run concurrently."""
        result = await self.orchestrator.apply_batch_action_async(
            job_id, application_ids, action, requester
        )
        await asyncio.to_thread(
            self._record_batch_activity,
            str(job_id),
            parse_application_ids(application_ids),
            result,
            requester,
        )
        return result

    def reject_application(
        self,
        job_id: str,
        application_id: str,
        requester: str,
        reasons: Sequence[str],
        custom_message: Optional[str] = None,
        send_email: bool = False,
    ) -> ApplicationBase:
        """
        Reject a single application with the recruiter's reasons.

        Raises:
            InputError: No reasons given, or a malformed application id
            JobNotFoundError: Requester does not own the job
            ApplicationNotFoundError: The application is not under the job
        """
        reasons = [r.strip() for r in (reasons or []) if r and r.strip()]
        if not reasons:
            raise InputError("At least one rejection reason is required", field="reasons")

        job = self._require_job(job_id, requester)
        application = self._require_application(job.id, application_id)
        repository = self.applications[application.kind]

        updated = repository.update(application.id, {"status": ApplicationStatus.REJECTED.value})
        if updated is None:
            raise ApplicationNotFoundError(application_id)

        self._record_activity(
            [
                create_status_change_activity(
                    application_id=application.id,
                    application_kind=application.kind,
                    job_id=job.id,
                    status=ApplicationStatus.REJECTED,
                    performed_by=requester,
                    reasons=reasons,
                    custom_message=custom_message,
                    email_sent=send_email,
                )
            ]
        )
        audit_log(
            AuditAction.APPLICATION_REJECTED.value,
            {
                "job_id": job.id,
                "application_id": application_id,
                "reasons": reasons,
                "performed_by": requester,
            },
        )

        if send_email:
            self.notifier.dispatch([application_id], ApplicationStatus.REJECTED.value)
        return updated

    # -------------------------------------------------------------------------
    # Listing
    # -------------------------------------------------------------------------

    def list_applications(self, job_id: str, requester: str) -> ApplicationListing:
        """Both variants of a job's applications merged, newest first."""
        job = self._require_job(job_id, requester)

        summaries = []
        counts: dict[ApplicationKind, int] = {}
        for kind, repository in self.applications.items():
            applications = repository.list_for_job(job.id)
            counts[kind] = len(applications)
            summaries.extend(a.to_summary() for a in applications)
        summaries.sort(key=lambda s: s.created_at, reverse=True)

        by_status: dict[str, int] = {}
        for summary in summaries:
            by_status[summary.status] = by_status.get(summary.status, 0) + 1

        return ApplicationListing(
            job_id=job.id,
            applications=tuple(summaries),
            candidate_count=counts.get(ApplicationKind.CANDIDATE, 0),
            public_count=counts.get(ApplicationKind.PUBLIC, 0),
            by_status=by_status,
        )


# Singleton instance
_triage_service: Optional[TriageService] = None


def get_triage_service() -> TriageService:
    """Get the triage service singleton instance."""
    global _triage_service
    if _triage_service is None:
        _triage_service = TriageService()
    return _triage_service
