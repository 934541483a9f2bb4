"""
Shared test fixtures for the Talent-Triage test suite.

Sets environment variables before any talent_triage imports to prevent config
failures, then provides in-memory stand-ins for the MongoDB repositories and
factory fixtures for application documents.
"""

import os

# === Set environment BEFORE any talent_triage imports ===
os.environ.setdefault("APP_ENVIRONMENT", "testing")
os.environ.setdefault("DB_NAME", "talent_triage_test")
os.environ.setdefault("LOG_FILE_OUTPUT", "false")

from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Sequence

import pytest

from talent_triage.core.batch import BatchStatusOrchestrator
from talent_triage.core.matching import MatchingEngine, SkillExtractor, SkillVocabulary
from talent_triage.data.models import (
    ApplicationBase,
    AutomationConfig,
    CandidateApplication,
    JobPosting,
    MatchResult,
    PublicApplication,
)
from talent_triage.services.triage_service import TriageService
from talent_triage.utils.constants import (
    DEFAULT_SKILL_VOCABULARY_VERSION,
    ApplicationKind,
    ApplicationStatus,
)

RECRUITER_USER = "user-rec-1"
OTHER_USER = "user-rec-2"

SENIOR_JD = "Senior Software Engineer — React, Node.js, AWS, Docker"
SENIOR_RESUME = "Senior engineer with 6 years experience in React, Node.js, AWS"


# ---------------------------------------------------------------------------
# In-memory collaborators
# ---------------------------------------------------------------------------


class FakeApplicationStore:
    """Dict-backed stand-in for an ApplicationRepository."""

    def __init__(self, kind: ApplicationKind, fail_with: Optional[Exception] = None):
        self.kind = kind
        self.documents: dict[str, ApplicationBase] = {}
        self.fail_with = fail_with
        self.update_calls: list[tuple[list[str], str, ApplicationStatus]] = []

    def add(self, application: ApplicationBase) -> ApplicationBase:
        self.documents[application.id] = application
        return application

    def _matching(self, raw_ids: Sequence[str], job_id: str) -> list[ApplicationBase]:
        return [
            self.documents[i]
            for i in raw_ids
            if i in self.documents and self.documents[i].belongs_to_job(job_id)
        ]

    def bulk_update_status(
        self, raw_ids: Sequence[str], job_id: str, status: ApplicationStatus
    ) -> int:
        self.update_calls.append((list(raw_ids), job_id, status))
        if self.fail_with is not None:
            raise self.fail_with
        changed = self._matching(raw_ids, job_id)
        for application in changed:
            self.documents[application.id] = application.with_status(status)
        return len(changed)

    async def bulk_update_status_async(
        self, raw_ids: Sequence[str], job_id: str, status: ApplicationStatus
    ) -> int:
        return self.bulk_update_status(raw_ids, job_id, status)

    def ids_in_job(self, raw_ids: Sequence[str], job_id: str) -> set[str]:
        return {a.id for a in self._matching(raw_ids, job_id)}

    def get_in_job(self, raw_id: str, job_id: str) -> Optional[ApplicationBase]:
        found = self._matching([raw_id], job_id)
        return found[0] if found else None

    def list_for_job(
        self, job_id: str, status: Optional[ApplicationStatus] = None, limit: int = 1000
    ) -> list[ApplicationBase]:
        found = [a for a in self.documents.values() if a.belongs_to_job(job_id)]
        if status is not None:
            found = [a for a in found if a.status == ApplicationStatus(status).value]
        return sorted(found, key=lambda a: a.created_at, reverse=True)[:limit]

    def update(self, raw_id: str, update_data: dict[str, Any]) -> Optional[ApplicationBase]:
        if raw_id not in self.documents:
            return None
        self.documents[raw_id] = self.documents[raw_id].model_copy(update=update_data)
        return self.documents[raw_id]

    def set_ai_analysis(self, raw_id: str, analysis: MatchResult) -> Optional[ApplicationBase]:
        return self.update(raw_id, {"ai_analysis": analysis})

    def status_of(self, raw_id: str) -> str:
        return self.documents[raw_id].status


class FakeJobRepository:
    """Jobs keyed by id plus a user -> recruiter profile mapping."""

    def __init__(self):
        self.jobs: dict[str, JobPosting] = {}
        self.recruiter_of_user: dict[str, str] = {}

    def add(self, job: JobPosting, user_id: str) -> JobPosting:
        self.jobs[job.id] = job
        self.recruiter_of_user[user_id] = job.recruiter_id
        return job

    def get_owned(self, job_id: str, user_id: str) -> Optional[JobPosting]:
        recruiter_id = self.recruiter_of_user.get(user_id)
        job = self.jobs.get(str(job_id))
        if recruiter_id is None or job is None or not job.is_owned_by(recruiter_id):
            return None
        return job

    def is_owned_by(self, job_id: str, user_id: str) -> bool:
        return self.get_owned(job_id, user_id) is not None

    async def is_owned_by_async(self, job_id: str, user_id: str) -> bool:
        return self.is_owned_by(job_id, user_id)


class FakeAutomationRepository:
    def __init__(self):
        self.configs: dict[str, AutomationConfig] = {}
        self.upserts = 0

    def get_for_job(self, job_id: str) -> Optional[AutomationConfig]:
        return self.configs.get(str(job_id))

    def upsert_for_job(self, config: AutomationConfig) -> AutomationConfig:
        self.upserts += 1
        self.configs[config.job_id] = config
        return config


class FakeActivityRepository:
    def __init__(self):
        self.entries = []

    def record(self, entries) -> int:
        self.entries.extend(entries)
        return len(entries)


class RecordingNotifier:
    """Notifier that only remembers what it was asked to send."""

    def __init__(self):
        self.calls: list[tuple[list[str], str]] = []

    def dispatch(self, application_ids: Sequence[str], action: str) -> None:
        self.calls.append((list(application_ids), action))


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_candidate_application():
    """Factory for CandidateApplication documents."""
    counter = {"n": 0}

    def _factory(
        id: Optional[str] = None,
        job_id: str = "job-1",
        status: ApplicationStatus = ApplicationStatus.NEW,
        resume_text: Optional[str] = SENIOR_RESUME,
        age_minutes: int = 0,
        **kwargs,
    ) -> CandidateApplication:
        counter["n"] += 1
        return CandidateApplication(
            id=id or f"c{counter['n']}",
            job_id=job_id,
            user_id=kwargs.pop("user_id", f"user-{counter['n']}"),
            candidate_name=kwargs.pop("candidate_name", "Jane Smith"),
            candidate_email=kwargs.pop("candidate_email", "jane.smith@example.com"),
            status=status,
            resume_text=resume_text,
            created_at=datetime.now(timezone.utc) - timedelta(minutes=age_minutes),
            **kwargs,
        )

    return _factory


@pytest.fixture
def make_public_application():
    """Factory for PublicApplication documents."""
    counter = {"n": 0}

    def _factory(
        id: Optional[str] = None,
        job_id: str = "job-1",
        status: ApplicationStatus = ApplicationStatus.NEW,
        resume_text: Optional[str] = SENIOR_RESUME,
        age_minutes: int = 0,
        **kwargs,
    ) -> PublicApplication:
        counter["n"] += 1
        return PublicApplication(
            id=id or f"p{counter['n']}",
            job_id=job_id,
            full_name=kwargs.pop("full_name", "Sam Doe"),
            email=kwargs.pop("email", "sam.doe@example.com"),
            status=status,
            resume_text=resume_text,
            created_at=datetime.now(timezone.utc) - timedelta(minutes=age_minutes),
            **kwargs,
        )

    return _factory


# ---------------------------------------------------------------------------
# Wired fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def matching_engine():
    """Engine over the default vocabulary with default weights."""
    extractor = SkillExtractor(SkillVocabulary.load(DEFAULT_SKILL_VOCABULARY_VERSION))
    return MatchingEngine(skill_extractor=extractor)


@pytest.fixture
def job():
    return JobPosting(
        id="job-1",
        recruiter_id="rec-1",
        title="Senior Software Engineer",
        description="React, Node.js, AWS, Docker",
    )


@pytest.fixture
def other_job():
    return JobPosting(id="job-2", recruiter_id="rec-2", title="Data Analyst", description="SQL, Tableau")


@pytest.fixture
def jobs(job, other_job):
    repository = FakeJobRepository()
    repository.add(job, RECRUITER_USER)
    repository.add(other_job, OTHER_USER)
    return repository


@pytest.fixture
def make_store():
    """Build an extra in-memory application store."""
    return FakeApplicationStore


@pytest.fixture
def candidate_store():
    return FakeApplicationStore(ApplicationKind.CANDIDATE)


@pytest.fixture
def public_store():
    return FakeApplicationStore(ApplicationKind.PUBLIC)


@pytest.fixture
def stores(candidate_store, public_store):
    return {
        ApplicationKind.CANDIDATE: candidate_store,
        ApplicationKind.PUBLIC: public_store,
    }


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def orchestrator(stores, jobs, notifier):
    return BatchStatusOrchestrator(stores=stores, job_access=jobs, notifier=notifier)


@pytest.fixture
def automation_repository():
    return FakeAutomationRepository()


@pytest.fixture
def activity_repository():
    return FakeActivityRepository()


@pytest.fixture
def triage_service(jobs, stores, automation_repository, activity_repository, matching_engine, notifier):
    return TriageService(
        jobs=jobs,
        applications=stores,
        automation=automation_repository,
        activity=activity_repository,
        engine=matching_engine,
        notifier=notifier,
    )
