"""
Tests for talent_triage.services.triage_service — TriageService.

Runs against the in-memory repositories from conftest.
"""

import asyncio

import pytest

from talent_triage.core.exceptions import (
    ApplicationNotFoundError,
    InputError,
    JobNotFoundError,
)
from talent_triage.data.models import SYSTEM_ACTOR, AutomationConfig, BatchRequest
from talent_triage.utils.constants import ApplicationKind, ApplicationStatus, AutomationAction

RECRUITER_USER = "user-rec-1"
OTHER_USER = "user-rec-2"

STRONG_RESUME = "Senior engineer, 9 years. MSc. React, Node.js, AWS, Docker"
WEAK_RESUME = "Junior cashier, 1 year"


# ── Scoring ──────────────────────────────────────────────────────────────────


class TestScoreTexts:
    def test_scores_without_job(self, triage_service):
        result = triage_service.score_texts(
            "Senior engineer with 6 years experience in React, Node.js, AWS",
            "Senior Software Engineer — React, Node.js, AWS, Docker",
        )
        assert result.overall_score == 76

    def test_blank_resume(self, triage_service):
        with pytest.raises(InputError):
            triage_service.score_texts("  ", "Senior engineer")


class TestAnalyzeApplication:
    def test_stores_analysis(self, triage_service, candidate_store, make_candidate_application):
        candidate_store.add(make_candidate_application(id="1", resume_text=STRONG_RESUME))

        result = triage_service.analyze_application("job-1", "candidate-1", RECRUITER_USER)

        assert result.matched_skills == ("react", "node.js", "aws", "docker")
        assert candidate_store.documents["1"].ai_analysis == result
        assert candidate_store.documents["1"].ai_score == result.overall_score

    def test_application_of_other_job(self, triage_service, candidate_store, make_candidate_application):
        candidate_store.add(make_candidate_application(id="1", job_id="job-2"))
        with pytest.raises(ApplicationNotFoundError):
            triage_service.analyze_application("job-1", "candidate-1", RECRUITER_USER)

    def test_not_owner(self, triage_service, candidate_store, make_candidate_application):
        candidate_store.add(make_candidate_application(id="1"))
        with pytest.raises(JobNotFoundError):
            triage_service.analyze_application("job-1", "candidate-1", OTHER_USER)

    def test_missing_resume_text(self, triage_service, public_store, make_public_application):
        public_store.add(make_public_application(id="1", resume_text=None))
        with pytest.raises(InputError) as exc:
            triage_service.analyze_application("job-1", "public-1", RECRUITER_USER)
        assert exc.value.field == "resumeText"


# ── Automation config ────────────────────────────────────────────────────────


class TestAutomationConfig:
    def test_defaults_when_absent(self, triage_service):
        config = triage_service.get_automation_config("job-1", RECRUITER_USER)
        assert config.job_id == "job-1"
        assert config.auto_reject_enabled is False
        assert config.auto_reject_threshold == 60
        assert config.auto_shortlist_enabled is False
        assert config.auto_shortlist_threshold == 80

    def test_configure_and_read_back(self, triage_service, automation_repository):
        triage_service.configure_automation(
            "job-1",
            RECRUITER_USER,
            auto_reject_enabled=True,
            auto_reject_threshold=45,
            auto_shortlist_enabled=True,
        )
        config = triage_service.get_automation_config("job-1", RECRUITER_USER)
        assert config.auto_reject_threshold == 45
        assert config.auto_shortlist_threshold == 80
        assert config.is_active

    def test_configure_is_idempotent(self, triage_service, automation_repository):
        for _ in range(2):
            triage_service.configure_automation("job-1", RECRUITER_USER, auto_reject_enabled=True)
        assert len(automation_repository.configs) == 1

    def test_zero_threshold_kept(self, triage_service):
        config = triage_service.configure_automation(
            "job-1", RECRUITER_USER, auto_reject_enabled=True, auto_reject_threshold=0
        )
        assert config.auto_reject_threshold == 0

    @pytest.mark.parametrize("field,value", [("auto_reject_threshold", 101), ("auto_shortlist_threshold", -5)])
    def test_threshold_out_of_range(self, triage_service, automation_repository, field, value):
        with pytest.raises(InputError) as exc:
            triage_service.configure_automation("job-1", RECRUITER_USER, **{field: value})
        assert exc.value.field == field
        assert automation_repository.upserts == 0

    def test_not_owner(self, triage_service, automation_repository):
        with pytest.raises(JobNotFoundError):
            triage_service.configure_automation("job-1", OTHER_USER, auto_reject_enabled=True)
        assert automation_repository.upserts == 0


# ── Automation run ───────────────────────────────────────────────────────────


class TestRunAutomation:
    @pytest.fixture
    def applications(
        self, candidate_store, public_store, make_candidate_application, make_public_application
    ):
        candidate_store.add(make_candidate_application(id="1", resume_text=STRONG_RESUME))
        candidate_store.add(make_candidate_application(id="2", resume_text=WEAK_RESUME))
        candidate_store.add(make_candidate_application(id="3", resume_text=""))
        candidate_store.add(
            make_candidate_application(id="4", resume_text=WEAK_RESUME, status=ApplicationStatus.INTERVIEW)
        )
        public_store.add(make_public_application(id="1", resume_text=WEAK_RESUME))
        public_store.add(make_public_application(id="2", resume_text=STRONG_RESUME, job_id="job-2"))

    def test_disabled_config_changes_nothing(self, triage_service, candidate_store, applications):
        report = triage_service.run_automation("job-1", RECRUITER_USER)
        assert report.scored == 3
        assert report.skipped == 1
        assert set(report.decisions.values()) == {"none"}
        assert report.results == ()
        assert candidate_store.status_of("1") == ApplicationStatus.NEW

    def test_applies_decisions(
        self, triage_service, automation_repository, candidate_store, public_store,
        activity_repository, notifier, applications,
    ):
        automation_repository.configs["job-1"] = AutomationConfig(
            job_id="job-1",
            auto_reject_enabled=True,
            auto_reject_threshold=60,
            auto_shortlist_enabled=True,
            auto_shortlist_threshold=80,
        )

        report = triage_service.run_automation("job-1", RECRUITER_USER)

        assert report.decisions == {
            "candidate-1": AutomationAction.AUTO_SHORTLIST.value,
            "candidate-2": AutomationAction.AUTO_REJECT.value,
            "public-1": AutomationAction.AUTO_REJECT.value,
        }
        assert report.changed_count == 3
        assert candidate_store.status_of("1") == ApplicationStatus.SHORTLISTED
        assert candidate_store.status_of("2") == ApplicationStatus.REJECTED
        assert public_store.status_of("1") == ApplicationStatus.REJECTED
        # Only new applications are considered
        assert candidate_store.status_of("4") == ApplicationStatus.INTERVIEW
        assert public_store.status_of("2") == ApplicationStatus.NEW

        assert notifier.calls == [(["candidate-2", "public-1"], "rejected")]

        automated = [e for e in activity_repository.entries if e.is_automated]
        assert sorted(e.client_application_id for e in automated) == [
            "candidate-1", "candidate-2", "public-1",
        ]
        assert all(e.performed_by == SYSTEM_ACTOR for e in automated)
        assert all("score" in e.details for e in automated)

    def test_scores_are_stored(self, triage_service, candidate_store, applications):
        triage_service.run_automation("job-1", RECRUITER_USER)
        assert candidate_store.documents["1"].ai_analysis is not None
        assert candidate_store.documents["3"].ai_analysis is None

    def test_not_owner(self, triage_service, applications):
        with pytest.raises(JobNotFoundError):
            triage_service.run_automation("job-1", OTHER_USER)


# ── Batch and single status changes ──────────────────────────────────────────


class TestApplyBatch:
    def test_records_activity_for_changed_applications(
        self, triage_service, candidate_store, public_store, activity_repository,
        make_candidate_application, make_public_application,
    ):
        candidate_store.add(make_candidate_application(id="1"))
        candidate_store.add(make_candidate_application(id="9", job_id="job-2"))
        public_store.add(make_public_application(id="1"))

        result = triage_service.apply_batch(
            "job-1", ["candidate-1", "candidate-9", "public-1"], "interview", RECRUITER_USER
        )

        assert result.updated_count == 2
        assert sorted(e.client_application_id for e in activity_repository.entries) == [
            "candidate-1", "public-1",
        ]
        assert all(e.performed_by == RECRUITER_USER for e in activity_repository.entries)
        assert all(e.action == "interview" for e in activity_repository.entries)

    def test_failed_bucket_gets_no_activity(
        self, triage_service, candidate_store, public_store, activity_repository,
        make_candidate_application, make_public_application,
    ):
        candidate_store.add(make_candidate_application(id="1"))
        public_store.add(make_public_application(id="1"))
        public_store.fail_with = RuntimeError("boom")

        result = triage_service.apply_batch(
            "job-1", ["candidate-1", "public-1"], "offer", RECRUITER_USER
        )

        assert result.partial_failure
        assert [e.client_application_id for e in activity_repository.entries] == ["candidate-1"]

    def test_activity_failure_does_not_fail_batch(
        self, triage_service, candidate_store, activity_repository, make_candidate_application
    ):
        def broken(entries):
            raise ConnectionError("activity store down")

        activity_repository.record = broken
        candidate_store.add(make_candidate_application(id="1"))

        result = triage_service.apply_batch("job-1", ["candidate-1"], "offer", RECRUITER_USER)
        assert result.updated_count == 1

    def test_activity_lookup_failure_does_not_fail_batch(
        self, triage_service, candidate_store, activity_repository, make_candidate_application
    ):
        def read_replica_down(raw_ids, job_id):
            raise ConnectionError("read replica down")

        candidate_store.ids_in_job = read_replica_down
        candidate_store.add(make_candidate_application(id="1"))

        result = triage_service.apply_batch("job-1", ["candidate-1"], "offer", RECRUITER_USER)

        assert result.updated_count == 1
        assert candidate_store.status_of("1") == ApplicationStatus.OFFER
        assert activity_repository.entries == []

    def test_activity_lookup_failure_async(
        self, triage_service, candidate_store, make_candidate_application
    ):
        def read_replica_down(raw_ids, job_id):
            raise ConnectionError("read replica down")

        candidate_store.ids_in_job = read_replica_down
        candidate_store.add(make_candidate_application(id="1"))

        result = asyncio.run(
            triage_service.apply_batch_async("job-1", ["candidate-1"], "hired", RECRUITER_USER)
        )

        assert result.updated_count == 1

    def test_activity_lookup_failure_during_automation(
        self, triage_service, automation_repository, candidate_store, make_candidate_application
    ):
        def read_replica_down(raw_ids, job_id):
            raise ConnectionError("read replica down")

        automation_repository.configs["job-1"] = AutomationConfig(
            job_id="job-1", auto_shortlist_enabled=True, auto_shortlist_threshold=80
        )
        candidate_store.ids_in_job = read_replica_down
        candidate_store.add(make_candidate_application(id="1", resume_text=STRONG_RESUME))

        report = triage_service.run_automation("job-1", RECRUITER_USER)

        assert report.changed_count == 1
        assert candidate_store.status_of("1") == ApplicationStatus.SHORTLISTED

    def test_batch_request_record(self, triage_service, public_store, make_public_application):
        public_store.add(make_public_application(id="1"))
        request = BatchRequest.model_validate({"applicationIds": ["public-1"], "action": "shortlisted"})

        result = triage_service.apply_request("job-1", request, RECRUITER_USER)

        assert result.updated_count == 1
        assert public_store.status_of("1") == ApplicationStatus.SHORTLISTED

    def test_async(self, triage_service, candidate_store, public_store, make_candidate_application, make_public_application):
        candidate_store.add(make_candidate_application(id="1"))
        public_store.add(make_public_application(id="1"))

        result = asyncio.run(
            triage_service.apply_batch_async("job-1", ["candidate-1", "public-1"], "hired", RECRUITER_USER)
        )
        assert result.updated_count == 2


class TestRejectApplication:
    def test_rejects_and_logs(
        self, triage_service, public_store, activity_repository, notifier, make_public_application
    ):
        public_store.add(make_public_application(id="7"))

        updated = triage_service.reject_application(
            "job-1", "public-7", RECRUITER_USER,
            reasons=["Missing required skills", "  "],
            custom_message="Thanks for applying",
            send_email=True,
        )

        assert updated.status == ApplicationStatus.REJECTED
        entry = activity_repository.entries[0]
        assert entry.application_kind == ApplicationKind.PUBLIC
        assert entry.details["reasons"] == ["Missing required skills"]
        assert entry.details["email_sent"] is True
        assert notifier.calls == [(["public-7"], "rejected")]

    def test_no_email_by_default(self, triage_service, public_store, notifier, make_public_application):
        public_store.add(make_public_application(id="7"))
        triage_service.reject_application("job-1", "public-7", RECRUITER_USER, reasons=["Other"])
        assert notifier.calls == []

    @pytest.mark.parametrize("reasons", [[], ["", "   "], None])
    def test_reasons_required(self, triage_service, reasons):
        with pytest.raises(InputError) as exc:
            triage_service.reject_application("job-1", "public-7", RECRUITER_USER, reasons=reasons)
        assert exc.value.field == "reasons"

    def test_bad_prefix(self, triage_service):
        with pytest.raises(InputError, match="Invalid application ID format"):
            triage_service.reject_application("job-1", "7", RECRUITER_USER, reasons=["x"])

    def test_unknown_application(self, triage_service):
        with pytest.raises(ApplicationNotFoundError):
            triage_service.reject_application("job-1", "candidate-404", RECRUITER_USER, reasons=["x"])


# ── Listing ──────────────────────────────────────────────────────────────────


class TestListApplications:
    def test_merged_newest_first(
        self, triage_service, candidate_store, public_store,
        make_candidate_application, make_public_application,
    ):
        candidate_store.add(make_candidate_application(id="1", age_minutes=30))
        candidate_store.add(
            make_candidate_application(id="2", age_minutes=10, status=ApplicationStatus.SHORTLISTED)
        )
        candidate_store.add(make_candidate_application(id="3", job_id="job-2"))
        public_store.add(make_public_application(id="1", age_minutes=20, full_name=None))

        listing = triage_service.list_applications("job-1", RECRUITER_USER)

        assert [a.id for a in listing.applications] == ["candidate-2", "public-1", "candidate-1"]
        assert listing.candidate_count == 2
        assert listing.public_count == 1
        assert listing.total == 3
        assert listing.by_status == {"new": 2, "shortlisted": 1}
        assert listing.applications[1].candidate_name == "Anonymous Applicant"

    def test_not_owner(self, triage_service):
        with pytest.raises(JobNotFoundError):
            triage_service.list_applications("job-1", OTHER_USER)
