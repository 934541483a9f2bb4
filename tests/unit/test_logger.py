"""
Tests for talent_triage.utils.logger — audit entries and redaction.
"""

import pytest
from loguru import logger

from talent_triage.utils.logger import LoggerMixin, _sanitize_for_logging, audit_log


@pytest.fixture
def captured():
    """Collect formatted records from a temporary loguru sink."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


class TestSanitize:
    def test_redacts_sensitive_keys(self):
        data = _sanitize_for_logging(
            {"job_id": "job-1", "candidate_email": "a@b.c", "DB_PASSWORD": "x"}
        )
        assert data == {
            "job_id": "job-1",
            "candidate_email": "***REDACTED***",
            "DB_PASSWORD": "***REDACTED***",
        }

    def test_nested(self):
        data = _sanitize_for_logging({"applications": [{"resume_text": "..."}, {"id": "1"}]})
        assert data == {"applications": [{"resume_text": "***REDACTED***"}, {"id": "1"}]}

    def test_scalars_untouched(self):
        assert _sanitize_for_logging(42) == 42


class TestAuditLog:
    def test_binds_audit_type(self, captured):
        audit_log("application_status_changed", {"job_id": "job-1", "updated_count": 2})

        record = captured[-1]
        assert record["extra"]["audit_type"] == "DECISION"
        assert record["message"].startswith("application_status_changed | ")
        assert "'updated_count': 2" in record["message"]

    def test_custom_type_and_redaction(self, captured):
        audit_log("batch_bucket_failed", {"token": "secret"}, audit_type="FAILURE")

        record = captured[-1]
        assert record["extra"]["audit_type"] == "FAILURE"
        assert "secret" not in record["message"]


class TestLoggerMixin:
    def test_logger_bound_to_class_name(self, captured):
        class Worker(LoggerMixin):
            pass

        worker = Worker()
        worker.logger.info("working")

        assert worker.logger is worker.logger
        assert captured[-1]["extra"]["name"] == "Worker"
