"""
Exception hierarchy for Talent-Triage.

InputError subclasses ValueError so callers that already guard against bad
values keep working.
"""

from typing import Optional


class TriageError(Exception):
    """Base class for all errors raised by the triage engine."""


class InputError(TriageError, ValueError):
    """Caller supplied missing or malformed input; nothing was computed."""

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class UnknownActionError(InputError):
    """Batch action is not one of the supported application statuses."""

    def __init__(self, action: object):
        super().__init__(f"Invalid action: {action!r}", field="action")
        self.action = action


class AuthorizationError(TriageError):
    """Requester may not act on the addressed resource."""


class JobNotFoundError(AuthorizationError):
    """
    Requester does not own the job, or the job does not exist.

    Both cases share the same message so that callers cannot probe for
    the existence of other recruiters' jobs.
    """

    def __init__(self, job_id: object):
        super().__init__("Job not found")
        self.job_id = job_id


class ApplicationNotFoundError(TriageError):
    """Application does not exist under the given job."""

    def __init__(self, application_id: str):
        super().__init__("Application not found")
        self.application_id = application_id
