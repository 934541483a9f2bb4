"""
Batch status transition models for Talent-Triage.

A batch request is split into one bucket per application variant. Each
bucket succeeds or fails on its own; BatchResult reduces the per-bucket
outcomes into an aggregate count plus the list of failed buckets.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from pydantic import Field

from talent_triage.utils.constants import ApplicationKind, ApplicationStatus

from .base import ApiModel


class BatchRequest(ApiModel):
    """Transient request to move several applications to one status."""

    application_ids: tuple[str, ...] = ()
    action: Optional[str] = None


class BucketError(ApiModel):
    """A bucket whose bulk update failed."""

    kind: ApplicationKind
    application_ids: tuple[str, ...]
    message: str


@dataclass(frozen=True)
class BucketOutcome:
    """Result of one bulk update: a row count or the error that stopped it."""

    kind: ApplicationKind
    raw_ids: tuple[str, ...]
    updated_count: int = 0
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_error(self) -> BucketError:
        return BucketError(
            kind=self.kind,
            application_ids=tuple(f"{self.kind.id_prefix}{raw_id}" for raw_id in self.raw_ids),
            message=str(self.error) or type(self.error).__name__,
        )


class BatchResult(ApiModel):
    """Aggregated outcome of a batch action."""

    updated_count: int = 0
    action: ApplicationStatus
    errors: tuple[BucketError, ...] = Field(default_factory=tuple)

    @classmethod
    def reduce(
        cls, action: ApplicationStatus, outcomes: Iterable[BucketOutcome]
    ) -> "BatchResult":
        """Sum successful buckets and collect the failed ones."""
        updated = 0
        errors: list[BucketError] = []
        for outcome in outcomes:
            if outcome.ok:
                updated += outcome.updated_count
            else:
                errors.append(outcome.to_error())
        return cls(updated_count=updated, action=action, errors=tuple(errors))

    @property
    def partial_failure(self) -> bool:
        """Check if at least one bucket failed."""
        return bool(self.errors)

    @property
    def message(self) -> str:
        if not self.errors:
            return f"Successfully updated {self.updated_count} applications to {self.action}"
        failed = ", ".join(error.kind for error in self.errors)
        return (
            f"Updated {self.updated_count} applications to {self.action}; "
            f"{failed} applications failed"
        )
