"""Batch status transitions across both application variants."""

from .orchestrator import (
    ApplicationStore,
    BatchStatusOrchestrator,
    JobAccess,
    Notifier,
    parse_batch_action,
)

__all__ = [
    "ApplicationStore",
    "BatchStatusOrchestrator",
    "JobAccess",
    "Notifier",
    "parse_batch_action",
]
