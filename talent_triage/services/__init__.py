"""
Business services for Talent-Triage.

This module contains high-level services that orchestrate
business logic across multiple components.
"""

from talent_triage.services.notification_service import (
    LoggingNotificationSender,
    NotificationDispatcher,
    NotificationSender,
    get_notification_dispatcher,
)
from talent_triage.services.triage_service import TriageService, get_triage_service

__all__ = [
    "LoggingNotificationSender",
    "NotificationDispatcher",
    "NotificationSender",
    "TriageService",
    "get_notification_dispatcher",
    "get_triage_service",
]
