"""
Pydantic data models and schemas for Talent-Triage.

This module provides all data models used throughout the application,
including database documents and API records.
"""

# Base models
from .base import ApiModel, BaseDocument, TimestampMixin

# Match models
from .match import MatchResult, ScoreInput

# Application models
from .application import (
    ApplicationBase,
    ApplicationListing,
    ApplicationSummary,
    CandidateApplication,
    PublicApplication,
)

# Job models
from .job import JobPosting, Recruiter

# Automation models
from .automation import AutomationConfig, AutomationConfigUpdate, TriageReport

# Batch models
from .batch import BatchRequest, BatchResult, BucketError, BucketOutcome

# Activity models
from .activity import (
    SYSTEM_ACTOR,
    ApplicationActivityLog,
    create_status_change_activity,
)

__all__ = [
    # Base
    "ApiModel",
    "BaseDocument",
    "TimestampMixin",
    # Match
    "MatchResult",
    "ScoreInput",
    # Application
    "ApplicationBase",
    "ApplicationListing",
    "ApplicationSummary",
    "CandidateApplication",
    "PublicApplication",
    # Job
    "JobPosting",
    "Recruiter",
    # Automation
    "AutomationConfig",
    "AutomationConfigUpdate",
    "TriageReport",
    # Batch
    "BatchRequest",
    "BatchResult",
    "BucketError",
    "BucketOutcome",
    # Activity
    "SYSTEM_ACTOR",
    "ApplicationActivityLog",
    "create_status_change_activity",
]
