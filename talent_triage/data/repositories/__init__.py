"""
Database repositories for Talent-Triage data access.

This module provides repository classes for all database collections,
implementing the repository pattern for clean data access.
"""

# Base repository
from .base import BaseRepository

# Entity repositories
from .application_repository import (
    ApplicationRepository,
    CandidateApplicationRepository,
    PublicApplicationRepository,
    get_candidate_application_repository,
    get_public_application_repository,
)
from .job_repository import (
    JobRepository,
    RecruiterRepository,
    get_job_repository,
    get_recruiter_repository,
)
from .automation_repository import (
    AutomationConfigRepository,
    get_automation_config_repository,
)
from .activity_repository import ActivityLogRepository, get_activity_log_repository

__all__ = [
    # Base
    "BaseRepository",
    # Applications
    "ApplicationRepository",
    "CandidateApplicationRepository",
    "PublicApplicationRepository",
    "get_candidate_application_repository",
    "get_public_application_repository",
    # Jobs
    "JobRepository",
    "RecruiterRepository",
    "get_job_repository",
    "get_recruiter_repository",
    # Automation
    "AutomationConfigRepository",
    "get_automation_config_repository",
    # Activity
    "ActivityLogRepository",
    "get_activity_log_repository",
]
