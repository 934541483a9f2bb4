"""
Utility modules for Talent-Triage.

This package contains shared utilities used across the application:
- config: Configuration management
- logger: Logging infrastructure
- constants: Application-wide constants
"""

from talent_triage.utils.config import (
    AppSettings,
    get_settings,
    reload_settings,
    ROOT_DIR,
)
from talent_triage.utils.constants import (
    APP_NAME,
    APP_DISPLAY_NAME,
    VERSION,
    ApplicationKind,
    ApplicationStatus,
    AuditAction,
    AutomationAction,
    JobStatus,
)
from talent_triage.utils.logger import (
    setup_logging,
    get_logger,
    audit_log,
    LoggerMixin,
)

__all__ = [
    # Config
    "AppSettings",
    "get_settings",
    "reload_settings",
    "ROOT_DIR",
    # Constants
    "APP_NAME",
    "APP_DISPLAY_NAME",
    "VERSION",
    "ApplicationKind",
    "ApplicationStatus",
    "AuditAction",
    "AutomationAction",
    "JobStatus",
    # Logger
    "setup_logging",
    "get_logger",
    "audit_log",
    "LoggerMixin",
]
