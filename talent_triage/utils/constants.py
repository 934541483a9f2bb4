"""
Application-wide constants for Talent-Triage.

This module contains all constant values used throughout the application.
Modify these values to customize behavior without changing code logic.
"""

from enum import Enum
from typing import Final, Optional


# =============================================================================
# Application Constants
# =============================================================================

APP_NAME: Final[str] = "Talent-Triage"
APP_DISPLAY_NAME: Final[str] = "Candidate Matching and Automated Triage Engine"
VERSION: Final[str] = "0.1.0"


# =============================================================================
# Skill Vocabularies
# =============================================================================

# Versioned reference vocabularies. The active version is picked at startup
# from MatchingSettings.skill_vocabulary_version; entries are already in
# normalized (lower-case) form and their order is the reporting order.
SKILL_VOCABULARIES: Final[dict[str, tuple[str, ...]]] = {
    "2024.1": (
        "javascript", "typescript", "react", "next.js", "node", "node.js",
        "python", "java", "c#", "sql", "postgres", "mysql", "mongodb",
        "aws", "azure", "gcp", "docker", "kubernetes", "git", "ci/cd",
        "rest", "graphql", "testing", "cypress", "jest", "playwright",
        "html", "css", "sass", "tailwind", "redux", "vue", "angular",
        "go", "rust", "redis", "rabbitmq", "kafka", "terraform", "ansible",
        "linux", "bash", "power bi", "tableau",
    ),
}

DEFAULT_SKILL_VOCABULARY_VERSION: Final[str] = "2024.1"


# =============================================================================
# Scoring Constants
# =============================================================================

# Weights of the component scores in the overall score
DEFAULT_SCORING_WEIGHTS: Final[dict[str, float]] = {
    "skills_match": 0.50,
    "experience_match": 0.35,
    "education_match": 0.15,
}

# Used when the job text names no known skill at all
NEUTRAL_SKILLS_SCORE: Final[int] = 60

EXPERIENCE_BASELINE_SCORE: Final[int] = 50
EXPERIENCE_SCORE_BOUNDS: Final[tuple[int, int]] = (30, 95)
MAX_COUNTED_EXPERIENCE_YEARS: Final[int] = 40

# Seniority signal words, checked in this order
SENIORITY_SIGNALS: Final[dict[str, tuple[str, ...]]] = {
    "senior": ("senior", "lead", "principal", "staff"),
    "mid": ("mid", "intermediate"),
    "junior": ("junior", "entry"),
}

# Education tiers, highest first; the first tier with a keyword hit wins
EDUCATION_TIERS: Final[tuple[tuple[int, tuple[str, ...]], ...]] = (
    (95, ("phd", "doctorate")),
    (90, ("master's", "masters", "msc")),
    (80, ("bachelor", "bsc", "degree")),
    (70, ("diploma", "certificate")),
)
DEFAULT_EDUCATION_SCORE: Final[int] = 60

# Recommendation triggers
MAX_RECOMMENDED_SKILLS: Final[int] = 7
EXPERIENCE_RECOMMENDATION_THRESHOLD: Final[int] = 70
EDUCATION_RECOMMENDATION_THRESHOLD: Final[int] = 75
SKILLS_RECOMMENDATION_THRESHOLD: Final[int] = 75


# =============================================================================
# Automation Constants
# =============================================================================

DEFAULT_AUTO_REJECT_THRESHOLD: Final[int] = 60
DEFAULT_AUTO_SHORTLIST_THRESHOLD: Final[int] = 80


# =============================================================================
# Enums
# =============================================================================


class ApplicationStatus(str, Enum):
    """Status of an application in the hiring pipeline."""

    NEW = "new"
    SHORTLISTED = "shortlisted"
    REJECTED = "rejected"
    INTERVIEW = "interview"
    OFFER = "offer"
    HIRED = "hired"
    WITHDRAWN = "withdrawn"


# Statuses a recruiter may apply through a batch action
BATCH_ACTIONS: Final[frozenset[ApplicationStatus]] = frozenset(
    {
        ApplicationStatus.SHORTLISTED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.INTERVIEW,
        ApplicationStatus.OFFER,
        ApplicationStatus.HIRED,
        ApplicationStatus.WITHDRAWN,
    }
)


class ApplicationKind(str, Enum):
    """The two shapes an application can take."""

    CANDIDATE = "candidate"  # linked to a registered user
    PUBLIC = "public"  # anonymous submission

    @property
    def id_prefix(self) -> str:
        """Prefix used for this kind in client-facing ids."""
        return f"{self.value}-"


class AutomationAction(str, Enum):
    """Outcome of evaluating a job's automation thresholds."""

    NONE = "none"
    AUTO_SHORTLIST = "auto_shortlist"
    AUTO_REJECT = "auto_reject"

    @property
    def target_status(self) -> Optional[ApplicationStatus]:
        """Application status this action transitions to, if any."""
        if self is AutomationAction.AUTO_SHORTLIST:
            return ApplicationStatus.SHORTLISTED
        if self is AutomationAction.AUTO_REJECT:
            return ApplicationStatus.REJECTED
        return None


class JobStatus(str, Enum):
    """Status of a job posting."""

    DRAFT = "draft"
    OPEN = "open"
    PAUSED = "paused"
    CLOSED = "closed"
    FILLED = "filled"


class AuditAction(str, Enum):
    """Types of actions that can be audited."""

    APPLICATION_SCORED = "application_scored"
    APPLICATION_STATUS_CHANGED = "application_status_changed"
    APPLICATION_REJECTED = "application_rejected"
    AUTOMATION_CONFIGURED = "automation_configured"
    AUTOMATION_DECIDED = "automation_decided"
    BATCH_BUCKET_FAILED = "batch_bucket_failed"
