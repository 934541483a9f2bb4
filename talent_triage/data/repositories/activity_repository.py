"""
Application activity log repository for Talent-Triage.

Activity entries are append-only.
"""

from typing import Optional

from talent_triage.data.models.activity import ApplicationActivityLog
from talent_triage.utils.logger import get_logger

from .base import BaseRepository

logger = get_logger(__name__)


class ActivityLogRepository(BaseRepository[ApplicationActivityLog]):
    """Repository for application activity entries."""

    @property
    def collection_name(self) -> str:
        return ApplicationActivityLog.Settings.name

    @property
    def model_class(self) -> type[ApplicationActivityLog]:
        return ApplicationActivityLog

    def record(self, entries: list[ApplicationActivityLog]) -> int:
        """
        Append activity entries.

        Returns:
            Number of entries written
        """
        if not entries:
            return 0
        documents = [self._to_document(entry) for entry in entries]
        result = self._get_sync_collection().insert_many(documents)
        logger.debug(f"Recorded {len(result.inserted_ids)} activity entries")
        return len(result.inserted_ids)


# Singleton instance
_activity_repository: Optional[ActivityLogRepository] = None


def get_activity_log_repository() -> ActivityLogRepository:
    """Get the activity log repository singleton instance."""
    global _activity_repository
    if _activity_repository is None:
        _activity_repository = ActivityLogRepository()
    return _activity_repository
