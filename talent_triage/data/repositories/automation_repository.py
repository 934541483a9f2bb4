"""
Automation config repository for Talent-Triage.

Stores at most one AutomationConfig per job.
"""

from typing import Optional
from uuid import uuid4

from pymongo import ReturnDocument

from talent_triage.data.models.automation import AutomationConfig
from talent_triage.data.models.base import utcnow
from talent_triage.utils.logger import get_logger

from .base import BaseRepository

logger = get_logger(__name__)


class AutomationConfigRepository(BaseRepository[AutomationConfig]):
    """Repository for per-job automation configs."""

    @property
    def collection_name(self) -> str:
        return AutomationConfig.Settings.name

    @property
    def model_class(self) -> type[AutomationConfig]:
        return AutomationConfig

    def get_for_job(self, job_id: str) -> Optional[AutomationConfig]:
        return self.find_one({"job_id": str(job_id)})

    def upsert_for_job(self, config: AutomationConfig) -> AutomationConfig:
        """Replace the job's config in one atomic write, creating it on first write."""
        now = utcnow()
        fields = config.model_dump(exclude={"id", "created_at", "updated_at"})
        document = self._get_sync_collection().find_one_and_update(
            {"job_id": str(config.job_id)},
            {
                "$set": {**fields, "updated_at": now},
                "$setOnInsert": {"_id": uuid4().hex, "created_at": now},
            },
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        logger.info(f"Saved automation config for job {config.job_id}")
        return self._to_model(document)


# Singleton instance
_automation_repository: Optional[AutomationConfigRepository] = None


def get_automation_config_repository() -> AutomationConfigRepository:
    """Get the automation config repository singleton instance."""
    global _automation_repository
    if _automation_repository is None:
        _automation_repository = AutomationConfigRepository()
    return _automation_repository
