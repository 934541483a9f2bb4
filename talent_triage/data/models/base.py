"""
Base model classes for Talent-Triage data models.

Provides common fields and functionality shared across all models.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


class TimestampMixin(BaseModel):
    """Mixin providing timestamp fields for models."""

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class BaseDocument(TimestampMixin):
    """
    Base document model for MongoDB collections.

    Documents are stored with snake_case keys and a string ``_id``; the
    API representation uses camelCase keys and ``id``.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
    )

    id: Optional[str] = Field(default=None, alias="_id")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Optional[str]:
        """Store ids as strings whatever the driver hands back (int, ObjectId)."""
        return None if v is None else str(v)

    def model_dump_mongo(self) -> dict[str, Any]:
        """Convert model to MongoDB-compatible dictionary."""
        data = self.model_dump(by_alias=True, exclude_none=True)
        if data.get("_id") is None:
            data.pop("_id", None)
        return data

    def to_api(self) -> dict[str, Any]:
        """JSON-serializable representation with camelCase keys."""
        data = self.model_dump(mode="json", by_alias=False)
        return {to_camel(key): value for key, value in data.items()}


class ApiModel(BaseModel):
    """
    Immutable value record exchanged with callers.

    Serializes with camelCase names (``model_dump(by_alias=True)``) and
    accepts either spelling on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        frozen=True,
    )

    def to_api(self) -> dict[str, Any]:
        """JSON-serializable representation with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
