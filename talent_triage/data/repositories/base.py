"""
Base repository class providing common CRUD operations.

All entity-specific repositories inherit from this base class.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar
from uuid import uuid4

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.collection import Collection
from pymongo.results import InsertOneResult, UpdateResult

from talent_triage.data.database import DatabaseManager, get_database_manager
from talent_triage.data.models.base import BaseDocument, utcnow
from talent_triage.utils.logger import get_logger

logger = get_logger(__name__)

# Type variable for document models
T = TypeVar("T", bound=BaseDocument)


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base repository providing common database operations.

    Implements both synchronous and asynchronous CRUD operations.
    Documents use string ``_id`` values; ids are generated on insert
    when the model does not carry one.
    """

    @property
    @abstractmethod
    def collection_name(self) -> str:
        """Name of the MongoDB collection."""

    @property
    @abstractmethod
    def model_class(self) -> type[T]:
        """Pydantic model class for this repository."""

    def __init__(self, db_manager: Optional[DatabaseManager] = None) -> None:
        self._db_manager = db_manager or get_database_manager()

    # -------------------------------------------------------------------------
    # Collection Access
    # -------------------------------------------------------------------------

    def _get_sync_collection(self) -> Collection:
        return self._db_manager.get_sync_collection(self.collection_name)

    def _get_async_collection(self) -> AsyncIOMotorCollection:
        return self._db_manager.get_async_collection(self.collection_name)

    # -------------------------------------------------------------------------
    # Document Conversion
    # -------------------------------------------------------------------------

    def _to_model(self, document: Optional[dict[str, Any]]) -> Optional[T]:
        """Convert MongoDB document to Pydantic model."""
        if document is None:
            return None
        return self.model_class.model_validate(document)

    def _to_models(self, documents: list[dict[str, Any]]) -> list[T]:
        return [self._to_model(doc) for doc in documents if doc is not None]

    def _to_document(self, model: T) -> dict[str, Any]:
        """Convert Pydantic model to a MongoDB document ready for insert."""
        document = model.model_dump_mongo()
        document.setdefault("_id", uuid4().hex)
        now = utcnow()
        document["created_at"] = now
        document["updated_at"] = now
        return document

    # -------------------------------------------------------------------------
    # Synchronous CRUD Operations
    # -------------------------------------------------------------------------

    def create(self, model: T) -> T:
        """Create a new document."""
        collection = self._get_sync_collection()
        document = self._to_document(model)
        result: InsertOneResult = collection.insert_one(document)
        logger.debug(f"Created {self.collection_name} document: {result.inserted_id}")
        return self.model_class.model_validate(document)

    def get_by_id(self, id_value: str) -> Optional[T]:
        """Get a document by its ID."""
        document = self._get_sync_collection().find_one({"_id": str(id_value)})
        return self._to_model(document)

    def find(
        self,
        query: dict[str, Any],
        skip: int = 0,
        limit: int = 100,
        sort_by: str = "created_at",
        sort_order: int = -1,
    ) -> list[T]:
        """Find documents matching a query."""
        cursor = (
            self._get_sync_collection()
            .find(query)
            .sort(sort_by, sort_order)
            .skip(skip)
            .limit(limit)
        )
        return self._to_models(list(cursor))

    def find_one(self, query: dict[str, Any]) -> Optional[T]:
        """Find a single document matching a query."""
        return self._to_model(self._get_sync_collection().find_one(query))

    def update(self, id_value: str, update_data: dict[str, Any]) -> Optional[T]:
        """Update a document by ID; returns the stored document, None if it does not exist."""
        update_data = {**update_data, "updated_at": utcnow()}
        result: UpdateResult = self._get_sync_collection().update_one(
            {"_id": str(id_value)},
            {"$set": update_data},
        )
        if result.matched_count == 0:
            return None
        logger.debug(f"Updated {self.collection_name} document: {id_value}")
        return self.get_by_id(id_value)

    def update_many(self, query: dict[str, Any], update_data: dict[str, Any]) -> int:
        """
        Update every document matching a query.

        Returns:
            Number of documents modified
        """
        update_data = {**update_data, "updated_at": utcnow()}
        result: UpdateResult = self._get_sync_collection().update_many(
            query, {"$set": update_data}
        )
        logger.debug(f"Updated {result.modified_count} {self.collection_name} documents")
        return result.modified_count

    def exists(self, query: dict[str, Any]) -> bool:
        """Check if any document matches the query."""
        return self._get_sync_collection().count_documents(query, limit=1) > 0

    # -------------------------------------------------------------------------
    # Asynchronous CRUD Operations
    # -------------------------------------------------------------------------

    async def find_one_async(self, query: dict[str, Any]) -> Optional[T]:
        """Find a single document matching a query asynchronously."""
        return self._to_model(await self._get_async_collection().find_one(query))

    async def update_many_async(
        self, query: dict[str, Any], update_data: dict[str, Any]
    ) -> int:
        """Update every document matching a query asynchronously."""
        update_data = {**update_data, "updated_at": utcnow()}
        result: UpdateResult = await self._get_async_collection().update_many(
            query, {"$set": update_data}
        )
        logger.debug(f"Updated {result.modified_count} {self.collection_name} documents")
        return result.modified_count

    async def exists_async(self, query: dict[str, Any]) -> bool:
        """Check if any document matches the query asynchronously."""
        count = await self._get_async_collection().count_documents(query, limit=1)
        return count > 0
