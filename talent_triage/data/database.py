"""
Database connection manager for Talent-Triage.

Provides MongoDB connection management with both synchronous (PyMongo)
and asynchronous (Motor) client support.
"""

from typing import Any, Optional
from urllib.parse import quote_plus

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

from talent_triage.data.models import (
    ApplicationActivityLog,
    AutomationConfig,
    CandidateApplication,
    JobPosting,
    PublicApplication,
    Recruiter,
)
from talent_triage.utils.config import get_settings
from talent_triage.utils.logger import get_logger

logger = get_logger(__name__)

# Documents whose collections and indexes this service manages
DOCUMENT_MODELS = (
    CandidateApplication,
    PublicApplication,
    JobPosting,
    Recruiter,
    AutomationConfig,
    ApplicationActivityLog,
)


class DatabaseManager:
    """
    Manages MongoDB database connections.

    Supports both synchronous and asynchronous operations.
    Implements singleton pattern for connection reuse.
    """

    _instance: Optional["DatabaseManager"] = None
    _sync_client: Optional[MongoClient] = None
    _async_client: Optional[AsyncIOMotorClient] = None

    def __new__(cls) -> "DatabaseManager":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if getattr(self, "_initialized", False):
            return

        db_settings = get_settings().database
        self._db_name = db_settings.name
        self._uri = self._build_uri(
            db_settings.host, db_settings.port, db_settings.username, db_settings.password
        )
        self._initialized = True

    @staticmethod
    def _build_uri(
        host: str, port: int, username: Optional[str], password: Optional[str]
    ) -> str:
        """
        Build MongoDB connection URI.

        Credentials are URL-encoded; hosts containing shell metacharacters
        are rejected.
        """
        host = host.strip()
        if not host or any(c in host for c in ";&|$`"):
            raise ValueError(f"Invalid database host: {host}")

        auth = ""
        if username and password:
            auth = f"{quote_plus(username)}:{quote_plus(password)}@"

        return f"mongodb://{auth}{host}:{port}"

    @property
    def database_name(self) -> str:
        return self._db_name

    # -------------------------------------------------------------------------
    # Synchronous Client
    # -------------------------------------------------------------------------

    def get_sync_client(self) -> MongoClient:
        """Get or create synchronous MongoDB client."""
        if self._sync_client is None:
            logger.info("Creating synchronous MongoDB client")
            self._sync_client = MongoClient(
                self._uri,
                serverSelectionTimeoutMS=5000,
                connectTimeoutMS=5000,
                maxPoolSize=50,
            )
        return self._sync_client

    def get_sync_database(self) -> Database:
        return self.get_sync_client()[self._db_name]

    def get_sync_collection(self, collection_name: str) -> Any:
        """Get a synchronous collection by name."""
        return self.get_sync_database()[collection_name]

    def check_sync_connection(self) -> bool:
        """Check if synchronous connection is healthy."""
        try:
            self.get_sync_client().admin.command("ping")
            return True
        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            logger.error(f"Sync connection check failed: {e}")
            self._sync_client = None
            return False

    # -------------------------------------------------------------------------
    # Asynchronous Client
    # -------------------------------------------------------------------------

    def get_async_client(self) -> AsyncIOMotorClient:
        """Get or create asynchronous MongoDB client."""
        if self._async_client is None:
            logger.info("Creating asynchronous MongoDB client")
            self._async_client = AsyncIOMotorClient(
                self._uri,
                serverSelectionTimeoutMS=5000,
                connectTimeoutMS=5000,
                maxPoolSize=50,
            )
        return self._async_client

    def get_async_database(self) -> AsyncIOMotorDatabase:
        return self.get_async_client()[self._db_name]

    def get_async_collection(self, collection_name: str) -> Any:
        """Get an asynchronous collection by name."""
        return self.get_async_database()[collection_name]

    # -------------------------------------------------------------------------
    # Lifecycle Management
    # -------------------------------------------------------------------------

    def close_all(self) -> None:
        """Close all database connections."""
        if self._sync_client:
            logger.info("Closing synchronous MongoDB client")
            self._sync_client.close()
            self._sync_client = None
        if self._async_client:
            logger.info("Closing asynchronous MongoDB client")
            self._async_client.close()
            self._async_client = None

    # -------------------------------------------------------------------------
    # Index Management
    # -------------------------------------------------------------------------

    def ensure_indexes(self) -> list[str]:
        """
        Create the indexes declared on each document's Settings.

        Returns:
            Names of the collections that were indexed
        """
        logger.info("Ensuring database indexes")
        indexed = []
        for model in DOCUMENT_MODELS:
            collection = self.get_sync_collection(model.Settings.name)
            for field in model.Settings.indexes:
                collection.create_index(field)
            # A field may not carry both a plain and a unique index
            for field in getattr(model.Settings, "unique_indexes", ()):
                collection.create_index(field, unique=True, name=f"{field}_unique")
            indexed.append(model.Settings.name)
        logger.info(f"Indexes ensured on {len(indexed)} collections")
        return indexed


# Global database manager instance
_db_manager: Optional[DatabaseManager] = None


def get_database_manager() -> DatabaseManager:
    """Get the global database manager instance."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager

