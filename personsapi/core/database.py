"""Database connectivity layer for the Persons API."""

from __future__ import annotations

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from personsapi.core.config import settings
from personsapi.core.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Owns the process-wide MongoDB client."""

    def __init__(self) -> None:
        self.mongodb: Optional[AsyncIOMotorClient] = None

    async def initialize(self) -> None:
        """Create the MongoDB client. Motor connects lazily on first use."""

        logger.info(
            "Connecting to MongoDB at %s/%s",
            settings.MONGODB_URL,
            settings.MONGODB_DATABASE,
        )
        self.mongodb = AsyncIOMotorClient(str(settings.MONGODB_URL))

    async def close(self) -> None:
        """Tear down the client gracefully."""

        if self.mongodb is not None:
            logger.info("Closing MongoDB connection")
            self.mongodb.close()
            self.mongodb = None

    def persons(self) -> AsyncIOMotorCollection:
        if self.mongodb is None:
            raise StoreUnavailableError(error="Person store is unavailable. Ensure MongoDB is configured.")
        return self.mongodb[settings.MONGODB_DATABASE][settings.MONGODB_COLLECTION]

    async def ping(self) -> bool:
        if self.mongodb is None:
            return False
        try:
            await self.mongodb.admin.command("ping")
        except PyMongoError as exc:
            logger.warning("MongoDB ping failed: %s", exc)
            return False
        return True


# Singleton instance shared by request handlers
database_manager = DatabaseManager()
