"""Initial setup script for the Persons API datastore."""

from __future__ import annotations

import asyncio
import logging

from personsapi.core.config import settings
from personsapi.core.database import database_manager
from personsapi.store import PersonStore

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def setup_mongodb() -> None:
    store = PersonStore(database_manager.persons())
    await store.ensure_indexes()
    logger.info(
        "Ensured unique identification index on %s.%s",
        settings.MONGODB_DATABASE,
        settings.MONGODB_COLLECTION,
    )


async def main() -> None:
    await database_manager.initialize()
    try:
        await setup_mongodb()
    finally:
        await database_manager.close()


if __name__ == "__main__":
    asyncio.run(main())
