from __future__ import annotations

from personsapi.core.database import database_manager
from personsapi.store import PersonStore


async def get_db():
    return database_manager


async def get_person_store() -> PersonStore:
    return PersonStore(database_manager.persons())
