import asyncio

import pytest
from mongomock_motor import AsyncMongoMockClient

from personsapi.store import PersonStore


@pytest.fixture
def juan():
    return {
        "identification": "12345678",
        "name": "Juan",
        "lastName": "Perez",
        "age": 30,
        "photo": "http://example.com/photo.jpg",
        "addresses": [{"street": "Main", "number": 1, "city": "Springfield"}],
    }


@pytest.fixture
def store():
    collection = AsyncMongoMockClient()["APINEXOPERSON"]["persons"]
    person_store = PersonStore(collection)
    # Private loop so the fixture never touches the loop pytest-asyncio installs
    loop = asyncio.new_event_loop()
    try:
        loop.run_until_complete(person_store.ensure_indexes())
    finally:
        loop.close()
    return person_store
