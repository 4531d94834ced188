"""MongoDB-backed record store for person documents."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import pydantic
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from personsapi.core.exceptions import (
    DuplicateKeyError as DuplicatePersonError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from personsapi.models import Person, PersonFilter

logger = logging.getLogger(__name__)

# Never leak Mongo's internal key to callers
_PROJECTION = {"_id": 0}


def _decode(document: Dict[str, Any]) -> Person:
    try:
        return Person.model_validate(document)
    except pydantic.ValidationError as exc:
        logger.error("Stored person %s does not match the schema: %s", document.get("identification"), exc)
        raise StoreUnavailableError(
            error=exc.errors(include_url=False, include_context=False),
        ) from exc


class PersonStore:
    """CRUD operations over a single persons collection.

    Every method touches at most one document, so MongoDB's single-document
    atomicity is all the consistency the store relies on.
    """

    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        self.collection = collection

    async def ensure_indexes(self) -> None:
        """Create the unique index that enforces one record per identification."""

        try:
            await self.collection.create_index([("identification", ASCENDING)], unique=True)
        except PyMongoError as exc:
            raise StoreUnavailableError(error=str(exc)) from exc

    async def create(self, person: Person) -> Person:
        document = person.to_document()
        try:
            await self.collection.insert_one(dict(document))
        except DuplicateKeyError as exc:
            logger.info("Rejected duplicate identification %s", person.identification)
            raise DuplicatePersonError(
                "Bad request",
                error=f"Person with identification {person.identification} already exists",
            ) from exc
        except PyMongoError as exc:
            raise StoreUnavailableError(error=str(exc)) from exc

        logger.info("Created person %s", person.identification)
        return Person.model_validate(document)

    async def find_all(self) -> List[Person]:
        return await self._find({})

    async def find_by_filter(self, criteria: Optional[PersonFilter] = None) -> List[Person]:
        query = criteria.to_query() if criteria is not None else {}
        return await self._find(query)

    async def find_one(self, identification: str) -> Person:
        document = await self._find_document(identification)
        if document is None:
            raise NotFoundError("Person not found")
        return _decode(document)

    async def update_by_identification(self, identification: str, changes: Dict[str, Any]) -> Person:
        """Merge ``changes`` into the stored record and return the result.

        ``identification`` in ``changes`` is dropped. The merged record is
        validated as a whole before anything is written.
        """

        changes = {key: value for key, value in changes.items() if key != "identification"}
        existing = await self._find_document(identification)
        if existing is None:
            logger.info("Person not found with identification: %s", identification)
            raise NotFoundError("Person not found")
        if not changes:
            return _decode(existing)

        try:
            merged = Person.model_validate({**existing, **changes})
        except pydantic.ValidationError as exc:
            raise ValidationError(
                "Bad request",
                error=exc.errors(include_url=False, include_context=False),
            ) from exc

        # Only the sent keys are written so concurrent updates to other fields survive
        validated = merged.to_document()
        update = {key: validated[key] for key in changes}
        try:
            document = await self.collection.find_one_and_update(
                {"identification": identification},
                {"$set": update},
                projection=_PROJECTION,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as exc:
            raise StoreUnavailableError(error=str(exc)) from exc

        if document is None:
            raise NotFoundError("Person not found")
        logger.info("Updated person %s fields=%s", identification, sorted(changes))
        return _decode(document)

    async def delete_by_identification(self, identification: str) -> None:
        try:
            result = await self.collection.delete_one({"identification": identification})
        except PyMongoError as exc:
            raise StoreUnavailableError(error=str(exc)) from exc

        if result.deleted_count == 0:
            raise NotFoundError("Person not found")
        logger.info("Deleted person %s", identification)

    async def _find(self, query: Dict[str, Any]) -> List[Person]:
        try:
            cursor = self.collection.find(query, _PROJECTION)
            documents = await cursor.to_list(length=None)
        except PyMongoError as exc:
            raise StoreUnavailableError(error=str(exc)) from exc

        logger.debug("Query %s matched %d persons", query, len(documents))
        return [_decode(document) for document in documents]

    async def _find_document(self, identification: str) -> Optional[Dict[str, Any]]:
        try:
            return await self.collection.find_one({"identification": identification}, _PROJECTION)
        except PyMongoError as exc:
            raise StoreUnavailableError(error=str(exc)) from exc
