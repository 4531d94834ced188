"""Person record endpoints."""

from __future__ import annotations

from typing import Dict, List, Optional

import pydantic
from fastapi import APIRouter, Depends, status

from personsapi.api.dependencies import get_person_store
from personsapi.core.exceptions import ValidationError
from personsapi.models import Person, PersonFilter, PersonUpdate
from personsapi.store import PersonStore

router = APIRouter(prefix="/persons", tags=["persons"])


@router.post("", response_model=Person, status_code=status.HTTP_201_CREATED)
async def create_person(payload: Person, store: PersonStore = Depends(get_person_store)) -> Person:
    """Create a new person."""

    return await store.create(payload)


@router.get("", response_model=List[Person])
async def list_persons(store: PersonStore = Depends(get_person_store)) -> List[Person]:
    """List every stored person."""

    return await store.find_all()


# Declared ahead of /{identification} so "search" is not read as an identification
@router.get("/search", response_model=List[Person])
async def search_persons(
    identification: Optional[str] = None,
    name: Optional[str] = None,
    age: Optional[str] = None,
    store: PersonStore = Depends(get_person_store),
) -> List[Person]:
    """Exact-match search on identification, name and age."""

    try:
        criteria = PersonFilter(identification=identification, name=name, age=age)
    except pydantic.ValidationError as exc:
        raise ValidationError(
            "Bad request",
            error=exc.errors(include_url=False, include_context=False),
        ) from exc
    return await store.find_by_filter(criteria)


@router.get("/{identification}", response_model=Person)
async def get_person(identification: str, store: PersonStore = Depends(get_person_store)) -> Person:
    return await store.find_one(identification)


@router.put("/{identification}", response_model=Person)
async def update_person(
    identification: str,
    payload: PersonUpdate,
    store: PersonStore = Depends(get_person_store),
) -> Person:
    """Merge the sent fields into the person. A new identification is ignored."""

    return await store.update_by_identification(identification, payload.changes())


@router.delete("/{identification}")
async def delete_person(identification: str, store: PersonStore = Depends(get_person_store)) -> Dict[str, str]:
    await store.delete_by_identification(identification)
    return {"message": "Person deleted successfully"}
