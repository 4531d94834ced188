"""Person data model definitions."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

Number = Union[int, float]

PERSON_FIELDS = ("identification", "name", "lastName", "age", "photo", "addresses")


class Address(BaseModel):
    """Embedded address; lives and dies with its owning person."""

    street: Optional[str] = None
    number: Optional[Number] = None
    city: Optional[str] = None


class Person(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    identification: str = Field(..., min_length=1, description="Unique person identifier")
    name: Optional[str] = None
    last_name: Optional[str] = Field(None, alias="lastName")
    age: Optional[Number] = None
    photo: Optional[str] = Field(None, description="Photo URL")
    addresses: List[Address] = Field(default_factory=list)

    def to_document(self) -> Dict[str, Any]:
        """Shape stored in MongoDB, keyed by the public field names."""

        return self.model_dump(mode="python", by_alias=True)


class PersonUpdate(BaseModel):
    """Partial update payload. ``identification`` is accepted and discarded."""

    model_config = ConfigDict(populate_by_name=True)

    identification: Any = None
    name: Optional[str] = None
    last_name: Optional[str] = Field(None, alias="lastName")
    age: Optional[Number] = None
    photo: Optional[str] = None
    addresses: Optional[List[Address]] = None

    def changes(self) -> Dict[str, Any]:
        """Fields the caller actually sent, minus the immutable identification."""

        data = self.model_dump(mode="python", by_alias=True, exclude_unset=True)
        data.pop("identification", None)
        return data


class PersonFilter(BaseModel):
    identification: Optional[str] = None
    name: Optional[str] = None
    age: Optional[Number] = None

    def to_query(self) -> Dict[str, Any]:
        return {key: value for key, value in self.model_dump().items() if value is not None}

    @field_validator("identification", "name", "age", mode="before")
    def _blank_is_unset(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value
