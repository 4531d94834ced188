from .person import PERSON_FIELDS, Address, Person, PersonFilter, PersonUpdate

__all__ = [
    "Address",
    "PERSON_FIELDS",
    "Person",
    "PersonFilter",
    "PersonUpdate",
]
