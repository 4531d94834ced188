from .person_store import PersonStore

__all__ = ["PersonStore"]
