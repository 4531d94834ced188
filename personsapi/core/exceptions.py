"""Custom exception hierarchy for the Persons API."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import status


class ApplicationError(Exception):
    """Base application error with HTTP semantics."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "application_error"

    def __init__(
        self,
        message: str,
        *,
        error: Any = None,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.message = message
        self.error = error

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"message": self.message}
        if self.error is not None:
            payload["error"] = self.error
        return payload


class ValidationError(ApplicationError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"


class DuplicateKeyError(ApplicationError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "duplicate_key"


class NotFoundError(ApplicationError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class StoreUnavailableError(ApplicationError):
    """Raised when the document store rejects or cannot serve an operation."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "store_unavailable"

    def __init__(self, message: str = "Server error", *, error: Optional[Any] = None) -> None:
        super().__init__(message, error=error)
