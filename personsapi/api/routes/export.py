"""CSV export endpoint."""

from __future__ import annotations

import logging
import os

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from starlette.background import BackgroundTask

from personsapi.api.dependencies import get_person_store
from personsapi.core.config import settings
from personsapi.core.exceptions import StoreUnavailableError
from personsapi.export import EXPORT_FILENAME, EXPORT_MEDIA_TYPE, write_export
from personsapi.store import PersonStore
from personsapi.utils.monitoring import observe_export

router = APIRouter(prefix="/export", tags=["export"])

logger = logging.getLogger(__name__)


def _discard(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        logger.debug("Export file %s already removed", path)


@router.get("/persons", response_class=FileResponse)
async def export_persons(store: PersonStore = Depends(get_person_store)) -> FileResponse:
    """Download every person as ``persons.csv``."""

    persons = await store.find_all()
    try:
        path = write_export(persons, settings.EXPORT_DIR)
    except OSError as exc:
        logger.error("Error exporting data: %s", exc)
        raise StoreUnavailableError("Error exporting data", error=str(exc)) from exc

    observe_export(len(persons))
    return FileResponse(
        path,
        media_type=EXPORT_MEDIA_TYPE,
        filename=EXPORT_FILENAME,
        background=BackgroundTask(_discard, str(path)),
    )
