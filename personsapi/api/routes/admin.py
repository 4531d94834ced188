"""Operational endpoints."""

from __future__ import annotations

from typing import Dict

from fastapi import APIRouter, Depends, Response

from personsapi.api.dependencies import get_db
from personsapi.core.config import settings
from personsapi.core.database import DatabaseManager
from personsapi.utils.monitoring import render_metrics

router = APIRouter(tags=["admin"])


@router.get("/health")
async def healthcheck(db: DatabaseManager = Depends(get_db)) -> Dict[str, str]:
    """Liveness probe that also reports whether MongoDB answers."""

    reachable = await db.ping()
    return {
        "status": "ok",
        "environment": settings.ENVIRONMENT,
        "database": "ok" if reachable else "unavailable",
    }


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    payload, content_type = render_metrics()
    return Response(content=payload, media_type=content_type)
