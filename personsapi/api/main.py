"""FastAPI application entrypoint for the Persons API."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from personsapi.api.middleware.logging import LoggingMiddleware
from personsapi.api.routes import admin, export, persons
from personsapi.core.config import settings
from personsapi.core.database import database_manager
from personsapi.core.exceptions import ApplicationError
from personsapi.core.observability import configure_logging
from personsapi.store import PersonStore

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    """Open the MongoDB client on startup and close it on shutdown."""

    await database_manager.initialize()
    try:
        await PersonStore(database_manager.persons()).ensure_indexes()
    except ApplicationError as exc:
        logger.warning("Could not ensure person indexes: %s", exc.error)

    try:
        yield
    finally:
        await database_manager.close()


app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description="API to manage persons and addresses",
    debug=settings.DEBUG,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)

# Routers
app.include_router(persons.router, prefix="/api")
app.include_router(export.router, prefix="/api")
app.include_router(admin.router)


@app.exception_handler(ApplicationError)
async def handle_application_error(_: Request, exc: ApplicationError):
    """Return standardized responses for application layer exceptions."""

    if exc.status_code >= 500:
        logger.error("%s: %s", exc.code, exc.error)
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_payload()))


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(_: Request, exc: RequestValidationError):
    """Malformed bodies and query strings are client errors, reported as 400."""

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder({"message": "Bad request", "error": exc.errors()}),
    )


@app.exception_handler(Exception)
async def handle_unexpected_error(_: Request, exc: Exception):
    """Anything unhandled still reaches the caller as JSON."""

    logger.exception("Unhandled error: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Server error"},
    )
