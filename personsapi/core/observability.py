"""Logging initialization for the Persons API."""

from __future__ import annotations

import logging

from personsapi.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach a single stream handler to the ``personsapi`` logger tree."""

    logger = logging.getLogger("personsapi")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level or settings.LOG_LEVEL)
    logger.propagate = False
    return logger
