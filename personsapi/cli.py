"""Command line entry for the Persons API."""

from __future__ import annotations

import uvicorn

from personsapi.api.main import app
from personsapi.core.config import settings


def run_server() -> None:
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


def main() -> None:
    run_server()


if __name__ == "__main__":
    main()
