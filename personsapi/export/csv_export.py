"""CSV rendering of the person record set."""

from __future__ import annotations

import csv
import io
import json
import logging
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from personsapi.models import PERSON_FIELDS, Person

logger = logging.getLogger(__name__)

EXPORT_FILENAME = "persons.csv"
EXPORT_MEDIA_TYPE = "text/csv; charset=utf-8"


def flatten_person(person: Person) -> Dict[str, Any]:
    """Map a person to one CSV row.

    Addresses collapse into a single JSON array column so each row can be
    turned back into the original record with ``json.loads``.
    """

    document = person.to_document()
    row = {field: document.get(field) for field in PERSON_FIELDS}
    row["addresses"] = json.dumps(document.get("addresses") or [], ensure_ascii=False)
    return row


def render_csv(persons: Iterable[Person]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=PERSON_FIELDS, lineterminator="\n")
    writer.writeheader()
    for person in persons:
        writer.writerow(flatten_person(person))
    return buffer.getvalue()


def write_export(persons: Iterable[Person], directory: Optional[Path] = None) -> Path:
    """Write the CSV to a fresh file and return its path.

    The caller owns the file and is expected to remove it once served.
    """

    content = render_csv(persons)
    if directory is not None:
        directory.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        newline="",
        prefix="persons-",
        suffix=".csv",
        dir=directory,
        delete=False,
    ) as handle:
        handle.write(content)
        path = Path(handle.name)

    logger.info("Wrote person export to %s (%d bytes)", path, len(content.encode("utf-8")))
    return path
