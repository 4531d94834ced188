import csv
import io
import json

from personsapi.export import flatten_person, render_csv, write_export
from personsapi.models import Person


def test_flatten_person_encodes_addresses_as_json(juan):
    row = flatten_person(Person.model_validate(juan))

    assert row["identification"] == "12345678"
    assert row["lastName"] == "Perez"
    assert json.loads(row["addresses"]) == juan["addresses"]


def test_render_csv_writes_header_and_one_row_per_person(juan):
    persons = [
        Person.model_validate(juan),
        Person(identification="87654321", name="Ana, María"),
    ]

    rows = list(csv.reader(io.StringIO(render_csv(persons))))

    assert rows[0] == ["identification", "name", "lastName", "age", "photo", "addresses"]
    assert rows[1][:5] == ["12345678", "Juan", "Perez", "30", "http://example.com/photo.jpg"]
    assert rows[2] == ["87654321", "Ana, María", "", "", "", "[]"]


def test_write_export_produces_utf8_file(tmp_path):
    path = write_export([Person(identification="1", name="José")], tmp_path / "exports")

    assert path.parent == tmp_path / "exports"
    assert path.suffix == ".csv"
    assert "José" in path.read_text(encoding="utf-8")
