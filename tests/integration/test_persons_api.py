import asyncio
import csv
import io
import json
import logging

import pytest
from fastapi.testclient import TestClient
from prometheus_client import REGISTRY

from personsapi.api.dependencies import get_db, get_person_store
from personsapi.api.main import app
from personsapi.core.config import settings


class BrokenStore:
    async def find_all(self):
        raise RuntimeError("cursor exploded")


class StubDatabase:
    def __init__(self, reachable):
        self.reachable = reachable

    async def ping(self):
        return self.reachable


@pytest.fixture
def client(store, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "EXPORT_DIR", tmp_path)
    app.dependency_overrides[get_person_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_person_lifecycle(client, juan):
    created = client.post("/api/persons", json=juan)
    assert created.status_code == 201
    assert created.json() == juan

    fetched = client.get("/api/persons/12345678")
    assert fetched.status_code == 200
    assert fetched.json() == juan

    updated = client.put("/api/persons/12345678", json={"age": 31})
    assert updated.status_code == 200
    assert updated.json() == {**juan, "age": 31}

    deleted = client.delete("/api/persons/12345678")
    assert deleted.status_code == 200
    assert deleted.json() == {"message": "Person deleted successfully"}

    missing = client.get("/api/persons/12345678")
    assert missing.status_code == 404
    assert missing.json() == {"message": "Person not found"}


def test_create_duplicate_identification_returns_400(client, juan):
    assert client.post("/api/persons", json=juan).status_code == 201

    response = client.post("/api/persons", json=juan)

    assert response.status_code == 400
    assert response.json()["message"] == "Bad request"
    assert "12345678" in response.json()["error"]


def test_create_without_identification_returns_400(client, juan):
    payload = {key: value for key, value in juan.items() if key != "identification"}

    response = client.post("/api/persons", json=payload)

    assert response.status_code == 400
    assert response.json()["message"] == "Bad request"
    assert response.json()["error"]


def test_create_with_mistyped_age_returns_400(client, juan):
    response = client.post("/api/persons", json={**juan, "age": "thirty"})

    assert response.status_code == 400


def test_list_persons(client, juan):
    assert client.get("/api/persons").json() == []

    client.post("/api/persons", json=juan)
    response = client.get("/api/persons")

    assert response.status_code == 200
    assert [person["identification"] for person in response.json()] == ["12345678"]


def test_search_persons(client, juan):
    client.post("/api/persons", json=juan)
    client.post("/api/persons", json={**juan, "identification": "87654321", "name": "Ana", "age": 25})

    by_name = client.get("/api/persons/search", params={"name": "Juan"})
    by_age = client.get("/api/persons/search", params={"age": "25"})
    combined = client.get("/api/persons/search", params={"name": "Juan", "age": "25"})
    blank = client.get("/api/persons/search", params={"name": ""})

    assert by_name.status_code == 200
    assert [p["name"] for p in by_name.json()] == ["Juan"]
    assert [p["identification"] for p in by_age.json()] == ["87654321"]
    assert combined.json() == []
    assert len(blank.json()) == 2


def test_search_with_non_numeric_age_returns_400(client):
    response = client.get("/api/persons/search", params={"age": "old"})

    assert response.status_code == 400


def test_update_ignores_identification_change(client, juan):
    client.post("/api/persons", json=juan)

    response = client.put("/api/persons/12345678", json={"identification": "00000000", "name": "Juanito"})

    assert response.status_code == 200
    assert response.json()["identification"] == "12345678"
    assert response.json()["name"] == "Juanito"
    assert client.get("/api/persons/00000000").status_code == 404


def test_update_missing_person_returns_404(client):
    response = client.put("/api/persons/nobody", json={"age": 40})

    assert response.status_code == 404
    assert response.json() == {"message": "Person not found"}


def test_update_with_invalid_field_returns_400(client, juan):
    client.post("/api/persons", json=juan)

    response = client.put("/api/persons/12345678", json={"addresses": "not-a-list"})

    assert response.status_code == 400
    assert client.get("/api/persons/12345678").json() == juan


def test_delete_missing_person_returns_404(client):
    response = client.delete("/api/persons/nobody")

    assert response.status_code == 404


def test_export_persons_csv(client, juan, tmp_path):
    client.post("/api/persons", json=juan)
    client.post("/api/persons", json={**juan, "identification": "87654321", "addresses": []})

    response = client.get("/api/export/persons")

    assert response.status_code == 200
    assert response.headers["content-type"].lower() == "text/csv; charset=utf-8"
    assert response.headers["content-disposition"] == 'attachment; filename="persons.csv"'

    rows = list(csv.DictReader(io.StringIO(response.content.decode("utf-8"))))
    assert len(rows) == 2
    assert list(rows[0].keys()) == ["identification", "name", "lastName", "age", "photo", "addresses"]
    assert json.loads(rows[0]["addresses"]) == juan["addresses"]
    assert json.loads(rows[1]["addresses"]) == []
    assert list(tmp_path.iterdir()) == []


def test_export_with_no_persons_has_header_only(client):
    response = client.get("/api/export/persons")

    assert response.status_code == 200
    assert response.content.decode("utf-8").splitlines() == [
        "identification,name,lastName,age,photo,addresses"
    ]


def test_healthcheck_reports_database_state(client):
    app.dependency_overrides[get_db] = lambda: StubDatabase(reachable=False)

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["database"] == "unavailable"


def test_malformed_stored_document_returns_json_500(client, store):
    loop = asyncio.new_event_loop()
    try:
        loop.run_until_complete(store.collection.insert_one({"identification": "x", "age": "old"}))
    finally:
        loop.close()

    response = client.get("/api/persons")

    assert response.status_code == 500
    assert response.headers["content-type"] == "application/json"
    assert response.json()["message"] == "Server error"


def test_unexpected_error_returns_json_500():
    app.dependency_overrides[get_person_store] = lambda: BrokenStore()
    try:
        response = TestClient(app, raise_server_exceptions=False).get("/api/persons")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"message": "Server error"}


def test_unmatched_paths_share_one_metric_label(client):
    labels = {"method": "GET", "path": "unmatched", "status": "404"}
    before = REGISTRY.get_sample_value("personsapi_http_requests_total", labels) or 0

    assert client.get("/no/such/route-1").status_code == 404
    assert client.get("/no/such/route-2").status_code == 404

    after = REGISTRY.get_sample_value("personsapi_http_requests_total", labels)
    assert after - before == 2


def test_access_log_includes_request_details(client, caplog):
    api_logger = logging.getLogger("personsapi.api")
    api_logger.addHandler(caplog.handler)
    try:
        with caplog.at_level(logging.INFO, logger="personsapi.api"):
            client.get("/api/persons")
    finally:
        api_logger.removeHandler(caplog.handler)

    messages = [record.getMessage() for record in caplog.records if record.name == "personsapi.api"]
    assert any(message.startswith("request.completed GET /api/persons 200 ") for message in messages)
