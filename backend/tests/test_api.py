import re

import pytest
from fastapi.testclient import TestClient

import storage
from app import app
from db import get_session
from errors import StorageError
from schemas import FIELD_IDS


@pytest.fixture(scope="function")
def client(test_session):
    """Create a test client with dependency override."""

    def get_test_session():
        yield test_session

    app.dependency_overrides[get_session] = get_test_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_get_missing_entry_returns_404(client):
    """Test getting a day that was never saved."""
    response = client.get("/api/entries/2025-03-01")
    assert response.status_code == 404
    assert response.json()["detail"] == "Entry not found"


def test_save_and_get_entry(client):
    """Test saving an entry and reading it back."""
    request_data = {
        "date": "2025-03-01",
        "timestamp": "1999-01-01T00:00:00Z",
        "fields": {"MOOD": "happy", "LUNCH": "Salad", "RATING": "4"},
    }

    response = client.post("/api/entries/2025-03-01", json=request_data)
    assert response.status_code == 200
    saved = response.json()
    assert saved["date"] == "2025-03-01"
    assert saved["timestamp"] != "1999-01-01T00:00:00Z"
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z", saved["timestamp"])

    response = client.get("/api/entries/2025-03-01")
    assert response.status_code == 200
    data = response.json()
    assert data["date"] == "2025-03-01"
    assert data["timestamp"] == saved["timestamp"]
    assert set(data["fields"]) == set(FIELD_IDS)
    assert data["fields"]["MOOD"] == "happy"
    assert data["fields"]["LUNCH"] == "Salad"
    assert data["fields"]["RATING"] == "4"
    assert data["fields"]["DINNER"] == ""


def test_save_uses_date_from_path(client):
    """Test that the date in the URL overrides the date in the body."""
    request_data = {"date": "2020-01-01", "fields": {"MOOD": "ok"}}

    response = client.post("/api/entries/2025-03-02", json=request_data)
    assert response.status_code == 200
    assert response.json()["date"] == "2025-03-02"

    assert client.get("/api/entries/2025-03-02").status_code == 200
    assert client.get("/api/entries/2020-01-01").status_code == 404


def test_save_without_body_date(client):
    """Test that the body may omit date and timestamp entirely."""
    response = client.post("/api/entries/2025-03-03", json={"fields": {"TV": "Film"}})
    assert response.status_code == 200
    assert response.json()["fields"]["TV"] == "Film"


def test_save_null_and_empty_values_read_as_empty(client):
    """Test that null and empty values both come back as empty strings."""
    request_data = {"fields": {"MOOD": "", "LUNCH": None, "DINNER": "Rice"}}

    response = client.post("/api/entries/2025-03-04", json=request_data)
    assert response.status_code == 200

    fields = client.get("/api/entries/2025-03-04").json()["fields"]
    assert fields["MOOD"] == ""
    assert fields["LUNCH"] == ""
    assert fields["DINNER"] == "Rice"


def test_save_overwrites_previous_fields(client):
    """Test that a second save replaces the whole field set."""
    client.post("/api/entries/2025-03-05", json={"fields": {"MOOD": "sad", "LUNCH": "Soup"}})
    client.post("/api/entries/2025-03-05", json={"fields": {"DINNER": "Curry"}})

    fields = client.get("/api/entries/2025-03-05").json()["fields"]
    assert fields["MOOD"] == ""
    assert fields["LUNCH"] == ""
    assert fields["DINNER"] == "Curry"


def test_delete_entry_is_idempotent(client):
    """Test deleting an entry, then deleting it again."""
    client.post("/api/entries/2025-03-06", json={"fields": {"MOOD": "ok"}})

    response = client.delete("/api/entries/2025-03-06")
    assert response.status_code == 204
    assert client.get("/api/entries/2025-03-06").status_code == 404

    response = client.delete("/api/entries/2025-03-06")
    assert response.status_code == 204


def test_entries_by_month(client):
    """Test listing the days of a month."""
    for date in ("2025-03-15", "2025-02-28", "2025-03-01"):
        client.post(f"/api/entries/{date}", json={"fields": {}})

    response = client.get("/api/entries/month/2025/3")
    assert response.status_code == 200
    assert response.json() == ["2025-03-01", "2025-03-15"]


def test_entries_by_month_empty(client):
    """Test listing a month without entries."""
    response = client.get("/api/entries/month/2025/4")
    assert response.status_code == 200
    assert response.json() == []


def test_entries_summary_by_month(client):
    """Test the working status summary for a month."""
    client.post("/api/entries/2025-03-01", json={"fields": {"WORKING": "yes"}})
    client.post("/api/entries/2025-03-02", json={"fields": {"MOOD": "lazy"}})
    client.post("/api/entries/2025-04-01", json={"fields": {"WORKING": "yes"}})

    response = client.get("/api/entries/month/2025/3/summary")
    assert response.status_code == 200
    assert response.json() == [
        {"date": "2025-03-01", "working": "yes"},
        {"date": "2025-03-02", "working": ""},
    ]


@pytest.mark.parametrize("date", ["2025-3-1", "2025-02-30", "not-a-date", "20250301"])
def test_invalid_date(client, date):
    """Test that malformed dates are rejected."""
    assert client.get(f"/api/entries/{date}").status_code == 400
    assert client.post(f"/api/entries/{date}", json={"fields": {}}).status_code == 400
    assert client.delete(f"/api/entries/{date}").status_code == 400


def test_invalid_month(client):
    """Test that out of range months are rejected."""
    assert client.get("/api/entries/month/2025/13").status_code == 400
    assert client.get("/api/entries/month/2025/0/summary").status_code == 400


def test_unparsable_month(client):
    """Test that non-numeric year or month fails validation."""
    assert client.get("/api/entries/month/abc/3").status_code == 422
    assert client.get("/api/entries/month/2025/march/summary").status_code == 422


def test_invalid_json(client):
    """Test posting a body that is not JSON."""
    response = client.post(
        "/api/entries/2025-03-01",
        content="not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 422


def test_storage_error_is_500(client, monkeypatch):
    """Test that storage failures are reported, not hidden as empty results."""

    def broken(*args, **kwargs):
        raise StorageError("disk on fire")

    monkeypatch.setattr(storage, "get_entry", broken)
    monkeypatch.setattr(storage, "list_dates_by_month", broken)

    response = client.get("/api/entries/2025-03-01")
    assert response.status_code == 500
    assert response.json()["detail"] == "Internal server error"
    assert client.get("/api/entries/month/2025/3").status_code == 500


def test_root_endpoint(client):
    """Test root endpoint."""
    response = client.get("/api")
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Days Journal API"
    assert "docs" in data
