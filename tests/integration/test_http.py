# File: tests/integration/test_http.py
"""
Integration tests for the HTTP API.
"""

import inspect

import pytest
from fastapi.testclient import TestClient

from lanecal.services.http import app, get_calendar_service
from lanecal.services.http.server import create_event, update_event

MEETING = {"title": "Standup", "start": "2024-06-03T09:00:00Z", "end": "2024-06-03T10:00:00Z"}


@pytest.fixture
def client(service):
    app.dependency_overrides[get_calendar_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


class TestEventsApi:
    """Tests for /api/events."""

    def test_create_returns_201(self, client):
        response = client.post("/api/events", json=MEETING)
        assert response.status_code == 201
        body = response.json()
        assert body["title"] == "Standup"
        assert body["allDay"] is False
        assert body["color"] == "#039be5"
        assert body["timeZone"] == "UTC"

    def test_validation_error_returns_400(self, client):
        response = client.post("/api/events", json={**MEETING, "title": "", "color": "red"})
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["kind"] == "validation"
        assert set(error["fieldErrors"]) == {"title", "color"}

    def test_malformed_json_returns_400(self, client):
        response = client.post("/api/events", content=b"{not json", headers={"content-type": "application/json"})
        assert response.status_code == 400
        assert response.json()["error"]["formErrors"] == ["Invalid JSON payload"]

    def test_conflict_returns_409(self, client):
        first = client.post("/api/events", json=MEETING).json()
        response = client.post(
            "/api/events",
            json={**MEETING, "start": "2024-06-03T09:30:00Z", "end": "2024-06-03T10:30:00Z"},
        )
        assert response.status_code == 409
        error = response.json()["error"]
        assert error["kind"] == "conflict"
        assert error["conflicts"] == [first["id"]]

    def test_list_in_window(self, client):
        client.post("/api/events", json=MEETING)
        client.post("/api/events", json={**MEETING, "start": "2024-06-04T09:00:00Z", "end": "2024-06-04T10:00:00Z"})
        response = client.get(
            "/api/events",
            params={"start": "2024-06-03T00:00:00Z", "end": "2024-06-04T00:00:00Z"},
        )
        assert response.status_code == 200
        assert [event["start"][:10] for event in response.json()] == ["2024-06-03"]

    def test_list_requires_window(self, client):
        response = client.get("/api/events", params={"start": "2024-06-03T00:00:00Z"})
        assert response.status_code == 400
        assert "end" in response.json()["error"]["fieldErrors"]

    def test_patch_and_delete(self, client):
        created = client.post("/api/events", json=MEETING).json()

        patched = client.patch(f"/api/events/{created['id']}", json={"title": "Retro"})
        assert patched.status_code == 200
        assert patched.json()["title"] == "Retro"

        deleted = client.delete(f"/api/events/{created['id']}")
        assert deleted.status_code == 200
        assert deleted.json() == {"ok": True}

        assert client.delete(f"/api/events/{created['id']}").status_code == 404
        assert client.patch(f"/api/events/{created['id']}", json={"title": "x"}).status_code == 404


class TestViewsApi:
    """Tests for /api/views."""

    def test_week_layout(self, client):
        client.post("/api/events", json=MEETING)
        client.post("/api/events", json={**MEETING, "start": "2024-06-03T10:00:00Z", "end": "2024-06-03T11:00:00Z"})
        response = client.get("/api/views/week", params={"anchor": "2024-06-05T12:00:00Z"})
        assert response.status_code == 200
        body = response.json()
        assert body["label"] == "June 2 – 8, 2024"
        assert len(body["days"]) == 7
        monday = body["days"][1]
        assert monday["day"] == "2024-06-03"
        assert [(segment["startMinutes"], segment["lane"]) for segment in monday["segments"]] == [(540, 0), (600, 0)]
        assert monday["laneCount"] == 1

    def test_month_layout(self, client):
        response = client.get("/api/views/month", params={"anchor": "2024-06-05T12:00:00Z"})
        body = response.json()
        assert body["label"] == "June 2024"
        assert len(body["weeks"]) == 6
        assert body["days"] == []

    def test_unknown_view(self, client):
        response = client.get("/api/views/year")
        assert response.status_code == 400
        assert "view" in response.json()["error"]["fieldErrors"]


class TestFailuresApi:
    """Tests for storage failures and request handling."""

    @pytest.fixture
    def failing_client(self, failing_service):
        app.dependency_overrides[get_calendar_service] = lambda: failing_service
        try:
            yield TestClient(app)
        finally:
            app.dependency_overrides.clear()

    def test_storage_failure_is_generic_500(self, failing_client):
        response = failing_client.post("/api/events", json=MEETING)
        assert response.status_code == 500
        error = response.json()["error"]
        assert error["kind"] == "storage"
        assert error["message"] == "Unable to process request"
        assert "secret" not in response.text

    def test_read_failure_is_generic_500(self, failing_client):
        response = failing_client.get(
            "/api/events",
            params={"start": "2024-06-03T00:00:00Z", "end": "2024-06-04T00:00:00Z"},
        )
        assert response.status_code == 500
        assert "hunter2" not in response.text

    def test_non_object_body(self, client):
        response = client.post("/api/events", json=["Standup"])
        assert response.status_code == 400
        assert response.json()["error"]["formErrors"] == ["Payload must be a JSON object"]

    def test_write_handlers_run_in_threadpool(self):
        assert not inspect.iscoroutinefunction(create_event)
        assert not inspect.iscoroutinefunction(update_event)
