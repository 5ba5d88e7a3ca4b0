from datetime import date

import pytest
from fastapi.testclient import TestClient

from main import app
from reportdesk.api.deps import get_session_registry
from reportdesk.services import ReportOrchestrator, SessionRegistry

HEADERS = {"X-API-Key": "test-key", "X-User-Id": "42"}


@pytest.fixture
def registry(backend, sink) -> SessionRegistry:
    return SessionRegistry(lambda: ReportOrchestrator(backend, sink, today=lambda: date(2024, 1, 15)))


@pytest.fixture
def client(registry):
    app.dependency_overrides[get_session_registry] = lambda: registry
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.pop(get_session_registry, None)


def _select_and_generate(client: TestClient, report_type: str = "predictions") -> dict:
    response = client.put(
        "/v1/reports/selection",
        json={"report_type": report_type, "date_range": "last-30-days"},
        headers=HEADERS,
    )
    assert response.status_code == 200
    response = client.post("/v1/reports/generate", headers=HEADERS)
    assert response.status_code == 200
    return response.json()


def test_healthcheck(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_catalog_lists_reports_and_ranges(client):
    response = client.get("/v1/reports/catalog", headers=HEADERS)

    assert response.status_code == 200
    payload = response.json()
    assert [item["id"] for item in payload["report_types"]] == [
        "predictions",
        "recommendations",
        "model-analysis",
        "forecast-insights",
    ]
    assert payload["report_types"][0]["name"] == "Prediction Performance Report"
    assert len(payload["date_ranges"]) == 5


def test_reports_require_api_key(client):
    response = client.get("/v1/reports/session")

    assert response.status_code == 401


def test_session_defaults_to_configured_user(client):
    response = client.get("/v1/reports/session", headers={"X-API-Key": "test-key"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["user_id"] == "1"
    assert payload["state"] == "idle"
    assert payload["selection"] == {"report_type": None, "date_range": "last-30-days", "can_generate": False}


def test_generate_requires_report_type(client, backend):
    response = client.post("/v1/reports/generate", headers=HEADERS)

    assert response.status_code == 409
    assert backend.calls == []


def test_generate_returns_report_and_message(client, backend):
    backend.rows = [{"prediction_id": index, "model_name": "baseline"} for index in range(12)]

    payload = _select_and_generate(client)

    assert payload["message"] == {"type": "success", "text": "Report generated successfully! (12 records)"}
    report = payload["report"]
    assert report["report_type"] == "predictions"
    assert report["record_count"] == 12
    assert report["row_count"] == 12
    assert report["counts_diverge"] is False
    assert report["preview"]["headers"] == ["Prediction Id", "Model Name"]
    assert len(report["preview"]["rows"]) == 10
    assert report["preview"]["truncated"] is True


def test_export_without_report_returns_message(client, backend):
    response = client.post("/v1/reports/export", json={"format": "csv"}, headers=HEADERS)

    assert response.status_code == 200
    payload = response.json()
    assert payload["download"] is None
    assert payload["message"] == {"type": "error", "text": "Please generate a report first"}
    assert backend.calls == []


def test_export_csv_after_generate(client, sink):
    _select_and_generate(client)

    response = client.post("/v1/reports/export", json={"format": "csv"}, headers=HEADERS)

    assert response.status_code == 200
    payload = response.json()
    assert payload["download"]["filename"] == "predictions_report_2024-01-15.csv"
    assert payload["download"]["location"] == "memory://42/predictions_report_2024-01-15.csv"
    assert payload["message"]["text"] == "Report exported as CSV successfully!"
    assert sink.saved[0].filename == "predictions_report_2024-01-15.csv"


def test_export_rejects_unknown_format(client):
    response = client.post("/v1/reports/export", json={"format": "docx"}, headers=HEADERS)

    assert response.status_code == 422


def test_preview_dialog_flow(client):
    _select_and_generate(client)

    response = client.post("/v1/reports/preview", json={"format": "pdf"}, headers=HEADERS)
    assert response.json()["dialog"] == {"is_open": True, "format": "pdf"}

    response = client.get("/v1/reports/preview", headers=HEADERS)
    assert response.status_code == 200
    assert "PREDICTIONS" in response.text

    response = client.post("/v1/reports/preview/download", headers=HEADERS)
    assert response.json()["download"]["filename"] == "predictions_report_2024-01-15.pdf"

    response = client.get("/v1/reports/session", headers=HEADERS)
    assert response.json()["dialog"]["is_open"] is False


def test_preview_requires_open_dialog(client):
    response = client.get("/v1/reports/preview", headers=HEADERS)

    assert response.status_code == 409


def test_table_renders_html(client):
    _select_and_generate(client)

    response = client.get("/v1/reports/table", headers=HEADERS)

    assert response.status_code == 200
    assert "<th>Model Name</th>" in response.text


def test_discard_session_resets_state(client, registry):
    _select_and_generate(client)
    assert len(registry) == 1

    response = client.delete("/v1/reports/session", headers=HEADERS)

    assert response.status_code == 204
    assert len(registry) == 0
    response = client.get("/v1/reports/session", headers=HEADERS)
    assert response.json()["report"] is None
