import pytest
from fastapi.testclient import TestClient

import main


@pytest.fixture
def client():
    return TestClient(main.app)


@pytest.fixture
def payload():
    return {
        "participants": [
            {"participant_id": "P001", "name": "Andrej", "arrival_date": "2025-10-16", "departure_date": "2025-10-28"},
            {"participant_id": "P002", "name": "Jane", "arrival_date": "2025-10-16", "departure_date": "2025-10-28"},
            {"participant_id": "P003", "name": "Anna", "arrival_date": "2025-10-16", "departure_date": "2025-10-26"},
            {"participant_id": "P004", "name": "Sho", "arrival_date": "2025-10-23", "departure_date": "2025-10-27"},
            {"participant_id": "P005", "name": "Hanami", "arrival_date": "2025-10-23", "departure_date": "2025-10-24"},
        ],
        "settings": {
            "total_cost": 1300,
            "start_date": "2025-10-16",
            "end_date": "2025-10-28",
            "exchange_rate": 1.07,
            "calculation_method": "equal",
        },
        "additional_activities": [
            {
                "activity_type": "loan",
                "description": "Cash",
                "amount": 100,
                "from_participant_ids": ["P001"],
                "to_participant_ids": ["P002"],
                "tips": [{"amount": 5, "from_participant_id": "P002"}],
            }
        ],
    }


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_calculate(client, payload):
    response = client.post("/calculate", json=payload)
    body = response.json()

    assert response.status_code == 200
    assert body["errors"] == []
    assert body["warnings"][0]["message"] == "Nobody is present on the night of 2025-10-28"
    result = body["result"]
    assert result["total_nights"] == 13
    assert sum(p["amount_eur"] for p in result["participants"]) == pytest.approx(1300)
    assert result["participants"][1]["additional_charges"] == 105
    assert result["additional_activities"][0]["from_participants"] == ["Andrej"]


def test_calculate_with_errors_returns_empty_result(client, payload):
    payload["settings"]["end_date"] = "2025-10-10"
    body = client.post("/calculate", json=payload).json()

    assert body["errors"][0]["message"] == "Booking end date must be after start date"
    assert body["result"]["participants"] == []
    assert body["result"]["total_nights"] == 0


def test_activity_with_empty_side_is_rejected(client, payload):
    payload["additional_activities"][0]["to_participant_ids"] = []
    assert client.post("/calculate", json=payload).status_code == 422


def test_save(client, payload, monkeypatch):
    saved = {}

    def fake_save(participants, settings, activities, existing_id=None):
        saved["participants"] = participants
        saved["existing_id"] = existing_id
        return "calc_1_abc"

    monkeypatch.setattr(main, "save_calculation", fake_save)
    response = client.post("/save", json={**payload, "existing_id": "calc_1_abc"})

    assert response.status_code == 200
    assert response.json()["calculation_id"] == "calc_1_abc"
    assert saved["existing_id"] == "calc_1_abc"
    assert saved["participants"][0].name == "Andrej"


def test_save_without_database(client, payload, monkeypatch):
    def unavailable(*args, **kwargs):
        raise RuntimeError("Firebase init failed: no credentials")

    monkeypatch.setattr(main, "save_calculation", unavailable)
    assert client.post("/save", json=payload).status_code == 503


def test_load(client, payload, monkeypatch):
    monkeypatch.setattr(main, "load_calculation", lambda calculation_id: {"participants": payload["participants"]})
    response = client.get("/load/calc_1_abc")
    assert response.status_code == 200
    assert response.json()["data"]["participants"][0]["name"] == "Andrej"


def test_load_missing(client, monkeypatch):
    monkeypatch.setattr(main, "load_calculation", lambda calculation_id: None)
    assert client.get("/load/calc_missing").status_code == 404


def test_export_summary(client, payload):
    response = client.post("/export/summary", json=payload)
    assert response.status_code == 200
    assert "Total Nights: 13" in response.text


def test_export_rejects_invalid_input(client, payload):
    payload["settings"]["total_cost"] = 0
    assert client.post("/export/csv", json=payload).status_code == 400


def test_export_then_import_csv(client, payload):
    exported = client.post("/export/csv", json=payload)
    assert exported.headers["content-type"].startswith("text/csv")

    imported = client.post("/import/csv", content=exported.text.encode("utf-8"))
    body = imported.json()

    assert imported.status_code == 200
    assert [p["name"] for p in body["participants"]] == ["Andrej", "Jane", "Anna", "Sho", "Hanami"]
    assert body["settings"]["total_cost"] == 1300
    assert body["additional_activities"][0]["to_participant_ids"] == ["P002"]


def test_import_csv_without_participants(client):
    response = client.post("/import/csv", content=b"SETTINGS\n")
    assert response.status_code == 400


def test_unexpected_export_failure_is_logged(client, payload, monkeypatch, caplog):
    def broken_export(*args, **kwargs):
        raise KeyError("P999")

    monkeypatch.setattr(main, "export_csv", broken_export)
    response = client.post("/export/csv", json=payload)

    assert response.status_code == 500
    assert "CSV export failed" in caplog.text


def test_unexpected_import_failure_is_logged(client, monkeypatch, caplog):
    def broken_import(text):
        raise KeyError("settings")

    monkeypatch.setattr(main, "import_csv", broken_import)
    response = client.post("/import/csv", content=b"PARTICIPANTS\n")

    assert response.status_code == 500
    assert "CSV import failed" in caplog.text
