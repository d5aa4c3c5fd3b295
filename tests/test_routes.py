"""API tests with the reservation source mocked out."""

from datetime import date
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from charter.main import app, page_query
from charter.models import Reservation

client = TestClient(app)


def _res(res_id, boat_id, start, end=None, status="APPROVED"):
    return Reservation(id=res_id, boat_id=boat_id, start_date=start, end_exclusive=end, status=status)


RESERVATIONS = [
    _res("r1", "sea-breeze", date(2026, 1, 14), date(2026, 1, 16)),
    _res("r2", "blue-horizon", date(2026, 1, 11), date(2026, 1, 25)),
    _res("r3", "gull", date(2026, 1, 12)),
    _res("r4", "gull", date(2026, 1, 13), date(2026, 1, 15), status="DENIED"),
    _res("r5", "island-hopper", date(2026, 1, 12), date(2026, 1, 14), status="BLOCKED"),
    _res("r6", "island-hopper", date(2026, 1, 13), status="PENDING"),
]


@pytest.fixture(autouse=True)
def mock_reservations():
    with patch("charter.routes.get_all_reservations", return_value=RESERVATIONS) as mock:
        yield mock


def test_health():
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_boats_sorted_and_active_only():
    resp = client.get("/api/boats")
    assert resp.status_code == 200
    names = [b["name"] for b in resp.json()]
    assert names == ["Blue Horizon", "Gull", "Island Hopper", "Sea Breeze"]


def test_schedule_only_active_statuses():
    resp = client.get("/api/schedule", params={"start": "2026-01-11", "days": 14})
    assert resp.status_code == 200
    data = resp.json()
    assert data["start"] == "2026-01-11"
    assert data["end"] == "2026-01-24"
    ids = [r["id"] for r in data["reservations"]]
    assert "r4" not in ids
    assert set(ids) == {"r1", "r2", "r3", "r5", "r6"}
    r1 = next(r for r in data["reservations"] if r["id"] == "r1")
    assert r1["boatId"] == "sea-breeze"
    assert r1["startDate"] == "2026-01-14"
    assert r1["endExclusive"] == "2026-01-16"


def test_schedule_bad_input():
    assert client.get("/api/schedule", params={"start": "01/11/2026"}).status_code == 400
    assert client.get("/api/schedule", params={"start": "2026-01-11", "days": 0}).status_code == 400
    assert client.get("/api/schedule", params={"start": "2026-01-11", "days": 61}).status_code == 400


def test_availability_any_window():
    resp = client.get("/api/availability", params={"start": "2026-01-11", "duration": "3"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["duration_days"] == 3
    boat_ids = [row["boat"]["id"] for row in data["boats"]]
    # blue-horizon is booked for the whole window
    assert boat_ids == ["gull", "island-hopper", "sea-breeze"]
    assert all(len(row["cells"]) == 14 for row in data["boats"])


def test_availability_request_start():
    params = {"start": "2026-01-11", "request_start": "2026-01-12", "duration": "2"}
    resp = client.get("/api/availability", params=params)
    assert resp.status_code == 200
    data = resp.json()
    # gull and island-hopper are booked on the 12th
    assert [row["boat"]["id"] for row in data["boats"]] == ["sea-breeze"]
    cells = data["boats"][0]["cells"]
    assert [c["day"] for c in cells if c["in_selection"]] == ["2026-01-12", "2026-01-13"]
    assert [c["day"] for c in cells if c["booked"]] == ["2026-01-14", "2026-01-15"]


def test_availability_selected_boats_and_clamped_duration():
    params = [("start", "2026-01-11"), ("duration", "99"), ("boat", "gull"), ("boat", "sea-breeze")]
    resp = client.get("/api/availability", params=params)
    assert resp.status_code == 200
    data = resp.json()
    assert data["duration_days"] == 30
    # nothing fits 30 days inside a 14 day window
    assert data["boats"] == []


def test_availability_post():
    body = {"start": "2026-01-11", "duration": "1", "boats": ["blue-horizon"]}
    resp = client.post("/api/availability", json=body)
    assert resp.status_code == 200
    data = resp.json()
    assert [row["boat"]["id"] for row in data["boats"]] == ["blue-horizon"]
    assert all(c["booked"] for c in data["boats"][0]["cells"])


def test_availability_bad_date():
    resp = client.get("/api/availability", params={"start": "2026-13-01"})
    assert resp.status_code == 400


def test_max_duration_shrinks():
    params = {"boat": "sea-breeze", "day": "2026-01-12", "duration": "5", "start": "2026-01-11"}
    resp = client.get("/api/availability/max-duration", params=params)
    assert resp.status_code == 200
    data = resp.json()
    assert data["requested_days"] == 5
    assert data["duration_days"] == 2
    assert data["end_exclusive"] == "2026-01-14"


def test_max_duration_floor_on_booked_day():
    params = {"boat": "sea-breeze", "day": "2026-01-14", "duration": "5", "start": "2026-01-11"}
    resp = client.get("/api/availability/max-duration", params=params)
    assert resp.json()["duration_days"] == 1


def test_max_duration_unknown_boat():
    params = {"boat": "titanic", "day": "2026-01-12"}
    assert client.get("/api/availability/max-duration", params=params).status_code == 404


def test_calendar_priorities():
    resp = client.get("/api/calendar", params={"start": "2026-01-11", "days": "7"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["days"] == 7
    rows = {row["boat_id"]: row for row in data["rows"]}
    assert "old-salt" in rows

    hopper = [c["status"] for c in rows["island-hopper"]["cells"]]
    assert hopper[:4] == [None, "BLOCKED", "BLOCKED", None]

    gull = [c["status"] for c in rows["gull"]["cells"]]
    # denied requests still show on the operator calendar
    assert gull[:5] == [None, "APPROVED", "DENIED", "DENIED", None]


def test_calendar_days_clamped():
    resp = client.get("/api/calendar", params={"start": "2026-01-11", "days": "500"})
    assert resp.json()["days"] == 60


def test_block_preview():
    params = {"boat": "sea-breeze", "day": "2026-01-13", "days": "90"}
    resp = client.get("/api/calendar/block-preview", params=params)
    assert resp.status_code == 200
    data = resp.json()
    assert data["days"] == 60
    assert data["end_exclusive"] == "2026-03-14"
    assert [r["id"] for r in data["conflicts"]] == ["r1"]


def test_refresh():
    with patch("charter.routes.refresh_all", return_value=True) as mock_refresh:
        resp = client.post("/api/refresh")
    assert resp.status_code == 200
    mock_refresh.assert_called_once()


def test_snapshot_requires_sheet_link(monkeypatch):
    monkeypatch.delenv("RESERVATIONS_SHEET_LINK", raising=False)
    assert client.post("/api/snapshot").status_code == 400


def test_snapshot_failure_reported(monkeypatch):
    monkeypatch.setenv("RESERVATIONS_SHEET_LINK", "https://docs.google.com/spreadsheets/d/abc/edit")
    with patch("charter.routes.download_snapshot", side_effect=RuntimeError("no credentials")):
        resp = client.post("/api/snapshot")
    assert resp.status_code == 500
    assert "no credentials" in resp.json()["detail"]


def test_index_page():
    resp = client.get("/", params={"start": "2026-01-11", "duration": "2"})
    assert resp.status_code == 200
    assert "Boat availability" in resp.text
    assert "Sea Breeze" in resp.text


def test_source_failure_reported(mock_reservations):
    mock_reservations.side_effect = ValueError("Unknown RESERVATIONS_SOURCE: 'carrier-pigeon'")
    resp = client.get("/api/availability", params={"start": "2026-01-11"})
    assert resp.status_code == 500
    assert "carrier-pigeon" in resp.json()["detail"]
    assert client.get("/api/calendar", params={"start": "2026-01-11"}).status_code == 500


def test_page_query_keeps_selection():
    query = page_query(date(2026, 1, 25), 3, date(2026, 1, 13), ["gull", "sea-breeze"])
    assert query == "start=2026-01-25&duration=3&request_start=2026-01-13&boat=gull&boat=sea-breeze"
    assert page_query(date(2026, 1, 25), 1) == "start=2026-01-25&duration=1"


def test_index_paging_links_keep_selection():
    params = [("start", "2026-01-11"), ("request_start", "2026-01-13"), ("duration", "3"), ("boat", "gull")]
    resp = client.get("/", params=params)
    assert resp.status_code == 200
    assert "start=2026-01-25" in resp.text
    assert "start=2025-12-28" in resp.text
    assert resp.text.count("request_start=2026-01-13") >= 2
    assert resp.text.count("boat=gull") >= 2
