"""
Tests for the FastAPI endpoints.
"""

from datetime import date, timedelta

from core import database

BULK_TEXT = """Sprint Planning Kickoff Aug 4, 2025 (Mon)
Leadership Review Sep 9-10, 2025 (Tue-Wed)
no date on this line
Old Offsite July 1, 2025"""


def latest_request(endpoint):
    conn = database.get_connection()
    try:
        row = conn.execute(
            "SELECT * FROM api_requests WHERE endpoint = ? ORDER BY id DESC LIMIT 1", (endpoint,)
        ).fetchone()
        details = conn.execute(
            "SELECT detail_type, message FROM api_request_details WHERE request_id = ?",
            (row["request_id"],),
        ).fetchall()
    finally:
        conn.close()
    return row, [tuple(d) for d in details]


class TestAuth:
    def test_missing_key(self, client):
        response = client.get("/v1/events", headers={"X-API-Key": ""})

        assert response.status_code == 401
        assert response.json()["detail"]["code"] == "UNAUTHORIZED"

    def test_wrong_key(self, client):
        response = client.get("/v1/events", headers={"X-API-Key": "nope"})

        assert response.status_code == 401

    def test_unconfigured_key(self, client, monkeypatch):
        from core import config

        monkeypatch.setattr(config, "CALENDAR_API_KEY", "")

        response = client.get("/v1/events")

        assert response.status_code == 500
        assert response.json()["detail"]["code"] == "INTERNAL_ERROR"

    def test_health_needs_no_key(self, client):
        response = client.get("/health", headers={"X-API-Key": ""})

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database_available"] is True


class TestParseEndpoints:
    def test_bulk_preview(self, client):
        response = client.post("/v1/parse/bulk", json={"text": BULK_TEXT})

        assert response.status_code == 200
        body = response.json()
        assert body["linesReceived"] == 4
        assert body["linesSkipped"] == 1
        assert [d["title"] for d in body["drafts"]] == ["Sprint Planning Kickoff", "Leadership Review"]
        assert body["drafts"][1] == {
            "type": "MEETING",
            "title": "Leadership Review",
            "date": "2025-09-09",
            "startDate": "2025-09-09",
            "endDate": "2025-09-10",
        }

    def test_bulk_preview_without_clipping(self, client):
        response = client.post(
            "/v1/parse/bulk", json={"text": BULK_TEXT, "clipToOperatingYear": False}
        )

        assert len(response.json()["drafts"]) == 3

    def test_bulk_preview_is_logged(self, client):
        client.post("/v1/parse/bulk", json={"text": BULK_TEXT})

        row, details = latest_request("/v1/parse/bulk")
        assert row["status_code"] == 200
        assert row["lines_received"] == 4
        assert row["drafts_produced"] == 2
        assert details == [("warning", "No date found: no date on this line")]

    def test_bulk_text_too_large(self, client, monkeypatch):
        from api.routes import parse

        monkeypatch.setattr(parse, "MAX_BULK_TEXT_CHARS", 10)

        response = client.post("/v1/parse/bulk", json={"text": BULK_TEXT})

        assert response.status_code == 413
        assert response.json()["detail"]["code"] == "TEXT_TOO_LARGE"
        row, _ = latest_request("/v1/parse/bulk")
        assert row["error_code"] == "TEXT_TOO_LARGE"

    def test_natural(self, client):
        response = client.post("/v1/parse/natural", json={"text": "Team Meeting tomorrow 2-4pm"})

        assert response.status_code == 200
        assert response.json() == {
            "type": "MEETING",
            "title": "Team Meeting",
            "date": (date.today() + timedelta(days=1)).isoformat(),
            "startTime": "14:00",
            "endTime": "16:00",
        }

    def test_natural_unparseable(self, client):
        response = client.post("/v1/parse/natural", json={"text": "2-4pm"})

        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["code"] == "UNPARSEABLE"
        assert detail["details"][0] == "No date found"


class TestEventEndpoints:
    def test_create_and_get(self, client, sample_event):
        created = client.post("/v1/events", json=sample_event)

        assert created.status_code == 201
        event = created.json()
        assert event["title"] == "PI Planning Kickoff"
        assert "endDate" not in event

        fetched = client.get(f"/v1/events/{event['id']}")
        assert fetched.json() == event

    def test_create_invalid(self, client, sample_event):
        response = client.post("/v1/events", json={**sample_event, "endDate": "2025-10-01"})

        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["code"] == "VALIDATION_ERROR"
        assert detail["details"] == ["End date must be on or after start date"]

    def test_update(self, client, sample_event):
        event = client.post("/v1/events", json=sample_event).json()

        response = client.put(f"/v1/events/{event['id']}", json={"endDate": "2025-11-04"})

        assert response.status_code == 200
        assert response.json()["endDate"] == "2025-11-04"
        assert response.json()["title"] == sample_event["title"]

    def test_update_checks_merged_event(self, client, sample_event):
        event = client.post("/v1/events", json={**sample_event, "endDate": "2025-11-05"}).json()

        response = client.put(f"/v1/events/{event['id']}", json={"date": "2025-11-10"})

        assert response.status_code == 422

    def test_delete(self, client, sample_event):
        event = client.post("/v1/events", json=sample_event).json()

        assert client.delete(f"/v1/events/{event['id']}").status_code == 204
        response = client.get(f"/v1/events/{event['id']}")
        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "NOT_FOUND"

    def test_range_and_type(self, client, sample_event):
        client.post("/v1/events", json=sample_event)
        client.post("/v1/events", json={**sample_event, "title": "Break", "type": "HOLIDAYS",
                                        "date": "2025-12-24"})

        in_range = client.get("/v1/events/range/2025-11-01/2025-11-30").json()
        holidays = client.get("/v1/events/type/HOLIDAYS").json()

        assert [e["title"] for e in in_range] == ["PI Planning Kickoff"]
        assert [e["title"] for e in holidays] == ["Break"]

    def test_range_rejects_bad_date(self, client):
        response = client.get("/v1/events/range/2025-11-01/soon")

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "INVALID_REQUEST"

    def test_import_text(self, client):
        response = client.post("/v1/events/import", json={"text": BULK_TEXT})

        assert response.status_code == 201
        assert len(response.json()) == 2
        assert len(client.get("/v1/events").json()) == 2

        row, _ = latest_request("/v1/events/import")
        assert row["events_created"] == 2

    def test_export_and_restore(self, client, sample_event):
        client.post("/v1/events", json=sample_event)
        exported = client.get("/v1/events/export").json()
        assert exported["version"] == "1.0"

        event_id = exported["events"][0]["id"]
        client.delete(f"/v1/events/{event_id}")

        restored = client.post("/v1/events/restore", json=exported)
        assert restored.json() == {"imported": 1}
        assert client.get(f"/v1/events/{event_id}").status_code == 200

        again = client.post("/v1/events/restore", json=exported)
        assert again.json() == {"imported": 0}

    def test_export_xlsx(self, client, sample_event):
        client.post("/v1/events", json=sample_event)

        response = client.get("/v1/events/export.xlsx")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
        assert "attachment" in response.headers["content-disposition"]
        assert response.content[:2] == b"PK"


class TestCalendarEndpoints:
    def test_month_layout(self, client):
        client.post("/v1/events", json={"title": "Demo Prep", "type": "PLANNING",
                                        "date": "2025-11-03", "endDate": "2025-11-05"})
        client.post("/v1/events", json={"title": "Review", "type": "MEETING",
                                        "date": "2025-11-04", "endDate": "2025-11-06"})
        client.post("/v1/events", json={"title": "Standup", "type": "MEETING",
                                        "date": "2025-11-04"})

        response = client.get("/v1/calendar/2025/11/layout")

        assert response.status_code == 200
        body = response.json()
        assert body["quarter"] == "Q2"
        assert len(body["weeks"]) == 6
        week = body["weeks"][1]
        assert week["maxLanes"] == 2
        assert week["dayCellOffsetPx"] == 68
        assert {s["event"]["title"]: s["lane"] for s in week["spanning"]} == {
            "Demo Prep": 0,
            "Review": 1,
        }
        assert week["days"][1]["date"] == "2025-11-04"
        assert [e["title"] for e in week["days"][1]["events"]] == ["Standup"]

    def test_month_layout_filters(self, client):
        client.post("/v1/events", json={"title": "Review", "type": "MEETING",
                                        "date": "2025-11-04", "endDate": "2025-11-06"})

        response = client.get("/v1/calendar/2025/11/layout", params={"type": "PLANNING"})

        assert all(w["spanning"] == [] for w in response.json()["weeks"])

    def test_invalid_month(self, client):
        response = client.get("/v1/calendar/2025/13/layout")

        assert response.status_code == 400

    def test_quarters(self, client):
        response = client.get("/v1/calendar/quarters/2025")

        quarters = response.json()
        assert [q["name"] for q in quarters] == ["Q1", "Q2", "Q3", "Q4"]
        assert quarters[1]["months"] == ["2025-11", "2025-12", "2026-01"]
        assert quarters[0]["header"] == "Q1: Aug - Sep - Oct 2025"
