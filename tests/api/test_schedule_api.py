"""Tests for the program schedule API.

Tests cover:
- Full scheduling persists program_json, scheduling_preferences and last_scheduled_at
- Feedback dispatch: resize, move, delta nudge, shift, regenerate
- Lookup/ownership errors (404, 401, 403)
- 400 for unknown sessions, invalid start dates, out-of-range durations
  and reschedules that leave the supported calendar
- 500 when the store fails to save
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from fitplan.main import create_app
from fitplan.programs.repository import InMemoryProgramStore, ProgramRecord

PROGRAM_ID = "550e8400-e29b-41d4-a716-446655440000"
OWNER = "user-1"


@pytest.fixture
def store(scheduled_program) -> InMemoryProgramStore:
    return InMemoryProgramStore(
        [
            ProgramRecord(
                id=PROGRAM_ID,
                user_id=OWNER,
                start_date="2025-01-02",
                program_json=scheduled_program.to_payload(),
            )
        ]
    )


@pytest.fixture
def client(store: InMemoryProgramStore):
    with TestClient(create_app(store)) as test_client:
        yield test_client


def _post(client: TestClient, path: str, body: dict | None = None, user: str | None = OWNER):
    headers = {"X-User-Id": user} if user else {}
    return client.post(f"/program/{PROGRAM_ID}{path}", json=body if body is not None else {}, headers=headers)


def _stored_session(store: InMemoryProgramStore, uid: str) -> dict:
    record = store.get_program(PROGRAM_ID)
    for week in record.program_json["weeks"]:
        for session in week["sessions"]:
            if session.get("uid") == uid:
                return session
    raise AssertionError(f"session {uid} not stored")


class TestSchedule:
    def test_full_schedule_persists_metadata(self, client, store):
        resp = _post(client, "/schedule", {"startDate": "2025-02-03", "preferences": {"daysOfWeek": [1, 3]}})

        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["scheduling_preferences"]["daysOfWeek"] == [1, 3]
        assert body["scheduling_preferences"]["default_time"] == "08:00"
        assert body["last_scheduled_at"] is not None

        # 2025-02-03 is a Monday
        assert _stored_session(store, "w1s1")["start_at"] == "2025-02-03T08:00"
        assert _stored_session(store, "w1s2")["start_at"] == "2025-02-05T08:00"
        assert _stored_session(store, "w2s2")["start_at"] == "2025-02-12T08:00"

    def test_falls_back_to_stored_start_date(self, client, store):
        resp = _post(client, "/schedule")

        assert resp.status_code == 200, resp.text
        assert _stored_session(store, "w1s1")["start_at"] == "2025-01-02T08:00"

    def test_non_object_preferences_ignored(self, client):
        resp = _post(client, "/schedule", {"preferences": "weekends"})

        assert resp.status_code == 200, resp.text
        assert resp.json()["scheduling_preferences"]["daysOfWeek"] == [0, 1, 2, 3, 4, 5, 6]

    def test_invalid_start_date(self, client):
        resp = _post(client, "/schedule", {"startDate": "someday"})

        assert resp.status_code == 400
        assert "Invalid start date" in resp.json()["detail"]

    def test_missing_start_date(self, client, store):
        store.update_program_fields(PROGRAM_ID, start_date=None)

        resp = _post(client, "/schedule")

        assert resp.status_code == 400

    def test_start_date_too_close_to_calendar_end(self, client, store):
        resp = _post(client, "/schedule", {"startDate": "9999-12-30"})

        assert resp.status_code == 400
        assert _stored_session(store, "w1s1")["start_at"] == "2025-01-02T08:00"


class TestAccess:
    def test_malformed_id_is_not_found(self, client):
        resp = client.post("/program/bad-id/schedule", json={}, headers={"X-User-Id": OWNER})
        assert resp.status_code == 404

    def test_unknown_program(self, client):
        resp = client.post(
            "/program/123e4567-e89b-42d3-a456-426614174000/schedule",
            json={},
            headers={"X-User-Id": OWNER},
        )
        assert resp.status_code == 404

    def test_unauthenticated(self, client):
        resp = _post(client, "/schedule/feedback", user=None)
        assert resp.status_code == 401

    def test_other_owner_forbidden(self, client, store):
        resp = _post(client, "/schedule/feedback", {"shiftDays": 1}, user="someone-else")

        assert resp.status_code == 403
        assert _stored_session(store, "w1s1")["start_at"] == "2025-01-02T08:00"


class TestFeedback:
    def test_resize(self, client, store):
        resp = _post(client, "/schedule/feedback", {"uid": "w1s1", "newDurationMinutes": 75})

        assert resp.status_code == 200, resp.text
        session = _stored_session(store, "w1s1")
        assert session["duration_minutes"] == 75
        assert session["start_at"] == "2025-01-02T08:00"

    def test_resize_keeps_preferences(self, client, store):
        store.update_program_fields(PROGRAM_ID, scheduling_preferences={"daysOfWeek": [4]})

        resp = _post(client, "/schedule/feedback", {"uid": "w1s1", "newDurationMinutes": 75})

        assert resp.status_code == 200
        assert resp.json()["scheduling_preferences"] == {"daysOfWeek": [4]}

    def test_resize_out_of_range(self, client, store):
        resp = _post(client, "/schedule/feedback", {"uid": "w1s1", "newDurationMinutes": 2})

        assert resp.status_code == 400
        assert _stored_session(store, "w1s1")["duration_minutes"] == 60

    def test_resize_unknown_uid(self, client):
        resp = _post(client, "/schedule/feedback", {"uid": "missing", "newDurationMinutes": 75})

        assert resp.status_code == 400
        assert resp.json()["detail"] == "No session updated"

    def test_move(self, client, store):
        resp = _post(client, "/schedule/feedback", {"uid": "w1s1", "newStartAt": "2025-01-03T10:30"})

        assert resp.status_code == 200, resp.text
        assert _stored_session(store, "w1s1")["start_at"] == "2025-01-03T10:30"
        assert _stored_session(store, "w1s2")["start_at"] == "2025-01-04T08:00"

    def test_move_invalid_start(self, client):
        resp = _post(client, "/schedule/feedback", {"uid": "w1s1", "newStartAt": "friday"})

        assert resp.status_code == 400

    def test_move_unknown_uid(self, client):
        resp = _post(client, "/schedule/feedback", {"uid": "missing", "newStartAt": "2025-01-05T12:00"})

        assert resp.status_code == 400
        assert resp.json()["detail"] == "No session updated"

    def test_nudge_by_delta_minutes(self, client, store):
        resp = _post(client, "/schedule/feedback", {"uid": "w1s1", "deltaMinutes": 30})

        assert resp.status_code == 200, resp.text
        assert _stored_session(store, "w1s1")["start_at"] == "2025-01-02T08:30"

    def test_nudge_unscheduled_session(self, client):
        resp = _post(client, "/schedule/feedback", {"uid": "w2s2", "deltaMinutes": 15})

        assert resp.status_code == 400
        assert "Session not found" in resp.json()["detail"]

    def test_nudge_unknown_session(self, client):
        resp = _post(client, "/schedule/feedback", {"uid": "missing", "deltaMinutes": 15})

        assert resp.status_code == 400
        assert "Session not found" in resp.json()["detail"]

    def test_shift(self, client, store):
        resp = _post(client, "/schedule/feedback", {"shiftDays": 2})

        assert resp.status_code == 200, resp.text
        assert _stored_session(store, "w1s1")["start_at"] == "2025-01-04T08:00"
        assert _stored_session(store, "w2s1")["start_at"] == "2025-01-09T18:30"
        assert "start_at" not in _stored_session(store, "w2s2")

    def test_shift_minutes_only(self, client, store):
        resp = _post(client, "/schedule/feedback", {"shiftMinutes": -60})

        assert resp.status_code == 200
        assert _stored_session(store, "w1s1")["start_at"] == "2025-01-02T07:00"

    def test_shift_out_of_calendar_range(self, client, store):
        resp = _post(client, "/schedule/feedback", {"shiftDays": 3_000_000})

        assert resp.status_code == 400
        assert "date range" in resp.json()["detail"]
        assert _stored_session(store, "w1s1")["start_at"] == "2025-01-02T08:00"

    def test_nudge_out_of_calendar_range(self, client, store):
        resp = _post(client, "/schedule/feedback", {"uid": "w1s1", "deltaMinutes": 10**20})

        assert resp.status_code == 400
        assert _stored_session(store, "w1s1")["start_at"] == "2025-01-02T08:00"

    def test_regenerate_when_no_specific_feedback(self, client, store):
        resp = _post(client, "/schedule/feedback", {"startDate": "2025-02-01", "preferences": {"daysOfWeek": [2, 4]}})

        assert resp.status_code == 200, resp.text
        assert resp.json()["scheduling_preferences"]["daysOfWeek"] == [2, 4]
        # 2025-02-01 is a Saturday; first Tuesday after is 2025-02-04
        assert _stored_session(store, "w1s1")["start_at"] == "2025-02-04T08:00"

    def test_save_failure(self, client, store):
        with patch.object(store, "update_program_fields", side_effect=RuntimeError("save fail")):
            resp = _post(client, "/schedule/feedback", {"uid": "w1s1", "newDurationMinutes": 75})

        assert resp.status_code == 500
        assert "save fail" in resp.json()["detail"]


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
