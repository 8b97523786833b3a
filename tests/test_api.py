"""Tests for src.api — FastAPI routes over a temp SQLite file.

The chat-completion call is mocked by patching src.core.llm.complete.
"""

import inspect
import json

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from fastapi.routing import APIRoute
from fastapi.testclient import TestClient

from src.api.app import create_app
from src.core.schedule_service import ScheduleConfig


@pytest.fixture
def client(tmp_db_path):
    app = create_app(db_path=tmp_db_path, schedule_config=ScheduleConfig(api_key="sk-test"))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def household(client):
    """Bootstrap a household; returns (guardian headers, member headers, invite code)."""
    resp = client.post("/api/households", json={
        "householdName": "The Cohens", "name": "Dana", "email": "dana@example.com",
    })
    assert resp.status_code == 201
    body = resp.json()
    invite_code = body["household"]["inviteCode"]

    joined = client.post("/api/households/join", json={
        "inviteCode": invite_code, "name": "Noa", "email": "noa@example.com",
    })
    assert joined.status_code == 201

    return (
        {"X-User-Id": str(body["user"]["id"])},
        {"X-User-Id": str(joined.json()["user"]["id"])},
        invite_code,
    )


# ---------------------------------------------------------------------------
# Health and identity
# ---------------------------------------------------------------------------


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "healthy"
        assert body["aiConfigured"] is True

    def test_health_without_key(self, tmp_db_path):
        app = create_app(db_path=tmp_db_path, schedule_config=ScheduleConfig(api_key=""))
        with TestClient(app) as client:
            assert client.get("/health").json()["aiConfigured"] is False


class TestIdentity:
    def test_missing_header_is_401(self, client):
        assert client.get("/api/users/me").status_code == 401

    def test_unknown_user_is_404(self, client):
        assert client.get("/api/users/me", headers={"X-User-Id": "999"}).status_code == 404

    def test_me(self, client, household):
        guardian, _, _ = household
        body = client.get("/api/users/me", headers=guardian).json()
        assert body["name"] == "Dana"
        assert body["role"] == "GUARDIAN"


# ---------------------------------------------------------------------------
# Households and users
# ---------------------------------------------------------------------------


class TestHouseholds:
    def test_join_makes_member(self, client, household):
        _, member, _ = household
        assert client.get("/api/users/me", headers=member).json()["role"] == "MEMBER"

    def test_join_with_bad_code(self, client):
        resp = client.post("/api/households/join", json={
            "inviteCode": "NOPE0000", "name": "X", "email": "x@example.com",
        })
        assert resp.status_code == 404

    def test_duplicate_email_is_409(self, client, household):
        _, _, invite_code = household
        resp = client.post("/api/households/join", json={
            "inviteCode": invite_code, "name": "Dana again", "email": "DANA@example.com",
        })
        assert resp.status_code == 409

    def test_members_and_invite_code(self, client, household):
        guardian, _, invite_code = household
        members = client.get("/api/users/household", headers=guardian).json()
        assert [m["name"] for m in members] == ["Dana", "Noa"]
        code = client.get("/api/users/household/invite-code", headers=guardian).json()
        assert code == {"inviteCode": invite_code}

    def test_update_profile(self, client, household):
        guardian, _, _ = household
        resp = client.patch("/api/users/me", headers=guardian, json={"avatar": "fox.png"})
        assert resp.status_code == 200
        assert resp.json()["avatar"] == "fox.png"
        assert resp.json()["name"] == "Dana"


# ---------------------------------------------------------------------------
# AI schedule
# ---------------------------------------------------------------------------


class TestSchedule:
    def test_creates_records(self, client, household):
        guardian, _, _ = household
        reply = json.dumps([
            {"type": "chore", "title": "Clean garage", "dateTime": "2025-03-10T09:00:00", "points": 15},
            {"type": "grocery", "title": "Milk", "category": "DAIRY"},
        ])
        with patch("src.core.llm.complete", AsyncMock(return_value=reply)):
            resp = client.post("/api/ai/schedule", headers=guardian, json={"text": "garage and milk"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["message"] == "Successfully processed your schedule!"
        assert body["choresCreated"] == 1
        assert body["groceriesCreated"] == 1
        assert body["items"][0]["dateTime"] == "2025-03-10T09:00:00"

        chores = client.get("/api/chores", headers=guardian).json()
        assert chores[0]["title"] == "Clean garage"
        assert chores[0]["points"] == 15

    def test_blank_text_is_422(self, client, household):
        guardian, _, _ = household
        resp = client.post("/api/ai/schedule", headers=guardian, json={"text": "   "})
        assert resp.status_code == 422

    def test_member_is_forbidden(self, client, household):
        _, member, _ = household
        resp = client.post("/api/ai/schedule", headers=member, json={"text": "Buy milk"})
        assert resp.status_code == 403

    def test_failure_is_still_200(self, client, household):
        guardian, _, _ = household
        with patch("src.core.llm.complete", AsyncMock(return_value="no idea")):
            resp = client.post("/api/ai/schedule", headers=guardian, json={"text": "hmm"})
        assert resp.status_code == 200
        assert resp.json()["outcome"] == "no_items"
        assert resp.json()["items"] == []


# ---------------------------------------------------------------------------
# Chores, events, medications, groceries, notifications
# ---------------------------------------------------------------------------


class TestChores:
    def test_lifecycle_and_leaderboard(self, client, household):
        guardian, member, _ = household
        noa_id = int(member["X-User-Id"])
        created = client.post("/api/chores", headers=guardian, json={
            "title": "Dishes", "dueDate": "2025-03-11T09:00:00", "points": 5, "assignedToId": noa_id,
        })
        assert created.status_code == 201
        chore_id = created.json()["id"]

        assert len(client.get("/api/chores/pending", headers=guardian).json()) == 1
        done = client.patch(f"/api/chores/{chore_id}/complete", headers=member)
        assert done.json()["completed"] is True
        assert client.get("/api/chores/pending", headers=guardian).json() == []

        board = client.get("/api/chores/leaderboard", headers=guardian).json()
        assert board[0] == {"userId": noa_id, "name": "Noa", "points": 5}

        assert client.delete(f"/api/chores/{chore_id}", headers=guardian).status_code == 204
        assert client.delete(f"/api/chores/{chore_id}", headers=guardian).status_code == 404

    def test_other_household_cannot_see_chore(self, client, household):
        guardian, _, _ = household
        chore_id = client.post("/api/chores", headers=guardian, json={
            "title": "Dishes", "dueDate": "2025-03-11T09:00:00",
        }).json()["id"]

        outsider = client.post("/api/households", json={
            "householdName": "Neighbours", "name": "Sam", "email": "sam@example.com",
        }).json()["user"]["id"]
        headers = {"X-User-Id": str(outsider)}

        assert client.get("/api/chores", headers=headers).json() == []
        assert client.patch(f"/api/chores/{chore_id}/complete", headers=headers).status_code == 404


class TestEvents:
    def test_create_update_filter(self, client, household):
        guardian, _, _ = household
        created = client.post("/api/events", headers=guardian, json={
            "title": "Dentist", "startTime": "2025-03-10T16:00:00",
            "endTime": "2025-03-10T17:00:00", "type": "MEDICAL",
        })
        assert created.status_code == 201
        event_id = created.json()["id"]

        updated = client.put(f"/api/events/{event_id}", headers=guardian, json={
            "title": "Orthodontist", "startTime": "2025-03-10T16:00:00",
            "endTime": "2025-03-10T16:30:00",
        })
        assert updated.json()["title"] == "Orthodontist"

        in_range = client.get("/api/events", headers=guardian, params={
            "start": "2025-03-10T00:00:00", "end": "2025-03-10T23:59:59",
        }).json()
        out_of_range = client.get("/api/events", headers=guardian, params={
            "start": "2025-03-11T00:00:00", "end": "2025-03-12T00:00:00",
        }).json()
        assert len(in_range) == 1
        assert out_of_range == []

    def test_end_before_start_is_422(self, client, household):
        guardian, _, _ = household
        resp = client.post("/api/events", headers=guardian, json={
            "title": "Backwards", "startTime": "2025-03-10T16:00:00", "endTime": "2025-03-10T15:00:00",
        })
        assert resp.status_code == 422


class TestMedications:
    def test_log_dose_and_inventory(self, client, household):
        guardian, _, _ = household
        med = client.post("/api/medications", headers=guardian, json={
            "name": "Vitamin D", "dosage": "1 tablet", "morning": True, "inventory": 3,
        }).json()

        log = client.post("/api/medications/log", headers=guardian, json={
            "medicationId": med["id"], "status": "TAKEN", "scheduledTime": "2025-03-10T08:00:00",
        })
        assert log.status_code == 201

        meds = client.get("/api/medications", headers=guardian).json()
        assert meds[0]["inventory"] == 2
        logs = client.get(f"/api/medications/{med['id']}/logs", headers=guardian).json()
        assert [l["status"] for l in logs] == ["TAKEN"]

        refilled = client.patch(f"/api/medications/{med['id']}/inventory", headers=guardian,
                                json={"quantity": 30})
        assert refilled.json()["inventory"] == 30

    def test_log_unknown_medication_is_404(self, client, household):
        guardian, _, _ = household
        resp = client.post("/api/medications/log", headers=guardian, json={
            "medicationId": 999, "status": "TAKEN", "scheduledTime": "2025-03-10T08:00:00",
        })
        assert resp.status_code == 404

    def test_negative_inventory_is_422(self, client, household):
        guardian, _, _ = household
        resp = client.post("/api/medications", headers=guardian, json={"name": "X", "inventory": -1})
        assert resp.status_code == 422


class TestGroceries:
    def test_toggle_and_clear_checked(self, client, household):
        guardian, member, _ = household
        milk = client.post("/api/groceries", headers=guardian,
                           json={"name": "Milk", "category": "DAIRY"}).json()
        client.post("/api/groceries", headers=member, json={"name": "Eggs"})
        assert milk["neededBy"] is not None

        toggled = client.patch(f"/api/groceries/{milk['id']}/toggle", headers=member)
        assert toggled.json()["checked"] is True
        assert [g["name"] for g in client.get("/api/groceries/pending", headers=guardian).json()] == ["Eggs"]

        assert client.delete("/api/groceries/clear-checked", headers=guardian).status_code == 204
        assert [g["name"] for g in client.get("/api/groceries", headers=guardian).json()] == ["Eggs"]


class TestNotifications:
    def test_register_and_unregister(self, client, household):
        guardian, _, _ = household
        first = client.post("/api/notifications/register", headers=guardian, json={"token": "tok-1"})
        again = client.post("/api/notifications/register", headers=guardian, json={"token": "tok-1"})
        assert first.status_code == 201
        assert first.json()["id"] == again.json()["id"]
        assert first.json()["platform"] == "ios"

        resp = client.request("DELETE", "/api/notifications/unregister", headers=guardian,
                              json={"token": "tok-1"})
        assert resp.status_code == 204


class TestErrors:
    def test_unexpected_error_is_500_json(self, tmp_db_path):
        app = create_app(db_path=tmp_db_path, schedule_config=ScheduleConfig(api_key=""))
        with TestClient(app, raise_server_exceptions=False) as client:
            user_id = client.post("/api/households", json={
                "householdName": "H", "name": "A", "email": "a@example.com",
            }).json()["user"]["id"]
            app.state.chores = MagicMock()
            app.state.chores.list_by_household.side_effect = RuntimeError("db exploded")

            resp = client.get("/api/chores", headers={"X-User-Id": str(user_id)})

        assert resp.status_code == 500
        assert resp.json() == {"error": "Internal server error"}


class TestRouteConcurrency:
    def test_database_routes_run_in_threadpool(self, tmp_db_path):
        app = create_app(db_path=tmp_db_path, schedule_config=ScheduleConfig(api_key=""))
        crud = [r for r in app.routes
                if isinstance(r, APIRoute) and r.path.startswith("/api/") and r.path != "/api/ai/schedule"]

        assert crud
        for route in crud:
            assert not inspect.iscoroutinefunction(route.endpoint), route.path

    def test_schedule_route_stays_async(self, tmp_db_path):
        app = create_app(db_path=tmp_db_path, schedule_config=ScheduleConfig(api_key=""))
        schedule = next(r for r in app.routes if isinstance(r, APIRoute) and r.path == "/api/ai/schedule")
        assert inspect.iscoroutinefunction(schedule.endpoint)
