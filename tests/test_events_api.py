"""API tests for /api/v1/events."""

from __future__ import annotations

import pytest

from tests.conftest import create_event, future_date

EVENTS = "/api/v1/events"


def set_status(client, headers, event_id: str, status: str):
    return client.patch(f"{EVENTS}/{event_id}/status", json={"status": status}, headers=headers)


class TestCreateEvent:
    def test_created_as_draft_with_derived_fields(self, client, planner):
        event = create_event(client, planner, date=future_date(10))
        assert event["status"] == "draft"
        assert event["budgetAverage"] == 2_000_000
        assert event["daysUntilEvent"] == 10
        assert event["isLocked"] is False
        assert event["isEditable"] is True
        assert event["venueType"] == "personal"

    def test_past_date_rejected(self, client, planner):
        payload = {
            "name": "Too Late",
            "type": "birthday",
            "date": future_date(-5),
            "guestCount": 20,
            "budgetMin": 1000,
            "budgetMax": 2000,
            "city": "Pune",
        }
        response = client.post(EVENTS, json=payload, headers=planner)
        assert response.status_code == 400
        assert response.json() == {"error": "Event date cannot be in the past"}

    @pytest.mark.parametrize(
        "overrides",
        [
            {"type": "funeral"},
            {"guestCount": 0},
            {"budgetMin": 0},
            {"budgetMin": 5000, "budgetMax": 1000},
            {"venueType": "beach"},
            {"city": ""},
        ],
    )
    def test_invalid_payloads(self, client, planner, overrides):
        payload = {
            "name": "Bad",
            "type": "corporate",
            "date": future_date(),
            "guestCount": 50,
            "budgetMin": 1000,
            "budgetMax": 2000,
            "city": "Delhi",
        }
        payload.update(overrides)
        assert client.post(EVENTS, json=payload, headers=planner).status_code == 422


class TestEventLifecycle:
    def test_proposal_flow_locks_event(self, client, planner, event):
        assert set_status(client, planner, event["id"], "planning").status_code == 200

        proposed = client.post(f"{EVENTS}/{event['id']}/send-proposal", headers=planner)
        assert proposed.json()["status"] == "proposed"

        approved = client.post(f"{EVENTS}/{event['id']}/approve", headers=planner).json()
        assert approved["status"] == "approved"
        assert approved["isLocked"] is True

        response = client.patch(f"{EVENTS}/{event['id']}", json={"name": "New"}, headers=planner)
        assert response.status_code == 400
        assert "locked" in response.json()["error"]

    def test_send_proposal_requires_planning(self, client, planner, event):
        response = client.post(f"{EVENTS}/{event['id']}/send-proposal", headers=planner)
        assert response.status_code == 400

    @pytest.mark.parametrize("target", ["live", "completed", "approved"])
    def test_draft_cannot_skip_ahead(self, client, planner, event, target):
        assert set_status(client, planner, event["id"], target).status_code == 400

    def test_cancelled_can_only_archive(self, client, planner, event):
        assert set_status(client, planner, event["id"], "cancelled").status_code == 200
        assert set_status(client, planner, event["id"], "planning").status_code == 400
        assert set_status(client, planner, event["id"], "archived").status_code == 200

    def test_update_checks_merged_budget(self, client, planner, event):
        response = client.patch(
            f"{EVENTS}/{event['id']}", json={"budgetMax": 1_000_000}, headers=planner
        )
        assert response.status_code == 400

    @pytest.mark.parametrize(
        "stored, patch",
        [
            ({}, {"endDate": future_date(80)}),
            ({"endDate": future_date(92)}, {"date": future_date(95)}),
            ({}, {"date": future_date(20), "endDate": future_date(10)}),
        ],
    )
    def test_update_keeps_end_date_after_start(self, client, planner, stored, patch):
        event = create_event(client, planner, **stored)
        response = client.patch(f"{EVENTS}/{event['id']}", json=patch, headers=planner)
        assert response.status_code == 400
        assert response.json() == {"error": "End date cannot be before the event date"}

    def test_update_end_date(self, client, planner, event):
        response = client.patch(
            f"{EVENTS}/{event['id']}", json={"endDate": future_date(92)}, headers=planner
        )
        assert response.status_code == 200
        assert response.json()["endDate"] == future_date(92)

    def test_update_fields(self, client, planner, event):
        response = client.patch(
            f"{EVENTS}/{event['id']}", json={"guestCount": 450, "notes": "Outdoor"}, headers=planner
        )
        assert response.status_code == 200
        assert response.json()["guestCount"] == 450

    def test_only_drafts_can_be_deleted(self, client, planner, event):
        set_status(client, planner, event["id"], "planning")
        assert client.delete(f"{EVENTS}/{event['id']}", headers=planner).status_code == 400

        draft = create_event(client, planner)
        response = client.delete(f"{EVENTS}/{draft['id']}", headers=planner)
        assert response.json() == {"deleted": True, "id": draft["id"]}


class TestEventQueries:
    def test_list_defaults_to_soonest_first(self, client, planner):
        create_event(client, planner, name="Later", date=future_date(200))
        create_event(client, planner, name="Sooner", date=future_date(20))
        body = client.get(EVENTS, headers=planner).json()
        assert [e["name"] for e in body["items"]] == ["Sooner", "Later"]
        assert body["meta"]["total"] == 2

    def test_filters(self, client, planner):
        create_event(client, planner, name="Office Party", type="corporate", city="Mumbai")
        create_event(client, planner)
        body = client.get(EVENTS, params={"type": "corporate"}, headers=planner).json()
        assert [e["name"] for e in body["items"]] == ["Office Party"]
        body = client.get(EVENTS, params={"city": "mumbai"}, headers=planner).json()
        assert body["meta"]["total"] == 1

    def test_stats(self, client, planner, event):
        stats = client.get(f"{EVENTS}/stats", headers=planner).json()
        assert stats["total"] == 1
        assert stats["byStatus"]["draft"] == 1
        assert stats["byStatus"]["live"] == 0
        assert stats["upcomingCount"] == 1

    def test_upcoming(self, client, planner, event):
        upcoming = client.get(f"{EVENTS}/upcoming", headers=planner).json()
        assert [e["id"] for e in upcoming] == [event["id"]]

    def test_other_planner_gets_404(self, client, other_planner, event):
        assert client.get(f"{EVENTS}/{event['id']}", headers=other_planner).status_code == 404
