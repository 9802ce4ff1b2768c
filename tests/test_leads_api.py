"""API tests for /api/v1/leads."""

from __future__ import annotations

import pytest

from tests.conftest import future_date

LEADS = "/api/v1/leads"


def create_lead(client, headers, **overrides) -> dict:
    payload = {
        "name": "Priya Sharma",
        "email": "priya@example.com",
        "phone": "9876543210",
        "eventType": "wedding",
        "eventDate": future_date(35),
        "budget": 600000,
        "guestCount": 600,
        "source": "referral",
    }
    payload.update(overrides)
    response = client.post(LEADS, json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def advance(client, headers, lead_id: str, *statuses: str) -> dict:
    body = {}
    for status in statuses:
        response = client.patch(f"{LEADS}/{lead_id}/status", json={"status": status}, headers=headers)
        assert response.status_code == 200, response.text
        body = response.json()
    return body


class TestCreateLead:
    def test_new_lead_is_scored_without_engagement(self, client, planner):
        lead = create_lead(client, planner)
        # 30 budget + 18 date + 15 guests + 15 referral + 10 not yet engaged
        assert lead["score"] == 88
        assert lead["status"] == "new"
        assert lead["isHotLead"] is True
        assert lead["priorityLevel"] == "high"

    def test_minimal_lead(self, client, planner):
        lead = create_lead(
            client,
            planner,
            email=None,
            phone=None,
            eventDate=None,
            budget=None,
            guestCount=None,
            source=None,
        )
        assert lead["score"] == 10
        assert lead["priorityLevel"] == "low"

    def test_budget_range_stands_in_for_budget(self, client, planner):
        lead = create_lead(
            client,
            planner,
            budget=None,
            budgetRange="5-10 lakhs",
            eventDate=None,
            guestCount=None,
            source=None,
        )
        assert lead["score"] == 30 + 10

    @pytest.mark.parametrize(
        "field, value",
        [("name", ""), ("email", "not-an-email"), ("phone", "12"), ("budget", -1)],
    )
    def test_validation_errors(self, client, planner, field, value):
        response = client.post(LEADS, json={"name": "Valid", field: value}, headers=planner)
        assert response.status_code == 422
        assert response.json()["error"] == "Validation failed"

    def test_requires_authentication(self, client):
        response = client.post(LEADS, json={"name": "Anon"})
        assert response.status_code == 401
        assert "error" in response.json()

    def test_vendor_cannot_manage_leads(self, client, vendor_user):
        response = client.get(LEADS, headers=vendor_user)
        assert response.status_code == 403


class TestListLeads:
    def test_paginated_envelope(self, client, planner):
        for i in range(3):
            create_lead(client, planner, name=f"Lead {i}", phone=None, email=None)

        response = client.get(LEADS, params={"limit": 2}, headers=planner)
        assert response.status_code == 200
        body = response.json()
        assert len(body["items"]) == 2
        assert body["meta"] == {"page": 1, "limit": 2, "total": 3, "totalPages": 2}

    def test_tenants_are_isolated(self, client, planner, other_planner):
        lead = create_lead(client, planner)
        assert client.get(LEADS, headers=other_planner).json()["meta"]["total"] == 0
        response = client.get(f"{LEADS}/{lead['id']}", headers=other_planner)
        assert response.status_code == 404
        assert response.json() == {"error": "Lead not found"}

    def test_hot_leads(self, client, planner):
        create_lead(client, planner, name="Hot")
        create_lead(
            client, planner, name="Cold", budget=None, guestCount=None, source=None, phone=None
        )
        hot = client.get(f"{LEADS}/hot", headers=planner).json()
        assert [lead["name"] for lead in hot] == ["Hot"]

    def test_search_and_filters(self, client, planner):
        create_lead(client, planner, name="Aarav Mehta", source="instagram")
        create_lead(client, planner, name="Zoya Khan", source="website", phone=None, email=None)

        found = client.get(LEADS, params={"search": "zoya"}, headers=planner).json()
        assert [lead["name"] for lead in found["items"]] == ["Zoya Khan"]

        by_source = client.get(LEADS, params={"source": "instagram"}, headers=planner).json()
        assert by_source["meta"]["total"] == 1


class TestLeadLifecycle:
    def test_status_transitions(self, client, planner):
        lead = create_lead(client, planner)
        updated = advance(client, planner, lead["id"], "contacted", "qualified")
        assert updated["status"] == "qualified"

    def test_invalid_transition(self, client, planner):
        lead = create_lead(client, planner)
        response = client.patch(
            f"{LEADS}/{lead['id']}/status", json={"status": "proposal_sent"}, headers=planner
        )
        assert response.status_code == 400
        assert "Cannot transition" in response.json()["error"]

    def test_convert_requires_proposal(self, client, planner):
        lead = create_lead(client, planner)
        response = client.post(f"{LEADS}/{lead['id']}/convert", headers=planner)
        assert response.status_code == 400

    def test_convert_creates_draft_event(self, client, planner):
        lead = create_lead(client, planner, eventDate=future_date(60))
        advance(client, planner, lead["id"], "contacted", "qualified", "proposal_sent")

        response = client.post(f"{LEADS}/{lead['id']}/convert", headers=planner)
        assert response.status_code == 200, response.text
        body = response.json()
        assert body["lead"]["status"] == "converted"
        assert body["lead"]["convertedEventId"] == body["eventId"]

        event = client.get(f"/api/v1/events/{body['eventId']}", headers=planner).json()
        assert event["status"] == "draft"
        assert event["name"] == "Priya Sharma's wedding"
        assert event["leadId"] == lead["id"]

    def test_rescore_counts_engagement(self, client, planner):
        lead = create_lead(client, planner)
        advance(client, planner, lead["id"], "contacted")
        rescored = client.post(f"{LEADS}/{lead['id']}/rescore", headers=planner).json()
        assert rescored["score"] == 98

    def test_manual_score_bounds(self, client, planner):
        lead = create_lead(client, planner)
        ok = client.patch(f"{LEADS}/{lead['id']}/score", json={"score": 42}, headers=planner)
        assert ok.json()["score"] == 42
        bad = client.patch(f"{LEADS}/{lead['id']}/score", json={"score": 101}, headers=planner)
        assert bad.status_code == 400

    def test_update_recomputes_score(self, client, planner):
        lead = create_lead(client, planner)
        response = client.patch(f"{LEADS}/{lead['id']}", json={"budget": 10000}, headers=planner)
        assert response.json()["score"] == lead["score"] - 25

    def test_delete(self, client, planner):
        lead = create_lead(client, planner)
        response = client.delete(f"{LEADS}/{lead['id']}", headers=planner)
        assert response.json() == {"deleted": True, "id": lead["id"]}
        assert client.get(f"{LEADS}/{lead['id']}", headers=planner).status_code == 404


class TestImportAndDuplicates:
    def test_import(self, client, planner):
        payload = {"leads": [{"name": "One"}, {"name": "Two", "source": "google"}]}
        response = client.post(f"{LEADS}/import", json=payload, headers=planner)
        assert response.status_code == 201
        assert response.json()["imported"] == 2

    @pytest.mark.parametrize("count", [0, 101])
    def test_import_batch_size(self, client, planner, count):
        payload = {"leads": [{"name": f"L{i}"} for i in range(count)]}
        response = client.post(f"{LEADS}/import", json=payload, headers=planner)
        assert response.status_code == 422
        assert response.json()["details"]

    def test_duplicate_check(self, client, planner):
        create_lead(client, planner)
        response = client.get(
            f"{LEADS}/duplicates", params={"phone": "+91 98765 43210"}, headers=planner
        )
        matches = response.json()
        assert len(matches) == 1
        assert matches[0]["matchType"] == "phone"
        assert matches[0]["confidence"] == "high"

    def test_duplicate_check_needs_criteria(self, client, planner):
        assert client.get(f"{LEADS}/duplicates", headers=planner).status_code == 400
