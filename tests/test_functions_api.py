"""API tests for /api/v1/functions."""

from __future__ import annotations

import pytest

from tests.conftest import create_event, create_function, future_date

FUNCTIONS = "/api/v1/functions"


class TestFunctions:
    def test_new_functions_append_in_order(self, client, planner, event):
        mehendi = create_function(client, planner, event["id"], name="Mehendi", type="mehendi")
        wedding = create_function(
            client,
            planner,
            event["id"],
            name="Pheras",
            type="wedding",
            date=future_date(),
            startTime="10:00",
            endTime="13:00",
            guestCount=250,
        )
        assert (mehendi["sortOrder"], wedding["sortOrder"]) == (0, 1)
        assert wedding["typeLabel"] == "Wedding Ceremony"
        assert wedding["startTime"] == "10:00"
        assert wedding["eventId"] == event["id"]

        listed = client.get(FUNCTIONS, params={"eventId": event["id"]}, headers=planner).json()
        assert [f["name"] for f in listed] == ["Mehendi", "Pheras"]

    @pytest.mark.parametrize(
        "overrides",
        [
            {"type": "funeral"},
            {"name": ""},
            {"startTime": "7pm"},
            {"guestCount": -1},
            {"eventId": "not-a-uuid"},
        ],
    )
    def test_invalid_payloads(self, client, planner, event, overrides):
        payload = {"eventId": event["id"], "name": "Haldi", "type": "haldi", **overrides}
        assert client.post(FUNCTIONS, json=payload, headers=planner).status_code == 422

    def test_unknown_event(self, client, planner):
        response = client.post(
            FUNCTIONS,
            json={
                "eventId": "00000000-0000-0000-0000-000000000000",
                "name": "Haldi",
                "type": "haldi",
            },
            headers=planner,
        )
        assert response.status_code == 404
        assert response.json() == {"error": "Event not found"}

    def test_filter_by_type_and_count(self, client, planner, event):
        create_function(client, planner, event["id"])
        create_function(client, planner, event["id"], name="Reception", type="reception")

        receptions = client.get(
            FUNCTIONS, params={"eventId": event["id"], "type": "reception"}, headers=planner
        ).json()
        assert [f["name"] for f in receptions] == ["Reception"]

        count = client.get(f"{FUNCTIONS}/count", params={"eventId": event["id"]}, headers=planner)
        assert count.json() == {"eventId": event["id"], "count": 2}

    def test_types(self, client, planner):
        types = client.get(f"{FUNCTIONS}/types", headers=planner).json()
        assert {"value": "sangeet", "label": "Sangeet"} in types
        assert len(types) == 11

    def test_update(self, client, planner, event):
        function = create_function(client, planner, event["id"])
        response = client.patch(
            f"{FUNCTIONS}/{function['id']}",
            json={"venueName": "Rambagh Palace", "guestCount": 180},
            headers=planner,
        )
        assert response.status_code == 200
        body = response.json()
        assert (body["venueName"], body["guestCount"]) == ("Rambagh Palace", 180)
        assert body["name"] == "Sangeet Night"

    @pytest.mark.parametrize("field", ["name", "type"])
    def test_required_fields_cannot_be_cleared(self, client, planner, event, field):
        function = create_function(client, planner, event["id"])
        url = f"{FUNCTIONS}/{function['id']}"
        response = client.patch(url, json={field: None}, headers=planner)
        assert response.status_code == 400

    def test_reorder(self, client, planner, event):
        first = create_function(client, planner, event["id"], name="Haldi", type="haldi")
        second = create_function(client, planner, event["id"], name="Reception", type="reception")

        response = client.post(
            f"{FUNCTIONS}/reorder",
            json={
                "items": [
                    {"id": first["id"], "sortOrder": 1},
                    {"id": second["id"], "sortOrder": 0},
                ]
            },
            headers=planner,
        )
        assert response.json() == {"reordered": 2}

        listed = client.get(FUNCTIONS, params={"eventId": event["id"]}, headers=planner).json()
        assert [f["name"] for f in listed] == ["Reception", "Haldi"]

    def test_reorder_rejects_foreign_ids(self, client, planner, other_planner, event):
        mine = create_function(client, planner, event["id"])
        theirs = create_function(client, other_planner, create_event(client, other_planner)["id"])
        response = client.post(
            f"{FUNCTIONS}/reorder",
            json={
                "items": [
                    {"id": mine["id"], "sortOrder": 1},
                    {"id": theirs["id"], "sortOrder": 0},
                ]
            },
            headers=planner,
        )
        assert response.status_code == 404
        assert client.get(f"{FUNCTIONS}/{mine['id']}", headers=planner).json()["sortOrder"] == 0

    def test_delete_detaches_linked_timeline_items(self, client, planner, event):
        function = create_function(client, planner, event["id"])
        item = client.post(
            "/api/v1/timeline",
            json={
                "eventId": event["id"],
                "functionId": function["id"],
                "startTime": "19:00",
                "duration": 30,
                "title": "Family performances",
                "owner": "Anchor",
            },
            headers=planner,
        ).json()
        assert item["functionId"] == function["id"]

        response = client.delete(f"{FUNCTIONS}/{function['id']}", headers=planner)
        assert response.json() == {"deleted": True, "id": function["id"]}
        assert client.get(f"{FUNCTIONS}/{function['id']}", headers=planner).status_code == 404

        kept = client.get(f"/api/v1/timeline/{item['id']}", headers=planner)
        assert kept.status_code == 200
        assert kept.json()["functionId"] is None

    def test_other_planner_gets_404(self, client, planner, other_planner, event):
        function = create_function(client, planner, event["id"])
        url = f"{FUNCTIONS}/{function['id']}"
        assert client.get(url, headers=other_planner).status_code == 404
        assert client.patch(url, json={"notes": "x"}, headers=other_planner).status_code == 404
        assert client.delete(url, headers=other_planner).status_code == 404
        listing = client.get(FUNCTIONS, params={"eventId": event["id"]}, headers=other_planner)
        assert listing.status_code == 404

    def test_vendor_cannot_manage_functions(self, client, vendor_user, event):
        response = client.get(FUNCTIONS, params={"eventId": event["id"]}, headers=vendor_user)
        assert response.status_code == 403
