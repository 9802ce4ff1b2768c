"""API tests for /api/v1/timeline."""

from __future__ import annotations

import uuid

import pytest

from tests.conftest import create_event, create_function

TIMELINE = "/api/v1/timeline"


def add_item(client, headers, event_id: str, **overrides) -> dict:
    payload = {
        "eventId": event_id,
        "startTime": "18:00",
        "duration": 60,
        "title": "Sound check",
        "owner": "DJ Team",
    }
    payload.update(overrides)
    response = client.post(TIMELINE, json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def apply_template(client, headers, event_id: str, name: str, **extra):
    return client.post(
        f"{TIMELINE}/apply-template",
        json={"eventId": event_id, "templateName": name, **extra},
        headers=headers,
    )


class TestTimelineItems:
    def test_items_append_in_sort_order(self, client, planner, event):
        first = add_item(client, planner, event["id"])
        second = add_item(client, planner, event["id"], title="Guest arrival", startTime="19:00")
        assert (first["sortOrder"], second["sortOrder"]) == (0, 1)
        assert first["status"] == "pending"
        assert first["dependsOn"] == []

    def test_end_time_from_duration_wraps_midnight(self, client, planner, event):
        item = add_item(client, planner, event["id"], startTime="23:30", duration=60)
        assert item["calculatedEndTime"] == "00:30"
        assert item["durationMinutes"] == 60

    def test_duration_from_explicit_end_time(self, client, planner, event):
        item = add_item(
            client, planner, event["id"], startTime="22:00", endTime="01:00", duration=None
        )
        assert item["calculatedEndTime"] == "01:00"
        assert item["durationMinutes"] == 180

    @pytest.mark.parametrize(
        "overrides",
        [
            {"startTime": "25:00"},
            {"startTime": "7pm"},
            {"owner": ""},
            {"duration": 0},
            {"dependsOn": ["not-an-id"]},
        ],
    )
    def test_invalid_payloads(self, client, planner, event, overrides):
        payload = {"eventId": event["id"], "startTime": "10:00", "title": "X", "owner": "Y"}
        payload.update(overrides)
        assert client.post(TIMELINE, json=payload, headers=planner).status_code == 422

    def test_update_and_delete(self, client, planner, event):
        item = add_item(client, planner, event["id"])
        updated = client.patch(
            f"{TIMELINE}/{item['id']}", json={"location": "Main lawn"}, headers=planner
        ).json()
        assert updated["location"] == "Main lawn"

        response = client.delete(f"{TIMELINE}/{item['id']}", headers=planner)
        assert response.json() == {"deleted": True, "id": item["id"]}

    def test_other_planner_gets_404(self, client, planner, other_planner, event):
        item = add_item(client, planner, event["id"])
        assert client.get(f"{TIMELINE}/{item['id']}", headers=other_planner).status_code == 404


class TestTimelineReferences:
    def test_links_function_vendor_and_dependency(self, client, planner, event, crm_vendor):
        function = create_function(client, planner, event["id"])
        setup = add_item(client, planner, event["id"], functionId=function["id"])
        show = add_item(
            client,
            planner,
            event["id"],
            functionId=function["id"],
            vendorId=crm_vendor["id"],
            dependsOn=[setup["id"]],
            title="Dance show",
            startTime="19:00",
        )
        assert show["functionId"] == function["id"]
        assert show["vendorId"] == crm_vendor["id"]
        assert show["dependsOn"] == [setup["id"]]

    def test_function_from_another_event(self, client, planner, event):
        other = create_event(client, planner, name="Office Party", type="corporate")
        foreign = create_function(client, planner, other["id"])
        payload = {
            "eventId": event["id"],
            "functionId": foreign["id"],
            "startTime": "18:00",
            "title": "Sound check",
            "owner": "DJ Team",
        }
        response = client.post(TIMELINE, json=payload, headers=planner)
        assert response.status_code == 404
        assert response.json() == {"error": "Function not found"}

        template = apply_template(
            client, planner, event["id"], "wedding_ceremony", functionId=foreign["id"]
        )
        assert template.status_code == 404

    def test_unknown_vendor(self, client, planner, event):
        payload = {
            "eventId": event["id"],
            "vendorId": str(uuid.uuid4()),
            "startTime": "18:00",
            "title": "Sound check",
            "owner": "DJ Team",
        }
        response = client.post(TIMELINE, json=payload, headers=planner)
        assert response.status_code == 404
        assert response.json() == {"error": "Vendor not found"}

    def test_update_with_unknown_vendor(self, client, planner, event):
        item = add_item(client, planner, event["id"])
        response = client.patch(
            f"{TIMELINE}/{item['id']}", json={"vendorId": str(uuid.uuid4())}, headers=planner
        )
        assert response.status_code == 404

    def test_dependency_on_another_event(self, client, planner, event):
        other = create_event(client, planner, name="Office Party", type="corporate")
        foreign = add_item(client, planner, other["id"])
        payload = {
            "eventId": event["id"],
            "dependsOn": [foreign["id"]],
            "startTime": "18:00",
            "title": "Sound check",
            "owner": "DJ Team",
        }
        response = client.post(TIMELINE, json=payload, headers=planner)
        assert response.status_code == 404
        assert response.json() == {"error": "Timeline item not found"}

    def test_dependency_of_another_planner(self, client, planner, other_planner, event):
        theirs = add_item(client, other_planner, create_event(client, other_planner)["id"])
        item = add_item(client, planner, event["id"])
        response = client.patch(
            f"{TIMELINE}/{item['id']}", json={"dependsOn": [theirs["id"]]}, headers=planner
        )
        assert response.status_code == 404

    def test_cannot_depend_on_itself(self, client, planner, event):
        item = add_item(client, planner, event["id"])
        response = client.patch(
            f"{TIMELINE}/{item['id']}", json={"dependsOn": [item["id"]]}, headers=planner
        )
        assert response.status_code == 400


class TestTimelineStatus:
    def test_run_through(self, client, planner, event):
        item = add_item(client, planner, event["id"])
        url = f"{TIMELINE}/{item['id']}/status"
        delayed = client.patch(
            url, json={"status": "delayed", "notes": "DJ stuck in traffic"}, headers=planner
        ).json()
        assert delayed["notes"] == "DJ stuck in traffic"
        assert client.patch(url, json={"status": "in_progress"}, headers=planner).status_code == 200
        assert client.patch(url, json={"status": "completed"}, headers=planner).status_code == 200
        assert client.patch(url, json={"status": "pending"}, headers=planner).status_code == 400

    def test_cannot_complete_before_starting(self, client, planner, event):
        item = add_item(client, planner, event["id"])
        response = client.patch(
            f"{TIMELINE}/{item['id']}/status", json={"status": "completed"}, headers=planner
        )
        assert response.status_code == 400


class TestTemplates:
    def test_template_names(self, client, planner):
        names = client.get(f"{TIMELINE}/templates", headers=planner).json()
        assert set(names) == {"wedding_ceremony", "reception", "sangeet", "mehendi", "haldi"}

    @pytest.mark.parametrize(
        "name, count",
        [("wedding_ceremony", 11), ("reception", 9), ("sangeet", 7), ("mehendi", 6), ("haldi", 5)],
    )
    def test_apply_creates_template_items(self, client, planner, event, name, count):
        response = apply_template(client, planner, event["id"], name)
        assert response.status_code == 201
        items = response.json()
        assert len(items) == count
        assert [i["sortOrder"] for i in items] == list(range(count))

    def test_apply_appends_after_existing(self, client, planner, event):
        add_item(client, planner, event["id"])
        items = apply_template(client, planner, event["id"], "haldi").json()
        assert items[0]["sortOrder"] == 1

    def test_clear_existing_replaces(self, client, planner, event):
        add_item(client, planner, event["id"])
        apply_template(client, planner, event["id"], "haldi", clearExisting=True)
        items = client.get(TIMELINE, params={"eventId": event["id"]}, headers=planner).json()
        assert len(items) == 5
        assert items[0]["sortOrder"] == 0

    def test_unknown_template(self, client, planner, event):
        response = apply_template(client, planner, event["id"], "cocktail")
        assert response.status_code == 400
        assert response.json() == {"error": "Template 'cocktail' not found"}

    def test_active_at_handles_midnight(self, client, planner, event):
        apply_template(client, planner, event["id"], "reception")
        active = client.get(
            TIMELINE, params={"eventId": event["id"], "activeAt": "23:00"}, headers=planner
        ).json()
        assert [i["title"] for i in active] == ["DJ set & dancing"]

    @pytest.mark.parametrize("at", ["09:00", "12:00", "08:59", "00:00"])
    def test_all_day_item_always_active(self, client, planner, event, at):
        add_item(client, planner, event["id"], title="Help desk", startTime="09:00", duration=1440)
        add_item(
            client,
            planner,
            event["id"],
            title="Photo op",
            startTime="09:00",
            endTime="09:00",
            duration=None,
        )
        active = client.get(
            TIMELINE, params={"eventId": event["id"], "activeAt": at}, headers=planner
        ).json()
        assert [i["title"] for i in active] == ["Help desk"]


class TestOverviewAndReorder:
    def test_overview(self, client, planner, event):
        first = add_item(client, planner, event["id"], title="Setup")
        add_item(client, planner, event["id"], title="Arrival")
        url = f"{TIMELINE}/{first['id']}/status"
        client.patch(url, json={"status": "in_progress"}, headers=planner)
        client.patch(url, json={"status": "completed"}, headers=planner)

        body = client.get(
            f"{TIMELINE}/overview", params={"eventId": event["id"]}, headers=planner
        ).json()
        assert body["total"] == 2
        assert body["completed"] == 1
        assert body["completionPercent"] == 50
        assert body["nextItem"]["title"] == "Arrival"

    def test_empty_overview(self, client, planner, event):
        body = client.get(
            f"{TIMELINE}/overview", params={"eventId": event["id"]}, headers=planner
        ).json()
        assert body["completionPercent"] == 0
        assert body["nextItem"] is None

    def test_reorder(self, client, planner, event):
        first = add_item(client, planner, event["id"], title="First")
        second = add_item(client, planner, event["id"], title="Second")
        response = client.post(
            f"{TIMELINE}/reorder",
            json={
                "items": [
                    {"id": first["id"], "sortOrder": 1},
                    {"id": second["id"], "sortOrder": 0},
                ]
            },
            headers=planner,
        )
        assert response.json() == {"reordered": 2}

        items = client.get(TIMELINE, params={"eventId": event["id"]}, headers=planner).json()
        assert [i["title"] for i in items] == ["Second", "First"]

    def test_reorder_rejects_foreign_items(self, client, planner, event):
        item = add_item(client, planner, event["id"])
        response = client.post(
            f"{TIMELINE}/reorder",
            json={
                "items": [
                    {"id": item["id"], "sortOrder": 0},
                    {"id": str(uuid.uuid4()), "sortOrder": 1},
                ]
            },
            headers=planner,
        )
        assert response.status_code == 404
