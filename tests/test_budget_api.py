"""API tests for /api/v1/budget."""

from __future__ import annotations

import pytest

from planneros.domain.budget.service import recommended_split, round_half_up
from tests.conftest import create_event, create_function, create_vendor

BUDGET = "/api/v1/budget"


def add_item(client, headers, event_id: str, **overrides) -> dict:
    payload = {
        "eventId": event_id,
        "category": "catering",
        "description": "Dinner buffet",
        "estimatedAmount": 100000,
    }
    payload.update(overrides)
    response = client.post(BUDGET, json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestRecommendedSplit:
    def test_split_for_ten_lakhs(self):
        split = recommended_split(1_000_000)
        assert split["venue"] == {"min": 200000, "max": 300000}
        assert split["catering"] == {"min": 250000, "max": 350000}
        assert len(split) == 11

    @pytest.mark.parametrize("value, expected", [(2.5, 3), (2.4, 2), (0, 0), (7.5, 8)])
    def test_rounds_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_endpoint(self, client, planner):
        response = client.get(f"{BUDGET}/recommended-split", params={"total": 1000}, headers=planner)
        assert response.json()["makeup"] == {"min": 20, "max": 50}

    def test_negative_total_rejected(self, client, planner):
        response = client.get(f"{BUDGET}/recommended-split", params={"total": -1}, headers=planner)
        assert response.status_code == 422


class TestBudgetItems:
    def test_new_item_derived_fields(self, client, planner, event):
        item = add_item(client, planner, event["id"])
        assert item["categoryLabel"] == "Food & Beverage"
        assert item["paidAmount"] == 0
        assert item["effectiveAmount"] == 100000
        assert item["remainingBalance"] == 100000
        assert item["isOverBudget"] is False
        assert item["overageAmount"] == 0
        assert item["paymentProgress"] == 0
        assert item["currency"] == "INR"

    def test_actual_over_estimate(self, client, planner, event):
        item = add_item(client, planner, event["id"], actualAmount=125000)
        assert item["effectiveAmount"] == 125000
        assert item["isOverBudget"] is True
        assert item["overageAmount"] == 25000

    def test_zero_cost_item_is_fully_paid(self, client, planner, event):
        item = add_item(client, planner, event["id"], estimatedAmount=0)
        assert item["paymentProgress"] == 100

    def test_payments_accumulate(self, client, planner, event):
        item = add_item(client, planner, event["id"], estimatedAmount=30000)
        url = f"{BUDGET}/{item['id']}/payments"
        client.post(url, json={"amount": 10000}, headers=planner)
        paid = client.post(url, json={"amount": 5000, "notes": "Second"}, headers=planner).json()
        assert paid["paidAmount"] == 15000
        assert paid["remainingBalance"] == 15000
        assert paid["paymentProgress"] == 50
        assert paid["notes"] == "Second"

    def test_progress_is_capped(self, client, planner, event):
        item = add_item(client, planner, event["id"], estimatedAmount=1000)
        paid = client.post(
            f"{BUDGET}/{item['id']}/payments", json={"amount": 1500}, headers=planner
        ).json()
        assert paid["paymentProgress"] == 100
        assert paid["remainingBalance"] == -500

    @pytest.mark.parametrize(
        "overrides",
        [
            {"category": "fireworks"},
            {"description": ""},
            {"estimatedAmount": -1},
            {"currency": "rupees"},
            {"vendorId": "not-a-uuid"},
        ],
    )
    def test_invalid_payloads(self, client, planner, event, overrides):
        payload = {
            "eventId": event["id"],
            "category": "venue",
            "description": "Hall",
            "estimatedAmount": 1,
        }
        payload.update(overrides)
        assert client.post(BUDGET, json=payload, headers=planner).status_code == 422

    def test_update_and_delete(self, client, planner, event):
        item = add_item(client, planner, event["id"])
        updated = client.patch(
            f"{BUDGET}/{item['id']}", json={"actualAmount": 90000}, headers=planner
        ).json()
        assert updated["effectiveAmount"] == 90000
        assert updated["isOverBudget"] is False

        response = client.delete(f"{BUDGET}/{item['id']}", headers=planner)
        assert response.json() == {"deleted": True, "id": item["id"]}

    def test_other_planner_gets_404(self, client, planner, other_planner, event):
        item = add_item(client, planner, event["id"])
        assert client.get(f"{BUDGET}/{item['id']}", headers=other_planner).status_code == 404

    def test_links_function_vendor_and_booking(self, client, planner, event, crm_vendor):
        function = create_function(client, planner, event["id"])
        booking = client.post(
            "/api/v1/bookings",
            json={"eventId": event["id"], "vendorId": crm_vendor["id"], "serviceCategory": "x"},
            headers=planner,
        ).json()
        item = add_item(
            client,
            planner,
            event["id"],
            functionId=function["id"],
            vendorId=crm_vendor["id"],
            bookingRequestId=booking["id"],
        )
        assert item["functionId"] == function["id"]
        assert item["vendorId"] == crm_vendor["id"]
        assert item["bookingRequestId"] == booking["id"]

    def test_function_from_another_event(self, client, planner, event):
        other = create_event(client, planner, name="Office Party", type="corporate")
        foreign = create_function(client, planner, other["id"])
        response = client.post(
            BUDGET,
            json={
                "eventId": event["id"],
                "functionId": foreign["id"],
                "category": "venue",
                "description": "Hall",
                "estimatedAmount": 1,
            },
            headers=planner,
        )
        assert response.status_code == 404
        assert response.json() == {"error": "Function not found"}

    def test_vendor_of_another_planner(self, client, planner, other_planner, event):
        theirs = create_vendor(client, other_planner, companyName="Their Florist")
        response = client.post(
            BUDGET,
            json={
                "eventId": event["id"],
                "vendorId": theirs["id"],
                "category": "decoration",
                "description": "Flowers",
                "estimatedAmount": 1,
            },
            headers=planner,
        )
        assert response.status_code == 404
        assert response.json() == {"error": "Vendor not found"}

    def test_update_with_booking_of_another_planner(
        self, client, planner, other_planner, event
    ):
        their_event = create_event(client, other_planner)
        their_vendor = create_vendor(client, other_planner)
        theirs = client.post(
            "/api/v1/bookings",
            json={
                "eventId": their_event["id"],
                "vendorId": their_vendor["id"],
                "serviceCategory": "catering",
            },
            headers=other_planner,
        ).json()
        item = add_item(client, planner, event["id"])
        response = client.patch(
            f"{BUDGET}/{item['id']}", json={"bookingRequestId": theirs["id"]}, headers=planner
        )
        assert response.status_code == 404
        assert response.json() == {"error": "Booking request not found"}


class TestBudgetQueries:
    def test_over_budget_filter(self, client, planner, event):
        add_item(client, planner, event["id"], description="Fine")
        over = add_item(client, planner, event["id"], description="Over", actualAmount=150000)
        items = client.get(
            BUDGET, params={"eventId": event["id"], "overBudgetOnly": True}, headers=planner
        ).json()
        assert [i["id"] for i in items] == [over["id"]]

    def test_categories(self, client, planner):
        categories = client.get(f"{BUDGET}/categories", headers=planner).json()
        assert len(categories) == 11
        assert categories[0] == {"value": "venue", "label": "Venue & Infrastructure"}

    def test_summary(self, client, planner, event):
        venue = add_item(
            client, planner, event["id"], category="venue", description="Hall", estimatedAmount=200000
        )
        client.post(f"{BUDGET}/{venue['id']}/payments", json={"amount": 50000}, headers=planner)
        add_item(client, planner, event["id"], estimatedAmount=100000, actualAmount=120000)

        summary = client.get(f"{BUDGET}/summary", params={"eventId": event["id"]}, headers=planner)
        body = summary.json()
        assert body["totalEstimated"] == 300000
        assert body["totalActual"] == 320000
        assert body["totalPaid"] == 50000
        assert body["remaining"] == 270000
        assert body["byCategory"]["venue"] == {"estimated": 200000, "actual": 0, "paid": 50000}
        assert body["byCategory"]["catering"]["actual"] == 120000
        assert [i["category"] for i in body["overBudgetItems"]] == ["catering"]

    def test_summary_unknown_event(self, client, planner):
        response = client.get(
            f"{BUDGET}/summary",
            params={"eventId": "00000000-0000-0000-0000-000000000000"},
            headers=planner,
        )
        assert response.status_code == 404
