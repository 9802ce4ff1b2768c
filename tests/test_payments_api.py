"""API tests for /api/v1/payments."""

from __future__ import annotations

import pytest

from tests.conftest import create_event, create_vendor, future_date

PAYMENTS = "/api/v1/payments"


def record_payment(client, headers, event_id: str, **overrides) -> dict:
    payload = {
        "eventId": event_id,
        "type": "client_payment",
        "method": "upi",
        "amount": 50000,
        "paidBy": "Sharma family",
    }
    payload.update(overrides)
    response = client.post(PAYMENTS, json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreatePayment:
    def test_starts_pending(self, client, planner, event):
        payment = record_payment(client, planner, event["id"], dueDate=future_date(3))
        assert payment["status"] == "pending"
        assert payment["statusLabel"] == "Pending"
        assert payment["typeLabel"] == "Client Payment"
        assert payment["currency"] == "INR"
        assert payment["daysUntilDue"] == 3
        assert payment["isOverdue"] is False
        assert payment["paidDate"] is None

    def test_past_due_is_overdue(self, client, planner, event):
        payment = record_payment(client, planner, event["id"], dueDate=future_date(-2))
        assert payment["isOverdue"] is True
        assert payment["daysUntilDue"] == -2

    @pytest.mark.parametrize(
        "overrides",
        [
            {"type": "bribe"},
            {"method": "barter"},
            {"amount": -5},
            {"currency": "RUPEE"},
            {"budgetItemId": "123"},
        ],
    )
    def test_invalid_payloads(self, client, planner, event, overrides):
        payload = {"eventId": event["id"], "type": "expense", "method": "cash", "amount": 10}
        payload.update(overrides)
        assert client.post(PAYMENTS, json=payload, headers=planner).status_code == 422

    def test_budget_item_must_belong_to_event(self, client, planner, event):
        other = create_event(client, planner, name="Other")
        item = client.post(
            "/api/v1/budget",
            json={
                "eventId": other["id"],
                "category": "venue",
                "description": "Hall",
                "estimatedAmount": 100,
            },
            headers=planner,
        ).json()
        response = client.post(
            PAYMENTS,
            json={
                "eventId": event["id"],
                "budgetItemId": item["id"],
                "type": "vendor_payment",
                "method": "cash",
                "amount": 100,
            },
            headers=planner,
        )
        assert response.status_code == 404

    def test_links_booking_of_the_event(self, client, planner, event, crm_vendor):
        booking = client.post(
            "/api/v1/bookings",
            json={"eventId": event["id"], "vendorId": crm_vendor["id"], "serviceCategory": "x"},
            headers=planner,
        ).json()
        payment = record_payment(client, planner, event["id"], bookingRequestId=booking["id"])
        assert payment["bookingRequestId"] == booking["id"]

    def test_booking_of_another_planner(self, client, planner, other_planner, event):
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
        response = client.post(
            PAYMENTS,
            json={
                "eventId": event["id"],
                "bookingRequestId": theirs["id"],
                "type": "vendor_payment",
                "method": "cash",
                "amount": 100,
            },
            headers=planner,
        )
        assert response.status_code == 404
        assert response.json() == {"error": "Booking request not found"}

    def test_booking_of_another_event(self, client, planner, event, crm_vendor):
        other = create_event(client, planner, name="Office Party", type="corporate")
        booking = client.post(
            "/api/v1/bookings",
            json={"eventId": other["id"], "vendorId": crm_vendor["id"], "serviceCategory": "x"},
            headers=planner,
        ).json()
        response = client.post(
            PAYMENTS,
            json={
                "eventId": event["id"],
                "bookingRequestId": booking["id"],
                "type": "vendor_payment",
                "method": "cash",
                "amount": 100,
            },
            headers=planner,
        )
        assert response.status_code == 404


class TestCompletePayment:
    def test_credits_linked_budget_item(self, client, planner, event):
        item = client.post(
            "/api/v1/budget",
            json={
                "eventId": event["id"],
                "category": "venue",
                "description": "Palace lawn",
                "estimatedAmount": 200000,
            },
            headers=planner,
        ).json()
        payment = record_payment(
            client,
            planner,
            event["id"],
            type="vendor_payment",
            amount=80000,
            budgetItemId=item["id"],
        )

        completed = client.post(
            f"{PAYMENTS}/{payment['id']}/complete",
            json={"reference": "UTR123", "receiptUrl": "https://example.com/r.pdf"},
            headers=planner,
        ).json()
        assert completed["status"] == "completed"
        assert completed["reference"] == "UTR123"
        assert completed["paidDate"] is not None
        assert completed["isOverdue"] is False

        credited = client.get(f"/api/v1/budget/{item['id']}", headers=planner).json()
        assert credited["paidAmount"] == 80000
        assert credited["paymentProgress"] == 40

    def test_cannot_complete_twice(self, client, planner, event):
        payment = record_payment(client, planner, event["id"])
        url = f"{PAYMENTS}/{payment['id']}/complete"
        assert client.post(url, headers=planner).status_code == 200
        assert client.post(url, headers=planner).status_code == 400

    def test_completed_payment_is_frozen(self, client, planner, event):
        payment = record_payment(client, planner, event["id"])
        client.post(f"{PAYMENTS}/{payment['id']}/complete", headers=planner)

        edit = client.patch(f"{PAYMENTS}/{payment['id']}", json={"notes": "x"}, headers=planner)
        assert edit.status_code == 400
        delete = client.delete(f"{PAYMENTS}/{payment['id']}", headers=planner)
        assert delete.status_code == 400


class TestPaymentStatus:
    def test_failed_payment_cannot_complete(self, client, planner, event):
        payment = record_payment(client, planner, event["id"])
        failed = client.post(
            f"{PAYMENTS}/{payment['id']}/fail", json={"reason": "Bounced"}, headers=planner
        ).json()
        assert failed["status"] == "failed"
        assert failed["notes"] == "Bounced"

        cannot = client.post(f"{PAYMENTS}/{payment['id']}/complete", headers=planner)
        assert cannot.status_code == 400

    def test_cancel_is_terminal(self, client, planner, event):
        payment = record_payment(client, planner, event["id"])
        assert client.post(f"{PAYMENTS}/{payment['id']}/cancel", headers=planner).status_code == 200
        assert client.post(f"{PAYMENTS}/{payment['id']}/fail", headers=planner).status_code == 400

    def test_delete_pending(self, client, planner, event):
        payment = record_payment(client, planner, event["id"])
        response = client.delete(f"{PAYMENTS}/{payment['id']}", headers=planner)
        assert response.json() == {"deleted": True, "id": payment["id"]}


class TestPaymentQueries:
    def test_overdue_upcoming_and_alerts(self, client, planner, event):
        late = record_payment(client, planner, event["id"], dueDate=future_date(-1))
        soon = record_payment(client, planner, event["id"], dueDate=future_date(5))
        record_payment(client, planner, event["id"], dueDate=future_date(30))

        overdue = client.get(f"{PAYMENTS}/overdue", headers=planner).json()
        assert [p["id"] for p in overdue] == [late["id"]]

        upcoming = client.get(f"{PAYMENTS}/upcoming", headers=planner).json()
        assert [p["id"] for p in upcoming] == [soon["id"]]

        wider = client.get(f"{PAYMENTS}/upcoming", params={"days": 60}, headers=planner).json()
        assert len(wider) == 2

        alerts = client.get(f"{PAYMENTS}/alerts", headers=planner).json()
        assert [p["id"] for p in alerts["overdue"]] == [late["id"]]
        assert [p["id"] for p in alerts["dueThisWeek"]] == [soon["id"]]

        only_overdue = client.get(PAYMENTS, params={"overdueOnly": True}, headers=planner).json()
        assert only_overdue["meta"]["total"] == 1

    def test_totals(self, client, planner, event):
        paid = record_payment(client, planner, event["id"], amount=100000)
        client.post(f"{PAYMENTS}/{paid['id']}/complete", headers=planner)
        record_payment(client, planner, event["id"], amount=40000, type="vendor_payment")

        totals = client.get(f"{PAYMENTS}/totals", params={"eventId": event["id"]}, headers=planner)
        assert totals.json() == {
            "totalDue": 140000,
            "totalPaid": 100000,
            "totalPending": 40000,
            "clientPayments": 100000,
            "vendorPayments": 40000,
        }

    def test_filters(self, client, planner, event):
        record_payment(client, planner, event["id"])
        record_payment(client, planner, event["id"], type="expense")
        body = client.get(PAYMENTS, params={"type": "expense"}, headers=planner).json()
        assert body["meta"]["total"] == 1
        assert body["items"][0]["type"] == "expense"

    def test_other_planner_gets_404(self, client, planner, other_planner, event):
        payment = record_payment(client, planner, event["id"])
        response = client.get(f"{PAYMENTS}/{payment['id']}", headers=other_planner)
        assert response.status_code == 404
        assert response.json() == {"error": "Payment not found"}
