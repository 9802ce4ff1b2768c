"""Booking service - Business logic for vendor booking requests"""

import logging
import uuid
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import DEFAULT_CURRENCY
from ...models import BookingMessage, BookingRequest, User, utcnow
from ...shared.transitions import ensure_transition
from ...shared.validators import today
from ..events.repository import EventRepository
from ..references import require_event_function
from ..vendors.repository import VendorRepository
from .repository import BookingRepository
from .schemas import BOOKING_STATUSES, BookingCreate, BookingUpdate, PaymentMilestoneIn

logger = logging.getLogger(__name__)

BOOKING_TRANSITIONS = {
    "draft": ["quote_requested", "cancelled"],
    "quote_requested": ["quote_received", "declined", "cancelled"],
    "quote_received": ["negotiating", "confirmed", "declined", "cancelled"],
    "negotiating": ["confirmed", "declined", "cancelled"],
    "confirmed": ["deposit_paid", "cancelled"],
    "deposit_paid": ["in_progress", "cancelled"],
    "in_progress": ["completed", "cancelled"],
    "completed": [],
    "cancelled": [],
    "declined": [],
}

# Statuses only reachable through their own endpoint
DEDICATED_ACTIONS = {
    "quote_received": "Use /quote to submit a quote",
    "confirmed": "Use /accept to confirm a booking",
    "declined": "Use /decline to decline a booking",
    "cancelled": "Use /cancel to cancel a booking",
}

PLANNER_ONLY_STATUSES = ("deposit_paid", "in_progress", "completed")


def status_label(status: str) -> str:
    return status.replace("_", " ").title()


def total_paid(booking: BookingRequest) -> float:
    return sum(m["amount"] for m in booking.payment_schedule or [] if m.get("status") == "paid")


def outstanding_balance(booking: BookingRequest) -> float:
    return (booking.agreed_amount or 0) - total_paid(booking)


def is_fully_paid(booking: BookingRequest) -> bool:
    return outstanding_balance(booking) <= 0


def build_milestones(milestones: list[PaymentMilestoneIn]) -> list[dict]:
    return [
        {
            "id": str(uuid.uuid4()),
            "name": m.name,
            "amount": m.amount,
            "dueDate": m.dueDate.isoformat(),
            "paidDate": m.paidDate.isoformat() if m.paidDate else None,
            "status": "paid" if m.paidDate else "pending",
        }
        for m in milestones
    ]


def status_timestamps(status: str) -> dict:
    """Entering quote_received stamps the response date; confirmed stamps confirmation"""
    if status == "quote_received":
        return {"response_date": utcnow()}
    if status == "confirmed":
        return {"confirmation_date": utcnow()}
    return {}


class BookingService:
    """Service layer for booking request business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BookingRepository()
        self.events = EventRepository()
        self.vendors = VendorRepository()

    def get_bookings(
        self,
        user: User,
        event_id: Optional[str] = None,
        vendor_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[BookingRequest]:
        return self.repo.get_bookings(self.db, user.id, event_id, vendor_id, status)

    def get_active(self, user: User) -> list[BookingRequest]:
        return self.repo.get_active_for_planner(self.db, user.id)

    def get_pending_for_vendor(self, user: User) -> list[BookingRequest]:
        """Quote requests waiting on the signed-in vendor"""
        vendor = self.vendors.get_vendor_for_user(self.db, user.id)
        if not vendor:
            raise HTTPException(status_code=404, detail="Vendor profile not found")
        return self.repo.get_pending_for_vendor(self.db, vendor.id)

    def get_stats(self, user: User) -> dict[str, int]:
        counts = self.repo.count_by_status(self.db, user.id)
        return {status: counts.get(status, 0) for status in BOOKING_STATUSES}

    def get_booking(self, booking_id: str, user: User) -> BookingRequest:
        booking = self.repo.get_booking_by_id(self.db, booking_id, user.id)
        if not booking:
            raise HTTPException(status_code=404, detail="Booking request not found")
        return booking

    def _planner_booking(self, booking_id: str, user: User) -> BookingRequest:
        booking = self.get_booking(booking_id, user)
        if booking.planner_id != user.id:
            raise HTTPException(status_code=403, detail="Only the planner can do this")
        return booking

    def get_messages(self, booking_id: str, user: User) -> list[BookingMessage]:
        booking = self.get_booking(booking_id, user)
        return self.repo.get_messages(self.db, booking.id)

    def create_booking(self, data: BookingCreate, user: User) -> BookingRequest:
        event = self.events.get_event_by_id(self.db, data.eventId, user.id)
        if not event:
            raise HTTPException(status_code=404, detail="Event not found")
        vendor = self.vendors.get_vendor_by_id(self.db, data.vendorId, user.id)
        if not vendor:
            raise HTTPException(status_code=404, detail="Vendor not found")
        function = require_event_function(self.db, data.functionId, event.id)

        booking = self.repo.create_booking(
            self.db,
            user.id,
            event_id=event.id,
            vendor_id=vendor.id,
            function_id=function.id if function else None,
            status="quote_requested",
            service_category=data.serviceCategory,
            service_details=data.serviceDetails,
            currency=DEFAULT_CURRENCY,
            payment_schedule=[],
            requested_date=utcnow(),
            notes=data.notes,
        )
        self.repo.add_message(self.db, booking.id, f"Quote requested for {data.serviceCategory}")
        logger.info(f"📨 Booking {booking.id} requested from vendor {vendor.id} for event {event.id}")
        return booking

    def update_booking(self, booking_id: str, data: BookingUpdate, user: User) -> BookingRequest:
        booking = self.get_booking(booking_id, user)

        provided = data.model_dump(exclude_unset=True)
        if "internalNotes" in provided and booking.planner_id != user.id:
            raise HTTPException(status_code=403, detail="Only the planner can edit internal notes")

        updates = {}
        if "serviceDetails" in provided:
            updates["service_details"] = provided["serviceDetails"]
        if "notes" in provided:
            updates["notes"] = provided["notes"]
        if "internalNotes" in provided:
            updates["internal_notes"] = provided["internalNotes"]

        return self.repo.update_booking(self.db, booking, **updates)

    def update_status(
        self, booking_id: str, status: str, user: User, notes: Optional[str] = None
    ) -> BookingRequest:
        if status in DEDICATED_ACTIONS:
            raise HTTPException(status_code=400, detail=DEDICATED_ACTIONS[status])
        if status in PLANNER_ONLY_STATUSES:
            booking = self._planner_booking(booking_id, user)
        else:
            booking = self.get_booking(booking_id, user)
        ensure_transition(BOOKING_TRANSITIONS, booking.status, status)

        previous = booking.status
        updates = {"status": status}
        if notes:
            updates["notes"] = notes
        booking = self.repo.update_booking(self.db, booking, **updates)
        self.repo.add_message(self.db, booking.id, f"Status changed to {status_label(status)}")
        logger.info(f"🔄 Booking {booking.id} status {previous} -> {status}")
        return booking

    def submit_quote(
        self,
        booking_id: str,
        amount: float,
        user: User,
        notes: Optional[str] = None,
        milestones: Optional[list[PaymentMilestoneIn]] = None,
    ) -> BookingRequest:
        """Record the vendor's quote; the planner may enter it for vendors without an account"""
        booking = self.get_booking(booking_id, user)
        if booking.status != "quote_requested":
            raise HTTPException(
                status_code=400, detail="Can only submit quote when status is quote_requested"
            )

        updates = {
            "quoted_amount": amount,
            "status": "quote_received",
            **status_timestamps("quote_received"),
        }
        if notes:
            updates["notes"] = notes
        if milestones:
            updates["payment_schedule"] = list(booking.payment_schedule or []) + build_milestones(
                milestones
            )

        booking = self.repo.update_booking(self.db, booking, **updates)
        self.repo.add_message(
            self.db,
            booking.id,
            f"Quote submitted: {booking.currency} {amount:,.2f}",
            sender_id=user.id,
            is_system=False,
        )
        logger.info(f"💬 Quote {amount} submitted for booking {booking.id}")
        return booking

    def accept_quote(
        self,
        booking_id: str,
        user: User,
        agreed_amount: Optional[float] = None,
        milestones: Optional[list[PaymentMilestoneIn]] = None,
    ) -> BookingRequest:
        booking = self._planner_booking(booking_id, user)
        if booking.status not in ("quote_received", "negotiating"):
            raise HTTPException(
                status_code=400,
                detail="Can only accept quote when in quote_received or negotiating status",
            )

        agreed = agreed_amount if agreed_amount is not None else booking.quoted_amount
        updates = {
            "agreed_amount": agreed,
            "status": "confirmed",
            **status_timestamps("confirmed"),
        }
        if milestones:
            updates["payment_schedule"] = list(booking.payment_schedule or []) + build_milestones(
                milestones
            )

        booking = self.repo.update_booking(self.db, booking, **updates)
        self.repo.add_message(
            self.db, booking.id, f"Booking confirmed at {booking.currency} {(agreed or 0):,.2f}"
        )
        logger.info(f"✅ Booking {booking.id} confirmed at {agreed}")
        return booking

    def decline(self, booking_id: str, user: User, reason: Optional[str] = None) -> BookingRequest:
        booking = self.get_booking(booking_id, user)
        ensure_transition(BOOKING_TRANSITIONS, booking.status, "declined")

        updates = {"status": "declined"}
        if reason:
            updates["notes"] = reason
        booking = self.repo.update_booking(self.db, booking, **updates)
        self.repo.add_message(self.db, booking.id, "Booking declined")
        logger.info(f"❌ Booking {booking.id} declined")
        return booking

    def cancel(self, booking_id: str, user: User, reason: Optional[str] = None) -> BookingRequest:
        booking = self._planner_booking(booking_id, user)
        if "cancelled" not in BOOKING_TRANSITIONS[booking.status]:
            raise HTTPException(status_code=400, detail="Cannot cancel this booking")

        updates = {"status": "cancelled"}
        if reason:
            updates["notes"] = reason
        booking = self.repo.update_booking(self.db, booking, **updates)
        self.repo.add_message(
            self.db, booking.id, f"Booking cancelled{': ' + reason if reason else ''}"
        )
        logger.info(f"🚫 Booking {booking.id} cancelled")
        return booking

    def mark_milestone_paid(self, booking_id: str, milestone_id: str, user: User) -> BookingRequest:
        """Mark a payment milestone paid; the first money in moves a confirmed booking to deposit_paid"""
        booking = self._planner_booking(booking_id, user)

        schedule = [dict(m) for m in booking.payment_schedule or []]
        milestone = next((m for m in schedule if m["id"] == milestone_id), None)
        if not milestone:
            raise HTTPException(status_code=404, detail="Milestone not found")
        if milestone["status"] == "paid":
            raise HTTPException(status_code=400, detail="Milestone already paid")

        milestone["status"] = "paid"
        milestone["paidDate"] = today().isoformat()

        # Reassign so the JSON column is flagged dirty
        booking.payment_schedule = schedule
        updates = {}
        if booking.status == "confirmed" and total_paid(booking) > 0:
            updates["status"] = "deposit_paid"

        booking = self.repo.update_booking(self.db, booking, **updates)
        self.repo.add_message(self.db, booking.id, f"Payment received for {milestone['name']}")
        logger.info(f"💰 Milestone {milestone_id} paid on booking {booking.id}")
        return booking
