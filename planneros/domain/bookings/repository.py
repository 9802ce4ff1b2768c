"""Booking repository - Database operations for booking requests and their messages"""

from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, joinedload

from ...models import BookingMessage, BookingRequest, Vendor

ACTIVE_STATUSES = ("confirmed", "deposit_paid", "in_progress")


def accessible_to(user_id: str):
    """The planner who requested the booking or the user behind the vendor"""
    vendor_ids = select(Vendor.id).where(Vendor.user_id == user_id)
    return or_(BookingRequest.planner_id == user_id, BookingRequest.vendor_id.in_(vendor_ids))


class BookingRepository:
    """Repository for booking request database operations"""

    @staticmethod
    def get_bookings(
        db: Session,
        user_id: str,
        event_id: Optional[str] = None,
        vendor_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[BookingRequest]:
        query = (
            db.query(BookingRequest)
            .options(joinedload(BookingRequest.vendor))
            .filter(accessible_to(user_id))
        )

        if event_id:
            query = query.filter(BookingRequest.event_id == event_id)
        if vendor_id:
            query = query.filter(BookingRequest.vendor_id == vendor_id)
        if status:
            query = query.filter(BookingRequest.status == status)

        return query.order_by(BookingRequest.created_at.desc()).all()

    @staticmethod
    def get_active_for_planner(db: Session, planner_id: str) -> list[BookingRequest]:
        return (
            db.query(BookingRequest)
            .filter(
                BookingRequest.planner_id == planner_id,
                BookingRequest.status.in_(ACTIVE_STATUSES),
            )
            .order_by(BookingRequest.confirmation_date.desc())
            .all()
        )

    @staticmethod
    def get_pending_for_vendor(db: Session, vendor_id: str) -> list[BookingRequest]:
        return (
            db.query(BookingRequest)
            .filter(
                BookingRequest.vendor_id == vendor_id,
                BookingRequest.status == "quote_requested",
            )
            .order_by(BookingRequest.requested_date.asc())
            .all()
        )

    @staticmethod
    def get_booking_by_id(db: Session, booking_id: str, user_id: str) -> Optional[BookingRequest]:
        return (
            db.query(BookingRequest)
            .filter(BookingRequest.id == booking_id, accessible_to(user_id))
            .first()
        )

    @staticmethod
    def count_by_status(db: Session, planner_id: str) -> dict[str, int]:
        rows = (
            db.query(BookingRequest.status, func.count(BookingRequest.id))
            .filter(BookingRequest.planner_id == planner_id)
            .group_by(BookingRequest.status)
            .all()
        )
        return {status: count for status, count in rows}

    @staticmethod
    def create_booking(db: Session, planner_id: str, **booking_data) -> BookingRequest:
        booking = BookingRequest(planner_id=planner_id, **booking_data)
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    @staticmethod
    def update_booking(db: Session, booking: BookingRequest, **updates) -> BookingRequest:
        for key, value in updates.items():
            if hasattr(booking, key):
                setattr(booking, key, value)

        db.commit()
        db.refresh(booking)
        return booking

    @staticmethod
    def add_message(
        db: Session,
        booking_id: str,
        message: str,
        sender_id: Optional[str] = None,
        is_system: bool = True,
    ) -> BookingMessage:
        entry = BookingMessage(
            booking_request_id=booking_id,
            sender_id=sender_id,
            message=message,
            is_system=is_system,
        )
        db.add(entry)
        db.commit()
        db.refresh(entry)
        return entry

    @staticmethod
    def get_messages(db: Session, booking_id: str) -> list[BookingMessage]:
        return (
            db.query(BookingMessage)
            .filter(BookingMessage.booking_request_id == booking_id)
            .order_by(BookingMessage.created_at.asc())
            .all()
        )
