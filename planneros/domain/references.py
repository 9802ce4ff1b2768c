"""Lookups for ids that one record stores about another

Each check raises 404 when the referenced row is missing or belongs to another
planner or event, the same answer the owning router gives for it.
"""

from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ..models import BookingRequest, EventFunction, User, Vendor
from .bookings.repository import BookingRepository
from .functions.repository import FunctionRepository
from .vendors.repository import VendorRepository


def require_event_function(
    db: Session, function_id: Optional[str], event_id: str
) -> Optional[EventFunction]:
    if not function_id:
        return None
    function = FunctionRepository.get_event_function(db, function_id, event_id)
    if not function:
        raise HTTPException(status_code=404, detail="Function not found")
    return function


def require_vendor(db: Session, vendor_id: Optional[str], user: User) -> Optional[Vendor]:
    """A CRM vendor of this planner or any marketplace vendor"""
    if not vendor_id:
        return None
    vendor = VendorRepository.get_vendor_by_id(db, vendor_id, user.id)
    if not vendor:
        raise HTTPException(status_code=404, detail="Vendor not found")
    return vendor


def require_event_booking(
    db: Session, booking_id: Optional[str], event_id: str, user: User
) -> Optional[BookingRequest]:
    """A booking the planner made for this event"""
    if not booking_id:
        return None
    booking = BookingRepository.get_booking_by_id(db, booking_id, user.id)
    if not booking or booking.planner_id != user.id or booking.event_id != event_id:
        raise HTTPException(status_code=404, detail="Booking request not found")
    return booking
