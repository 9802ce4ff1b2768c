"""Booking router - FastAPI endpoints for vendor booking requests"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_planner, get_current_user
from ...database import get_db
from ...models import BookingRequest, User
from ...rate_limiter import api_rate_limiter
from .schemas import (
    BookingCreate,
    BookingMessageResponse,
    BookingReason,
    BookingResponse,
    BookingStatusUpdate,
    BookingUpdate,
    PaymentMilestone,
    QuoteAccept,
    QuoteSubmit,
)
from .service import BookingService, is_fully_paid, outstanding_balance, status_label, total_paid

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["Bookings"], dependencies=[Depends(api_rate_limiter)])


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db)


def to_booking_response(booking: BookingRequest, user: User) -> BookingResponse:
    # Internal notes stay with the planner
    internal_notes = booking.internal_notes if booking.planner_id == user.id else None
    return BookingResponse(
        id=booking.id,
        eventId=booking.event_id,
        vendorId=booking.vendor_id,
        vendorName=booking.vendor.company_name if booking.vendor else None,
        functionId=booking.function_id,
        status=booking.status,
        statusLabel=status_label(booking.status),
        serviceCategory=booking.service_category,
        serviceDetails=booking.service_details,
        quotedAmount=booking.quoted_amount,
        agreedAmount=booking.agreed_amount,
        currency=booking.currency,
        paymentSchedule=[PaymentMilestone(**m) for m in booking.payment_schedule or []],
        totalPaid=total_paid(booking),
        outstandingBalance=outstanding_balance(booking),
        isFullyPaid=is_fully_paid(booking),
        requestedDate=booking.requested_date,
        responseDate=booking.response_date,
        confirmationDate=booking.confirmation_date,
        notes=booking.notes,
        internalNotes=internal_notes,
        createdAt=booking.created_at,
    )


# ============================================================================
# QUERIES
# ============================================================================


@router.get("", response_model=list[BookingResponse])
async def list_bookings(
    eventId: Optional[str] = Query(None),
    vendorId: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Bookings you requested or that were requested from your vendor profile"""
    bookings = service.get_bookings(current_user, eventId, vendorId, status)
    return [to_booking_response(b, current_user) for b in bookings]


@router.get("/active", response_model=list[BookingResponse])
async def get_active_bookings(
    current_user: User = Depends(get_current_planner),
    service: BookingService = Depends(get_booking_service),
):
    """Confirmed, deposit paid and in progress bookings"""
    return [to_booking_response(b, current_user) for b in service.get_active(current_user)]


@router.get("/pending", response_model=list[BookingResponse])
async def get_pending_quote_requests(
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Quote requests waiting on the signed-in vendor"""
    bookings = service.get_pending_for_vendor(current_user)
    return [to_booking_response(b, current_user) for b in bookings]


@router.get("/stats")
async def get_booking_stats(
    current_user: User = Depends(get_current_planner),
    service: BookingService = Depends(get_booking_service),
):
    """Booking counts by status"""
    return service.get_stats(current_user)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return to_booking_response(service.get_booking(booking_id, current_user), current_user)


@router.get("/{booking_id}/messages", response_model=list[BookingMessageResponse])
async def get_booking_messages(
    booking_id: str,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return [
        BookingMessageResponse(
            id=m.id,
            message=m.message,
            isSystem=m.is_system,
            senderId=m.sender_id,
            createdAt=m.created_at,
        )
        for m in service.get_messages(booking_id, current_user)
    ]


# ============================================================================
# MUTATIONS
# ============================================================================


@router.post("", response_model=BookingResponse, status_code=201)
async def create_booking(
    data: BookingCreate,
    current_user: User = Depends(get_current_planner),
    service: BookingService = Depends(get_booking_service),
):
    """Request a quote from a vendor for one of your events"""
    return to_booking_response(service.create_booking(data, current_user), current_user)


@router.patch("/{booking_id}", response_model=BookingResponse)
async def update_booking(
    booking_id: str,
    data: BookingUpdate,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return to_booking_response(service.update_booking(booking_id, data, current_user), current_user)


@router.patch("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: str,
    data: BookingStatusUpdate,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Negotiation and delivery progress; quotes, confirmation, decline and cancel have their own routes"""
    booking = service.update_status(booking_id, data.status, current_user, data.notes)
    return to_booking_response(booking, current_user)


@router.post("/{booking_id}/quote", response_model=BookingResponse)
async def submit_quote(
    booking_id: str,
    data: QuoteSubmit,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    booking = service.submit_quote(
        booking_id, data.amount, current_user, data.notes, data.paymentSchedule
    )
    return to_booking_response(booking, current_user)


@router.post("/{booking_id}/accept", response_model=BookingResponse)
async def accept_quote(
    booking_id: str,
    data: QuoteAccept,
    current_user: User = Depends(get_current_planner),
    service: BookingService = Depends(get_booking_service),
):
    booking = service.accept_quote(
        booking_id, current_user, data.agreedAmount, data.paymentSchedule
    )
    return to_booking_response(booking, current_user)


@router.post("/{booking_id}/decline", response_model=BookingResponse)
async def decline_booking(
    booking_id: str,
    data: Optional[BookingReason] = None,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    reason = data.reason if data else None
    return to_booking_response(service.decline(booking_id, current_user, reason), current_user)


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: str,
    data: Optional[BookingReason] = None,
    current_user: User = Depends(get_current_planner),
    service: BookingService = Depends(get_booking_service),
):
    reason = data.reason if data else None
    return to_booking_response(service.cancel(booking_id, current_user, reason), current_user)


@router.post("/{booking_id}/milestones/{milestone_id}/pay", response_model=BookingResponse)
async def mark_milestone_paid(
    booking_id: str,
    milestone_id: str,
    current_user: User = Depends(get_current_planner),
    service: BookingService = Depends(get_booking_service),
):
    booking = service.mark_milestone_paid(booking_id, milestone_id, current_user)
    return to_booking_response(booking, current_user)


__all__ = ["router"]
