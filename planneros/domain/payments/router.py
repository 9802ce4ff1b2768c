"""Payment router - FastAPI endpoints for payment tracking"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_planner
from ...database import get_db
from ...models import Payment, User
from ...rate_limiter import api_rate_limiter
from ...shared.pagination import PageParams, page_params, page_response
from .schemas import (
    PAYMENT_STATUSES,
    PAYMENT_TYPES,
    PaymentComplete,
    PaymentCreate,
    PaymentReason,
    PaymentResponse,
    PaymentTotals,
    PaymentUpdate,
)
from .service import PaymentService, days_until_due, is_overdue

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["Payments"], dependencies=[Depends(api_rate_limiter)])


def get_payment_service(db: Session = Depends(get_db)) -> PaymentService:
    """Dependency injection for PaymentService"""
    return PaymentService(db)


def to_payment_response(payment: Payment) -> PaymentResponse:
    return PaymentResponse(
        id=payment.id,
        eventId=payment.event_id,
        bookingRequestId=payment.booking_request_id,
        budgetItemId=payment.budget_item_id,
        type=payment.type,
        typeLabel=PAYMENT_TYPES.get(payment.type, payment.type),
        status=payment.status,
        statusLabel=PAYMENT_STATUSES.get(payment.status, payment.status),
        method=payment.method,
        amount=payment.amount,
        currency=payment.currency,
        paidBy=payment.paid_by,
        paidTo=payment.paid_to,
        dueDate=payment.due_date,
        paidDate=payment.paid_date,
        reference=payment.reference,
        receiptUrl=payment.receipt_url,
        description=payment.description,
        notes=payment.notes,
        isOverdue=is_overdue(payment),
        daysUntilDue=days_until_due(payment),
        createdAt=payment.created_at,
    )


# ============================================================================
# QUERIES
# ============================================================================


@router.get("")
async def list_payments(
    eventId: Optional[str] = Query(None),
    bookingRequestId: Optional[str] = Query(None),
    type: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    overdueOnly: bool = Query(False),
    params: PageParams = Depends(page_params),
    current_user: User = Depends(get_current_planner),
    service: PaymentService = Depends(get_payment_service),
):
    payments, total = service.search_payments(
        current_user, params, eventId, bookingRequestId, type, status, overdueOnly
    )
    return page_response([to_payment_response(p) for p in payments], total, params)


@router.get("/overdue", response_model=list[PaymentResponse])
async def get_overdue_payments(
    current_user: User = Depends(get_current_planner),
    service: PaymentService = Depends(get_payment_service),
):
    """Pending payments whose due date has passed"""
    return [to_payment_response(p) for p in service.get_overdue(current_user)]


@router.get("/upcoming", response_model=list[PaymentResponse])
async def get_upcoming_payments(
    days: int = Query(7, ge=1, le=365),
    current_user: User = Depends(get_current_planner),
    service: PaymentService = Depends(get_payment_service),
):
    return [to_payment_response(p) for p in service.get_upcoming(current_user, days)]


@router.get("/alerts")
async def get_payment_alerts(
    current_user: User = Depends(get_current_planner),
    service: PaymentService = Depends(get_payment_service),
):
    """Dashboard alerts: overdue payments and those due in the next week"""
    alerts = service.get_alerts(current_user)
    return {key: [to_payment_response(p) for p in payments] for key, payments in alerts.items()}


@router.get("/totals", response_model=PaymentTotals)
async def get_payment_totals(
    eventId: str = Query(...),
    current_user: User = Depends(get_current_planner),
    service: PaymentService = Depends(get_payment_service),
):
    return service.get_totals(eventId, current_user)


@router.get("/{payment_id}", response_model=PaymentResponse)
async def get_payment(
    payment_id: str,
    current_user: User = Depends(get_current_planner),
    service: PaymentService = Depends(get_payment_service),
):
    return to_payment_response(service.get_payment(payment_id, current_user))


# ============================================================================
# MUTATIONS
# ============================================================================


@router.post("", response_model=PaymentResponse, status_code=201)
async def create_payment(
    data: PaymentCreate,
    current_user: User = Depends(get_current_planner),
    service: PaymentService = Depends(get_payment_service),
):
    return to_payment_response(service.create_payment(data, current_user))


@router.patch("/{payment_id}", response_model=PaymentResponse)
async def update_payment(
    payment_id: str,
    data: PaymentUpdate,
    current_user: User = Depends(get_current_planner),
    service: PaymentService = Depends(get_payment_service),
):
    return to_payment_response(service.update_payment(payment_id, data, current_user))


@router.post("/{payment_id}/complete", response_model=PaymentResponse)
async def complete_payment(
    payment_id: str,
    data: Optional[PaymentComplete] = None,
    current_user: User = Depends(get_current_planner),
    service: PaymentService = Depends(get_payment_service),
):
    payment = service.complete_payment(payment_id, data or PaymentComplete(), current_user)
    return to_payment_response(payment)


@router.post("/{payment_id}/fail", response_model=PaymentResponse)
async def fail_payment(
    payment_id: str,
    data: Optional[PaymentReason] = None,
    current_user: User = Depends(get_current_planner),
    service: PaymentService = Depends(get_payment_service),
):
    reason = data.reason if data else None
    return to_payment_response(service.fail_payment(payment_id, current_user, reason))


@router.post("/{payment_id}/cancel", response_model=PaymentResponse)
async def cancel_payment(
    payment_id: str,
    data: Optional[PaymentReason] = None,
    current_user: User = Depends(get_current_planner),
    service: PaymentService = Depends(get_payment_service),
):
    reason = data.reason if data else None
    return to_payment_response(service.cancel_payment(payment_id, current_user, reason))


@router.delete("/{payment_id}")
async def delete_payment(
    payment_id: str,
    current_user: User = Depends(get_current_planner),
    service: PaymentService = Depends(get_payment_service),
):
    """Delete a payment that has not been completed"""
    return service.delete_payment(payment_id, current_user)


__all__ = ["router"]
