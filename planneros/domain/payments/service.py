"""Payment service - Business logic for client and vendor payment tracking"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Payment, User
from ...shared.pagination import PageParams
from ...shared.transitions import ensure_transition
from ...shared.validators import today
from ..budget.repository import BudgetRepository
from ..events.repository import EventRepository
from ..references import require_event_booking
from .repository import CLOSED_STATUSES, PaymentRepository
from .schemas import PaymentComplete, PaymentCreate, PaymentUpdate

logger = logging.getLogger(__name__)

PAYMENT_TRANSITIONS = {
    "pending": ["processing", "completed", "failed", "cancelled"],
    "processing": ["completed", "failed", "cancelled"],
    "failed": ["pending", "cancelled"],
    "completed": [],
    "cancelled": [],
}

PAYMENT_FIELDS = {
    "method": "method",
    "dueDate": "due_date",
    "reference": "reference",
    "receiptUrl": "receipt_url",
    "notes": "notes",
}


def is_overdue(payment: Payment) -> bool:
    if payment.status in CLOSED_STATUSES or not payment.due_date:
        return False
    return payment.due_date < today()


def days_until_due(payment: Payment) -> Optional[int]:
    """Negative once the due date has passed"""
    if not payment.due_date:
        return None
    return (payment.due_date - today()).days


def payment_totals(payments: list[Payment]) -> dict[str, float]:
    total_due = sum(p.amount for p in payments)
    total_paid = sum(p.amount for p in payments if p.status == "completed")
    return {
        "totalDue": total_due,
        "totalPaid": total_paid,
        "totalPending": total_due - total_paid,
        "clientPayments": sum(p.amount for p in payments if p.type == "client_payment"),
        "vendorPayments": sum(p.amount for p in payments if p.type == "vendor_payment"),
    }


class PaymentService:
    """Service layer for payment business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PaymentRepository()
        self.events = EventRepository()
        self.budget = BudgetRepository()

    def search_payments(
        self,
        user: User,
        params: PageParams,
        event_id: Optional[str] = None,
        booking_request_id: Optional[str] = None,
        type: Optional[str] = None,
        status: Optional[str] = None,
        overdue_only: bool = False,
    ) -> tuple[list[Payment], int]:
        return self.repo.search_payments(
            self.db,
            user.id,
            params,
            event_id=event_id,
            booking_request_id=booking_request_id,
            type=type,
            status=status,
            overdue_before=today() if overdue_only else None,
        )

    def get_overdue(self, user: User) -> list[Payment]:
        return self.repo.get_overdue(self.db, user.id, today())

    def get_upcoming(self, user: User, days: int = 7) -> list[Payment]:
        return self.repo.get_upcoming(self.db, user.id, today(), days)

    def get_alerts(self, user: User) -> dict[str, list[Payment]]:
        return {"overdue": self.get_overdue(user), "dueThisWeek": self.get_upcoming(user, 7)}

    def get_totals(self, event_id: str, user: User) -> dict[str, float]:
        event = self.events.get_event_by_id(self.db, event_id, user.id)
        if not event:
            raise HTTPException(status_code=404, detail="Event not found")
        return payment_totals(self.repo.get_for_event(self.db, user.id, event.id))

    def get_payment(self, payment_id: str, user: User) -> Payment:
        payment = self.repo.get_payment_by_id(self.db, payment_id, user.id)
        if not payment:
            raise HTTPException(status_code=404, detail="Payment not found")
        return payment

    def create_payment(self, data: PaymentCreate, user: User) -> Payment:
        event = self.events.get_event_by_id(self.db, data.eventId, user.id)
        if not event:
            raise HTTPException(status_code=404, detail="Event not found")
        if data.budgetItemId:
            item = self.budget.get_item_by_id(self.db, data.budgetItemId, user.id)
            if not item or item.event_id != event.id:
                raise HTTPException(status_code=404, detail="Budget item not found")
        require_event_booking(self.db, data.bookingRequestId, event.id, user)

        payment = self.repo.create_payment(
            self.db,
            event_id=event.id,
            booking_request_id=data.bookingRequestId,
            budget_item_id=data.budgetItemId,
            type=data.type,
            status="pending",
            method=data.method,
            amount=data.amount,
            currency=data.currency,
            paid_by=data.paidBy,
            paid_to=data.paidTo,
            due_date=data.dueDate,
            description=data.description,
            notes=data.notes,
        )
        logger.info(f"🧾 Payment {payment.id} ({payment.type}) of {payment.amount} created")
        return payment

    def update_payment(self, payment_id: str, data: PaymentUpdate, user: User) -> Payment:
        payment = self.get_payment(payment_id, user)
        if payment.status in CLOSED_STATUSES:
            raise HTTPException(status_code=400, detail=f"Cannot edit a {payment.status} payment")

        provided = data.model_dump(exclude_unset=True)
        updates = {
            PAYMENT_FIELDS[key]: value for key, value in provided.items() if key in PAYMENT_FIELDS
        }
        return self.repo.update_payment(self.db, payment, **updates)

    def complete_payment(self, payment_id: str, data: PaymentComplete, user: User) -> Payment:
        """Mark paid today and credit the linked budget item in the same commit"""
        payment = self.get_payment(payment_id, user)
        if payment.status not in ("pending", "processing"):
            raise HTTPException(
                status_code=400, detail="Only pending or processing payments can be completed"
            )

        updates = {"status": "completed", "paid_date": today()}
        if data.reference:
            updates["reference"] = data.reference
        if data.receiptUrl:
            updates["receipt_url"] = data.receiptUrl
        if data.notes:
            updates["notes"] = data.notes

        item = payment.budget_item
        if item:
            item.paid_amount = (item.paid_amount or 0) + payment.amount

        payment = self.repo.update_payment(self.db, payment, **updates)
        logger.info(f"✅ Payment {payment.id} completed")
        return payment

    def fail_payment(self, payment_id: str, user: User, reason: Optional[str] = None) -> Payment:
        payment = self.get_payment(payment_id, user)
        ensure_transition(PAYMENT_TRANSITIONS, payment.status, "failed")

        updates = {"status": "failed"}
        if reason:
            updates["notes"] = reason
        payment = self.repo.update_payment(self.db, payment, **updates)
        logger.warning(f"⚠️ Payment {payment.id} failed")
        return payment

    def cancel_payment(self, payment_id: str, user: User, reason: Optional[str] = None) -> Payment:
        payment = self.get_payment(payment_id, user)
        ensure_transition(PAYMENT_TRANSITIONS, payment.status, "cancelled")

        updates = {"status": "cancelled"}
        if reason:
            updates["notes"] = reason
        payment = self.repo.update_payment(self.db, payment, **updates)
        logger.info(f"🚫 Payment {payment.id} cancelled")
        return payment

    def delete_payment(self, payment_id: str, user: User) -> dict:
        payment = self.get_payment(payment_id, user)
        if payment.status == "completed":
            raise HTTPException(status_code=400, detail="Completed payments cannot be deleted")

        self.repo.delete_payment(self.db, payment)
        logger.info(f"🗑️ Payment {payment_id} deleted")
        return {"deleted": True, "id": payment_id}
