"""Payment repository - Database operations for payments"""

from datetime import date, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Event, Payment
from ...shared.pagination import PageParams, paginate

PAYMENT_SORT_COLUMNS = {
    "createdAt": Payment.created_at,
    "dueDate": Payment.due_date,
    "amount": Payment.amount,
    "status": Payment.status,
}

CLOSED_STATUSES = ("completed", "cancelled")


class PaymentRepository:
    """Repository for payment database operations"""

    @staticmethod
    def _owned(db: Session, planner_id: str):
        return (
            db.query(Payment)
            .join(Event, Payment.event_id == Event.id)
            .filter(Event.planner_id == planner_id)
        )

    @staticmethod
    def search_payments(
        db: Session,
        planner_id: str,
        params: PageParams,
        event_id: Optional[str] = None,
        booking_request_id: Optional[str] = None,
        type: Optional[str] = None,
        status: Optional[str] = None,
        overdue_before: Optional[date] = None,
    ) -> tuple[list[Payment], int]:
        query = PaymentRepository._owned(db, planner_id)

        if event_id:
            query = query.filter(Payment.event_id == event_id)
        if booking_request_id:
            query = query.filter(Payment.booking_request_id == booking_request_id)
        if type:
            query = query.filter(Payment.type == type)
        if status:
            query = query.filter(Payment.status == status)
        if overdue_before:
            query = query.filter(
                Payment.status.notin_(CLOSED_STATUSES),
                Payment.due_date.isnot(None),
                Payment.due_date < overdue_before,
            )

        return paginate(query, params, PAYMENT_SORT_COLUMNS, default_sort="createdAt")

    @staticmethod
    def get_overdue(db: Session, planner_id: str, today: date) -> list[Payment]:
        return (
            PaymentRepository._owned(db, planner_id)
            .filter(Payment.status == "pending", Payment.due_date < today)
            .order_by(Payment.due_date.asc())
            .all()
        )

    @staticmethod
    def get_upcoming(db: Session, planner_id: str, today: date, days: int) -> list[Payment]:
        return (
            PaymentRepository._owned(db, planner_id)
            .filter(
                Payment.status == "pending",
                Payment.due_date >= today,
                Payment.due_date <= today + timedelta(days=days),
            )
            .order_by(Payment.due_date.asc())
            .all()
        )

    @staticmethod
    def get_for_event(db: Session, planner_id: str, event_id: str) -> list[Payment]:
        return (
            PaymentRepository._owned(db, planner_id)
            .filter(Payment.event_id == event_id)
            .all()
        )

    @staticmethod
    def get_payment_by_id(db: Session, payment_id: str, planner_id: str) -> Optional[Payment]:
        return PaymentRepository._owned(db, planner_id).filter(Payment.id == payment_id).first()

    @staticmethod
    def create_payment(db: Session, **payment_data) -> Payment:
        payment = Payment(**payment_data)
        db.add(payment)
        db.commit()
        db.refresh(payment)
        return payment

    @staticmethod
    def update_payment(db: Session, payment: Payment, **updates) -> Payment:
        for key, value in updates.items():
            if hasattr(payment, key):
                setattr(payment, key, value)

        db.commit()
        db.refresh(payment)
        return payment

    @staticmethod
    def delete_payment(db: Session, payment: Payment) -> None:
        db.delete(payment)
        db.commit()
