"""Budget service - Business logic for event budget tracking"""

import logging
import math
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import BudgetItem, User
from ..events.repository import EventRepository
from ..references import require_event_booking, require_event_function, require_vendor
from .repository import BudgetRepository
from .schemas import BUDGET_CATEGORIES, BudgetItemCreate, BudgetItemUpdate

logger = logging.getLogger(__name__)

# Percent of the total budget, per category
RECOMMENDED_SPLITS = {
    "venue": (20, 30),
    "catering": (25, 35),
    "decoration": (15, 25),
    "photography": (5, 10),
    "entertainment": (5, 10),
    "attire": (3, 8),
    "makeup": (2, 5),
    "transport": (3, 5),
    "invitations": (2, 5),
    "gifts": (2, 5),
    "miscellaneous": (5, 10),
}

BUDGET_FIELDS = {
    "description": "description",
    "estimatedAmount": "estimated_amount",
    "actualAmount": "actual_amount",
    "paidAmount": "paid_amount",
    "vendorId": "vendor_id",
    "bookingRequestId": "booking_request_id",
    "notes": "notes",
}


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def effective_amount(item: BudgetItem) -> float:
    return item.actual_amount if item.actual_amount is not None else item.estimated_amount


def remaining_balance(item: BudgetItem) -> float:
    return effective_amount(item) - (item.paid_amount or 0)


def is_over_budget(item: BudgetItem) -> bool:
    return item.actual_amount is not None and item.actual_amount > item.estimated_amount


def overage_amount(item: BudgetItem) -> float:
    if not is_over_budget(item):
        return 0
    return item.actual_amount - item.estimated_amount


def payment_progress(item: BudgetItem) -> float:
    effective = effective_amount(item)
    if effective == 0:
        return 100
    return min(100, round((item.paid_amount or 0) / effective * 100, 2))


def recommended_split(total: float) -> dict[str, dict[str, int]]:
    return {
        category: {
            "min": round_half_up(total * low / 100),
            "max": round_half_up(total * high / 100),
        }
        for category, (low, high) in RECOMMENDED_SPLITS.items()
    }


def summarize(items: list[BudgetItem]) -> dict:
    by_category = {}
    for item in items:
        totals = by_category.setdefault(item.category, {"estimated": 0, "actual": 0, "paid": 0})
        totals["estimated"] += item.estimated_amount
        totals["actual"] += item.actual_amount or 0
        totals["paid"] += item.paid_amount or 0

    total_estimated = sum(i.estimated_amount for i in items)
    total_actual = sum(effective_amount(i) for i in items)
    total_paid = sum(i.paid_amount or 0 for i in items)

    return {
        "totalEstimated": total_estimated,
        "totalActual": total_actual,
        "totalPaid": total_paid,
        "remaining": total_actual - total_paid,
        "byCategory": by_category,
        "overBudgetItems": [i for i in items if is_over_budget(i)],
    }


class BudgetService:
    """Service layer for budget item business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BudgetRepository()
        self.events = EventRepository()

    def get_items(
        self,
        user: User,
        event_id: Optional[str] = None,
        function_id: Optional[str] = None,
        category: Optional[str] = None,
        over_budget_only: bool = False,
    ) -> list[BudgetItem]:
        items = self.repo.get_items(self.db, user.id, event_id, function_id, category)
        if over_budget_only:
            items = [i for i in items if is_over_budget(i)]
        return items

    def get_categories(self) -> list[dict[str, str]]:
        return [{"value": value, "label": label} for value, label in BUDGET_CATEGORIES.items()]

    def get_recommended_split(self, total: float) -> dict[str, dict[str, int]]:
        if total < 0:
            raise HTTPException(status_code=400, detail="Total budget cannot be negative")
        return recommended_split(total)

    def get_summary(self, event_id: str, user: User) -> dict:
        event = self.events.get_event_by_id(self.db, event_id, user.id)
        if not event:
            raise HTTPException(status_code=404, detail="Event not found")
        return summarize(self.repo.get_items(self.db, user.id, event_id=event.id))

    def get_item(self, item_id: str, user: User) -> BudgetItem:
        item = self.repo.get_item_by_id(self.db, item_id, user.id)
        if not item:
            raise HTTPException(status_code=404, detail="Budget item not found")
        return item

    def create_item(self, data: BudgetItemCreate, user: User) -> BudgetItem:
        event = self.events.get_event_by_id(self.db, data.eventId, user.id)
        if not event:
            raise HTTPException(status_code=404, detail="Event not found")
        require_event_function(self.db, data.functionId, event.id)
        require_vendor(self.db, data.vendorId, user)
        require_event_booking(self.db, data.bookingRequestId, event.id, user)

        item = self.repo.create_item(
            self.db,
            event_id=event.id,
            function_id=data.functionId,
            category=data.category,
            description=data.description,
            vendor_id=data.vendorId,
            booking_request_id=data.bookingRequestId,
            estimated_amount=data.estimatedAmount,
            actual_amount=data.actualAmount,
            paid_amount=0,
            currency=data.currency,
            notes=data.notes,
        )
        logger.info(f"💰 Budget item {item.id} ({item.category}) added to event {event.id}")
        return item

    def update_item(self, item_id: str, data: BudgetItemUpdate, user: User) -> BudgetItem:
        item = self.get_item(item_id, user)
        provided = data.model_dump(exclude_unset=True)
        require_vendor(self.db, provided.get("vendorId"), user)
        require_event_booking(self.db, provided.get("bookingRequestId"), item.event_id, user)
        updates = {
            BUDGET_FIELDS[key]: value for key, value in provided.items() if key in BUDGET_FIELDS
        }
        return self.repo.update_item(self.db, item, **updates)

    def add_payment(
        self, item_id: str, amount: float, user: User, notes: Optional[str] = None
    ) -> BudgetItem:
        item = self.get_item(item_id, user)
        updates = {"paid_amount": (item.paid_amount or 0) + amount}
        if notes:
            updates["notes"] = notes
        item = self.repo.update_item(self.db, item, **updates)
        logger.info(f"💸 Recorded {amount} against budget item {item.id}")
        return item

    def delete_item(self, item_id: str, user: User) -> dict:
        item = self.get_item(item_id, user)
        self.repo.delete_item(self.db, item)
        logger.info(f"🗑️ Budget item {item_id} deleted")
        return {"deleted": True, "id": item_id}
