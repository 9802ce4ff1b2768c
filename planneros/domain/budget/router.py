"""Budget router - FastAPI endpoints for event budget items"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_planner
from ...database import get_db
from ...models import BudgetItem, User
from ...rate_limiter import api_rate_limiter
from .schemas import (
    BUDGET_CATEGORIES,
    BudgetItemCreate,
    BudgetItemResponse,
    BudgetItemUpdate,
    BudgetPayment,
    BudgetSummary,
)
from .service import (
    BudgetService,
    effective_amount,
    is_over_budget,
    overage_amount,
    payment_progress,
    remaining_balance,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/budget", tags=["Budget"], dependencies=[Depends(api_rate_limiter)])


def get_budget_service(db: Session = Depends(get_db)) -> BudgetService:
    """Dependency injection for BudgetService"""
    return BudgetService(db)


def to_budget_response(item: BudgetItem) -> BudgetItemResponse:
    return BudgetItemResponse(
        id=item.id,
        eventId=item.event_id,
        functionId=item.function_id,
        category=item.category,
        categoryLabel=BUDGET_CATEGORIES.get(item.category, item.category),
        description=item.description,
        vendorId=item.vendor_id,
        bookingRequestId=item.booking_request_id,
        estimatedAmount=item.estimated_amount,
        actualAmount=item.actual_amount,
        paidAmount=item.paid_amount or 0,
        effectiveAmount=effective_amount(item),
        remainingBalance=remaining_balance(item),
        isOverBudget=is_over_budget(item),
        overageAmount=overage_amount(item),
        paymentProgress=payment_progress(item),
        currency=item.currency,
        notes=item.notes,
        createdAt=item.created_at,
    )


# ============================================================================
# QUERIES
# ============================================================================


@router.get("", response_model=list[BudgetItemResponse])
async def list_budget_items(
    eventId: Optional[str] = Query(None),
    functionId: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    overBudgetOnly: bool = Query(False),
    current_user: User = Depends(get_current_planner),
    service: BudgetService = Depends(get_budget_service),
):
    items = service.get_items(current_user, eventId, functionId, category, overBudgetOnly)
    return [to_budget_response(i) for i in items]


@router.get("/categories")
async def get_budget_categories(
    current_user: User = Depends(get_current_planner),
    service: BudgetService = Depends(get_budget_service),
):
    return service.get_categories()


@router.get("/recommended-split")
async def get_recommended_split(
    total: float = Query(..., ge=0),
    current_user: User = Depends(get_current_planner),
    service: BudgetService = Depends(get_budget_service),
):
    """Suggested min/max spend per category for a total budget"""
    return service.get_recommended_split(total)


@router.get("/summary", response_model=BudgetSummary)
async def get_budget_summary(
    eventId: str = Query(...),
    current_user: User = Depends(get_current_planner),
    service: BudgetService = Depends(get_budget_service),
):
    summary = service.get_summary(eventId, current_user)
    summary["overBudgetItems"] = [to_budget_response(i) for i in summary["overBudgetItems"]]
    return summary


@router.get("/{item_id}", response_model=BudgetItemResponse)
async def get_budget_item(
    item_id: str,
    current_user: User = Depends(get_current_planner),
    service: BudgetService = Depends(get_budget_service),
):
    return to_budget_response(service.get_item(item_id, current_user))


# ============================================================================
# MUTATIONS
# ============================================================================


@router.post("", response_model=BudgetItemResponse, status_code=201)
async def create_budget_item(
    data: BudgetItemCreate,
    current_user: User = Depends(get_current_planner),
    service: BudgetService = Depends(get_budget_service),
):
    return to_budget_response(service.create_item(data, current_user))


@router.patch("/{item_id}", response_model=BudgetItemResponse)
async def update_budget_item(
    item_id: str,
    data: BudgetItemUpdate,
    current_user: User = Depends(get_current_planner),
    service: BudgetService = Depends(get_budget_service),
):
    return to_budget_response(service.update_item(item_id, data, current_user))


@router.post("/{item_id}/payments", response_model=BudgetItemResponse)
async def add_budget_payment(
    item_id: str,
    data: BudgetPayment,
    current_user: User = Depends(get_current_planner),
    service: BudgetService = Depends(get_budget_service),
):
    """Record money paid against a budget item"""
    return to_budget_response(service.add_payment(item_id, data.amount, current_user, data.notes))


@router.delete("/{item_id}")
async def delete_budget_item(
    item_id: str,
    current_user: User = Depends(get_current_planner),
    service: BudgetService = Depends(get_budget_service),
):
    return service.delete_item(item_id, current_user)


__all__ = ["router"]
