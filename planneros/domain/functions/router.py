"""Event function router - FastAPI endpoints for the functions of an event"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_planner
from ...database import get_db
from ...models import EventFunction, User
from ...rate_limiter import api_rate_limiter
from .schemas import (
    FunctionCount,
    FunctionCreate,
    FunctionReorder,
    FunctionResponse,
    FunctionUpdate,
)
from .service import FunctionService, type_label

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/functions", tags=["Functions"], dependencies=[Depends(api_rate_limiter)]
)


def get_function_service(db: Session = Depends(get_db)) -> FunctionService:
    """Dependency injection for FunctionService"""
    return FunctionService(db)


def to_function_response(function: EventFunction) -> FunctionResponse:
    return FunctionResponse(
        id=function.id,
        eventId=function.event_id,
        name=function.name,
        type=function.type,
        typeLabel=type_label(function.type),
        date=function.date,
        startTime=function.start_time,
        endTime=function.end_time,
        venueName=function.venue_name,
        venueAddress=function.venue_address,
        guestCount=function.guest_count,
        budget=function.budget,
        notes=function.notes,
        sortOrder=function.sort_order,
        createdAt=function.created_at,
    )


# ============================================================================
# QUERIES
# ============================================================================


@router.get("", response_model=list[FunctionResponse])
async def list_functions(
    eventId: str = Query(...),
    type: Optional[str] = Query(None),
    current_user: User = Depends(get_current_planner),
    service: FunctionService = Depends(get_function_service),
):
    """An event's functions in running order"""
    functions = service.get_functions(eventId, current_user, type)
    return [to_function_response(f) for f in functions]


@router.get("/types")
async def get_function_types(
    current_user: User = Depends(get_current_planner),
    service: FunctionService = Depends(get_function_service),
):
    return service.get_types()


@router.get("/count", response_model=FunctionCount)
async def count_functions(
    eventId: str = Query(...),
    current_user: User = Depends(get_current_planner),
    service: FunctionService = Depends(get_function_service),
):
    return service.get_count(eventId, current_user)


@router.get("/{function_id}", response_model=FunctionResponse)
async def get_function(
    function_id: str,
    current_user: User = Depends(get_current_planner),
    service: FunctionService = Depends(get_function_service),
):
    return to_function_response(service.get_function(function_id, current_user))


# ============================================================================
# MUTATIONS
# ============================================================================


@router.post("", response_model=FunctionResponse, status_code=201)
async def create_function(
    data: FunctionCreate,
    current_user: User = Depends(get_current_planner),
    service: FunctionService = Depends(get_function_service),
):
    return to_function_response(service.create_function(data, current_user))


@router.post("/reorder")
async def reorder_functions(
    data: FunctionReorder,
    current_user: User = Depends(get_current_planner),
    service: FunctionService = Depends(get_function_service),
):
    return service.reorder(data.items, current_user)


@router.patch("/{function_id}", response_model=FunctionResponse)
async def update_function(
    function_id: str,
    data: FunctionUpdate,
    current_user: User = Depends(get_current_planner),
    service: FunctionService = Depends(get_function_service),
):
    return to_function_response(service.update_function(function_id, data, current_user))


@router.delete("/{function_id}")
async def delete_function(
    function_id: str,
    current_user: User = Depends(get_current_planner),
    service: FunctionService = Depends(get_function_service),
):
    """Delete a function; its bookings, budget items and timeline items become event-wide"""
    return service.delete_function(function_id, current_user)


__all__ = ["router"]
