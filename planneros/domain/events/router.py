"""Event router - FastAPI endpoints for event operations"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_planner
from ...database import get_db
from ...models import Event, User
from ...rate_limiter import api_rate_limiter
from ...shared.pagination import PageParams, page_params, page_response
from .schemas import EventCreate, EventResponse, EventStats, EventStatusUpdate, EventUpdate
from .service import EventService, budget_average, days_until_event, is_locked

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["Events"], dependencies=[Depends(api_rate_limiter)])


def get_event_service(db: Session = Depends(get_db)) -> EventService:
    """Dependency injection for EventService"""
    return EventService(db)


def to_event_response(event: Event) -> EventResponse:
    locked = is_locked(event)
    return EventResponse(
        id=event.id,
        leadId=event.lead_id,
        name=event.name,
        type=event.type,
        status=event.status,
        date=event.date,
        endDate=event.end_date,
        guestCount=event.guest_count,
        budgetMin=event.budget_min,
        budgetMax=event.budget_max,
        budgetAverage=budget_average(event),
        city=event.city,
        venueType=event.venue_type,
        venueId=event.venue_id,
        notes=event.notes,
        daysUntilEvent=days_until_event(event),
        isLocked=locked,
        isEditable=not locked,
        createdAt=event.created_at,
        updatedAt=event.updated_at,
    )


# ============================================================================
# QUERIES
# ============================================================================


@router.get("")
async def list_events(
    status: Optional[str] = Query(None),
    type: Optional[str] = Query(None),
    dateFrom: Optional[date] = Query(None),
    dateTo: Optional[date] = Query(None),
    city: Optional[str] = Query(None),
    params: PageParams = Depends(page_params),
    current_user: User = Depends(get_current_planner),
    service: EventService = Depends(get_event_service),
):
    """List events; soonest first unless another sort is requested"""
    events, total = service.search_events(
        current_user, params, status, type, dateFrom, dateTo, city
    )
    return page_response([to_event_response(e) for e in events], total, params)


@router.get("/upcoming", response_model=list[EventResponse])
async def get_upcoming_events(
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_planner),
    service: EventService = Depends(get_event_service),
):
    return [to_event_response(e) for e in service.get_upcoming(current_user, limit)]


@router.get("/today", response_model=list[EventResponse])
async def get_todays_events(
    current_user: User = Depends(get_current_planner),
    service: EventService = Depends(get_event_service),
):
    return [to_event_response(e) for e in service.get_today(current_user)]


@router.get("/stats", response_model=EventStats)
async def get_event_stats(
    current_user: User = Depends(get_current_planner),
    service: EventService = Depends(get_event_service),
):
    """Dashboard counts by status plus upcoming and today's events"""
    return service.get_stats(current_user)


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: str,
    current_user: User = Depends(get_current_planner),
    service: EventService = Depends(get_event_service),
):
    return to_event_response(service.get_event(event_id, current_user))


# ============================================================================
# MUTATIONS
# ============================================================================


@router.post("", response_model=EventResponse, status_code=201)
async def create_event(
    data: EventCreate,
    current_user: User = Depends(get_current_planner),
    service: EventService = Depends(get_event_service),
):
    return to_event_response(service.create_event(data, current_user))


@router.patch("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: str,
    data: EventUpdate,
    current_user: User = Depends(get_current_planner),
    service: EventService = Depends(get_event_service),
):
    """Update an event; approved and later events are locked"""
    return to_event_response(service.update_event(event_id, data, current_user))


@router.patch("/{event_id}/status", response_model=EventResponse)
async def update_event_status(
    event_id: str,
    data: EventStatusUpdate,
    current_user: User = Depends(get_current_planner),
    service: EventService = Depends(get_event_service),
):
    return to_event_response(service.update_status(event_id, data.status, current_user))


@router.post("/{event_id}/send-proposal", response_model=EventResponse)
async def send_proposal(
    event_id: str,
    current_user: User = Depends(get_current_planner),
    service: EventService = Depends(get_event_service),
):
    return to_event_response(service.send_proposal(event_id, current_user))


@router.post("/{event_id}/approve", response_model=EventResponse)
async def approve_event(
    event_id: str,
    current_user: User = Depends(get_current_planner),
    service: EventService = Depends(get_event_service),
):
    return to_event_response(service.approve(event_id, current_user))


@router.delete("/{event_id}")
async def delete_event(
    event_id: str,
    current_user: User = Depends(get_current_planner),
    service: EventService = Depends(get_event_service),
):
    """Delete a draft event"""
    return service.delete_event(event_id, current_user)


__all__ = ["router"]
