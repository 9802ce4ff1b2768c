"""Timeline router - FastAPI endpoints for day-of timelines"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_planner
from ...database import get_db
from ...models import TimelineItem, User
from ...rate_limiter import api_rate_limiter
from .schemas import (
    ApplyTemplate,
    TimelineItemCreate,
    TimelineItemResponse,
    TimelineItemUpdate,
    TimelineOverview,
    TimelineReorder,
    TimelineStatusUpdate,
)
from .service import TimelineService, calculated_end_time, duration_minutes

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/timeline", tags=["Timeline"], dependencies=[Depends(api_rate_limiter)])


def get_timeline_service(db: Session = Depends(get_db)) -> TimelineService:
    """Dependency injection for TimelineService"""
    return TimelineService(db)


def to_timeline_response(item: TimelineItem) -> TimelineItemResponse:
    return TimelineItemResponse(
        id=item.id,
        eventId=item.event_id,
        functionId=item.function_id,
        startTime=item.start_time,
        endTime=item.end_time,
        calculatedEndTime=calculated_end_time(item),
        duration=item.duration,
        durationMinutes=duration_minutes(item),
        title=item.title,
        description=item.description,
        location=item.location,
        owner=item.owner,
        vendorId=item.vendor_id,
        status=item.status,
        notes=item.notes,
        dependsOn=item.depends_on or [],
        sortOrder=item.sort_order,
        createdAt=item.created_at,
    )


# ============================================================================
# QUERIES
# ============================================================================


@router.get("", response_model=list[TimelineItemResponse])
async def list_timeline_items(
    eventId: Optional[str] = Query(None),
    functionId: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    activeAt: Optional[str] = Query(None, pattern=r"^([01]\d|2[0-3]):([0-5]\d)$"),
    current_user: User = Depends(get_current_planner),
    service: TimelineService = Depends(get_timeline_service),
):
    """Run sheet in display order; activeAt=HH:MM keeps only items running at that time"""
    items = service.get_items(current_user, eventId, functionId, status, activeAt)
    return [to_timeline_response(i) for i in items]


@router.get("/templates")
async def get_timeline_templates(
    current_user: User = Depends(get_current_planner),
    service: TimelineService = Depends(get_timeline_service),
):
    return service.get_templates()


@router.get("/overview", response_model=TimelineOverview)
async def get_timeline_overview(
    eventId: str = Query(...),
    functionId: Optional[str] = Query(None),
    current_user: User = Depends(get_current_planner),
    service: TimelineService = Depends(get_timeline_service),
):
    summary = service.get_overview(eventId, current_user, functionId)
    if summary["nextItem"] is not None:
        summary["nextItem"] = to_timeline_response(summary["nextItem"])
    return summary


@router.get("/{item_id}", response_model=TimelineItemResponse)
async def get_timeline_item(
    item_id: str,
    current_user: User = Depends(get_current_planner),
    service: TimelineService = Depends(get_timeline_service),
):
    return to_timeline_response(service.get_item(item_id, current_user))


# ============================================================================
# MUTATIONS
# ============================================================================


@router.post("", response_model=TimelineItemResponse, status_code=201)
async def create_timeline_item(
    data: TimelineItemCreate,
    current_user: User = Depends(get_current_planner),
    service: TimelineService = Depends(get_timeline_service),
):
    return to_timeline_response(service.create_item(data, current_user))


@router.post("/reorder")
async def reorder_timeline(
    data: TimelineReorder,
    current_user: User = Depends(get_current_planner),
    service: TimelineService = Depends(get_timeline_service),
):
    return service.reorder(data.items, current_user)


@router.post("/apply-template", response_model=list[TimelineItemResponse], status_code=201)
async def apply_timeline_template(
    data: ApplyTemplate,
    current_user: User = Depends(get_current_planner),
    service: TimelineService = Depends(get_timeline_service),
):
    """Seed a function's timeline from a named template"""
    return [to_timeline_response(i) for i in service.apply_template(data, current_user)]


@router.patch("/{item_id}", response_model=TimelineItemResponse)
async def update_timeline_item(
    item_id: str,
    data: TimelineItemUpdate,
    current_user: User = Depends(get_current_planner),
    service: TimelineService = Depends(get_timeline_service),
):
    return to_timeline_response(service.update_item(item_id, data, current_user))


@router.patch("/{item_id}/status", response_model=TimelineItemResponse)
async def update_timeline_status(
    item_id: str,
    data: TimelineStatusUpdate,
    current_user: User = Depends(get_current_planner),
    service: TimelineService = Depends(get_timeline_service),
):
    item = service.update_status(item_id, data.status, current_user, data.notes)
    return to_timeline_response(item)


@router.delete("/{item_id}")
async def delete_timeline_item(
    item_id: str,
    current_user: User = Depends(get_current_planner),
    service: TimelineService = Depends(get_timeline_service),
):
    return service.delete_item(item_id, current_user)


__all__ = ["router"]
