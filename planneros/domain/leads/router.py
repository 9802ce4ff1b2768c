"""Lead router - FastAPI endpoints for lead operations"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_planner
from ...database import get_db
from ...models import Lead, User
from ...rate_limiter import api_rate_limiter, lead_import_limiter
from ...shared.pagination import PageParams, page_params, page_response
from .schemas import (
    DuplicateMatchResponse,
    LeadConversionResponse,
    LeadCreate,
    LeadImport,
    LeadImportResponse,
    LeadResponse,
    LeadScoreUpdate,
    LeadStatusUpdate,
    LeadUpdate,
)
from .scoring import get_score_category, get_score_color, is_hot_lead
from .service import LeadService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/leads", tags=["Leads"], dependencies=[Depends(api_rate_limiter)])


def get_lead_service(db: Session = Depends(get_db)) -> LeadService:
    """Dependency injection for LeadService"""
    return LeadService(db)


def to_lead_response(lead: Lead) -> LeadResponse:
    return LeadResponse(
        id=lead.id,
        name=lead.name,
        email=lead.email,
        phone=lead.phone,
        eventType=lead.event_type,
        eventDate=lead.event_date,
        budget=lead.budget,
        budgetRange=lead.budget_range,
        guestCount=lead.guest_count,
        source=lead.source,
        score=lead.score,
        status=lead.status,
        notes=lead.notes,
        convertedEventId=lead.converted_event_id,
        isHotLead=is_hot_lead(lead.score),
        priorityLevel=get_score_category(lead.score),
        scoreColor=get_score_color(lead.score),
        createdAt=lead.created_at,
        updatedAt=lead.updated_at,
    )


# ============================================================================
# QUERIES
# ============================================================================


@router.get("")
async def list_leads(
    status: Optional[str] = Query(None),
    source: Optional[str] = Query(None),
    minScore: Optional[int] = Query(None, ge=0, le=100),
    search: Optional[str] = Query(None),
    params: PageParams = Depends(page_params),
    current_user: User = Depends(get_current_planner),
    service: LeadService = Depends(get_lead_service),
):
    """List leads with filters, sorting and pagination"""
    leads, total = service.search_leads(current_user, params, status, source, minScore, search)
    return page_response([to_lead_response(lead) for lead in leads], total, params)


@router.get("/hot", response_model=list[LeadResponse])
async def get_hot_leads(
    current_user: User = Depends(get_current_planner),
    service: LeadService = Depends(get_lead_service),
):
    """Open leads scoring 70 or more, best first"""
    return [to_lead_response(lead) for lead in service.get_hot_leads(current_user)]


@router.get("/duplicates", response_model=list[DuplicateMatchResponse])
async def check_duplicates(
    phone: Optional[str] = Query(None),
    email: Optional[str] = Query(None),
    name: Optional[str] = Query(None),
    eventDate: Optional[date] = Query(None),
    current_user: User = Depends(get_current_planner),
    service: LeadService = Depends(get_lead_service),
):
    """Find existing leads that look like the same client"""
    matches = service.find_duplicates(current_user, phone, email, name, eventDate)
    return [
        DuplicateMatchResponse(
            lead=to_lead_response(match.lead),
            matchType=match.match_type,
            confidence=match.confidence,
            reason=match.reason,
        )
        for match in matches
    ]


@router.get("/{lead_id}", response_model=LeadResponse)
async def get_lead(
    lead_id: str,
    current_user: User = Depends(get_current_planner),
    service: LeadService = Depends(get_lead_service),
):
    return to_lead_response(service.get_lead(lead_id, current_user))


# ============================================================================
# MUTATIONS
# ============================================================================


@router.post("", response_model=LeadResponse, status_code=201)
async def create_lead(
    data: LeadCreate,
    current_user: User = Depends(get_current_planner),
    service: LeadService = Depends(get_lead_service),
):
    """Capture a new lead; its score is calculated on creation"""
    return to_lead_response(service.create_lead(data, current_user))


@router.post(
    "/import",
    response_model=LeadImportResponse,
    status_code=201,
    dependencies=[Depends(lead_import_limiter)],
)
async def import_leads(
    data: LeadImport,
    current_user: User = Depends(get_current_planner),
    service: LeadService = Depends(get_lead_service),
):
    """Bulk import up to 100 leads"""
    leads = service.import_leads(data.leads, current_user)
    return LeadImportResponse(imported=len(leads), leads=[to_lead_response(lead) for lead in leads])


@router.patch("/{lead_id}", response_model=LeadResponse)
async def update_lead(
    lead_id: str,
    data: LeadUpdate,
    current_user: User = Depends(get_current_planner),
    service: LeadService = Depends(get_lead_service),
):
    return to_lead_response(service.update_lead(lead_id, data, current_user))


@router.patch("/{lead_id}/status", response_model=LeadResponse)
async def update_lead_status(
    lead_id: str,
    data: LeadStatusUpdate,
    current_user: User = Depends(get_current_planner),
    service: LeadService = Depends(get_lead_service),
):
    return to_lead_response(service.update_status(lead_id, data.status, current_user))


@router.patch("/{lead_id}/score", response_model=LeadResponse)
async def update_lead_score(
    lead_id: str,
    data: LeadScoreUpdate,
    current_user: User = Depends(get_current_planner),
    service: LeadService = Depends(get_lead_service),
):
    """Manually override a lead's score"""
    return to_lead_response(service.update_score(lead_id, data.score, current_user))


@router.post("/{lead_id}/rescore", response_model=LeadResponse)
async def rescore_lead(
    lead_id: str,
    current_user: User = Depends(get_current_planner),
    service: LeadService = Depends(get_lead_service),
):
    """Recalculate a lead's score from its stored details"""
    return to_lead_response(service.rescore_lead(lead_id, current_user))


@router.post("/{lead_id}/convert", response_model=LeadConversionResponse)
async def convert_lead(
    lead_id: str,
    current_user: User = Depends(get_current_planner),
    service: LeadService = Depends(get_lead_service),
):
    """Convert a lead with a sent proposal into a draft event"""
    lead, event = service.convert_lead(lead_id, current_user)
    return LeadConversionResponse(lead=to_lead_response(lead), eventId=event.id)


@router.delete("/{lead_id}")
async def delete_lead(
    lead_id: str,
    current_user: User = Depends(get_current_planner),
    service: LeadService = Depends(get_lead_service),
):
    return service.delete_lead(lead_id, current_user)


__all__ = ["router"]
