"""Client router - FastAPI endpoints for client operations"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_planner
from ...database import get_db
from ...models import Client, User
from ...rate_limiter import api_rate_limiter
from ...shared.pagination import PageParams, page_params, page_response
from .schemas import ClientCreate, ClientRecordEvent, ClientResponse, ClientStats, ClientUpdate
from .service import (
    ClientService,
    average_spend,
    display_location,
    is_high_value,
    status_label,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clients", tags=["Clients"], dependencies=[Depends(api_rate_limiter)])


def get_client_service(db: Session = Depends(get_db)) -> ClientService:
    """Dependency injection for ClientService"""
    return ClientService(db)


def to_client_response(client: Client) -> ClientResponse:
    return ClientResponse(
        id=client.id,
        name=client.name,
        email=client.email,
        phone=client.phone,
        alternatePhone=client.alternate_phone,
        status=client.status,
        statusLabel=status_label(client.status),
        address=client.address,
        city=client.city,
        state=client.state,
        displayLocation=display_location(client),
        preferences=client.preferences or {},
        totalEvents=client.total_events or 0,
        totalSpend=client.total_spend or 0,
        averageSpend=average_spend(client),
        isHighValue=is_high_value(client),
        currency=client.currency,
        referralSource=client.referral_source,
        notes=client.notes,
        createdAt=client.created_at,
        updatedAt=client.updated_at,
    )


# ============================================================================
# QUERIES
# ============================================================================


@router.get("")
async def list_clients(
    status: Optional[str] = Query(None),
    city: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    highValueOnly: bool = Query(False),
    params: PageParams = Depends(page_params),
    current_user: User = Depends(get_current_planner),
    service: ClientService = Depends(get_client_service),
):
    """List clients with filters, sorting and pagination"""
    clients, total = service.search_clients(
        current_user, params, status, city, search, highValueOnly
    )
    return page_response([to_client_response(c) for c in clients], total, params)


@router.get("/stats", response_model=ClientStats)
async def get_client_stats(
    current_user: User = Depends(get_current_planner),
    service: ClientService = Depends(get_client_service),
):
    return service.get_stats(current_user)


@router.get("/high-value", response_model=list[ClientResponse])
async def get_high_value_clients(
    current_user: User = Depends(get_current_planner),
    service: ClientService = Depends(get_client_service),
):
    """Clients with lifetime spend of 5 lakh or more, biggest first"""
    return [to_client_response(c) for c in service.get_high_value(current_user)]


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: str,
    current_user: User = Depends(get_current_planner),
    service: ClientService = Depends(get_client_service),
):
    return to_client_response(service.get_client(client_id, current_user))


# ============================================================================
# MUTATIONS
# ============================================================================


@router.post("", response_model=ClientResponse, status_code=201)
async def create_client(
    data: ClientCreate,
    current_user: User = Depends(get_current_planner),
    service: ClientService = Depends(get_client_service),
):
    return to_client_response(service.create_client(data, current_user))


@router.patch("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: str,
    data: ClientUpdate,
    current_user: User = Depends(get_current_planner),
    service: ClientService = Depends(get_client_service),
):
    return to_client_response(service.update_client(client_id, data, current_user))


@router.post("/{client_id}/record-event", response_model=ClientResponse)
async def record_client_event(
    client_id: str,
    data: ClientRecordEvent,
    current_user: User = Depends(get_current_planner),
    service: ClientService = Depends(get_client_service),
):
    return to_client_response(service.record_event(client_id, data.eventAmount, current_user))


@router.delete("/{client_id}")
async def delete_client(
    client_id: str,
    current_user: User = Depends(get_current_planner),
    service: ClientService = Depends(get_client_service),
):
    return service.delete_client(client_id, current_user)


__all__ = ["router"]
