"""Vendor router - FastAPI endpoints for vendor directory and marketplace"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User, Vendor
from ...rate_limiter import api_rate_limiter
from ...shared.pagination import PageParams, page_params, page_response
from .schemas import VendorCreate, VendorResponse, VendorReview, VendorUpdate
from .service import VendorService, average_price, price_level

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/vendors", tags=["Vendors"], dependencies=[Depends(api_rate_limiter)])


def get_vendor_service(db: Session = Depends(get_db)) -> VendorService:
    """Dependency injection for VendorService"""
    return VendorService(db)


def to_vendor_response(vendor: Vendor) -> VendorResponse:
    return VendorResponse(
        id=vendor.id,
        companyName=vendor.company_name,
        contactName=vendor.contact_name,
        email=vendor.email,
        phone=vendor.phone,
        website=vendor.website,
        category=vendor.category,
        description=vendor.description,
        location=vendor.location,
        priceMin=vendor.price_min,
        priceMax=vendor.price_max,
        averagePrice=average_price(vendor),
        priceLevel=price_level(vendor),
        rating=vendor.rating or 0,
        reviewCount=vendor.review_count or 0,
        isVerified=vendor.is_verified,
        isMarketplace=vendor.planner_id is None,
        imageUrl=vendor.image_url,
        portfolioUrls=vendor.portfolio_urls or [],
        createdAt=vendor.created_at,
    )


# ============================================================================
# QUERIES
# ============================================================================


@router.get("")
async def search_vendors(
    category: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    maxPrice: Optional[float] = Query(None, gt=0),
    minRating: Optional[float] = Query(None, ge=0, le=5),
    isVerified: Optional[bool] = Query(None),
    search: Optional[str] = Query(None),
    params: PageParams = Depends(page_params),
    current_user: User = Depends(get_current_user),
    service: VendorService = Depends(get_vendor_service),
):
    """Search your vendors and the marketplace; best rated first by default"""
    vendors, total = service.search_vendors(
        current_user, params, category, location, maxPrice, minRating, isVerified, search
    )
    return page_response([to_vendor_response(v) for v in vendors], total, params)


@router.get("/verified", response_model=list[VendorResponse])
async def get_verified_vendors(
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    service: VendorService = Depends(get_vendor_service),
):
    return [to_vendor_response(v) for v in service.get_verified(current_user, limit)]


@router.get("/me", response_model=VendorResponse)
async def get_my_vendor_profile(
    current_user: User = Depends(get_current_user),
    service: VendorService = Depends(get_vendor_service),
):
    """Marketplace profile of the signed-in vendor"""
    return to_vendor_response(service.get_own_profile(current_user))


@router.get("/{vendor_id}", response_model=VendorResponse)
async def get_vendor(
    vendor_id: str,
    current_user: User = Depends(get_current_user),
    service: VendorService = Depends(get_vendor_service),
):
    return to_vendor_response(service.get_vendor(vendor_id, current_user))


# ============================================================================
# MUTATIONS
# ============================================================================


@router.post("", response_model=VendorResponse, status_code=201)
async def create_vendor(
    data: VendorCreate,
    current_user: User = Depends(get_current_user),
    service: VendorService = Depends(get_vendor_service),
):
    return to_vendor_response(service.create_vendor(data, current_user))


@router.patch("/{vendor_id}", response_model=VendorResponse)
async def update_vendor(
    vendor_id: str,
    data: VendorUpdate,
    current_user: User = Depends(get_current_user),
    service: VendorService = Depends(get_vendor_service),
):
    return to_vendor_response(service.update_vendor(vendor_id, data, current_user))


@router.post("/{vendor_id}/reviews", response_model=VendorResponse)
async def review_vendor(
    vendor_id: str,
    data: VendorReview,
    current_user: User = Depends(get_current_user),
    service: VendorService = Depends(get_vendor_service),
):
    """Add a 1-5 star rating"""
    return to_vendor_response(service.add_review(vendor_id, data.rating, current_user))


@router.delete("/{vendor_id}")
async def delete_vendor(
    vendor_id: str,
    current_user: User = Depends(get_current_user),
    service: VendorService = Depends(get_vendor_service),
):
    return service.delete_vendor(vendor_id, current_user)


__all__ = ["router"]
