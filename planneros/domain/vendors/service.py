"""Vendor service - Business logic for vendor directory and marketplace profiles"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import User, Vendor
from ...shared.pagination import PageParams
from .repository import VendorRepository
from .schemas import VendorCreate, VendorUpdate

logger = logging.getLogger(__name__)

BUDGET_PRICE_CEILING = 5000
MID_RANGE_PRICE_CEILING = 20000

VENDOR_FIELDS = {
    "companyName": "company_name",
    "contactName": "contact_name",
    "email": "email",
    "phone": "phone",
    "website": "website",
    "category": "category",
    "description": "description",
    "location": "location",
    "priceMin": "price_min",
    "priceMax": "price_max",
    "imageUrl": "image_url",
    "portfolioUrls": "portfolio_urls",
}


def average_price(vendor: Vendor) -> float:
    return ((vendor.price_min or 0) + (vendor.price_max or 0)) / 2


def price_level(vendor: Vendor) -> str:
    avg = average_price(vendor)
    if avg < BUDGET_PRICE_CEILING:
        return "budget"
    if avg < MID_RANGE_PRICE_CEILING:
        return "mid-range"
    return "premium"


def owns_vendor(vendor: Vendor, user: User) -> bool:
    return vendor.planner_id == user.id or vendor.user_id == user.id


class VendorService:
    """Service layer for vendor business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = VendorRepository()

    def search_vendors(
        self,
        user: User,
        params: PageParams,
        category: Optional[str] = None,
        location: Optional[str] = None,
        max_price: Optional[float] = None,
        min_rating: Optional[float] = None,
        is_verified: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> tuple[list[Vendor], int]:
        return self.repo.search_vendors(
            self.db, user.id, params, category, location, max_price, min_rating, is_verified, search
        )

    def get_verified(self, user: User, limit: int = 20) -> list[Vendor]:
        return self.repo.get_verified(self.db, user.id, limit)

    def get_vendor(self, vendor_id: str, user: User) -> Vendor:
        vendor = self.repo.get_vendor_by_id(self.db, vendor_id, user.id)
        if not vendor:
            raise HTTPException(status_code=404, detail="Vendor not found")
        return vendor

    def get_own_profile(self, user: User) -> Vendor:
        vendor = self.repo.get_vendor_for_user(self.db, user.id)
        if not vendor:
            raise HTTPException(status_code=404, detail="Vendor profile not found")
        return vendor

    def _owned_vendor(self, vendor_id: str, user: User) -> Vendor:
        vendor = self.get_vendor(vendor_id, user)
        if not owns_vendor(vendor, user):
            raise HTTPException(status_code=403, detail="You can only modify your own vendors")
        return vendor

    def create_vendor(self, data: VendorCreate, user: User) -> Vendor:
        """
        Vendor users create their single marketplace profile; planners add
        private vendors to their own directory.
        """
        vendor_data = {column: getattr(data, field) for field, column in VENDOR_FIELDS.items()}
        vendor_data["portfolio_urls"] = vendor_data["portfolio_urls"] or []

        if user.role == "vendor":
            if self.repo.get_vendor_for_user(self.db, user.id):
                raise HTTPException(status_code=409, detail="Vendor profile already exists")
            vendor = self.repo.create_vendor(self.db, user_id=user.id, **vendor_data)
            logger.info(f"🏪 Marketplace vendor {vendor.id} created for user {user.id}")
        elif user.role in ("planner", "admin"):
            vendor = self.repo.create_vendor(self.db, planner_id=user.id, **vendor_data)
            logger.info(f"🏪 Vendor {vendor.id} added to planner {user.id} directory")
        else:
            raise HTTPException(status_code=403, detail="Only planners and vendors can create vendors")

        return vendor

    def update_vendor(self, vendor_id: str, data: VendorUpdate, user: User) -> Vendor:
        vendor = self._owned_vendor(vendor_id, user)

        provided = data.model_dump(exclude_unset=True)
        for required in ("companyName", "category", "priceMin", "priceMax"):
            if required in provided and provided[required] is None:
                raise HTTPException(status_code=400, detail=f"{required} cannot be empty")
        updates = {VENDOR_FIELDS[field]: value for field, value in provided.items()}
        if "portfolio_urls" in updates and updates["portfolio_urls"] is None:
            updates["portfolio_urls"] = []

        price_min = updates.get("price_min", vendor.price_min)
        price_max = updates.get("price_max", vendor.price_max)
        if price_min is not None and price_max is not None and price_max < price_min:
            raise HTTPException(
                status_code=400, detail="Maximum price must be greater than or equal to minimum price"
            )

        vendor = self.repo.update_vendor(self.db, vendor, **updates)
        logger.info(f"✏️ Vendor {vendor.id} updated")
        return vendor

    def add_review(self, vendor_id: str, rating: float, user: User) -> Vendor:
        """Fold a 1-5 star rating into the vendor's running average"""
        vendor = self.get_vendor(vendor_id, user)
        if vendor.user_id == user.id:
            raise HTTPException(status_code=400, detail="You cannot review your own vendor profile")

        count = vendor.review_count or 0
        new_rating = ((vendor.rating or 0) * count + rating) / (count + 1)
        vendor = self.repo.update_vendor(
            self.db, vendor, rating=round(new_rating, 2), review_count=count + 1
        )
        logger.info(f"⭐ Vendor {vendor.id} reviewed: {rating} (avg {vendor.rating})")
        return vendor

    def delete_vendor(self, vendor_id: str, user: User) -> dict:
        vendor = self._owned_vendor(vendor_id, user)
        self.repo.delete_vendor(self.db, vendor)
        logger.info(f"🗑️ Vendor {vendor_id} deleted")
        return {"deleted": True, "id": vendor_id}
