"""Vendor repository - Database operations for vendors"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models import Vendor
from ...shared.pagination import PageParams, paginate

VENDOR_SORT_COLUMNS = {
    "rating": Vendor.rating,
    "priceMin": Vendor.price_min,
    "createdAt": Vendor.created_at,
    "companyName": Vendor.company_name,
}


def visible_to(user_id: str):
    """Own CRM vendors, own marketplace profile, and every marketplace vendor"""
    return or_(Vendor.planner_id == user_id, Vendor.planner_id.is_(None))


class VendorRepository:
    """Repository for vendor database operations"""

    @staticmethod
    def search_vendors(
        db: Session,
        user_id: str,
        params: PageParams,
        category: Optional[str] = None,
        location: Optional[str] = None,
        max_price: Optional[float] = None,
        min_rating: Optional[float] = None,
        is_verified: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> tuple[list[Vendor], int]:
        query = db.query(Vendor).filter(visible_to(user_id))

        if category:
            query = query.filter(Vendor.category == category)
        if location:
            query = query.filter(Vendor.location.ilike(f"%{location}%"))
        if max_price is not None:
            query = query.filter(Vendor.price_min <= max_price)
        if min_rating is not None:
            query = query.filter(Vendor.rating >= min_rating)
        if is_verified is not None:
            query = query.filter(Vendor.is_verified.is_(is_verified))
        if search:
            search_term = f"%{search.lower()}%"
            query = query.filter(
                (Vendor.company_name.ilike(search_term)) | (Vendor.description.ilike(search_term))
            )

        return paginate(query, params, VENDOR_SORT_COLUMNS, default_sort="rating")

    @staticmethod
    def get_verified(db: Session, user_id: str, limit: int = 20) -> list[Vendor]:
        return (
            db.query(Vendor)
            .filter(visible_to(user_id), Vendor.is_verified.is_(True))
            .order_by(Vendor.rating.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def get_vendor_by_id(db: Session, vendor_id: str, user_id: str) -> Optional[Vendor]:
        return db.query(Vendor).filter(Vendor.id == vendor_id, visible_to(user_id)).first()

    @staticmethod
    def get_vendor_for_user(db: Session, user_id: str) -> Optional[Vendor]:
        """Marketplace profile owned by a vendor user"""
        return db.query(Vendor).filter(Vendor.user_id == user_id).first()

    @staticmethod
    def create_vendor(db: Session, **vendor_data) -> Vendor:
        vendor = Vendor(**vendor_data)
        db.add(vendor)
        db.commit()
        db.refresh(vendor)
        return vendor

    @staticmethod
    def update_vendor(db: Session, vendor: Vendor, **updates) -> Vendor:
        for key, value in updates.items():
            if hasattr(vendor, key):
                setattr(vendor, key, value)

        db.commit()
        db.refresh(vendor)
        return vendor

    @staticmethod
    def delete_vendor(db: Session, vendor: Vendor) -> None:
        db.delete(vendor)
        db.commit()
