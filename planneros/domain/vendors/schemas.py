"""Vendor domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...shared.validators import validate_choice, validate_email, validate_phone, validate_url

VENDOR_CATEGORIES = (
    "photography",
    "videography",
    "catering",
    "decoration",
    "music",
    "venue",
    "makeup",
    "transportation",
    "other",
)


class VendorBase(BaseModel):
    @field_validator("category", check_fields=False)
    @classmethod
    def check_category(cls, v):
        return validate_choice(v, VENDOR_CATEGORIES, "category")

    @field_validator("email", check_fields=False)
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("phone", check_fields=False)
    @classmethod
    def check_phone(cls, v):
        return validate_phone(v)

    @field_validator("website", "imageUrl", check_fields=False)
    @classmethod
    def check_url(cls, v):
        return validate_url(v)

    @field_validator("portfolioUrls", check_fields=False)
    @classmethod
    def check_portfolio(cls, v):
        if v is None:
            return v
        return [validate_url(url) for url in v]

    @model_validator(mode="after")
    def check_price_range(self):
        if self.priceMin is not None and self.priceMax is not None:
            if self.priceMax < self.priceMin:
                raise ValueError("Maximum price must be greater than or equal to minimum price")
        return self


class VendorCreate(VendorBase):
    """Schema for creating a vendor (CRM contact or marketplace profile)"""

    companyName: str = Field(..., min_length=1, max_length=255)
    contactName: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    category: str
    description: Optional[str] = Field(None, max_length=2000)
    location: str = Field(..., min_length=1, max_length=255)
    priceMin: float = Field(..., gt=0)
    priceMax: float = Field(..., gt=0)
    imageUrl: Optional[str] = None
    portfolioUrls: Optional[list[str]] = Field(None, max_length=10)


class VendorUpdate(VendorBase):
    """Schema for updating a vendor"""

    companyName: Optional[str] = Field(None, min_length=1, max_length=255)
    contactName: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = Field(None, max_length=2000)
    location: Optional[str] = Field(None, max_length=255)
    priceMin: Optional[float] = Field(None, gt=0)
    priceMax: Optional[float] = Field(None, gt=0)
    imageUrl: Optional[str] = None
    portfolioUrls: Optional[list[str]] = Field(None, max_length=10)


class VendorReview(BaseModel):
    rating: float = Field(..., ge=1, le=5)


class VendorResponse(BaseModel):
    """Schema for vendor response"""

    id: str
    companyName: str
    contactName: Optional[str]
    email: Optional[str]
    phone: Optional[str]
    website: Optional[str]
    category: str
    description: Optional[str]
    location: Optional[str]
    priceMin: Optional[float]
    priceMax: Optional[float]
    averagePrice: float
    priceLevel: str
    rating: float
    reviewCount: int
    isVerified: bool
    isMarketplace: bool
    imageUrl: Optional[str]
    portfolioUrls: list[str]
    createdAt: Optional[datetime] = None

    class Config:
        from_attributes = True
