"""Budget domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_choice, validate_currency, validate_uuid

BUDGET_CATEGORIES = {
    "venue": "Venue & Infrastructure",
    "catering": "Food & Beverage",
    "decoration": "Decoration & Design",
    "photography": "Photography & Video",
    "entertainment": "Entertainment",
    "attire": "Attire & Jewelry",
    "makeup": "Makeup & Hair",
    "transport": "Transport & Logistics",
    "invitations": "Invitations & Stationery",
    "gifts": "Gifts & Favors",
    "miscellaneous": "Miscellaneous",
}


class BudgetItemBase(BaseModel):
    @field_validator("eventId", "functionId", "vendorId", "bookingRequestId", check_fields=False)
    @classmethod
    def check_ids(cls, v):
        if v is not None and not validate_uuid(v):
            raise ValueError("Must be a UUID")
        return v


class BudgetItemCreate(BudgetItemBase):
    eventId: str
    functionId: Optional[str] = None
    category: str
    description: str = Field(..., min_length=1, max_length=200)
    vendorId: Optional[str] = None
    bookingRequestId: Optional[str] = None
    estimatedAmount: float = Field(..., ge=0)
    actualAmount: Optional[float] = Field(None, ge=0)
    currency: str = "INR"
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator("category")
    @classmethod
    def check_category(cls, v):
        return validate_choice(v, tuple(BUDGET_CATEGORIES), "category")

    @field_validator("currency")
    @classmethod
    def check_currency(cls, v):
        return validate_currency(v)


class BudgetItemUpdate(BudgetItemBase):
    description: Optional[str] = Field(None, min_length=1, max_length=200)
    estimatedAmount: Optional[float] = Field(None, ge=0)
    actualAmount: Optional[float] = Field(None, ge=0)
    paidAmount: Optional[float] = Field(None, ge=0)
    vendorId: Optional[str] = None
    bookingRequestId: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=1000)


class BudgetPayment(BaseModel):
    amount: float = Field(..., ge=0)
    notes: Optional[str] = Field(None, max_length=500)


class BudgetItemResponse(BaseModel):
    """Schema for budget item response"""

    id: str
    eventId: str
    functionId: Optional[str]
    category: str
    categoryLabel: str
    description: str
    vendorId: Optional[str]
    bookingRequestId: Optional[str]
    estimatedAmount: float
    actualAmount: Optional[float]
    paidAmount: float
    effectiveAmount: float
    remainingBalance: float
    isOverBudget: bool
    overageAmount: float
    paymentProgress: float
    currency: str
    notes: Optional[str]
    createdAt: Optional[datetime] = None

    class Config:
        from_attributes = True


class CategoryTotals(BaseModel):
    estimated: float
    actual: float
    paid: float


class BudgetSummary(BaseModel):
    totalEstimated: float
    totalActual: float
    totalPaid: float
    remaining: float
    byCategory: dict[str, CategoryTotals]
    overBudgetItems: list[BudgetItemResponse]
