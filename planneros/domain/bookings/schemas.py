"""Booking domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_choice, validate_uuid

BOOKING_STATUSES = (
    "draft",
    "quote_requested",
    "quote_received",
    "negotiating",
    "confirmed",
    "deposit_paid",
    "in_progress",
    "completed",
    "cancelled",
    "declined",
)


class PaymentMilestoneIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    amount: float = Field(..., ge=0)
    dueDate: date
    paidDate: Optional[date] = None


class PaymentMilestone(BaseModel):
    id: str
    name: str
    amount: float
    dueDate: Optional[str]
    paidDate: Optional[str]
    status: str  # pending, paid


class BookingCreate(BaseModel):
    eventId: str
    vendorId: str
    functionId: Optional[str] = None
    serviceCategory: str = Field(..., min_length=1, max_length=100)
    serviceDetails: Optional[str] = Field(None, max_length=2000)
    notes: Optional[str] = Field(None, max_length=2000)

    @field_validator("eventId", "vendorId", "functionId")
    @classmethod
    def check_ids(cls, v):
        if v is not None and not validate_uuid(v):
            raise ValueError("Must be a UUID")
        return v


class BookingUpdate(BaseModel):
    serviceDetails: Optional[str] = Field(None, max_length=2000)
    notes: Optional[str] = Field(None, max_length=2000)
    internalNotes: Optional[str] = Field(None, max_length=2000)


class QuoteSubmit(BaseModel):
    """Vendor's price for the requested service"""

    amount: float = Field(..., ge=0)
    notes: Optional[str] = Field(None, max_length=2000)
    paymentSchedule: Optional[list[PaymentMilestoneIn]] = None


class QuoteAccept(BaseModel):
    """Planner accepts the quote, optionally at a negotiated amount"""

    agreedAmount: Optional[float] = Field(None, ge=0)
    paymentSchedule: Optional[list[PaymentMilestoneIn]] = None


class BookingStatusUpdate(BaseModel):
    status: str
    notes: Optional[str] = Field(None, max_length=2000)

    @field_validator("status")
    @classmethod
    def check_status(cls, v):
        return validate_choice(v, BOOKING_STATUSES, "status")


class BookingReason(BaseModel):
    reason: Optional[str] = Field(None, max_length=2000)


class BookingResponse(BaseModel):
    """Schema for booking request response"""

    id: str
    eventId: str
    vendorId: str
    vendorName: Optional[str] = None
    functionId: Optional[str]
    status: str
    statusLabel: str
    serviceCategory: Optional[str]
    serviceDetails: Optional[str]
    quotedAmount: Optional[float]
    agreedAmount: Optional[float]
    currency: str
    paymentSchedule: list[PaymentMilestone]
    totalPaid: float
    outstandingBalance: float
    isFullyPaid: bool
    requestedDate: Optional[datetime]
    responseDate: Optional[datetime]
    confirmationDate: Optional[datetime]
    notes: Optional[str]
    internalNotes: Optional[str] = None
    createdAt: Optional[datetime] = None

    class Config:
        from_attributes = True


class BookingMessageResponse(BaseModel):
    id: str
    message: str
    isSystem: bool
    senderId: Optional[str]
    createdAt: Optional[datetime]
