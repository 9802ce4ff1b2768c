"""Payment domain schemas - Pydantic models for validation"""

from datetime import date as DateType
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_choice, validate_currency, validate_url, validate_uuid

PAYMENT_TYPES = {
    "client_payment": "Client Payment",
    "vendor_payment": "Vendor Payment",
    "refund": "Refund",
    "expense": "Expense",
}

PAYMENT_STATUSES = {
    "pending": "Pending",
    "processing": "Processing",
    "completed": "Completed",
    "failed": "Failed",
    "cancelled": "Cancelled",
}

PAYMENT_METHODS = ("bank_transfer", "cash", "cheque", "upi", "card", "other")


class PaymentBase(BaseModel):
    @field_validator("eventId", "bookingRequestId", "budgetItemId", check_fields=False)
    @classmethod
    def check_ids(cls, v):
        if v is not None and not validate_uuid(v):
            raise ValueError("Must be a UUID")
        return v

    @field_validator("method", check_fields=False)
    @classmethod
    def check_method(cls, v):
        return validate_choice(v, PAYMENT_METHODS, "method")

    @field_validator("receiptUrl", check_fields=False)
    @classmethod
    def check_receipt_url(cls, v):
        return validate_url(v)


class PaymentCreate(PaymentBase):
    eventId: str
    bookingRequestId: Optional[str] = None
    budgetItemId: Optional[str] = None
    type: str
    method: str
    amount: float = Field(..., ge=0)
    currency: str = "INR"
    paidBy: Optional[str] = Field(None, max_length=100)
    paidTo: Optional[str] = Field(None, max_length=100)
    dueDate: Optional[DateType] = None
    description: Optional[str] = Field(None, max_length=500)
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator("type")
    @classmethod
    def check_type(cls, v):
        return validate_choice(v, tuple(PAYMENT_TYPES), "type")

    @field_validator("currency")
    @classmethod
    def check_currency(cls, v):
        return validate_currency(v)


class PaymentUpdate(PaymentBase):
    method: Optional[str] = None
    dueDate: Optional[DateType] = None
    reference: Optional[str] = Field(None, max_length=100)
    receiptUrl: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=1000)


class PaymentComplete(PaymentBase):
    reference: Optional[str] = Field(None, max_length=100)
    receiptUrl: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=500)


class PaymentReason(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


class PaymentResponse(BaseModel):
    """Schema for payment response"""

    id: str
    eventId: str
    bookingRequestId: Optional[str]
    budgetItemId: Optional[str]
    type: str
    typeLabel: str
    status: str
    statusLabel: str
    method: Optional[str]
    amount: float
    currency: str
    paidBy: Optional[str]
    paidTo: Optional[str]
    dueDate: Optional[DateType]
    paidDate: Optional[DateType]
    reference: Optional[str]
    receiptUrl: Optional[str]
    description: Optional[str]
    notes: Optional[str]
    isOverdue: bool
    daysUntilDue: Optional[int]
    createdAt: Optional[datetime] = None

    class Config:
        from_attributes = True


class PaymentTotals(BaseModel):
    totalDue: float
    totalPaid: float
    totalPending: float
    clientPayments: float
    vendorPayments: float
