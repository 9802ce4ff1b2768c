"""Client domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...shared.validators import validate_choice, validate_email, validate_phone

CLIENT_STATUSES = {
    "prospect": "Prospect",
    "active": "Active Client",
    "past": "Past Client",
    "inactive": "Inactive",
}
COMMUNICATION_METHODS = ("email", "phone", "whatsapp")


class BudgetRange(BaseModel):
    min: float = Field(..., ge=0)
    max: float = Field(..., ge=0)

    @model_validator(mode="after")
    def check_order(self):
        if self.max < self.min:
            raise ValueError("Budget max must be greater than or equal to min")
        return self


class ClientPreferences(BaseModel):
    communicationMethod: str = "whatsapp"
    budgetRange: Optional[BudgetRange] = None
    preferredVenues: list[str] = []
    dietaryRestrictions: list[str] = []
    notes: str = Field("", max_length=2000)

    @field_validator("communicationMethod")
    @classmethod
    def check_method(cls, v):
        return validate_choice(v, COMMUNICATION_METHODS, "communicationMethod")


class ClientPreferencesUpdate(ClientPreferences):
    """Partial preferences; only the keys sent are merged into the stored ones"""

    communicationMethod: Optional[str] = None
    preferredVenues: Optional[list[str]] = None
    dietaryRestrictions: Optional[list[str]] = None
    notes: Optional[str] = Field(None, max_length=2000)


class ClientBase(BaseModel):
    @field_validator("email", check_fields=False)
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("phone", "alternatePhone", check_fields=False)
    @classmethod
    def check_phone(cls, v):
        return validate_phone(v)

    @field_validator("status", check_fields=False)
    @classmethod
    def check_status(cls, v):
        return validate_choice(v, CLIENT_STATUSES, "status")


class ClientCreate(ClientBase):
    """Schema for creating a new client"""

    name: str = Field(..., min_length=1, max_length=200)
    email: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=20)
    alternatePhone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = Field(None, max_length=500)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    preferences: Optional[ClientPreferences] = None
    referralSource: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, max_length=2000)


class ClientUpdate(ClientBase):
    """Schema for updating an existing client"""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=20)
    alternatePhone: Optional[str] = Field(None, max_length=20)
    status: Optional[str] = None
    address: Optional[str] = Field(None, max_length=500)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    preferences: Optional[ClientPreferencesUpdate] = None
    notes: Optional[str] = Field(None, max_length=2000)


class ClientRecordEvent(BaseModel):
    eventAmount: float = Field(..., ge=0)


class ClientResponse(BaseModel):
    """Schema for client response"""

    id: str
    name: str
    email: Optional[str]
    phone: Optional[str]
    alternatePhone: Optional[str]
    status: str
    statusLabel: str
    address: Optional[str]
    city: Optional[str]
    state: Optional[str]
    displayLocation: str
    preferences: dict
    totalEvents: int
    totalSpend: float
    averageSpend: float
    isHighValue: bool
    currency: str
    referralSource: Optional[str]
    notes: Optional[str]
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    class Config:
        from_attributes = True


class ClientStats(BaseModel):
    total: int
    active: int
    prospects: int
    totalRevenue: float
