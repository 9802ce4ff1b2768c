"""Event function schemas - Pydantic models for validation"""

from datetime import date as DateType
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_choice, validate_time_of_day, validate_uuid

FUNCTION_TYPES = {
    "wedding": "Wedding Ceremony",
    "reception": "Reception",
    "sangeet": "Sangeet",
    "mehendi": "Mehendi",
    "haldi": "Haldi",
    "cocktail": "Cocktail Party",
    "after_party": "After Party",
    "ceremony": "Ceremony",
    "conference": "Conference",
    "dinner": "Dinner",
    "custom": "Custom",
}


class FunctionBase(BaseModel):
    @field_validator("eventId", check_fields=False)
    @classmethod
    def check_event_id(cls, v):
        if not validate_uuid(v):
            raise ValueError("eventId must be a UUID")
        return v

    @field_validator("type", check_fields=False)
    @classmethod
    def check_type(cls, v):
        return validate_choice(v, FUNCTION_TYPES, "type")

    @field_validator("startTime", "endTime", check_fields=False)
    @classmethod
    def check_times(cls, v):
        return validate_time_of_day(v)


class FunctionCreate(FunctionBase):
    """Schema for adding a function to an event"""

    eventId: str
    name: str = Field(..., min_length=1, max_length=100)
    type: str
    date: Optional[DateType] = None
    startTime: Optional[str] = None
    endTime: Optional[str] = None
    venueName: Optional[str] = Field(None, max_length=200)
    venueAddress: Optional[str] = Field(None, max_length=500)
    guestCount: Optional[int] = Field(None, ge=0)
    budget: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = Field(None, max_length=2000)


class FunctionUpdate(FunctionBase):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[str] = None
    date: Optional[DateType] = None
    startTime: Optional[str] = None
    endTime: Optional[str] = None
    venueName: Optional[str] = Field(None, max_length=200)
    venueAddress: Optional[str] = Field(None, max_length=500)
    guestCount: Optional[int] = Field(None, ge=0)
    budget: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = Field(None, max_length=2000)


class FunctionReorderEntry(BaseModel):
    id: str
    sortOrder: int = Field(..., ge=0)


class FunctionReorder(BaseModel):
    items: list[FunctionReorderEntry] = Field(..., min_length=1)


class FunctionResponse(BaseModel):
    """Schema for event function response"""

    id: str
    eventId: str
    name: str
    type: str
    typeLabel: str
    date: Optional[DateType]
    startTime: Optional[str]
    endTime: Optional[str]
    venueName: Optional[str]
    venueAddress: Optional[str]
    guestCount: Optional[int]
    budget: Optional[float]
    notes: Optional[str]
    sortOrder: int
    createdAt: Optional[datetime] = None

    class Config:
        from_attributes = True


class FunctionCount(BaseModel):
    eventId: str
    count: int
