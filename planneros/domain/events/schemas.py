"""Event domain schemas - Pydantic models for validation"""

from datetime import date as DateType
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...shared.validators import validate_choice, validate_uuid

EVENT_TYPES = ("wedding", "corporate", "birthday", "social", "other")
EVENT_STATUSES = (
    "draft",
    "planning",
    "proposed",
    "approved",
    "live",
    "completed",
    "archived",
    "cancelled",
)
VENUE_TYPES = ("personal", "showroom")


class EventBase(BaseModel):
    @field_validator("type", check_fields=False)
    @classmethod
    def check_type(cls, v):
        return validate_choice(v, EVENT_TYPES, "event type")

    @field_validator("venueType", check_fields=False)
    @classmethod
    def check_venue_type(cls, v):
        return validate_choice(v, VENUE_TYPES, "venue type")

    @field_validator("venueId", check_fields=False)
    @classmethod
    def check_venue_id(cls, v):
        if v and not validate_uuid(v):
            raise ValueError("venueId must be a UUID")
        return v

    @model_validator(mode="after")
    def check_budget_range(self):
        if self.budgetMin is not None and self.budgetMax is not None:
            if self.budgetMax < self.budgetMin:
                raise ValueError("Maximum budget must be greater than or equal to minimum budget")
        return self


class EventCreate(EventBase):
    """Schema for creating an event"""

    name: str = Field(..., min_length=1, max_length=255)
    type: str
    date: DateType
    endDate: Optional[DateType] = None
    guestCount: int = Field(..., ge=1, le=100000)
    budgetMin: float = Field(..., gt=0)
    budgetMax: float = Field(..., gt=0)
    city: str = Field(..., min_length=1, max_length=100)
    venueType: str = "personal"
    venueId: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=2000)


class EventUpdate(EventBase):
    """Schema for updating an event"""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[str] = None
    date: Optional[DateType] = None
    endDate: Optional[DateType] = None
    guestCount: Optional[int] = Field(None, ge=1, le=100000)
    budgetMin: Optional[float] = Field(None, gt=0)
    budgetMax: Optional[float] = Field(None, gt=0)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    venueType: Optional[str] = None
    venueId: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=2000)


class EventStatusUpdate(BaseModel):
    status: str

    @field_validator("status")
    @classmethod
    def check_status(cls, v):
        return validate_choice(v, EVENT_STATUSES, "status")


class EventResponse(BaseModel):
    """Schema for event response"""

    id: str
    leadId: Optional[str] = None
    name: str
    type: str
    status: str
    date: DateType
    endDate: Optional[DateType]
    guestCount: int
    budgetMin: float
    budgetMax: float
    budgetAverage: float
    city: Optional[str]
    venueType: Optional[str]
    venueId: Optional[str]
    notes: Optional[str]
    daysUntilEvent: int
    isLocked: bool
    isEditable: bool
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    class Config:
        from_attributes = True


class EventStats(BaseModel):
    total: int
    byStatus: dict[str, int]
    upcomingCount: int
    todayCount: int
