"""Lead domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_choice, validate_email, validate_phone

LEAD_STATUSES = ("new", "contacted", "qualified", "proposal_sent", "converted", "lost")


class LeadCreate(BaseModel):
    """Schema for capturing a new lead"""

    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=20)
    eventType: Optional[str] = Field(None, max_length=50)
    eventDate: Optional[date] = None
    budget: Optional[float] = Field(None, ge=0)
    budgetRange: Optional[str] = Field(None, max_length=100)
    guestCount: Optional[int] = Field(None, ge=0)
    source: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = Field(None, max_length=2000)

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        return validate_phone(v)

    @field_validator("source")
    @classmethod
    def normalize_source(cls, v):
        return v.strip().lower() if v else v


class LeadUpdate(LeadCreate):
    """Schema for updating a lead - every field optional"""

    name: Optional[str] = Field(None, min_length=1, max_length=255)


class LeadImport(BaseModel):
    leads: list[LeadCreate] = Field(..., min_length=1, max_length=100)


class LeadStatusUpdate(BaseModel):
    status: str

    @field_validator("status")
    @classmethod
    def check_status(cls, v):
        return validate_choice(v, LEAD_STATUSES, "status")


class LeadScoreUpdate(BaseModel):
    # Range is checked in the service so the caller gets a 400 like other business rules
    score: int


class LeadResponse(BaseModel):
    """Schema for lead response"""

    id: str
    name: str
    email: Optional[str]
    phone: Optional[str]
    eventType: Optional[str]
    eventDate: Optional[date]
    budget: Optional[float]
    budgetRange: Optional[str]
    guestCount: Optional[int]
    source: Optional[str]
    score: int
    status: str
    notes: Optional[str]
    convertedEventId: Optional[str] = None
    isHotLead: bool
    priorityLevel: str
    scoreColor: str
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    class Config:
        from_attributes = True


class DuplicateMatchResponse(BaseModel):
    lead: LeadResponse
    matchType: str
    confidence: str
    reason: str


class LeadConversionResponse(BaseModel):
    lead: LeadResponse
    eventId: str


class LeadImportResponse(BaseModel):
    imported: int
    leads: list[LeadResponse]
