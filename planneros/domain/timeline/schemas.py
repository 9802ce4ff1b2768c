"""Timeline domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_choice, validate_time_of_day, validate_uuid

TIMELINE_STATUSES = ("pending", "in_progress", "completed", "delayed")


class TimelineItemBase(BaseModel):
    @field_validator("startTime", "endTime", check_fields=False)
    @classmethod
    def check_times(cls, v):
        return validate_time_of_day(v)

    @field_validator("eventId", "functionId", "vendorId", check_fields=False)
    @classmethod
    def check_ids(cls, v):
        if v is not None and not validate_uuid(v):
            raise ValueError("Must be a UUID")
        return v

    @field_validator("dependsOn", check_fields=False)
    @classmethod
    def check_depends_on(cls, v):
        if v is None:
            return v
        for item_id in v:
            if not validate_uuid(item_id):
                raise ValueError("dependsOn must contain timeline item ids")
        return v


class TimelineItemCreate(TimelineItemBase):
    eventId: str
    functionId: Optional[str] = None
    startTime: str
    endTime: Optional[str] = None
    duration: Optional[int] = Field(None, ge=1, le=1440)
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    location: Optional[str] = Field(None, max_length=255)
    owner: str = Field(..., min_length=1, max_length=100)
    vendorId: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=2000)
    dependsOn: Optional[list[str]] = None


class TimelineItemUpdate(TimelineItemBase):
    startTime: Optional[str] = None
    endTime: Optional[str] = None
    duration: Optional[int] = Field(None, ge=1, le=1440)
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    location: Optional[str] = Field(None, max_length=255)
    owner: Optional[str] = Field(None, min_length=1, max_length=100)
    vendorId: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=2000)
    dependsOn: Optional[list[str]] = None


class TimelineStatusUpdate(BaseModel):
    status: str
    notes: Optional[str] = Field(None, max_length=500)

    @field_validator("status")
    @classmethod
    def check_status(cls, v):
        return validate_choice(v, TIMELINE_STATUSES, "status")


class ReorderEntry(BaseModel):
    id: str
    sortOrder: int = Field(..., ge=0)


class TimelineReorder(BaseModel):
    items: list[ReorderEntry] = Field(..., min_length=1)


class ApplyTemplate(TimelineItemBase):
    eventId: str
    functionId: Optional[str] = None
    templateName: str
    clearExisting: bool = False


class TimelineItemResponse(BaseModel):
    """Schema for timeline item response"""

    id: str
    eventId: str
    functionId: Optional[str]
    startTime: str
    endTime: Optional[str]
    calculatedEndTime: Optional[str]
    duration: Optional[int]
    durationMinutes: Optional[int]
    title: str
    description: Optional[str]
    location: Optional[str]
    owner: str
    vendorId: Optional[str]
    status: str
    notes: Optional[str]
    dependsOn: list[str]
    sortOrder: int
    createdAt: Optional[datetime] = None

    class Config:
        from_attributes = True


class TimelineOverview(BaseModel):
    total: int
    pending: int
    inProgress: int
    completed: int
    delayed: int
    completionPercent: int
    nextItem: Optional[TimelineItemResponse] = None

