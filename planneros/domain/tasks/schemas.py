"""Task domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...shared.validators import to_naive_utc, validate_choice, validate_url, validate_uuid

TASK_STATUSES = ("pending", "accepted", "rejected", "in_progress", "completed", "verified")
TASK_PRIORITIES = ("low", "medium", "high", "urgent")


class TaskBase(BaseModel):
    @field_validator("priority", check_fields=False)
    @classmethod
    def check_priority(cls, v):
        return validate_choice(v, TASK_PRIORITIES, "priority")

    @model_validator(mode="after")
    def check_window(self):
        start = to_naive_utc(getattr(self, "startTime", None))
        end = to_naive_utc(getattr(self, "endTime", None))
        if start and end and end < start:
            raise ValueError("endTime must be after startTime")
        return self


class TaskCreate(TaskBase):
    eventId: str
    vendorId: str
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    priority: str = "medium"
    startTime: Optional[datetime] = None
    endTime: Optional[datetime] = None
    dueDate: Optional[datetime] = None

    @field_validator("eventId", "vendorId")
    @classmethod
    def check_ids(cls, v):
        if not validate_uuid(v):
            raise ValueError("Must be a UUID")
        return v


class TaskUpdate(TaskBase):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    priority: Optional[str] = None
    startTime: Optional[datetime] = None
    endTime: Optional[datetime] = None
    dueDate: Optional[datetime] = None
    notes: Optional[str] = Field(None, max_length=2000)


class TaskStatusUpdate(BaseModel):
    status: str
    reason: Optional[str] = Field(None, max_length=500)

    @field_validator("status")
    @classmethod
    def check_status(cls, v):
        return validate_choice(v, TASK_STATUSES, "status")


class TaskComplete(BaseModel):
    proofUrls: list[str] = Field(..., min_length=1, max_length=10)
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator("proofUrls")
    @classmethod
    def check_urls(cls, v):
        return [validate_url(url) for url in v]


class TaskResponse(BaseModel):
    """Schema for task response"""

    id: str
    eventId: str
    vendorId: Optional[str]
    title: str
    description: Optional[str]
    status: str
    priority: str
    startTime: Optional[datetime]
    endTime: Optional[datetime]
    dueDate: Optional[datetime]
    completedAt: Optional[datetime]
    proofUrls: list[str]
    notes: Optional[str]
    isCompleted: bool
    isOverdue: bool
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    class Config:
        from_attributes = True
