"""Event service - Business logic for the event lifecycle"""

import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Event, User
from ...shared.pagination import PageParams
from ...shared.transitions import ensure_transition
from ...shared.validators import today
from .repository import EventRepository
from .schemas import EVENT_STATUSES, EventCreate, EventUpdate

logger = logging.getLogger(__name__)

EVENT_TRANSITIONS = {
    "draft": ["planning", "archived", "cancelled"],
    "planning": ["proposed", "draft", "cancelled"],
    "proposed": ["approved", "planning", "cancelled"],
    "approved": ["live", "cancelled"],
    "live": ["completed"],
    "completed": ["archived"],
    "archived": [],
    "cancelled": ["archived"],
}
LOCKED_STATUSES = ("approved", "live", "completed", "archived")

EVENT_FIELDS = {
    "name": "name",
    "type": "type",
    "date": "date",
    "endDate": "end_date",
    "guestCount": "guest_count",
    "budgetMin": "budget_min",
    "budgetMax": "budget_max",
    "city": "city",
    "venueType": "venue_type",
    "venueId": "venue_id",
    "notes": "notes",
}


def is_locked(event: Event) -> bool:
    return event.status in LOCKED_STATUSES


def days_until_event(event: Event, reference: Optional[date] = None) -> int:
    return (event.date - (reference or today())).days


def budget_average(event: Event) -> float:
    return ((event.budget_min or 0) + (event.budget_max or 0)) / 2


class EventService:
    """Service layer for event business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = EventRepository()

    def search_events(
        self,
        user: User,
        params: PageParams,
        status: Optional[str] = None,
        event_type: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        city: Optional[str] = None,
    ) -> tuple[list[Event], int]:
        return self.repo.search_events(
            self.db, user.id, params, status, event_type, date_from, date_to, city
        )

    def get_event(self, event_id: str, user: User) -> Event:
        event = self.repo.get_event_by_id(self.db, event_id, user.id)
        if not event:
            raise HTTPException(status_code=404, detail="Event not found")
        return event

    def get_upcoming(self, user: User, limit: int = 10) -> list[Event]:
        return self.repo.get_upcoming(self.db, user.id, today(), limit)

    def get_today(self, user: User) -> list[Event]:
        return self.repo.get_on_date(self.db, user.id, today())

    def get_stats(self, user: User) -> dict:
        counts = self.repo.count_by_status(self.db, user.id)
        by_status = {status: counts.get(status, 0) for status in EVENT_STATUSES}
        return {
            "total": sum(by_status.values()),
            "byStatus": by_status,
            "upcomingCount": self.repo.count_upcoming(self.db, user.id, today()),
            "todayCount": len(self.get_today(user)),
        }

    def create_event(self, data: EventCreate, user: User) -> Event:
        if data.date < today():
            raise HTTPException(status_code=400, detail="Event date cannot be in the past")
        if data.endDate and data.endDate < data.date:
            raise HTTPException(status_code=400, detail="End date cannot be before the event date")

        event_data = {column: getattr(data, field) for field, column in EVENT_FIELDS.items()}
        event = self.repo.create_event(self.db, user.id, status="draft", **event_data)
        logger.info(f"📅 Event {event.id} created for planner {user.id}")
        return event

    def update_event(self, event_id: str, data: EventUpdate, user: User) -> Event:
        event = self.get_event(event_id, user)
        if is_locked(event):
            raise HTTPException(
                status_code=400, detail=f"Event is locked in status '{event.status}' and cannot be edited"
            )

        provided = data.model_dump(exclude_unset=True)
        for required in ("name", "type", "date", "guestCount", "budgetMin", "budgetMax", "city"):
            if required in provided and provided[required] is None:
                raise HTTPException(status_code=400, detail=f"{required} cannot be empty")
        updates = {EVENT_FIELDS[field]: value for field, value in provided.items()}

        budget_min = updates.get("budget_min", event.budget_min)
        budget_max = updates.get("budget_max", event.budget_max)
        if budget_max < budget_min:
            raise HTTPException(
                status_code=400,
                detail="Maximum budget must be greater than or equal to minimum budget",
            )
        if "date" in updates and updates["date"] < today():
            raise HTTPException(status_code=400, detail="Event date cannot be in the past")
        start = updates.get("date", event.date)
        end = updates.get("end_date", event.end_date)
        if end and end < start:
            raise HTTPException(status_code=400, detail="End date cannot be before the event date")

        event = self.repo.update_event(self.db, event, **updates)
        logger.info(f"✏️ Event {event.id} updated")
        return event

    def update_status(self, event_id: str, status: str, user: User) -> Event:
        event = self.get_event(event_id, user)
        ensure_transition(EVENT_TRANSITIONS, event.status, status)

        previous = event.status
        event = self.repo.update_event(self.db, event, status=status)
        logger.info(f"🔄 Event {event.id} status {previous} -> {status}")
        return event

    def send_proposal(self, event_id: str, user: User) -> Event:
        event = self.get_event(event_id, user)
        if event.status != "planning":
            raise HTTPException(
                status_code=400, detail="Proposals can only be sent for events in planning"
            )
        return self.update_status(event_id, "proposed", user)

    def approve(self, event_id: str, user: User) -> Event:
        event = self.get_event(event_id, user)
        if event.status != "proposed":
            raise HTTPException(status_code=400, detail="Only proposed events can be approved")
        return self.update_status(event_id, "approved", user)

    def delete_event(self, event_id: str, user: User) -> dict:
        event = self.get_event(event_id, user)
        if event.status != "draft":
            raise HTTPException(status_code=400, detail="Only draft events can be deleted")

        self.repo.delete_event(self.db, event)
        logger.info(f"🗑️ Event {event_id} deleted")
        return {"deleted": True, "id": event_id}
