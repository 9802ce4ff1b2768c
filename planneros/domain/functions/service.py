"""Event function service - Business logic for the functions of an event"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Event, EventFunction, User
from ..events.repository import EventRepository
from .repository import FunctionRepository
from .schemas import FUNCTION_TYPES, FunctionCreate, FunctionReorderEntry, FunctionUpdate

logger = logging.getLogger(__name__)

FUNCTION_FIELDS = {
    "name": "name",
    "type": "type",
    "date": "date",
    "startTime": "start_time",
    "endTime": "end_time",
    "venueName": "venue_name",
    "venueAddress": "venue_address",
    "guestCount": "guest_count",
    "budget": "budget",
    "notes": "notes",
}


def type_label(function_type: str) -> str:
    return FUNCTION_TYPES.get(function_type, function_type)


class FunctionService:
    """Service layer for event function business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = FunctionRepository()
        self.events = EventRepository()

    def _event(self, event_id: str, user: User) -> Event:
        event = self.events.get_event_by_id(self.db, event_id, user.id)
        if not event:
            raise HTTPException(status_code=404, detail="Event not found")
        return event

    def get_functions(
        self, event_id: str, user: User, type: Optional[str] = None
    ) -> list[EventFunction]:
        event = self._event(event_id, user)
        return self.repo.get_functions(self.db, user.id, event.id, type)

    def get_types(self) -> list[dict[str, str]]:
        return [{"value": value, "label": label} for value, label in FUNCTION_TYPES.items()]

    def get_count(self, event_id: str, user: User) -> dict:
        event = self._event(event_id, user)
        return {"eventId": event.id, "count": self.repo.count_for_event(self.db, event.id)}

    def get_function(self, function_id: str, user: User) -> EventFunction:
        function = self.repo.get_function_by_id(self.db, function_id, user.id)
        if not function:
            raise HTTPException(status_code=404, detail="Function not found")
        return function

    def create_function(self, data: FunctionCreate, user: User) -> EventFunction:
        event = self._event(data.eventId, user)

        function_data = {column: getattr(data, field) for field, column in FUNCTION_FIELDS.items()}
        function = self.repo.create_function(
            self.db,
            event_id=event.id,
            sort_order=self.repo.get_max_sort_order(self.db, event.id) + 1,
            **function_data,
        )
        logger.info(f"🎉 Function {function.id} '{function.name}' added to event {event.id}")
        return function

    def update_function(self, function_id: str, data: FunctionUpdate, user: User) -> EventFunction:
        function = self.get_function(function_id, user)

        provided = data.model_dump(exclude_unset=True)
        for required in ("name", "type"):
            if required in provided and provided[required] is None:
                raise HTTPException(status_code=400, detail=f"{required} cannot be empty")
        updates = {FUNCTION_FIELDS[field]: value for field, value in provided.items()}

        function = self.repo.update_function(self.db, function, **updates)
        logger.info(f"✏️ Function {function.id} updated")
        return function

    def reorder(self, entries: list[FunctionReorderEntry], user: User) -> dict:
        orders = {entry.id: entry.sortOrder for entry in entries}
        functions = self.repo.get_functions_by_ids(self.db, list(orders), user.id)
        if len(functions) != len(orders):
            raise HTTPException(status_code=404, detail="Function not found")

        self.repo.update_sort_orders(self.db, functions, orders)
        logger.info(f"↕️ Reordered {len(functions)} functions")
        return {"reordered": len(functions)}

    def delete_function(self, function_id: str, user: User) -> dict:
        """Linked bookings, budget items and timeline items stay on the event"""
        function = self.get_function(function_id, user)
        self.repo.delete_function(self.db, function)
        logger.info(f"🗑️ Function {function_id} deleted")
        return {"deleted": True, "id": function_id}
