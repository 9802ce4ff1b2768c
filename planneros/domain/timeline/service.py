"""Timeline service - Business logic for day-of run sheets"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import TimelineItem, User
from ...shared.transitions import ensure_transition
from ..events.repository import EventRepository
from ..references import require_event_function, require_vendor
from .repository import TimelineRepository
from .schemas import ApplyTemplate, ReorderEntry, TimelineItemCreate, TimelineItemUpdate
from .templates import TIMELINE_TEMPLATES, template_names

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60

TIMELINE_TRANSITIONS = {
    "pending": ["in_progress", "delayed"],
    "in_progress": ["completed", "delayed"],
    "delayed": ["in_progress", "pending"],
    "completed": [],
}

TIMELINE_FIELDS = {
    "startTime": "start_time",
    "endTime": "end_time",
    "duration": "duration",
    "title": "title",
    "description": "description",
    "location": "location",
    "owner": "owner",
    "vendorId": "vendor_id",
    "notes": "notes",
    "dependsOn": "depends_on",
}


def to_minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def format_minutes(total: int) -> str:
    total %= MINUTES_PER_DAY
    return f"{total // 60:02d}:{total % 60:02d}"


def calculated_end_time(item: TimelineItem) -> Optional[str]:
    """Explicit end time, else start plus duration wrapped past midnight"""
    if item.end_time:
        return item.end_time
    if not item.duration:
        return None
    return format_minutes(to_minutes(item.start_time) + item.duration)


def duration_minutes(item: TimelineItem) -> Optional[int]:
    if item.duration:
        return item.duration
    if not item.end_time:
        return None
    return (to_minutes(item.end_time) - to_minutes(item.start_time)) % MINUTES_PER_DAY


def is_active_at(item: TimelineItem, at: str) -> bool:
    end = calculated_end_time(item)
    if not end:
        return False
    start = item.start_time
    if end == start:
        # A full 24h item wraps back onto its own start time
        return bool(duration_minutes(item))
    if end < start:
        return at >= start or at < end
    return start <= at < end


def overview(items: list[TimelineItem]) -> dict:
    counts = {status: 0 for status in TIMELINE_TRANSITIONS}
    for item in items:
        counts[item.status] = counts.get(item.status, 0) + 1

    total = len(items)
    completed = counts["completed"]
    return {
        "total": total,
        "pending": counts["pending"],
        "inProgress": counts["in_progress"],
        "completed": completed,
        "delayed": counts["delayed"],
        "completionPercent": round(completed / total * 100) if total else 0,
        "nextItem": next((i for i in items if i.status == "pending"), None),
    }


class TimelineService:
    """Service layer for timeline business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = TimelineRepository()
        self.events = EventRepository()

    def _event(self, event_id: str, user: User):
        event = self.events.get_event_by_id(self.db, event_id, user.id)
        if not event:
            raise HTTPException(status_code=404, detail="Event not found")
        return event

    def get_items(
        self,
        user: User,
        event_id: Optional[str] = None,
        function_id: Optional[str] = None,
        status: Optional[str] = None,
        active_at: Optional[str] = None,
    ) -> list[TimelineItem]:
        items = self.repo.get_items(self.db, user.id, event_id, function_id, status)
        if active_at:
            items = [i for i in items if is_active_at(i, active_at)]
        return items

    def get_templates(self) -> list[str]:
        return template_names()

    def get_overview(self, event_id: str, user: User, function_id: Optional[str] = None) -> dict:
        event = self._event(event_id, user)
        return overview(self.repo.get_items(self.db, user.id, event.id, function_id))

    def get_item(self, item_id: str, user: User) -> TimelineItem:
        item = self.repo.get_item_by_id(self.db, item_id, user.id)
        if not item:
            raise HTTPException(status_code=404, detail="Timeline item not found")
        return item

    def _check_dependencies(
        self,
        depends_on: Optional[list[str]],
        event_id: str,
        user: User,
        item_id: Optional[str] = None,
    ) -> None:
        """Dependencies must be other items on the same event"""
        if not depends_on:
            return
        ids = set(depends_on)
        if item_id in ids:
            raise HTTPException(status_code=400, detail="A timeline item cannot depend on itself")
        found = self.repo.get_items_by_ids(self.db, list(ids), user.id)
        if len(found) != len(ids) or any(i.event_id != event_id for i in found):
            raise HTTPException(status_code=404, detail="Timeline item not found")

    def create_item(self, data: TimelineItemCreate, user: User) -> TimelineItem:
        event = self._event(data.eventId, user)
        require_event_function(self.db, data.functionId, event.id)
        require_vendor(self.db, data.vendorId, user)
        self._check_dependencies(data.dependsOn, event.id, user)
        sort_order = self.repo.get_max_sort_order(self.db, event.id, data.functionId) + 1

        item = self.repo.create_item(
            self.db,
            event_id=event.id,
            function_id=data.functionId,
            start_time=data.startTime,
            end_time=data.endTime,
            duration=data.duration,
            title=data.title,
            description=data.description,
            location=data.location,
            owner=data.owner,
            vendor_id=data.vendorId,
            status="pending",
            notes=data.notes,
            depends_on=data.dependsOn or [],
            sort_order=sort_order,
        )
        logger.info(f"🕒 Timeline item {item.id} '{item.title}' at {item.start_time} added")
        return item

    def update_item(self, item_id: str, data: TimelineItemUpdate, user: User) -> TimelineItem:
        item = self.get_item(item_id, user)
        provided = data.model_dump(exclude_unset=True)
        require_vendor(self.db, provided.get("vendorId"), user)
        self._check_dependencies(provided.get("dependsOn"), item.event_id, user, item.id)
        updates = {
            TIMELINE_FIELDS[key]: value for key, value in provided.items() if key in TIMELINE_FIELDS
        }
        if "depends_on" in updates and updates["depends_on"] is None:
            updates["depends_on"] = []
        return self.repo.update_item(self.db, item, **updates)

    def update_status(
        self, item_id: str, status: str, user: User, notes: Optional[str] = None
    ) -> TimelineItem:
        item = self.get_item(item_id, user)
        ensure_transition(TIMELINE_TRANSITIONS, item.status, status)

        previous = item.status
        updates = {"status": status}
        if notes:
            updates["notes"] = notes
        item = self.repo.update_item(self.db, item, **updates)
        logger.info(f"🔄 Timeline item {item.id} status {previous} -> {status}")
        return item

    def reorder(self, entries: list[ReorderEntry], user: User) -> dict:
        orders = {entry.id: entry.sortOrder for entry in entries}
        items = self.repo.get_items_by_ids(self.db, list(orders), user.id)
        if len(items) != len(orders):
            raise HTTPException(status_code=404, detail="Timeline item not found")

        self.repo.update_sort_orders(self.db, items, orders)
        logger.info(f"↕️ Reordered {len(items)} timeline items")
        return {"reordered": len(items)}

    def apply_template(self, data: ApplyTemplate, user: User) -> list[TimelineItem]:
        """Seed a function's run sheet from a named template"""
        template = TIMELINE_TEMPLATES.get(data.templateName)
        if template is None:
            raise HTTPException(
                status_code=400, detail=f"Template '{data.templateName}' not found"
            )
        event = self._event(data.eventId, user)
        require_event_function(self.db, data.functionId, event.id)

        start = 0
        if not data.clearExisting:
            start = self.repo.get_max_sort_order(self.db, event.id, data.functionId) + 1

        rows = [
            {
                "event_id": event.id,
                "function_id": data.functionId,
                "start_time": start_time,
                "duration": duration,
                "title": title,
                "owner": owner,
                "status": "pending",
                "depends_on": [],
                "sort_order": start + index,
            }
            for index, (start_time, title, owner, duration) in enumerate(template)
        ]
        items = self.repo.replace_items(
            self.db, event.id, data.functionId, rows, clear_existing=data.clearExisting
        )
        logger.info(
            f"📑 Applied template '{data.templateName}' to event {event.id} ({len(items)} items)"
        )
        return items

    def delete_item(self, item_id: str, user: User) -> dict:
        item = self.get_item(item_id, user)
        self.repo.delete_item(self.db, item)
        logger.info(f"🗑️ Timeline item {item_id} deleted")
        return {"deleted": True, "id": item_id}
