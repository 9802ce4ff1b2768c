"""Event repository - Database operations for events"""

from datetime import date
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Event
from ...shared.pagination import PageParams, paginate

EVENT_SORT_COLUMNS = {
    "date": Event.date,
    "createdAt": Event.created_at,
    "name": Event.name,
    "status": Event.status,
}
INACTIVE_STATUSES = ("cancelled", "archived")


class EventRepository:
    """Repository for event database operations"""

    @staticmethod
    def search_events(
        db: Session,
        planner_id: str,
        params: PageParams,
        status: Optional[str] = None,
        event_type: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        city: Optional[str] = None,
    ) -> tuple[list[Event], int]:
        query = db.query(Event).filter(Event.planner_id == planner_id)

        if status:
            query = query.filter(Event.status == status)
        if event_type:
            query = query.filter(Event.type == event_type)
        if date_from:
            query = query.filter(Event.date >= date_from)
        if date_to:
            query = query.filter(Event.date <= date_to)
        if city:
            query = query.filter(Event.city.ilike(f"%{city}%"))

        return paginate(query, params, EVENT_SORT_COLUMNS, default_sort="date", default_order="asc")

    @staticmethod
    def get_event_by_id(db: Session, event_id: str, planner_id: str) -> Optional[Event]:
        return (
            db.query(Event).filter(Event.id == event_id, Event.planner_id == planner_id).first()
        )

    @staticmethod
    def get_upcoming(db: Session, planner_id: str, today: date, limit: int = 10) -> list[Event]:
        return (
            db.query(Event)
            .filter(
                Event.planner_id == planner_id,
                Event.date >= today,
                Event.status.notin_(INACTIVE_STATUSES),
            )
            .order_by(Event.date.asc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def get_on_date(db: Session, planner_id: str, day: date) -> list[Event]:
        return (
            db.query(Event)
            .filter(
                Event.planner_id == planner_id,
                Event.date == day,
                Event.status.notin_(INACTIVE_STATUSES),
            )
            .all()
        )

    @staticmethod
    def count_upcoming(db: Session, planner_id: str, today: date) -> int:
        return (
            db.query(func.count(Event.id))
            .filter(
                Event.planner_id == planner_id,
                Event.date >= today,
                Event.status.notin_(INACTIVE_STATUSES),
            )
            .scalar()
        )

    @staticmethod
    def count_by_status(db: Session, planner_id: str) -> dict[str, int]:
        rows = (
            db.query(Event.status, func.count(Event.id))
            .filter(Event.planner_id == planner_id)
            .group_by(Event.status)
            .all()
        )
        return {status: count for status, count in rows}

    @staticmethod
    def create_event(db: Session, planner_id: str, **event_data) -> Event:
        event = Event(planner_id=planner_id, **event_data)
        db.add(event)
        db.commit()
        db.refresh(event)
        return event

    @staticmethod
    def update_event(db: Session, event: Event, **updates) -> Event:
        for key, value in updates.items():
            if hasattr(event, key):
                setattr(event, key, value)

        db.commit()
        db.refresh(event)
        return event

    @staticmethod
    def delete_event(db: Session, event: Event) -> None:
        db.delete(event)
        db.commit()
