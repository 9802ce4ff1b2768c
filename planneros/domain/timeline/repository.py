"""Timeline repository - Database operations for day-of timeline items"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Event, TimelineItem


def in_function(function_id: Optional[str]):
    """Items of one function; None means event-wide items with no function"""
    if function_id is None:
        return TimelineItem.function_id.is_(None)
    return TimelineItem.function_id == function_id


class TimelineRepository:
    """Repository for timeline item database operations"""

    @staticmethod
    def _owned(db: Session, planner_id: str):
        return (
            db.query(TimelineItem)
            .join(Event, TimelineItem.event_id == Event.id)
            .filter(Event.planner_id == planner_id)
        )

    @staticmethod
    def get_items(
        db: Session,
        planner_id: str,
        event_id: Optional[str] = None,
        function_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[TimelineItem]:
        query = TimelineRepository._owned(db, planner_id)

        if event_id:
            query = query.filter(TimelineItem.event_id == event_id)
        if function_id:
            query = query.filter(TimelineItem.function_id == function_id)
        if status:
            query = query.filter(TimelineItem.status == status)

        return query.order_by(TimelineItem.sort_order.asc(), TimelineItem.start_time.asc()).all()

    @staticmethod
    def get_item_by_id(db: Session, item_id: str, planner_id: str) -> Optional[TimelineItem]:
        return TimelineRepository._owned(db, planner_id).filter(TimelineItem.id == item_id).first()

    @staticmethod
    def get_items_by_ids(db: Session, item_ids: list[str], planner_id: str) -> list[TimelineItem]:
        return TimelineRepository._owned(db, planner_id).filter(TimelineItem.id.in_(item_ids)).all()

    @staticmethod
    def get_max_sort_order(db: Session, event_id: str, function_id: Optional[str]) -> int:
        """Highest sort order in the event/function, -1 when empty"""
        value = (
            db.query(func.max(TimelineItem.sort_order))
            .filter(TimelineItem.event_id == event_id, in_function(function_id))
            .scalar()
        )
        return -1 if value is None else value

    @staticmethod
    def create_item(db: Session, **item_data) -> TimelineItem:
        item = TimelineItem(**item_data)
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def replace_items(
        db: Session,
        event_id: str,
        function_id: Optional[str],
        rows: list[dict],
        clear_existing: bool = False,
    ) -> list[TimelineItem]:
        """Insert template rows, optionally clearing the function first, in one commit"""
        if clear_existing:
            db.query(TimelineItem).filter(
                TimelineItem.event_id == event_id, in_function(function_id)
            ).delete(synchronize_session=False)

        items = [TimelineItem(**row) for row in rows]
        db.add_all(items)
        db.commit()
        for item in items:
            db.refresh(item)
        return items

    @staticmethod
    def update_item(db: Session, item: TimelineItem, **updates) -> TimelineItem:
        for key, value in updates.items():
            if hasattr(item, key):
                setattr(item, key, value)

        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def update_sort_orders(db: Session, items: list[TimelineItem], orders: dict[str, int]) -> None:
        for item in items:
            item.sort_order = orders[item.id]
        db.commit()

    @staticmethod
    def delete_item(db: Session, item: TimelineItem) -> None:
        db.delete(item)
        db.commit()
