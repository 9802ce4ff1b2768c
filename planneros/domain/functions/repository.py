"""Event function repository - Database operations for event functions"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import BookingRequest, BudgetItem, Event, EventFunction, TimelineItem

# Rows that may point at a function; they fall back to event-wide when it is deleted
FUNCTION_LINKED_MODELS = (BookingRequest, BudgetItem, TimelineItem)


class FunctionRepository:
    """Repository for event function database operations"""

    @staticmethod
    def _owned(db: Session, planner_id: str):
        return (
            db.query(EventFunction)
            .join(Event, EventFunction.event_id == Event.id)
            .filter(Event.planner_id == planner_id)
        )

    @staticmethod
    def get_functions(
        db: Session, planner_id: str, event_id: str, type: Optional[str] = None
    ) -> list[EventFunction]:
        query = FunctionRepository._owned(db, planner_id).filter(EventFunction.event_id == event_id)
        if type:
            query = query.filter(EventFunction.type == type)
        return query.order_by(EventFunction.sort_order.asc(), EventFunction.created_at.asc()).all()

    @staticmethod
    def get_function_by_id(
        db: Session, function_id: str, planner_id: str
    ) -> Optional[EventFunction]:
        return (
            FunctionRepository._owned(db, planner_id)
            .filter(EventFunction.id == function_id)
            .first()
        )

    @staticmethod
    def get_event_function(db: Session, function_id: str, event_id: str) -> Optional[EventFunction]:
        """A function only when it belongs to the given event"""
        return (
            db.query(EventFunction)
            .filter(EventFunction.id == function_id, EventFunction.event_id == event_id)
            .first()
        )

    @staticmethod
    def get_functions_by_ids(
        db: Session, function_ids: list[str], planner_id: str
    ) -> list[EventFunction]:
        return (
            FunctionRepository._owned(db, planner_id)
            .filter(EventFunction.id.in_(function_ids))
            .all()
        )

    @staticmethod
    def get_max_sort_order(db: Session, event_id: str) -> int:
        """Highest sort order in the event, -1 when it has no functions"""
        value = (
            db.query(func.max(EventFunction.sort_order))
            .filter(EventFunction.event_id == event_id)
            .scalar()
        )
        return -1 if value is None else value

    @staticmethod
    def count_for_event(db: Session, event_id: str) -> int:
        return db.query(EventFunction).filter(EventFunction.event_id == event_id).count()

    @staticmethod
    def create_function(db: Session, **function_data) -> EventFunction:
        function = EventFunction(**function_data)
        db.add(function)
        db.commit()
        db.refresh(function)
        return function

    @staticmethod
    def update_function(db: Session, function: EventFunction, **updates) -> EventFunction:
        for key, value in updates.items():
            if hasattr(function, key):
                setattr(function, key, value)

        db.commit()
        db.refresh(function)
        return function

    @staticmethod
    def update_sort_orders(
        db: Session, functions: list[EventFunction], orders: dict[str, int]
    ) -> None:
        for function in functions:
            function.sort_order = orders[function.id]
        db.commit()

    @staticmethod
    def delete_function(db: Session, function: EventFunction) -> None:
        """Detach bookings, budget items and timeline items, then delete, in one commit"""
        for model in FUNCTION_LINKED_MODELS:
            db.query(model).filter(model.function_id == function.id).update(
                {model.function_id: None}, synchronize_session=False
            )
        db.delete(function)
        db.commit()
