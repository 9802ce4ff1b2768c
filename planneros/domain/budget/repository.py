"""Budget repository - Database operations for budget items"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import BudgetItem, Event


class BudgetRepository:
    """Repository for budget item database operations"""

    @staticmethod
    def get_items(
        db: Session,
        planner_id: str,
        event_id: Optional[str] = None,
        function_id: Optional[str] = None,
        category: Optional[str] = None,
    ) -> list[BudgetItem]:
        query = (
            db.query(BudgetItem)
            .join(Event, BudgetItem.event_id == Event.id)
            .filter(Event.planner_id == planner_id)
        )

        if event_id:
            query = query.filter(BudgetItem.event_id == event_id)
        if function_id:
            query = query.filter(BudgetItem.function_id == function_id)
        if category:
            query = query.filter(BudgetItem.category == category)

        return query.order_by(BudgetItem.category.asc(), BudgetItem.created_at.asc()).all()

    @staticmethod
    def get_item_by_id(db: Session, item_id: str, planner_id: str) -> Optional[BudgetItem]:
        return (
            db.query(BudgetItem)
            .join(Event, BudgetItem.event_id == Event.id)
            .filter(BudgetItem.id == item_id, Event.planner_id == planner_id)
            .first()
        )

    @staticmethod
    def create_item(db: Session, **item_data) -> BudgetItem:
        item = BudgetItem(**item_data)
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def update_item(db: Session, item: BudgetItem, **updates) -> BudgetItem:
        for key, value in updates.items():
            if hasattr(item, key):
                setattr(item, key, value)

        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def delete_item(db: Session, item: BudgetItem) -> None:
        db.delete(item)
        db.commit()
