"""Task repository - Database operations for vendor tasks"""

from datetime import datetime
from typing import Optional

from sqlalchemy import case, or_, select
from sqlalchemy.orm import Session

from ...models import Event, Task, Vendor
from ...shared.pagination import PageParams, paginate

DONE_STATUSES = ("completed", "verified")

PRIORITY_RANK = {"low": 0, "medium": 1, "high": 2, "urgent": 3}

TASK_SORT_COLUMNS = {
    "createdAt": Task.created_at,
    "dueDate": Task.due_date,
    "priority": case(PRIORITY_RANK, value=Task.priority, else_=1),
    "status": Task.status,
}


def visible_to(user_id: str):
    """Tasks on the planner's events or assigned to the user's vendor profile"""
    vendor_ids = select(Vendor.id).where(Vendor.user_id == user_id)
    return or_(Event.planner_id == user_id, Task.vendor_id.in_(vendor_ids))


class TaskRepository:
    """Repository for task database operations"""

    @staticmethod
    def _visible(db: Session, user_id: str):
        return db.query(Task).join(Event, Task.event_id == Event.id).filter(visible_to(user_id))

    @staticmethod
    def search_tasks(
        db: Session,
        user_id: str,
        params: PageParams,
        event_id: Optional[str] = None,
        vendor_id: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> tuple[list[Task], int]:
        query = TaskRepository._visible(db, user_id)

        if event_id:
            query = query.filter(Task.event_id == event_id)
        if vendor_id:
            query = query.filter(Task.vendor_id == vendor_id)
        if status:
            query = query.filter(Task.status == status)
        if priority:
            query = query.filter(Task.priority == priority)

        return paginate(
            query, params, TASK_SORT_COLUMNS, default_sort="dueDate", default_order="asc"
        )

    @staticmethod
    def get_overdue(db: Session, user_id: str, now: datetime) -> list[Task]:
        return (
            TaskRepository._visible(db, user_id)
            .filter(
                Task.due_date.isnot(None),
                Task.due_date < now,
                Task.status.notin_(DONE_STATUSES),
            )
            .order_by(Task.due_date.asc())
            .all()
        )

    @staticmethod
    def get_task_by_id(db: Session, task_id: str, user_id: str) -> Optional[Task]:
        return TaskRepository._visible(db, user_id).filter(Task.id == task_id).first()

    @staticmethod
    def create_task(db: Session, **task_data) -> Task:
        task = Task(**task_data)
        db.add(task)
        db.commit()
        db.refresh(task)
        return task

    @staticmethod
    def update_task(db: Session, task: Task, **updates) -> Task:
        for key, value in updates.items():
            if hasattr(task, key):
                setattr(task, key, value)

        db.commit()
        db.refresh(task)
        return task

    @staticmethod
    def delete_task(db: Session, task: Task) -> None:
        db.delete(task)
        db.commit()
