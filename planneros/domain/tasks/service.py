"""Task service - Business logic for vendor task assignment and proof of completion"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Task, User, utcnow
from ...shared.pagination import PageParams
from ...shared.transitions import ensure_transition
from ...shared.validators import to_naive_utc
from ..events.repository import EventRepository
from ..vendors.repository import VendorRepository
from .repository import DONE_STATUSES, TaskRepository
from .schemas import TaskComplete, TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)

TASK_TRANSITIONS = {
    "pending": ["accepted", "rejected"],
    "accepted": ["in_progress", "rejected"],
    "rejected": ["pending"],
    "in_progress": ["completed"],
    "completed": ["verified", "in_progress"],
    "verified": [],
}

TASK_FIELDS = {
    "title": "title",
    "description": "description",
    "priority": "priority",
    "startTime": "start_time",
    "endTime": "end_time",
    "dueDate": "due_date",
    "notes": "notes",
}

TIME_FIELDS = ("start_time", "end_time", "due_date")

# Statuses only reachable through their own endpoint
DEDICATED_ACTIONS = {
    "completed": "Use /complete with proof of completion to complete a task",
    "verified": "Use /verify to verify a task",
}


def is_completed(task: Task) -> bool:
    return task.status in DONE_STATUSES


def is_overdue(task: Task) -> bool:
    if not task.due_date or is_completed(task):
        return False
    return task.due_date < utcnow()


class TaskService:
    """Service layer for task business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = TaskRepository()
        self.events = EventRepository()
        self.vendors = VendorRepository()

    def search_tasks(
        self,
        user: User,
        params: PageParams,
        event_id: Optional[str] = None,
        vendor_id: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> tuple[list[Task], int]:
        return self.repo.search_tasks(
            self.db, user.id, params, event_id, vendor_id, status, priority
        )

    def get_overdue(self, user: User) -> list[Task]:
        return self.repo.get_overdue(self.db, user.id, utcnow())

    def get_task(self, task_id: str, user: User) -> Task:
        task = self.repo.get_task_by_id(self.db, task_id, user.id)
        if not task:
            raise HTTPException(status_code=404, detail="Task not found")
        return task

    def _planner_task(self, task_id: str, user: User) -> Task:
        task = self.get_task(task_id, user)
        if task.event.planner_id != user.id:
            raise HTTPException(status_code=403, detail="Only the event planner can do this")
        return task

    def create_task(self, data: TaskCreate, user: User) -> Task:
        event = self.events.get_event_by_id(self.db, data.eventId, user.id)
        if not event:
            raise HTTPException(status_code=404, detail="Event not found")
        vendor = self.vendors.get_vendor_by_id(self.db, data.vendorId, user.id)
        if not vendor:
            raise HTTPException(status_code=404, detail="Vendor not found")

        task = self.repo.create_task(
            self.db,
            event_id=event.id,
            vendor_id=vendor.id,
            title=data.title,
            description=data.description,
            status="pending",
            priority=data.priority,
            start_time=to_naive_utc(data.startTime),
            end_time=to_naive_utc(data.endTime),
            due_date=to_naive_utc(data.dueDate),
            proof_urls=[],
        )
        logger.info(f"📋 Task {task.id} assigned to vendor {vendor.id} for event {event.id}")
        return task

    def update_task(self, task_id: str, data: TaskUpdate, user: User) -> Task:
        task = self._planner_task(task_id, user)
        if is_completed(task):
            raise HTTPException(status_code=400, detail="Cannot update a completed task")

        provided = data.model_dump(exclude_unset=True)
        updates = {TASK_FIELDS[key]: value for key, value in provided.items() if key in TASK_FIELDS}
        for field in TIME_FIELDS:
            if field in updates:
                updates[field] = to_naive_utc(updates[field])

        return self.repo.update_task(self.db, task, **updates)

    def update_status(
        self, task_id: str, status: str, user: User, reason: Optional[str] = None
    ) -> Task:
        task = self.get_task(task_id, user)
        if status in DEDICATED_ACTIONS:
            raise HTTPException(status_code=400, detail=DEDICATED_ACTIONS[status])
        ensure_transition(TASK_TRANSITIONS, task.status, status)

        previous = task.status
        updates = {"status": status}
        if status == "rejected" and reason:
            updates["notes"] = reason

        task = self.repo.update_task(self.db, task, **updates)
        logger.info(f"🔄 Task {task.id} status {previous} -> {status}")
        return task

    def complete_task(self, task_id: str, data: TaskComplete, user: User) -> Task:
        """Close out an in-progress task with photo or document proof"""
        task = self.get_task(task_id, user)
        if task.status != "in_progress":
            raise HTTPException(status_code=400, detail="Task must be in progress to complete")

        task = self.repo.update_task(
            self.db,
            task,
            status="completed",
            completed_at=utcnow(),
            proof_urls=list(task.proof_urls or []) + data.proofUrls,
            notes=data.notes or task.notes,
        )
        logger.info(f"✅ Task {task.id} completed with {len(data.proofUrls)} proof(s)")
        return task

    def verify_task(self, task_id: str, user: User) -> Task:
        task = self._planner_task(task_id, user)
        if task.status != "completed":
            raise HTTPException(status_code=400, detail="Task must be completed to verify")

        task = self.repo.update_task(self.db, task, status="verified")
        logger.info(f"🏁 Task {task.id} verified")
        return task

    def delete_task(self, task_id: str, user: User) -> dict:
        task = self._planner_task(task_id, user)
        if task.status not in ("pending", "rejected"):
            raise HTTPException(
                status_code=400, detail="Only pending or rejected tasks can be deleted"
            )

        self.repo.delete_task(self.db, task)
        logger.info(f"🗑️ Task {task_id} deleted")
        return {"deleted": True, "id": task_id}
