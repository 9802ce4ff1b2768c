"""Task router - FastAPI endpoints for vendor tasks"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_planner, get_current_user
from ...database import get_db
from ...models import Task, User
from ...rate_limiter import api_rate_limiter
from ...shared.pagination import PageParams, page_params, page_response
from .schemas import TaskComplete, TaskCreate, TaskResponse, TaskStatusUpdate, TaskUpdate
from .service import TaskService, is_completed, is_overdue

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["Tasks"], dependencies=[Depends(api_rate_limiter)])


def get_task_service(db: Session = Depends(get_db)) -> TaskService:
    """Dependency injection for TaskService"""
    return TaskService(db)


def to_task_response(task: Task) -> TaskResponse:
    return TaskResponse(
        id=task.id,
        eventId=task.event_id,
        vendorId=task.vendor_id,
        title=task.title,
        description=task.description,
        status=task.status,
        priority=task.priority,
        startTime=task.start_time,
        endTime=task.end_time,
        dueDate=task.due_date,
        completedAt=task.completed_at,
        proofUrls=task.proof_urls or [],
        notes=task.notes,
        isCompleted=is_completed(task),
        isOverdue=is_overdue(task),
        createdAt=task.created_at,
        updatedAt=task.updated_at,
    )


# ============================================================================
# QUERIES
# ============================================================================


@router.get("")
async def list_tasks(
    eventId: Optional[str] = Query(None),
    vendorId: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    priority: Optional[str] = Query(None),
    params: PageParams = Depends(page_params),
    current_user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Tasks on your events, or assigned to your vendor profile; soonest due first"""
    tasks, total = service.search_tasks(current_user, params, eventId, vendorId, status, priority)
    return page_response([to_task_response(t) for t in tasks], total, params)


@router.get("/overdue", response_model=list[TaskResponse])
async def get_overdue_tasks(
    current_user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    return [to_task_response(t) for t in service.get_overdue(current_user)]


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: str,
    current_user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    return to_task_response(service.get_task(task_id, current_user))


# ============================================================================
# MUTATIONS
# ============================================================================


@router.post("", response_model=TaskResponse, status_code=201)
async def create_task(
    data: TaskCreate,
    current_user: User = Depends(get_current_planner),
    service: TaskService = Depends(get_task_service),
):
    return to_task_response(service.create_task(data, current_user))


@router.patch("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    data: TaskUpdate,
    current_user: User = Depends(get_current_planner),
    service: TaskService = Depends(get_task_service),
):
    return to_task_response(service.update_task(task_id, data, current_user))


@router.patch("/{task_id}/status", response_model=TaskResponse)
async def update_task_status(
    task_id: str,
    data: TaskStatusUpdate,
    current_user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Accept, reject, start or reopen a task"""
    task = service.update_status(task_id, data.status, current_user, data.reason)
    return to_task_response(task)


@router.post("/{task_id}/complete", response_model=TaskResponse)
async def complete_task(
    task_id: str,
    data: TaskComplete,
    current_user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    return to_task_response(service.complete_task(task_id, data, current_user))


@router.post("/{task_id}/verify", response_model=TaskResponse)
async def verify_task(
    task_id: str,
    current_user: User = Depends(get_current_planner),
    service: TaskService = Depends(get_task_service),
):
    return to_task_response(service.verify_task(task_id, current_user))


@router.delete("/{task_id}")
async def delete_task(
    task_id: str,
    current_user: User = Depends(get_current_planner),
    service: TaskService = Depends(get_task_service),
):
    return service.delete_task(task_id, current_user)


__all__ = ["router"]
