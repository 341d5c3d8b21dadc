"""
Tasks API - Task CRUD and lifecycle actions

Authorization lives in TaskService so that a missing task is reported as
404 before any role check (403) or status check (400).
"""

from fastapi import APIRouter, Depends, status
from uuid import UUID
import logging

from task_tracker.schemas import (
    ApiResponse,
    DeletedTaskResponse,
    TaskCreate,
    TaskListResponse,
    TaskResponse,
    TaskUpdate,
    success,
)
from task_tracker.core.authorization import Actor
from task_tracker.core.dependencies import get_current_actor, get_task_service
from task_tracker.services import TaskService

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("", response_model=ApiResponse[TaskListResponse])
def list_tasks(
    actor: Actor = Depends(get_current_actor),
    tasks: TaskService = Depends(get_task_service),
):
    """Admins get every task; users get the tasks assigned to them"""
    logger.info(f"➡️  List tasks request from: {actor.email}")
    items, total = tasks.list_tasks(actor)
    return success(
        TaskListResponse(tasks=[TaskResponse.model_validate(t) for t in items], total=total),
        meta={"total": total},
    )

@router.get("/{task_id}", response_model=ApiResponse[TaskResponse])
def get_task(
    task_id: UUID,
    actor: Actor = Depends(get_current_actor),
    tasks: TaskService = Depends(get_task_service),
):
    """
    Raises:
        404: Task not found
        403: Task exists but is not assigned to a non-admin caller
    """
    return success(TaskResponse.model_validate(tasks.get_task(task_id, actor)))

@router.post("", response_model=ApiResponse[TaskResponse], status_code=status.HTTP_201_CREATED)
def create_task(
    task_data: TaskCreate,
    actor: Actor = Depends(get_current_actor),
    tasks: TaskService = Depends(get_task_service),
):
    """Create a task (admin only); status defaults to pending"""
    logger.info(f"➡️  Create task request from: {actor.email}")
    task = tasks.create_task(task_data.model_dump(), actor)
    return success(TaskResponse.model_validate(task))

@router.patch("/{task_id}", response_model=ApiResponse[TaskResponse])
def update_task(
    task_id: UUID,
    task_data: TaskUpdate,
    actor: Actor = Depends(get_current_actor),
    tasks: TaskService = Depends(get_task_service),
):
    """
    Partial update (admin only). Fields sent as null are cleared,
    omitted fields are left unchanged.
    """
    logger.info(f"➡️  Update task {task_id} request from: {actor.email}")
    task = tasks.update_task(task_id, task_data.to_patch(), actor)
    return success(TaskResponse.model_validate(task))

@router.delete("/{task_id}", response_model=ApiResponse[DeletedTaskResponse])
def delete_task(
    task_id: UUID,
    actor: Actor = Depends(get_current_actor),
    tasks: TaskService = Depends(get_task_service),
):
    """Delete a task (admin only)"""
    logger.info(f"➡️  Delete task {task_id} request from: {actor.email}")
    return success(tasks.delete_task(task_id, actor))

@router.post("/{task_id}/start", response_model=ApiResponse[TaskResponse])
def start_task(
    task_id: UUID,
    actor: Actor = Depends(get_current_actor),
    tasks: TaskService = Depends(get_task_service),
):
    """pending -> in_progress (owner or admin)"""
    return success(TaskResponse.model_validate(tasks.start_task(task_id, actor)))

@router.post("/{task_id}/complete", response_model=ApiResponse[TaskResponse])
def complete_task(
    task_id: UUID,
    actor: Actor = Depends(get_current_actor),
    tasks: TaskService = Depends(get_task_service),
):
    """in_progress -> pending_review (owner or admin), records time spent"""
    return success(TaskResponse.model_validate(tasks.complete_task(task_id, actor)))

@router.post("/{task_id}/approve", response_model=ApiResponse[TaskResponse])
def approve_task(
    task_id: UUID,
    actor: Actor = Depends(get_current_actor),
    tasks: TaskService = Depends(get_task_service),
):
    """pending_review -> completed (admin only)"""
    return success(TaskResponse.model_validate(tasks.approve_task(task_id, actor)))

@router.post("/{task_id}/reject", response_model=ApiResponse[TaskResponse])
def reject_task(
    task_id: UUID,
    actor: Actor = Depends(get_current_actor),
    tasks: TaskService = Depends(get_task_service),
):
    """pending_review -> in_progress (admin only), clears completion data"""
    return success(TaskResponse.model_validate(tasks.reject_task(task_id, actor)))
