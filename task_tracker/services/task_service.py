"""
Task Lifecycle Engine - Status workflow, role/ownership rules, time tracking

    pending --start--> in_progress --complete--> pending_review --approve--> completed
                            ^                          |
                            +---------reject-----------+

Every action checks, in order: the task exists (NotFoundError), the actor may
perform it (ForbiddenError), the task is in the required status
(InvalidOperationError). A failed check changes nothing.
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple
from uuid import UUID
import logging
import math

from task_tracker.core.authorization import Actor, ensure_admin, ensure_owner_or_admin
from task_tracker.core.exceptions import InternalError, InvalidOperationError, NotFoundError
from task_tracker.database import utcnow
from task_tracker.models import LIFECYCLE_TRANSITIONS, Task, TaskAction, TaskStatus
from task_tracker.repositories.protocols import TaskStore

logger = logging.getLogger(__name__)

# Message used when the current status does not allow the action
STATUS_GUARD_MESSAGES = {
    TaskAction.START: "Only pending tasks can be started",
    TaskAction.COMPLETE: "Only in-progress tasks can be completed",
    TaskAction.APPROVE: "Only tasks pending review can be approved",
    TaskAction.REJECT: "Only tasks pending review can be rejected",
}

OWNER_ACTIONS = {TaskAction.START, TaskAction.COMPLETE}  # Owner or admin; the rest are admin only


def elapsed_minutes(started_at: datetime, completed_at: datetime) -> int:
    """
    Whole minutes between two timestamps, rounded half up.

    90 seconds -> 2, 89 seconds -> 1. Clock skew never yields a negative value.
    """
    seconds = (completed_at - started_at).total_seconds()
    return max(0, math.floor(seconds / 60 + 0.5))


def task_not_found(task_id: UUID) -> NotFoundError:
    return NotFoundError(f"Task with id '{task_id}' not found", code="TASK_NOT_FOUND")


class TaskService:
    def __init__(self, tasks: TaskStore, clock: Callable[[], datetime] = utcnow):
        self.tasks = tasks
        self.clock = clock  # Injected so tests can control elapsed time

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_tasks(self, actor: Actor) -> Tuple[List[Task], int]:
        """Admins see every task, everyone else only the tasks they own."""
        if actor.is_admin:
            tasks = self.tasks.find_all()
        else:
            tasks = self.tasks.find_by_owner(actor.id)
        return tasks, len(tasks)

    def get_task(self, task_id: UUID, actor: Actor) -> Task:
        task = self._require_task(task_id)
        ensure_owner_or_admin(actor, task, "You do not have access to this task")
        return task

    # ------------------------------------------------------------------
    # Admin writes (raw field writes, no lifecycle side effects)
    # ------------------------------------------------------------------

    def create_task(self, data: Dict[str, Any], actor: Actor) -> Task:
        ensure_admin(actor, "Only admins can create tasks")
        values = {
            "title": data["title"],
            "description": data.get("description"),
            "status": data.get("status") or TaskStatus.PENDING,
            "deadline": data.get("deadline"),
            "owner_user_id": data.get("user_id"),
        }
        with self.tasks.transaction():
            task = self.tasks.create(values)
        logger.info(f"✅ Task {task.id} created by {actor.email}")
        return task

    def update_task(self, task_id: UUID, patch: Dict[str, Any], actor: Actor) -> Task:
        """
        Apply a partial patch. Keys absent from the patch keep their value;
        keys present with None clear nullable fields (description, deadline, owner).
        A status given here is written as-is, bypassing the workflow guards.
        """
        values = dict(patch)
        if "user_id" in values:
            values["owner_user_id"] = values.pop("user_id")

        with self.tasks.transaction():
            self._require_task(task_id)
            ensure_admin(actor, "Only admins can update tasks")
            task = self.tasks.update(task_id, values)
            if task is None:
                raise task_not_found(task_id)
        logger.info(f"✅ Task {task_id} updated by {actor.email}: {sorted(values)}")
        return task

    def delete_task(self, task_id: UUID, actor: Actor) -> Dict[str, Any]:
        with self.tasks.transaction():
            self._require_task(task_id)
            ensure_admin(actor, "Only admins can delete tasks")
            if not self.tasks.delete(task_id):
                raise task_not_found(task_id)
        logger.info(f"✅ Task {task_id} deleted by {actor.email}")
        return {"id": task_id, "message": "Task deleted successfully"}

    # ------------------------------------------------------------------
    # Lifecycle transitions
    # ------------------------------------------------------------------

    def start_task(self, task_id: UUID, actor: Actor) -> Task:
        return self._transition(TaskAction.START, task_id, actor)

    def complete_task(self, task_id: UUID, actor: Actor) -> Task:
        return self._transition(TaskAction.COMPLETE, task_id, actor)

    def approve_task(self, task_id: UUID, actor: Actor) -> Task:
        return self._transition(TaskAction.APPROVE, task_id, actor)

    def reject_task(self, task_id: UUID, actor: Actor) -> Task:
        return self._transition(TaskAction.REJECT, task_id, actor)

    def _transition(self, action: TaskAction, task_id: UUID, actor: Actor) -> Task:
        from_status, _ = LIFECYCLE_TRANSITIONS[action]

        with self.tasks.transaction():
            task = self._require_task(task_id)

            if action in OWNER_ACTIONS:
                ensure_owner_or_admin(actor, task, f"You can only {action.value} tasks assigned to you")
            else:
                ensure_admin(actor, f"Only admins can {action.value} tasks")

            if task.status != from_status:
                raise InvalidOperationError(STATUS_GUARD_MESSAGES[action])

            updated = self._apply(action, task)
            if updated is None:
                # Another request moved or removed the task between our read and write
                if self.tasks.find_by_id(task_id) is None:
                    raise task_not_found(task_id)
                raise InvalidOperationError(STATUS_GUARD_MESSAGES[action])

        logger.info(f"✅ Task {task_id} {action.value}: {from_status.value} -> {updated.status.value} by {actor.email}")
        return updated

    def _apply(self, action: TaskAction, task: Task) -> Optional[Task]:
        if action == TaskAction.START:
            return self.tasks.start(task.id, started_at=self.clock())

        if action == TaskAction.COMPLETE:
            if task.started_at is None:
                logger.error(f"❌ Task {task.id} is in progress without started_at")
                raise InternalError("Task is in progress but has no start time")
            completed_at = self.clock()
            return self.tasks.complete(
                task.id,
                completed_at=completed_at,
                time_spent_minutes=elapsed_minutes(task.started_at, completed_at),
            )

        if action == TaskAction.APPROVE:
            return self.tasks.approve(task.id)

        return self.tasks.reject(task.id)

    def _require_task(self, task_id: UUID) -> Task:
        task = self.tasks.find_by_id(task_id)
        if task is None:
            raise task_not_found(task_id)
        return task
