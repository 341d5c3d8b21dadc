"""
Task Repository - SQLAlchemy-backed task store with conditional lifecycle writes
"""

from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional
from uuid import UUID
import logging

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError

from task_tracker.core.exceptions import InputValidationError
from task_tracker.database import utcnow
from task_tracker.models import LIFECYCLE_TRANSITIONS, Task, TaskAction
from task_tracker.repositories.base import SQLAlchemyRepository

logger = logging.getLogger(__name__)

class TaskRepository(SQLAlchemyRepository):
    """Task store over the tasks table"""

    def find_all(self) -> List[Task]:
        return list(self.db.execute(
            select(Task).order_by(Task.created_at.desc())
            .execution_options(populate_existing=True)
        ).scalars())

    def find_by_id(self, task_id: UUID) -> Optional[Task]:
        return self.db.execute(
            select(Task).where(Task.id == task_id).execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def find_by_owner(self, owner_id: UUID) -> List[Task]:
        return list(self.db.execute(
            select(Task).where(Task.owner_user_id == owner_id).order_by(Task.created_at.desc())
            .execution_options(populate_existing=True)
        ).scalars())

    def create(self, values: Dict[str, Any]) -> Task:
        task = Task(**values)
        self.db.add(task)
        with self._owner_constraint():
            self.db.flush()
        return task

    def update(self, task_id: UUID, values: Dict[str, Any]) -> Optional[Task]:
        """Raw field write - only supplied keys change, no lifecycle side effects."""
        with self._owner_constraint():
            self.db.execute(
                update(Task).where(Task.id == task_id).values(**values, updated_at=utcnow())
                .execution_options(synchronize_session=False)
            )
        return self.find_by_id(task_id)

    def delete(self, task_id: UUID) -> bool:
        result = self.db.execute(
            delete(Task).where(Task.id == task_id).execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    def start(self, task_id: UUID, started_at: datetime) -> Optional[Task]:
        return self._transition(TaskAction.START, task_id, started_at=started_at)

    def complete(self, task_id: UUID, completed_at: datetime, time_spent_minutes: int) -> Optional[Task]:
        return self._transition(
            TaskAction.COMPLETE,
            task_id,
            completed_at=completed_at,
            time_spent_minutes=time_spent_minutes,
        )

    def approve(self, task_id: UUID) -> Optional[Task]:
        return self._transition(TaskAction.APPROVE, task_id)

    def reject(self, task_id: UUID) -> Optional[Task]:
        return self._transition(TaskAction.REJECT, task_id, completed_at=None, time_spent_minutes=None)

    def _transition(self, action: TaskAction, task_id: UUID, **values: Any) -> Optional[Task]:
        """
        UPDATE ... WHERE id = :id AND status = :from

        A single statement, so of two concurrent requests at most one matches
        the row. Returns None when the task is gone or already moved on.
        """
        from_status, to_status = LIFECYCLE_TRANSITIONS[action]
        result = self.db.execute(
            update(Task)
            .where(Task.id == task_id, Task.status == from_status)
            .values(status=to_status, **values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            logger.info(f"⚠️  Conditional {action.value} on task {task_id} matched no row")
            return None
        return self.find_by_id(task_id)

    @contextmanager
    def _owner_constraint(self) -> Iterator[None]:
        """Translate a foreign key violation on owner_user_id into a validation error."""
        try:
            yield
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"⚠️  Task write rejected by constraint: {str(e.orig)}")
            raise InputValidationError(
                "Assigned user does not exist",
                details=[{"field": "user_id", "message": "Unknown user"}],
            ) from e
