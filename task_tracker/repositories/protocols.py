"""
Store Protocols - What the services need from persistence

The services depend on these protocols, not on SQLAlchemy, so tests can
plug in in-memory stores (see tests/fakes.py).
"""

from datetime import datetime
from typing import Any, ContextManager, Dict, List, Optional, Protocol
from uuid import UUID

from task_tracker.models import Task, User, UserRole


class UserStore(Protocol):
    """Credential store - persists user records."""

    def transaction(self) -> ContextManager[None]:
        """Commit on success, roll back on error."""
        ...

    def find_by_email(self, email: str) -> Optional[User]:
        ...

    def find_by_id(self, user_id: UUID, for_update: bool = False) -> Optional[User]:
        ...

    def find_all(self) -> List[User]:
        ...

    def create(self, name: str, email: str, password_hash: str, role: UserRole) -> User:
        ...

    def update(self, user_id: UUID, values: Dict[str, Any]) -> Optional[User]:
        ...

    def delete(self, user_id: UUID) -> bool:
        """Delete the user and un-assign their tasks."""
        ...

    def count_by_role(self, role: UserRole, for_update: bool = False) -> int:
        """Count users with a role; for_update locks the counted rows, in id order, until commit."""
        ...


class TaskStore(Protocol):
    """Task store - persists task records and applies guarded transitions."""

    def transaction(self) -> ContextManager[None]:
        ...

    def find_all(self) -> List[Task]:
        ...

    def find_by_id(self, task_id: UUID) -> Optional[Task]:
        ...

    def find_by_owner(self, owner_id: UUID) -> List[Task]:
        ...

    def create(self, values: Dict[str, Any]) -> Task:
        ...

    def update(self, task_id: UUID, values: Dict[str, Any]) -> Optional[Task]:
        ...

    def delete(self, task_id: UUID) -> bool:
        ...

    # Lifecycle writes - each applies only if the task is still in the
    # expected status and returns None otherwise.

    def start(self, task_id: UUID, started_at: datetime) -> Optional[Task]:
        ...

    def complete(self, task_id: UUID, completed_at: datetime, time_spent_minutes: int) -> Optional[Task]:
        ...

    def approve(self, task_id: UUID) -> Optional[Task]:
        ...

    def reject(self, task_id: UUID) -> Optional[Task]:
        ...

