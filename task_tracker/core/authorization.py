"""
Authorization Helpers - Role and ownership checks shared by the services
"""

from dataclasses import dataclass
from typing import Any
from uuid import UUID

from task_tracker.core.exceptions import ForbiddenError
from task_tracker.models.user import UserRole


@dataclass(frozen=True)
class Actor:
    """The authenticated identity performing a request."""

    id: UUID
    email: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @classmethod
    def from_user(cls, user: Any) -> "Actor":
        return cls(id=user.id, email=user.email, role=UserRole(user.role))


def is_owner(actor: Actor, task: Any) -> bool:
    """True when the task is assigned to the actor (unassigned tasks have no owner)."""
    return task.owner_user_id is not None and task.owner_user_id == actor.id


def can_access_task(actor: Actor, task: Any) -> bool:
    return actor.is_admin or is_owner(actor, task)


def ensure_admin(actor: Actor, message: str = "Admin access required") -> None:
    """Raise ForbiddenError unless the actor is an admin."""
    if not actor.is_admin:
        raise ForbiddenError(message)


def ensure_owner_or_admin(actor: Actor, task: Any, message: str) -> None:
    """Raise ForbiddenError unless the actor is an admin or owns the task."""
    if not can_access_task(actor, task):
        raise ForbiddenError(message)
