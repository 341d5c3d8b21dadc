"""
In-memory stores for service-level tests.

Both implement the store protocols with a lock around every write, and hand
out copies so callers hold snapshots the way they would hold DB rows.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional
from uuid import UUID, uuid4
import threading

from task_tracker.core.exceptions import ConflictError
from task_tracker.models import LIFECYCLE_TRANSITIONS, TaskAction, TaskStatus, UserRole


def _now() -> datetime:
    return datetime(2024, 1, 1, 9, 0, 0)


@dataclass
class UserRecord:
    name: str
    email: str
    password_hash: str
    role: UserRole
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)


@dataclass
class TaskRecord:
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    deadline: Optional[datetime] = None
    owner_user_id: Optional[UUID] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    time_spent_minutes: Optional[int] = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)


class InMemoryTaskStore:
    def __init__(self) -> None:
        self.rows: Dict[UUID, TaskRecord] = {}
        self._lock = threading.Lock()
        self._read_barrier: Optional[threading.Barrier] = None
        self.writes = 0  # Successful lifecycle writes, for race assertions

    def hold_first_reads(self, parties: int) -> None:
        """Make the next `parties` find_by_id calls wait for each other."""
        self._read_barrier = threading.Barrier(parties, timeout=5)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        yield  # Writes are individually atomic; no read locks

    def find_all(self) -> List[TaskRecord]:
        return [replace(t) for t in self.rows.values()]

    def find_by_id(self, task_id: UUID) -> Optional[TaskRecord]:
        row = self.rows.get(task_id)
        snapshot = replace(row) if row else None
        barrier = self._read_barrier
        if barrier is not None:
            barrier.wait()
            with self._lock:
                if barrier.n_waiting == 0 and self._read_barrier is barrier:
                    self._read_barrier = None
        return snapshot

    def find_by_owner(self, owner_id: UUID) -> List[TaskRecord]:
        return [replace(t) for t in self.rows.values() if t.owner_user_id == owner_id]

    def create(self, values: Dict[str, Any]) -> TaskRecord:
        task = TaskRecord(**values)
        with self._lock:
            self.rows[task.id] = task
        return replace(task)

    def update(self, task_id: UUID, values: Dict[str, Any]) -> Optional[TaskRecord]:
        with self._lock:
            row = self.rows.get(task_id)
            if row is None:
                return None
            for key, value in values.items():
                setattr(row, key, value)
            return replace(row)

    def delete(self, task_id: UUID) -> bool:
        with self._lock:
            return self.rows.pop(task_id, None) is not None

    def start(self, task_id: UUID, started_at: datetime) -> Optional[TaskRecord]:
        return self._transition(TaskAction.START, task_id, started_at=started_at)

    def complete(self, task_id: UUID, completed_at: datetime, time_spent_minutes: int) -> Optional[TaskRecord]:
        return self._transition(
            TaskAction.COMPLETE, task_id, completed_at=completed_at, time_spent_minutes=time_spent_minutes
        )

    def approve(self, task_id: UUID) -> Optional[TaskRecord]:
        return self._transition(TaskAction.APPROVE, task_id)

    def reject(self, task_id: UUID) -> Optional[TaskRecord]:
        return self._transition(TaskAction.REJECT, task_id, completed_at=None, time_spent_minutes=None)

    def _transition(self, action: TaskAction, task_id: UUID, **values: Any) -> Optional[TaskRecord]:
        from_status, to_status = LIFECYCLE_TRANSITIONS[action]
        with self._lock:
            row = self.rows.get(task_id)
            if row is None or row.status != from_status:
                return None
            row.status = to_status
            for key, value in values.items():
                setattr(row, key, value)
            self.writes += 1
            return replace(row)


class InMemoryUserStore:
    def __init__(self, tasks: Optional[InMemoryTaskStore] = None) -> None:
        self.rows: Dict[UUID, UserRecord] = {}
        self.tasks = tasks
        self._lock = threading.RLock()
        self.lock_order: List[Any] = []  # Row locks requested, in order

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:  # Serializes read-check-write, like row locks would
            yield

    def find_by_email(self, email: str) -> Optional[UserRecord]:
        for user in self.rows.values():
            if user.email == email:
                return replace(user)
        return None

    def find_by_id(self, user_id: UUID, for_update: bool = False) -> Optional[UserRecord]:
        if for_update:
            self.lock_order.append(user_id)
        user = self.rows.get(user_id)
        return replace(user) if user else None

    def find_all(self) -> List[UserRecord]:
        return sorted((replace(u) for u in self.rows.values()), key=lambda u: u.name)

    def create(self, name: str, email: str, password_hash: str, role: UserRole) -> UserRecord:
        with self._lock:
            if any(u.email == email for u in self.rows.values()):
                raise ConflictError("User with this email already exists", code="EMAIL_EXISTS")
            user = UserRecord(name=name, email=email, password_hash=password_hash, role=role)
            self.rows[user.id] = user
            return replace(user)

    def update(self, user_id: UUID, values: Dict[str, Any]) -> Optional[UserRecord]:
        with self._lock:
            user = self.rows.get(user_id)
            if user is None:
                return None
            for key, value in values.items():
                setattr(user, key, value)
            return replace(user)

    def delete(self, user_id: UUID) -> bool:
        with self._lock:
            if self.rows.pop(user_id, None) is None:
                return False
            if self.tasks is not None:
                for task in self.tasks.rows.values():
                    if task.owner_user_id == user_id:
                        task.owner_user_id = None
            return True

    def count_by_role(self, role: UserRole, for_update: bool = False) -> int:
        if for_update:
            self.lock_order.append(role)
        return sum(1 for u in self.rows.values() if u.role == role)
