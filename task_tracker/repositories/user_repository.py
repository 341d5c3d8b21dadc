"""
User Repository - SQLAlchemy-backed credential store
"""

from typing import Any, Dict, List, Optional
from uuid import UUID
import logging

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError

from task_tracker.core.exceptions import ConflictError
from task_tracker.database import utcnow
from task_tracker.models import Task, User, UserRole
from task_tracker.repositories.base import SQLAlchemyRepository

logger = logging.getLogger(__name__)

EMAIL_EXISTS = "EMAIL_EXISTS"

class UserRepository(SQLAlchemyRepository):
    """Credential store over the users table"""

    def find_by_email(self, email: str) -> Optional[User]:
        return self.db.execute(
            select(User).where(User.email == email)  # Exact, case-sensitive match
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def find_by_id(self, user_id: UUID, for_update: bool = False) -> Optional[User]:
        query = select(User).where(User.id == user_id).execution_options(populate_existing=True)
        if for_update:
            query = query.with_for_update()
        return self.db.execute(query).scalar_one_or_none()

    def find_all(self) -> List[User]:
        return list(self.db.execute(
            select(User).order_by(User.name.asc())
            .execution_options(populate_existing=True)
        ).scalars())

    def create(self, name: str, email: str, password_hash: str, role: UserRole) -> User:
        user = User(name=name, email=email, password_hash=password_hash, role=role)
        self.db.add(user)
        try:
            self.db.flush()  # Surface unique violations now, inside the caller's transaction
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"⚠️  Duplicate email on insert: {email}")
            raise ConflictError("User with this email already exists", code=EMAIL_EXISTS) from e
        return user

    def update(self, user_id: UUID, values: Dict[str, Any]) -> Optional[User]:
        """Apply only the supplied fields. updated_at is stamped even for an empty patch."""
        try:
            self.db.execute(
                update(User).where(User.id == user_id).values(**values, updated_at=utcnow())
                .execution_options(synchronize_session=False)
            )
            self.db.flush()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("User with this email already exists", code=EMAIL_EXISTS) from e
        return self.find_by_id(user_id)

    def delete(self, user_id: UUID) -> bool:
        # Un-assign first so the result does not depend on the backend enforcing ON DELETE SET NULL
        self.db.execute(
            update(Task).where(Task.owner_user_id == user_id).values(owner_user_id=None)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(
            delete(User).where(User.id == user_id).execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    def count_by_role(self, role: UserRole, for_update: bool = False) -> int:
        if for_update:
            # Lock every matching row, in id order, so concurrent demotions/deletions serialize on them
            ids = self.db.execute(
                select(User.id).where(User.role == role).order_by(User.id).with_for_update()
            ).scalars().all()
            return len(ids)
        return self.db.execute(
            select(func.count()).select_from(User).where(User.role == role)
        ).scalar_one()
