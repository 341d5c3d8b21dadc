"""
User Model - Represents authenticated users in the system
"""

from sqlalchemy import Column, String, DateTime, Enum as SQLEnum, Uuid
from sqlalchemy.orm import relationship
import uuid
import enum

from task_tracker.database import Base, utcnow

class UserRole(str, enum.Enum):
    """User role - closed set of permission levels"""
    USER = "user"  # Works on tasks assigned to them
    ADMIN = "admin"  # Manages users and every task

class User(Base):
    """
    User table - stores authentication and profile information.

    Invariant: at least one ADMIN row exists at all times
    (enforced by IdentityService, not by the schema).
    """
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)

    # Authentication fields
    email = Column(String(255), unique=True, nullable=False, index=True)  # Login identifier (exact match)
    password_hash = Column(String(255), nullable=False)  # bcrypt hash, never plaintext

    # Profile
    name = Column(String(255), nullable=False)

    # Authorization
    role = Column(SQLEnum(UserRole, name="user_role"), default=UserRole.USER, nullable=False, index=True)

    # Timestamps
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Tasks owned by this user (owner_user_id is SET NULL when the user is deleted)
    tasks = relationship("Task", back_populates="owner", passive_deletes=True)

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
