"""
Task Model - Represents work items and their lifecycle timestamps
"""

from sqlalchemy import Column, String, Text, DateTime, Integer, Enum as SQLEnum, ForeignKey, Uuid
from sqlalchemy.orm import relationship
import enum
import uuid

from task_tracker.database import Base, utcnow

class TaskStatus(str, enum.Enum):
    """Task status - ordered by workflow"""
    PENDING = "pending"  # Created, not started
    IN_PROGRESS = "in_progress"  # Started by owner (or sent back by a reviewer)
    PENDING_REVIEW = "pending_review"  # Completed by owner, awaiting admin review
    COMPLETED = "completed"  # Approved by admin (terminal)

class TaskAction(str, enum.Enum):
    """Lifecycle actions - each one is a single guarded status change"""
    START = "start"
    COMPLETE = "complete"
    APPROVE = "approve"
    REJECT = "reject"

# action -> (required current status, new status)
LIFECYCLE_TRANSITIONS = {
    TaskAction.START: (TaskStatus.PENDING, TaskStatus.IN_PROGRESS),
    TaskAction.COMPLETE: (TaskStatus.IN_PROGRESS, TaskStatus.PENDING_REVIEW),
    TaskAction.APPROVE: (TaskStatus.PENDING_REVIEW, TaskStatus.COMPLETED),
    TaskAction.REJECT: (TaskStatus.PENDING_REVIEW, TaskStatus.IN_PROGRESS),
}

TASK_TITLE_MAX_LENGTH = 255
TASK_DESCRIPTION_MAX_LENGTH = 2000

class Task(Base):
    """
    Task table - work items with time tracking.

    started_at is written only by the start transition; completed_at and
    time_spent_minutes only by complete (and cleared by reject).
    """
    __tablename__ = "tasks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)

    # Content
    title = Column(String(TASK_TITLE_MAX_LENGTH), nullable=False)
    description = Column(Text, nullable=True)

    # Workflow
    status = Column(SQLEnum(TaskStatus, name="task_status"), default=TaskStatus.PENDING, nullable=False, index=True)
    deadline = Column(DateTime, nullable=True)

    # Ownership - deleting the user un-assigns the task
    owner_user_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    # Time tracking
    started_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    time_spent_minutes = Column(Integer, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    owner = relationship("User", back_populates="tasks")

    def __repr__(self):
        return f"<Task {self.id}: {self.title} ({self.status})>"
