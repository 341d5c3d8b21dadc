"""
Models Package - Exports all database models for easy importing
"""

# Import all models to register them with SQLAlchemy Base
from task_tracker.models.user import User, UserRole
from task_tracker.models.task import Task, TaskStatus, TaskAction, LIFECYCLE_TRANSITIONS

__all__ = [
    "User",
    "UserRole",
    "Task",
    "TaskStatus",
    "TaskAction",
    "LIFECYCLE_TRANSITIONS",
]
