"""
Repositories Package - Store protocols and their SQLAlchemy implementations
"""

from task_tracker.repositories.protocols import UserStore, TaskStore
from task_tracker.repositories.user_repository import UserRepository
from task_tracker.repositories.task_repository import TaskRepository

__all__ = [
    "UserStore",
    "TaskStore",
    "UserRepository",
    "TaskRepository",
]
