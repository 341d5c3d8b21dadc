"""
API Package - Exports all API routers
"""

from task_tracker.api import auth, tasks, users

__all__ = ["auth", "tasks", "users"]
