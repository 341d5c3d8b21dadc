"""
Services Package - Identity Service and Task Lifecycle Engine
"""

from task_tracker.services.identity_service import IdentityService, TokenClaims
from task_tracker.services.task_service import TaskService, elapsed_minutes

__all__ = [
    "IdentityService",
    "TokenClaims",
    "TaskService",
    "elapsed_minutes",
]
