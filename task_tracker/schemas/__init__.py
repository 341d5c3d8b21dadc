"""
Schemas Package - Exports all Pydantic schemas
"""

from task_tracker.schemas.common import (
    ApiResponse,
    success,
)
from task_tracker.schemas.user import (
    UserCreate,
    UserLogin,
    UserResponse,
    UserUpdate,
    AuthResponse,
    DeletedUserResponse,
)
from task_tracker.schemas.task import (
    TaskCreate,
    TaskUpdate,
    TaskResponse,
    TaskListResponse,
    DeletedTaskResponse,
)

__all__ = [
    "ApiResponse",
    "success",
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "UserUpdate",
    "AuthResponse",
    "DeletedUserResponse",
    "TaskCreate",
    "TaskUpdate",
    "TaskResponse",
    "TaskListResponse",
    "DeletedTaskResponse",
]
