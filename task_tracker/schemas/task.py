"""
Task Schemas - Pydantic models for task operations
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
from datetime import datetime, timezone
from uuid import UUID

from task_tracker.models.task import TaskStatus, TASK_TITLE_MAX_LENGTH, TASK_DESCRIPTION_MAX_LENGTH

# DO NOT import from task_tracker.schemas here - causes circular import

def _to_naive_utc(v: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are stored as naive UTC; convert offset-aware input."""
    if v is not None and v.tzinfo is not None:
        return v.astimezone(timezone.utc).replace(tzinfo=None)
    return v

def _clean_title(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError('Title is required')
    if len(v) > TASK_TITLE_MAX_LENGTH:
        raise ValueError(f'Title must be {TASK_TITLE_MAX_LENGTH} characters or less')
    return v

class TaskCreate(BaseModel):
    """Schema for creating a task (admin)"""
    title: str
    description: Optional[str] = Field(default=None, max_length=TASK_DESCRIPTION_MAX_LENGTH)
    status: TaskStatus = TaskStatus.PENDING
    deadline: Optional[datetime] = None
    user_id: Optional[UUID] = None  # Owner; unassigned when omitted

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        return _clean_title(v)

    @field_validator('deadline')
    @classmethod
    def normalize_deadline(cls, v):
        return _to_naive_utc(v)

class TaskUpdate(BaseModel):
    """
    Partial update (admin) - three states per field:
    omitted (left untouched), null (cleared) or a value.
    title and status cannot be cleared.
    """
    title: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=TASK_DESCRIPTION_MAX_LENGTH)
    status: Optional[TaskStatus] = None
    deadline: Optional[datetime] = None
    user_id: Optional[UUID] = None

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if v is None:
            raise ValueError('Title cannot be null')
        return _clean_title(v)

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        if v is None:
            raise ValueError('Status cannot be null')
        return v

    @field_validator('deadline')
    @classmethod
    def normalize_deadline(cls, v):
        return _to_naive_utc(v)

    def to_patch(self) -> dict:
        """Only the keys the client actually sent"""
        return self.model_dump(exclude_unset=True)

class TaskResponse(BaseModel):
    """Schema for task data in responses"""
    id: UUID
    title: str
    description: Optional[str]
    status: TaskStatus
    deadline: Optional[datetime]
    owner_user_id: Optional[UUID]
    started_at: Optional[datetime]
    completed_at: Optional[datetime]
    time_spent_minutes: Optional[int]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class TaskListResponse(BaseModel):
    """Role-scoped task list"""
    tasks: List[TaskResponse]
    total: int

class DeletedTaskResponse(BaseModel):
    id: UUID
    message: str
