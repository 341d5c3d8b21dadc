"""
User Schemas - Pydantic models for request/response validation
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime
from uuid import UUID

from task_tracker.models.user import UserRole

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 255
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 100

def _clean_name(v: str) -> str:
    v = v.strip()
    if len(v) < NAME_MIN_LENGTH:
        raise ValueError(f'Name must be at least {NAME_MIN_LENGTH} characters')
    if len(v) > NAME_MAX_LENGTH:
        raise ValueError(f'Name must be at most {NAME_MAX_LENGTH} characters')
    return v

class UserCreate(BaseModel):
    """Registration payload - any role sent by the client is ignored"""
    name: str
    email: EmailStr  # email-validator also caps the address at 254 characters
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return _clean_name(v)

class UserLogin(BaseModel):
    """Schema for login request"""
    email: EmailStr
    password: str = Field(min_length=1)

class UserUpdate(BaseModel):
    """
    Admin patch - only the fields present in the request body are applied.
    None of these fields can be cleared, so an explicit null is rejected.
    """
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    role: Optional[UserRole] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if v is None:
            raise ValueError('Name cannot be null')
        return _clean_name(v)

    @field_validator('email', 'role')
    @classmethod
    def reject_null(cls, v, info):
        if v is None:
            raise ValueError(f'{info.field_name} cannot be null')
        return v

class UserResponse(BaseModel):
    """Schema for user data in responses - excludes password hash"""
    id: UUID
    name: str
    email: str
    role: UserRole
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)  # Build from SQLAlchemy models

class AuthResponse(BaseModel):
    """Register/login result - user plus bearer token"""
    user: UserResponse
    token: str
    token_type: str = "bearer"

class DeletedUserResponse(BaseModel):
    id: UUID
