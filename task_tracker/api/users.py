"""
Users API - User management endpoints (admin only)
"""

from fastapi import APIRouter, Depends
from typing import List
from uuid import UUID
import logging

from task_tracker.schemas import ApiResponse, DeletedUserResponse, UserResponse, UserUpdate, success
from task_tracker.core.authorization import Actor
from task_tracker.core.dependencies import get_current_admin, get_identity_service
from task_tracker.services import IdentityService

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("", response_model=ApiResponse[List[UserResponse]])
def get_all_users(
    current_admin: Actor = Depends(get_current_admin),
    identity: IdentityService = Depends(get_identity_service),
):
    """All users ordered by name (admin only) - feeds the task assignment dropdown"""
    logger.info(f"➡️  Get all users request from admin: {current_admin.email}")
    users = identity.list_users()
    logger.info(f"✅ Returning {len(users)} users")
    return success([UserResponse.model_validate(user) for user in users])

@router.patch("/{user_id}", response_model=ApiResponse[UserResponse])
def update_user(
    user_id: UUID,
    user_data: UserUpdate,
    current_admin: Actor = Depends(get_current_admin),
    identity: IdentityService = Depends(get_identity_service),
):
    """
    Update name, email or role (admin only).

    Raises:
        404: User not found
        400: Would demote the last admin
        409: Email already in use
    """
    logger.info(f"➡️  Update user {user_id} request from admin: {current_admin.email}")
    user = identity.update_user(user_id, user_data.model_dump(exclude_unset=True), current_admin.id)
    return success(UserResponse.model_validate(user))

@router.delete("/{user_id}", response_model=ApiResponse[DeletedUserResponse])
def delete_user(
    user_id: UUID,
    current_admin: Actor = Depends(get_current_admin),
    identity: IdentityService = Depends(get_identity_service),
):
    """
    Delete a user (admin only). Their tasks become unassigned.

    Raises:
        400: Self delete, or deleting the last admin
        404: User not found
    """
    logger.info(f"➡️  Delete user {user_id} request from admin: {current_admin.email}")
    return success(identity.delete_user(user_id, current_admin.id))
