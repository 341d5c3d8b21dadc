"""
Authentication API - Registration, login and current profile
"""

from fastapi import APIRouter, Depends, status
import logging

from task_tracker.schemas import ApiResponse, AuthResponse, UserCreate, UserLogin, UserResponse, success
from task_tracker.core.authorization import Actor
from task_tracker.core.dependencies import get_current_actor, get_identity_service
from task_tracker.services import IdentityService

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/register", response_model=ApiResponse[AuthResponse], status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserCreate,  # Validated by Pydantic (name, email, password)
    identity: IdentityService = Depends(get_identity_service),
):
    """
    Register new user account.

    The account is always created with role "user"; a role field in the
    body is ignored.

    Raises:
        409: Email already registered
    """
    logger.info(f"➡️  Registration attempt for email: {user_data.email}")
    user, token = identity.register(user_data.name, user_data.email, user_data.password)
    return success(AuthResponse(user=UserResponse.model_validate(user), token=token))

@router.post("/login", response_model=ApiResponse[AuthResponse])
def login(
    credentials: UserLogin,
    identity: IdentityService = Depends(get_identity_service),
):
    """
    Authenticate user and return a bearer token.

    Raises:
        401: Invalid credentials (same response for unknown email and wrong password)
    """
    logger.info(f"➡️  Login attempt for email: {credentials.email}")
    user, token = identity.login(credentials.email, credentials.password)
    return success(AuthResponse(user=UserResponse.model_validate(user), token=token))

@router.get("/me", response_model=ApiResponse[UserResponse])
def get_current_user_info(
    actor: Actor = Depends(get_current_actor),
    identity: IdentityService = Depends(get_identity_service),
):
    """Current user's profile - used by the frontend to verify its stored token"""
    logger.debug(f"➡️  Profile request from: {actor.email}")
    return success(UserResponse.model_validate(identity.get_profile(actor.id)))
