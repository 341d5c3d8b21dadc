"""
FastAPI Dependencies - Reusable dependency injection functions
"""

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional
import logging

from task_tracker.database import get_db
from task_tracker.core.authorization import Actor
from task_tracker.core.exceptions import ForbiddenError, UnauthorizedError
from task_tracker.repositories import TaskRepository, UserRepository
from task_tracker.services import IdentityService, TaskService

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme - expects "Authorization: Bearer <token>" header.
# auto_error=False so a missing header becomes our own 401 envelope.
security = HTTPBearer(auto_error=False)

def get_identity_service(db: Session = Depends(get_db)) -> IdentityService:
    """Identity Service bound to the request's database session"""
    return IdentityService(UserRepository(db))

def get_task_service(db: Session = Depends(get_db)) -> TaskService:
    """Task Lifecycle Engine bound to the request's database session"""
    return TaskService(TaskRepository(db))

def get_current_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    identity: IdentityService = Depends(get_identity_service),
) -> Actor:
    """
    Resolve the bearer token to the acting user.

    The role comes from the stored user record, not from the token, so a
    demotion takes effect on the next request.

    Raises:
        UnauthorizedError: header missing, token invalid/expired, or user deleted
    """
    if credentials is None or not credentials.credentials:
        logger.warning("⚠️  Request without bearer token")
        raise UnauthorizedError()

    user = identity.authenticate(credentials.credentials)
    logger.debug(f"✅ Authenticated user: {user.email}")
    return Actor.from_user(user)

def get_current_admin(actor: Actor = Depends(get_current_actor)) -> Actor:
    """
    Dependency that ensures the actor has the admin role.

    Raises:
        ForbiddenError: actor is not an admin
    """
    if not actor.is_admin:
        logger.warning(f"⚠️  Non-admin user {actor.email} attempted admin access")
        raise ForbiddenError("Admin access required")
    return actor
