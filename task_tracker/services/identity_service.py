"""
Identity Service - Registration, login, token handling and user administration

Enforces the last-admin invariant: the system never reaches a state
with zero admin users.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID
import logging

from task_tracker.core.exceptions import (
    ConflictError,
    InvalidOperationError,
    InvalidTokenError,
    NotFoundError,
    UnauthorizedError,
)
from task_tracker.core.security import create_access_token, decode_token, hash_password, verify_password
from task_tracker.models import User, UserRole
from task_tracker.repositories.protocols import UserStore

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


@dataclass(frozen=True)
class TokenClaims:
    """Identity embedded in a bearer token"""
    user_id: UUID
    email: Optional[str]
    role: Optional[UserRole]


class IdentityService:
    def __init__(self, users: UserStore):
        self.users = users

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    def issue_token(self, user: User) -> str:
        """Signed, expiring credential embedding {sub, email, role}"""
        return create_access_token({
            "sub": str(user.id),
            "email": user.email,
            "role": UserRole(user.role).value,
        })

    def verify_token(self, token: str) -> TokenClaims:
        """
        Recover the claims embedded in a token.

        Raises:
            InvalidTokenError: bad signature, malformed payload, or expired
        """
        claims = decode_token(token)
        if claims is None:
            raise InvalidTokenError()
        try:
            return TokenClaims(
                user_id=UUID(str(claims["sub"])),
                email=claims.get("email"),
                role=UserRole(claims["role"]) if claims.get("role") else None,
            )
        except ValueError as e:
            raise InvalidTokenError() from e

    def authenticate(self, token: str) -> User:
        """Resolve a bearer token to a live user record."""
        claims = self.verify_token(token)
        user = self.users.find_by_id(claims.user_id)
        if user is None:
            logger.warning(f"⚠️  Token valid but user {claims.user_id} no longer exists")
            raise UnauthorizedError("User no longer exists.")
        return user

    # ------------------------------------------------------------------
    # Account flows
    # ------------------------------------------------------------------

    def register(self, name: str, email: str, password: str) -> Tuple[User, str]:
        """
        Create a regular user account.

        The role is always USER - callers cannot self-assign admin.

        Raises:
            ConflictError: email already registered
        """
        with self.users.transaction():
            if self.users.find_by_email(email) is not None:
                logger.warning(f"⚠️  Registration failed - email already exists: {email}")
                raise ConflictError("User with this email already exists", code="EMAIL_EXISTS")
            user = self.users.create(
                name=name,
                email=email,
                password_hash=hash_password(password),
                role=UserRole.USER,
            )
        logger.info(f"✅ User registered: {user.email}")
        return user, self.issue_token(user)

    def login(self, email: str, password: str) -> Tuple[User, str]:
        """
        Raises:
            UnauthorizedError: unknown email or wrong password (indistinguishable)
        """
        user = self.users.find_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.warning(f"⚠️  Login failed for: {email}")
            raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE, code="INVALID_CREDENTIALS")
        logger.info(f"✅ Login successful: {user.email}")
        return user, self.issue_token(user)

    def get_profile(self, user_id: UUID) -> User:
        user = self.users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")
        return user

    def seed_admin(self, name: str, email: str, password: str) -> Tuple[User, bool]:
        """
        Create an admin account unless the email is already taken.

        Returns:
            (user, created) - created is False when the account already existed
        """
        with self.users.transaction():
            existing = self.users.find_by_email(email)
            if existing is not None:
                logger.info(f"⚠️  Admin seed skipped, {email} already exists")
                return existing, False
            user = self.users.create(
                name=name,
                email=email,
                password_hash=hash_password(password),
                role=UserRole.ADMIN,
            )
        logger.info(f"✅ Admin user seeded: {user.email}")
        return user, True

    # ------------------------------------------------------------------
    # Administration (callers must already have checked the actor is an admin)
    # ------------------------------------------------------------------

    def list_users(self) -> List[User]:
        return self.users.find_all()

    def update_user(self, target_id: UUID, patch: Dict[str, Any], acting_admin_id: UUID) -> User:
        """
        Apply a partial patch (only supplied keys change).

        Raises:
            NotFoundError: target does not exist
            InvalidOperationError: patch would demote the last admin
            ConflictError: new email already belongs to another user
        """
        new_role = patch.get("role")
        demoting = new_role is not None and UserRole(new_role) == UserRole.USER

        with self.users.transaction():
            # Admin rows are locked before the target row, same order as delete_user
            admin_count = self.users.count_by_role(UserRole.ADMIN, for_update=True) if demoting else None
            user = self.users.find_by_id(target_id, for_update=True)
            if user is None:
                raise NotFoundError("User not found", code="USER_NOT_FOUND")

            if demoting and user.role == UserRole.ADMIN and admin_count < 2:
                logger.warning(f"⚠️  Admin {acting_admin_id} tried to demote the last admin {target_id}")
                raise InvalidOperationError("Cannot demote the last admin", code="LAST_ADMIN")

            new_email = patch.get("email")
            if new_email is not None and new_email != user.email:
                other = self.users.find_by_email(new_email)
                if other is not None and other.id != user.id:
                    raise ConflictError("User with this email already exists", code="EMAIL_EXISTS")

            updated = self.users.update(target_id, patch)
        logger.info(f"✅ User {target_id} updated by {acting_admin_id}: {sorted(patch)}")
        return updated

    def delete_user(self, target_id: UUID, acting_admin_id: UUID) -> Dict[str, Any]:
        """
        Delete a user; their tasks become unassigned.

        Raises:
            InvalidOperationError: self delete, or deleting the last admin
            NotFoundError: target does not exist
        """
        if target_id == acting_admin_id:
            raise InvalidOperationError("Cannot delete your own account", code="SELF_DELETE")

        with self.users.transaction():
            # Admin rows first, then the target: every writer takes locks in this order
            admin_count = self.users.count_by_role(UserRole.ADMIN, for_update=True)
            user = self.users.find_by_id(target_id, for_update=True)
            if user is None:
                raise NotFoundError("User not found", code="USER_NOT_FOUND")

            if user.role == UserRole.ADMIN and admin_count < 2:
                logger.warning(f"⚠️  Admin {acting_admin_id} tried to delete the last admin {target_id}")
                raise InvalidOperationError("Cannot delete the last admin", code="LAST_ADMIN")

            self.users.delete(target_id)
        logger.info(f"✅ User {target_id} deleted by {acting_admin_id}")
        return {"id": target_id}
