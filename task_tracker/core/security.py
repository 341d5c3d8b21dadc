"""
Security Module - Handles password hashing and JWT token generation/validation
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
import logging

from task_tracker.core.config import settings

logger = logging.getLogger(__name__)

# Password hashing context - bcrypt with configurable cost factor
pwd_context = CryptContext(
    schemes=["bcrypt"],  # Use bcrypt algorithm
    deprecated="auto",  # Automatically upgrade old hashes
    bcrypt__rounds=settings.BCRYPT_ROUNDS  # Cost factor (higher = slower)
)

def hash_password(password: str) -> str:
    """
    Hash a plaintext password using bcrypt.

    bcrypt salts every hash, so two users with the same password
    end up with different stored values.

    Args:
        password: Plaintext password from user input

    Returns:
        Hashed password string (safe to store in database)
    """
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plaintext password against a bcrypt hash.

    Returns:
        True if password matches, False otherwise (including corrupt hashes)
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)  # Constant-time comparison
    except (ValueError, TypeError) as e:
        logger.error(f"❌ Password verification error: {str(e)}")
        return False  # If hash is corrupted, deny access

def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create JWT access token for authentication.

    Payload: {sub: user_id, email, role, exp}

    The token is signed, not encrypted - never put secrets in the payload.

    Example:
        token = create_access_token({"sub": str(user.id), "email": user.email, "role": "user"})
    """
    to_encode = data.copy()  # Don't modify original dict

    expire = datetime.now(timezone.utc) + (
        expires_delta if expires_delta is not None
        else timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})

    encoded_jwt = jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )

    logger.debug(f"✅ Created access token expiring at {expire}")
    return encoded_jwt

def verify_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Verify and decode JWT token.

    Returns:
        Decoded payload dict if valid, None if invalid/expired

    Only the configured algorithm is accepted (prevents algorithm switching).
    """
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )

    except ExpiredSignatureError:
        logger.warning("⚠️  Token expired")
        return None

    except JWTError as e:
        logger.warning(f"⚠️  Invalid token: {str(e)}")  # Signature invalid or malformed
        return None

def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Extract identity claims {sub, email, role} from a JWT.

    Returns:
        Claims dict if the token is valid and carries a subject, None otherwise
    """
    payload = verify_token(token)
    if not payload or not payload.get("sub"):
        return None
    return {
        "sub": payload["sub"],
        "email": payload.get("email"),
        "role": payload.get("role"),
    }
