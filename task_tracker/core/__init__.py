"""
Core Package - Configuration, security, errors and authorization helpers

IMPORTANT: Only import config and security here.
Dependencies must be imported directly to avoid circular imports.
"""

from task_tracker.core.config import settings, get_settings
from task_tracker.core.security import hash_password, verify_password, create_access_token, decode_token

__all__ = [
    "settings",
    "get_settings",
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_token",
]
