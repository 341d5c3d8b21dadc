"""
Application Exceptions - Typed failures raised by services and stores

Services never build HTTP responses. They raise one of these errors and the
API layer (task_tracker.api.errors) maps each type to a status code.
"""

from typing import Any, Optional


class AppError(Exception):
    """Base class for every expected application failure."""

    code: str = "INTERNAL_ERROR"
    default_message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[str] = None,
        details: Optional[Any] = None,
    ):
        self.message = message or self.default_message
        if code:
            self.code = code  # Instance-level override (e.g. LAST_ADMIN)
        self.details = details
        super().__init__(self.message)

    def __repr__(self):
        return f"<{type(self).__name__} {self.code}: {self.message}>"


class InputValidationError(AppError):
    """Malformed or inconsistent input."""

    code = "VALIDATION_ERROR"
    default_message = "Validation failed"


class UnauthorizedError(AppError):
    """Missing or invalid credentials."""

    code = "UNAUTHORIZED"
    default_message = "Authentication required. Please provide a valid token."


class InvalidTokenError(UnauthorizedError):
    """Bearer token could not be verified (bad signature, malformed, expired)."""

    code = "INVALID_TOKEN"
    default_message = "Invalid or expired token."


class ForbiddenError(AppError):
    """Authenticated, but not permitted to perform the action."""

    code = "FORBIDDEN"
    default_message = "You do not have permission to perform this action"


class NotFoundError(AppError):
    """Entity does not exist."""

    code = "NOT_FOUND"
    default_message = "Resource not found"


class ConflictError(AppError):
    """Duplicate unique key."""

    code = "CONFLICT"
    default_message = "Resource already exists"


class InvalidOperationError(AppError):
    """A business rule guard failed (wrong status, last admin, self delete)."""

    code = "INVALID_OPERATION"
    default_message = "Operation not allowed"


class InternalError(AppError):
    """Broken invariant or unexpected store failure."""

    code = "INTERNAL_ERROR"
    default_message = "An unexpected error occurred"
