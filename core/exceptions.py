"""
Error taxonomy for the portal.

Every failure a route can report maps to one class here. Each class
carries the HTTP status it surfaces as, so the API layer converts any
PortalError into the `{success: false, message}` envelope in one place.

Usage:
    from core.exceptions import NotFoundError

    if doc is None:
        raise NotFoundError("Event")
"""

from typing import Any, Optional


class PortalError(Exception):
    """Base exception for all portal errors."""

    status_code: int = 500
    default_message: str = "Something went wrong!"

    def __init__(self, message: Optional[str] = None, **details: Any):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"success": False, "message": self.message}


# ============================================
# Request errors (400)
# ============================================

class ValidationError(PortalError):
    """Missing or malformed input."""

    status_code = 400
    default_message = "Invalid request"


class CapacityError(ValidationError):
    """A capped counter is already at its limit."""

    default_message = "Event is full"


class DuplicateError(PortalError):
    """An insert would violate a uniqueness rule."""

    status_code = 400
    default_message = "Record already exists"

    def __init__(self, message: Optional[str] = None, field: Optional[str] = None):
        super().__init__(message, field=field)
        self.field = field


# ============================================
# Authentication & Authorization (401 / 403)
# ============================================

class UnauthorizedError(PortalError):
    """Missing, invalid or expired token, or an unusable principal."""

    status_code = 401
    default_message = "No token provided"


class InvalidCredentialsError(UnauthorizedError):
    default_message = "Invalid credentials"


class AccountDeactivatedError(UnauthorizedError):
    default_message = "Account is deactivated"


class ForbiddenError(PortalError):
    """Authenticated, but the role does not allow the action."""

    status_code = 403
    default_message = "Access denied"


# ============================================
# Resource errors (404)
# ============================================

class NotFoundError(PortalError):
    """The targeted record does not exist in the active storage."""

    status_code = 404
    default_message = "Record not found"

    def __init__(self, entity: Optional[str] = None, message: Optional[str] = None):
        if message is None and entity:
            message = f"{entity} not found"
        super().__init__(message, entity=entity)
        self.entity = entity


# ============================================
# Infrastructure (5xx)
# ============================================

class StorageUnavailableError(PortalError):
    """The durable store could not be reached."""

    status_code = 503
    default_message = "Storage unavailable"
