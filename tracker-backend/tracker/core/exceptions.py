# File: tracker/core/exceptions.py

"""
Domain exceptions for the Project Tracker API.

Services raise these instead of HTTPException so they stay usable outside
a request. The handlers registered in tracker.main turn them into:

    {"error": <message>, "code": <code>, "details": {...}}

with the status code carried by the exception class.
"""

from typing import Any, Dict, Optional


class TrackerError(Exception):
    """Base exception for all tracker errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.message,
            "code": self.code,
            "details": self.details,
        }


# ============================================
# Validation (400)
# ============================================

class ValidationError(TrackerError):
    """Missing or malformed input"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else None
        super().__init__(message, code="VALIDATION_ERROR", details=details)


# ============================================
# Authentication & Authorization (401 / 403)
# ============================================

class AuthenticationError(TrackerError):
    """Caller could not be authenticated"""

    status_code = 401

    def __init__(self, message: str = "Please authenticate", code: str = "AUTH_FAILED"):
        super().__init__(message, code=code)


class TokenExpiredError(AuthenticationError):
    def __init__(self):
        super().__init__("Token has expired", code="TOKEN_EXPIRED")


class InvalidTokenError(AuthenticationError):
    def __init__(self, message: str = "Invalid token"):
        super().__init__(message, code="INVALID_TOKEN")


class ForbiddenError(TrackerError):
    """Authenticated, but not allowed to do this"""

    status_code = 403

    def __init__(self, message: str = "Access denied"):
        super().__init__(message, code="FORBIDDEN")


# ============================================
# Resource Errors (404)
# ============================================

class NotFoundError(TrackerError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} not found",
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class ProjectNotFoundError(NotFoundError):
    def __init__(self, project_id: str):
        super().__init__("Project", project_id)


class UpdateNotFoundError(NotFoundError):
    def __init__(self, update_id: str):
        super().__init__("Update", update_id)


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: str):
        super().__init__("User", user_id)


# ============================================
# Internal (500)
# ============================================

class InternalError(TrackerError):
    """Store or transport failure"""

    status_code = 500

    def __init__(self, message: str = "Server error"):
        super().__init__(message, code="INTERNAL_ERROR")
