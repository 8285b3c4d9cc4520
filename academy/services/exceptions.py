"""
Academy service exceptions

Raised by services and the store facade; rendered to JSON by the
handlers registered in academy.main.
"""
from typing import Optional, Dict, Any


class AcademyError(Exception):
    """Base exception for academy service errors."""

    status_code = 400

    def __init__(
        self,
        message: str,
        code: str = "ACADEMY_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(AcademyError):
    """Raised when input is rejected before any write happens."""

    status_code = 400

    def __init__(self, message: str, field: str = None, details: Optional[Dict[str, Any]] = None):
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(message=message, code="VALIDATION_ERROR", details=error_details)


class NotFoundError(AcademyError):
    """Raised when a referenced row does not exist."""

    status_code = 404

    def __init__(self, resource: str, resource_id: Any = None):
        super().__init__(
            message=f"{resource} not found",
            code="NOT_FOUND",
            details={"resource": resource, "id": str(resource_id) if resource_id is not None else None},
        )


class LessonLockedError(AcademyError):
    """Raised when completing a lesson whose prerequisite is not completed."""

    status_code = 409

    def __init__(self, lesson_id: Any):
        super().__init__(
            message="Complete the previous lesson to unlock this one",
            code="LESSON_LOCKED",
            details={"lesson_id": str(lesson_id)},
        )


class InvalidTransitionError(AcademyError):
    """Raised when a user task status change is not allowed."""

    status_code = 409

    def __init__(self, current: str, target: str):
        super().__init__(
            message=f"Cannot move task from '{current}' to '{target}'",
            code="INVALID_TRANSITION",
            details={"from": current, "to": target},
        )


class AuthenticationError(AcademyError):
    """Raised for bad credentials or an invalid session token."""

    status_code = 401

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message=message, code="AUTHENTICATION_FAILED")


class PermissionDeniedError(AcademyError):
    """Raised when a learner calls a manager-only operation."""

    status_code = 403

    def __init__(self, message: str = "Manager access required"):
        super().__init__(message=message, code="PERMISSION_DENIED")
