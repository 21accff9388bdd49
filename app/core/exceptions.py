"""Error hierarchy for the course platform API.

Every AppError is rendered as
    {"success": false, "error": {"code", "message", "details"}}
with the status code carried by the exception.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base exception for application errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)


class NotFoundError(AppError):
    """Resource not found error (404)."""

    def __init__(self, message: str = "Resource not found", resource: str | None = None):
        details = {"resource": resource} if resource else {}
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="NOT_FOUND",
            details=details,
        )


class ValidationError(AppError):
    """Validation error (400)."""

    def __init__(self, message: str = "Validation failed", field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="VALIDATION_ERROR",
            details=details,
        )


class ConflictError(AppError):
    """Resource conflict error (409)."""

    def __init__(self, message: str = "Resource conflict", resource: str | None = None):
        details = {"resource": resource} if resource else {}
        super().__init__(
            message=message,
            status_code=status.HTTP_409_CONFLICT,
            error_code="CONFLICT",
            details=details,
        )


class StateError(AppError):
    """Illegal state transition error (409)."""

    def __init__(self, message: str = "Invalid state transition", state: str | None = None):
        details = {"state": state} if state else {}
        super().__init__(
            message=message,
            status_code=status.HTTP_409_CONFLICT,
            error_code="INVALID_STATE",
            details=details,
        )


class UnauthorizedError(AppError):
    """Authentication required error (401)."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="UNAUTHORIZED",
        )


class ForbiddenError(AppError):
    """Access forbidden error (403)."""

    def __init__(self, message: str = "Access denied"):
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            error_code="FORBIDDEN",
        )


# ─────────────────────────────────────────────────────────────
# Domain errors
# ─────────────────────────────────────────────────────────────


class InvalidCredentialsError(UnauthorizedError):
    def __init__(self) -> None:
        super().__init__("Incorrect email or password")


class EmailAlreadyExistsError(ConflictError):
    def __init__(self, email: str):
        super().__init__(f"Email {email} is already registered", resource="user")


class CourseNotFoundError(NotFoundError):
    def __init__(self, course_id: object):
        super().__init__(f"Course {course_id} not found", resource="course")


class SectionNotFoundError(NotFoundError):
    def __init__(self, section_id: object):
        super().__init__(f"Section {section_id} not found", resource="section")


class LessonNotFoundError(NotFoundError):
    def __init__(self, lesson_id: object):
        super().__init__(f"Lesson {lesson_id} not found", resource="lesson")


class EnrollmentNotFoundError(NotFoundError):
    def __init__(self, message: str = "Enrollment not found"):
        super().__init__(message, resource="enrollment")


class ProgressNotFoundError(NotFoundError):
    def __init__(self, enrollment_id: object, lesson_id: object):
        super().__init__(
            f"No progress recorded for lesson {lesson_id} in enrollment {enrollment_id}",
            resource="progress",
        )


class ReviewNotFoundError(NotFoundError):
    def __init__(self, message: str = "Review not found"):
        super().__init__(message, resource="review")


class CertificateNotFoundError(NotFoundError):
    def __init__(self, message: str = "Certificate not found"):
        super().__init__(message, resource="certificate")


class AlreadyEnrolledError(ConflictError):
    def __init__(self, user_id: object, course_id: object):
        super().__init__(
            f"User {user_id} is already enrolled in course {course_id}",
            resource="enrollment",
        )


class NotEnrolledError(ForbiddenError):
    def __init__(self, message: str = "You must be enrolled in this course"):
        super().__init__(message)


class UnauthorizedReviewAccessError(ForbiddenError):
    def __init__(self, message: str = "You can only modify your own reviews"):
        super().__init__(message)


async def app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render an AppError as the standard error envelope."""
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        level,
        "%s %s failed: %s (code=%s, status=%d)",
        request.method,
        request.url.path,
        exc.message,
        exc.error_code,
        exc.status_code,
        extra={"details": exc.details},
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": {
                "code": exc.error_code,
                "message": exc.message,
                "details": exc.details if exc.details else None,
            },
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unhandled exceptions with a generic error response."""
    logger.exception("Unhandled exception: %s", str(exc))

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "details": None,
            },
        },
    )


def register_exception_handlers(app: FastAPI, *, debug: bool = False) -> None:
    """Register exception handlers with the FastAPI app.

    Args:
        app: The FastAPI application instance.
        debug: If True, unhandled exceptions propagate with stack traces.
    """
    app.add_exception_handler(AppError, app_exception_handler)  # type: ignore[arg-type]
    if not debug:
        app.add_exception_handler(Exception, unhandled_exception_handler)
