"""
Exercise Tracker — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the error scenarios of the API.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the right HTTP status.
Who:   Raised by services, schemas and dependencies; caught by global handlers.

Exception Hierarchy:
    ExerciseTrackerError (base)
    ├── ValidationError        → 400 Bad Request
    ├── NotFoundError          → 404 Not Found
    ├── ConflictError          → 409 Conflict
    ├── StoreUnavailableError  → 503 Service Unavailable
    └── DatabaseError          → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class ExerciseTrackerError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info; returned as `details` only for
                  client errors, logged server-side for the rest
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ExerciseTrackerError):
    """
    Raised when client input fails validation.

    When:    Empty username, missing description, non-numeric duration,
             out-of-range values, malformed body.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "duration must be a whole number of minutes",
            "details": {"field": "duration"},
            "request_id": "a1b2c3d4"
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(ExerciseTrackerError):
    """
    Raised when a referenced resource does not exist.

    When:    A user id in the path is malformed or unknown.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(ExerciseTrackerError):
    """
    Raised when a write would violate a uniqueness rule.

    When:    Creating a user whose username is already taken.
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class StoreUnavailableError(ExerciseTrackerError):
    """
    Raised when a store-backed route is reached with no store configured.

    HTTP:    503 Service Unavailable
    """

    def __init__(
        self,
        message: str = "The exercise store is not configured",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(ExerciseTrackerError):
    """
    Raised when store operations fail unexpectedly.

    When:    Connection lost mid-query, write failure, driver error.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic; the original
    exception type and identifiers are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
