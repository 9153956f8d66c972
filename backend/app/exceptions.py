"""
Back Office API - Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for every failure the API reports.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) turn them into
       `{"error": <message>, "details"?: ...}` JSON responses.
Who:   Raised by services, stores and storage backends; caught by handlers.

Exception Hierarchy:
    BackOfficeError (base)
    ├── UnauthenticatedError     → 401 Unauthorized
    ├── NotFoundError            → 404 Not Found
    ├── InvalidPayloadError      → 422 Unprocessable Entity (+ details)
    ├── UploadValidationError    → 400 Bad Request
    ├── PersistenceError         → 500 (generic message, kind in context)
    └── StorageError             → 400 / 500 depending on kind

Failure kinds:
    Collaborators (the persistence store, blob storage) tag their errors with
    a FailureKind. Boundaries branch on the kind and never inspect the text
    of an underlying driver or OS error.
"""

import enum
from typing import Any, Dict, Optional


class FailureKind(str, enum.Enum):
    """Classification of a collaborator failure."""

    NOT_FOUND = "not_found"
    AUTH_FAILURE = "auth_failure"
    UNAVAILABLE = "unavailable"
    INVALID_URL = "invalid_url"
    UNKNOWN = "unknown"


class BackOfficeError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class UnauthenticatedError(BackOfficeError):
    """
    Raised when a request carries no valid session.

    HTTP:    401 Unauthorized
    Raised before any database access is attempted.
    """

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(BackOfficeError):
    """
    Raised when a requested resource does not exist.

    HTTP:    404 Not Found

    SQLAlchemy returns None for missing rows; services convert that None into
    this exception so routes stay free of branching on results.
    """

    def __init__(
        self,
        resource: str = "Resource",
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        super().__init__(message=message or f"{resource} not found", context=ctx)
        self.resource = resource


class InvalidPayloadError(BackOfficeError):
    """
    Raised when a request body fails schema validation.

    HTTP:    422 Unprocessable Entity

    `details` enumerates every failing field and IS returned to the client:

        {
            "error": "Invalid request payload",
            "details": [
                {"field": "practiceName", "message": "...", "type": "string_too_short"}
            ]
        }
    """

    default_message = "Invalid request payload"

    def __init__(
        self,
        details: Any = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message or self.default_message, context=context)
        self.details = details if details is not None else []


class UploadValidationError(BackOfficeError):
    """
    Raised when an uploaded file is missing, of the wrong type, or too large.

    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Invalid upload",
        field: Optional[str] = "file",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class PersistenceError(BackOfficeError):
    """
    Raised when the persistence layer fails.

    HTTP:    500 Internal Server Error

    The message is always generic ("Failed to fetch practice information").
    The kind and the original error type are kept in `context` for the
    server log; driver messages, SQL text and stack traces never reach the
    response body.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        kind: FailureKind = FailureKind.UNKNOWN,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["kind"] = kind.value
        super().__init__(message=message, context=ctx)
        self.kind = kind


class StorageError(BackOfficeError):
    """
    Raised by blob storage backends.

    HTTP:    400 for INVALID_URL, 500 otherwise (see main.py)

    The kind decides both the status code and the fixed client message;
    `message` itself is server-side detail.
    """

    def __init__(
        self,
        kind: FailureKind = FailureKind.UNKNOWN,
        message: str = "Blob storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["kind"] = kind.value
        super().__init__(message=message, context=ctx)
        self.kind = kind

