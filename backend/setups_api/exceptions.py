"""
Setups API - Custom Exception Hierarchy
=========================================

What:  Application-specific exceptions for each failure a request can hit.
Why:   Guards and services raise these; the handlers registered in main.py
       turn them into HTTP responses. No route builds an error response itself.
How:   Each exception carries a user-facing message and an optional context
       dict that is logged server-side but never returned for 5xx errors.

Exception Hierarchy:
    SetupsAPIError (base)
    ├── ValidationError     → 422 Unprocessable Entity
    ├── UnauthorizedError   → 401 Unauthorized
    ├── ForbiddenError      → 403 Forbidden
    ├── NotFoundError       → 404 Not Found
    └── DatabaseError       → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class SetupsAPIError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description
        context:  Additional debug info (logged, and only returned for 4xx errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(SetupsAPIError):
    """
    Raised when a create/update payload is malformed.

    HTTP: 422. FastAPI's own body validation failures are rendered in the
    same shape so clients see one format for both.
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

    @classmethod
    def from_pydantic(cls, exc: Any, message: str = "Invalid setup payload") -> "ValidationError":
        """Wrap a pydantic ValidationError, keeping its JSON-safe error list."""
        return cls(
            message=message,
            context={
                "errors": exc.errors(include_url=False, include_context=False, include_input=False)
            },
        )


class UnauthorizedError(SetupsAPIError):
    """Missing, malformed or unknown bearer token. HTTP: 401."""

    def __init__(
        self,
        message: str = "Authentication credentials were missing or invalid",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(SetupsAPIError):
    """
    Raised when an authenticated user acts on a record they don't own.

    HTTP: 403. Only ever raised after the record was found, so a missing
    record is reported as 404 instead.
    """

    def __init__(
        self,
        message: str = "You do not have permission to modify this resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(SetupsAPIError):
    """
    Raised when a requested record does not exist.

    SQLAlchemy returns None for missing rows; the guards convert that into
    this exception so the handler can answer 404.
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


class DatabaseError(SetupsAPIError):
    """
    Raised when a database operation fails unexpectedly.

    The message returned to the client is always generic. Driver errors,
    SQL and constraint names stay in the server logs.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
