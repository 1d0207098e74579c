"""
Local Library: Custom Exception Hierarchy
==========================================

What:  Application-specific exceptions for the error conditions that leave a
       request handler.
Why:   Global exception handlers (registered in main.py) map each type to a
       status code and render the generic error page, so handlers never
       build error responses themselves.
How:   Each exception carries a user-facing message, a status code and an
       optional context dict that is logged but never rendered.

Exception Hierarchy:
    LibraryError (base)        → 500
    ├── NotFoundError          → 404 (requested identifier has no record)
    └── DatabaseError          → 500 (storage engine reported an error)

Not in the hierarchy on purpose:
    Form validation failures are not exceptions. Create/update handlers
    re-render the form with a list of field errors instead of raising.
    A delete blocked by dependent copies is a rendered view as well.
"""

from typing import Any, Dict, Optional


class LibraryError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:     User-facing error description (safe to render)
        status_code: HTTP status used by the generic error handler
        context:     Additional debug info (logged, NOT rendered)
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NotFoundError(LibraryError):
    """
    Raised when a requested record does not exist.

    When:  Detail/update views for an unknown or malformed identifier.
    HTTP:  404 Not Found

    SQLAlchemy returns None for missing rows; services convert that None
    into this exception so the handler code stays on the success path.
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class DatabaseError(LibraryError):
    """
    Raised when a database operation fails.

    What:    A query, insert, update or delete raised SQLAlchemyError.
    HTTP:    500 Internal Server Error
    Retries: None. The error propagates to the generic handler.

    The rendered message is always generic; the original error type and the
    record involved go to the server log through `context`.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
