"""
Posts & Comments API — Custom Exception Hierarchy
===================================================

What:  Application-specific exceptions for the error scenarios of the API.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return `{"error": message}` JSON bodies with the right status code.
Who:   Raised by collections and the resource controller; caught by handlers.
When:  During request processing.

Exception Hierarchy:
    PostsApiError (base)
    ├── ValidationError       → 400 Bad Request (record rejected by a collection)
    ├── NotFoundError         → 404 Not Found
    └── OperationFailedError  → 400 or 500, chosen by the controller
"""

from typing import Any, Dict, Optional

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred"


class PostsApiError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  Client-facing error description
        context:  Additional debug info (logged, never returned to the client)
    """

    def __init__(
        self,
        message: str = UNKNOWN_ERROR_MESSAGE,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(PostsApiError):
    """
    Raised by a collection when a record fails its field rules, and by the
    resource routers when a request body is not an object.

    When:    Missing required field, wrong type, empty string, or a filter value
             that cannot be cast to the field's type.

    Example message:
        "post validation failed: title: Path `title` is required."
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


class NotFoundError(PostsApiError):
    """
    Raised when an identifier has no matching record.

    HTTP:    404 Not Found, body {"error": "Resource not found"}.
    The response never says which resource or id was missing; both go into
    the context for logging.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message="Resource not found", context=ctx)


class OperationFailedError(PostsApiError):
    """
    Raised by the resource controller when a collection call fails.

    The controller picks the status: 400 for create/update (the client can
    fix the body), 500 for list/get/delete. The message is the underlying
    failure's text, or UNKNOWN_ERROR_MESSAGE when it has none.
    """

    def __init__(
        self,
        message: str = UNKNOWN_ERROR_MESSAGE,
        status_code: int = 500,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.status_code = status_code


def error_message(exc: BaseException) -> str:
    """Message text of `exc`, or the generic fallback when it carries none."""
    if isinstance(exc, PostsApiError):
        return exc.message or UNKNOWN_ERROR_MESSAGE
    return str(exc) or UNKNOWN_ERROR_MESSAGE
