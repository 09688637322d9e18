"""
Blog API Backend — Custom Exception Hierarchy
===============================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Custom exceptions enable targeted error handling with appropriate HTTP
       status codes and messages that never leak internal details.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return `{"error": <message>}` with the matching HTTP status code.
Who:   Raised by services and the database initializer; caught by handlers.

Exception Hierarchy:
    BlogAPIError (base)
    ├── ValidationError             → 400 Bad Request (client can fix)
    ├── NotFoundError               → 404 Not Found
    ├── DatabaseError               → 500 Internal Server Error
    └── StorageInitializationError  → fatal at startup (no HTTP mapping)

Design Decision:
    Exceptions propagate naturally through the call stack, so route handlers
    stay free of status-code branching. The alternative, returning
    Result[T, Error] objects, would force every caller to check for failure.
"""

from typing import Any, Dict, Optional


class BlogAPIError(Exception):
    """
    Base exception for all Blog API application errors.

    Attributes:
        message:  Client-facing error description (safe to return in API response)
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


class ValidationError(BlogAPIError):
    """
    Raised when client input fails validation.

    When:    Missing or empty title/content, malformed JSON body, non-integer id.
    HTTP:    400 Bad Request
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


class NotFoundError(BlogAPIError):
    """
    Raised when a requested resource does not exist.

    When:    GET/PUT/DELETE /api/posts/{id} with an id that has no row.
    HTTP:    404 Not Found

    SQLAlchemy returns None (or a zero rowcount) for missing records; the
    service layer converts that into this exception.
    """

    def __init__(
        self,
        resource: str = "Post",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)
        self.resource_id = resource_id


class DatabaseError(BlogAPIError):
    """
    Raised when a database statement fails.

    HTTP:    500 Internal Server Error

    Security Note:
        The message is a generic per-operation string ("Failed to create post").
        The driver error is logged server-side and kept in `context` only.
    """

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StorageInitializationError(BlogAPIError):
    """
    Raised when the backing store cannot be provisioned on startup.

    When:    Storage directory not creatable, database file not openable,
             table creation or seeding failed.
    Effect:  Propagates out of the application lifespan; uvicorn aborts
             startup and the process exits non-zero.
    """

    def __init__(
        self,
        message: str = "Could not initialize the database",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
