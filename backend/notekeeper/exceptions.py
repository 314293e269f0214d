"""
NoteKeeper Backend: Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for each error class the API exposes.
How:   Each exception carries a user-facing message, a machine-readable code
       and an optional context dict. Global exception handlers (registered in
       main.py) turn them into JSON error responses with the right status.
Who:   Raised by the validator, identifier service, duplicate guard, stores
       and services; caught only by the global handlers.

Exception Hierarchy:
    NoteKeeperError (base)
    ├── ValidationError           → 400 Bad Request
    ├── MalformedIdError          → 400 Bad Request
    ├── DuplicateError            → 400 Bad Request
    ├── NotFoundError             → 404 Not Found
    ├── AuthenticationError       → 401 Unauthorized
    └── StorageUnavailableError   → 503 Service Unavailable
"""

from typing import Any, Dict, Optional


class NoteKeeperError(Exception):
    """
    Base exception for all NoteKeeper application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code: int = 500
    code: str = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NoteKeeperError):
    """
    Raised when a request body fails field validation.

    When:    Missing required field, wrong type, too short.
    HTTP:    400 Bad Request

    Example response:
        {"error": "`content` is required", "code": "validation_error", ...}
    """

    status_code = 400
    code = "validation_error"

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


class MalformedIdError(NoteKeeperError):
    """
    Raised when a path identifier does not have the identifier format.

    Distinct from NotFoundError: "asdf" is malformed (400), a well-formed
    UUID with no matching row is not found (404).
    """

    status_code = 400
    code = "malformed_id"

    def __init__(
        self,
        raw_id: str,
        resource: str = "resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        ctx["raw_id"] = raw_id
        super().__init__(message="malformatted id", context=ctx)
        self.raw_id = raw_id


class DuplicateError(NoteKeeperError):
    """
    Raised when a create would violate a uniqueness constraint.

    The message names the violated constraint, e.g.
    "expected `username` to be unique".
    """

    status_code = 400
    code = "duplicate"

    def __init__(
        self,
        field: str,
        value: Any = None,
        resource: str = "resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} validation failed: {field}: expected `{field}` to be unique"
        ctx = context or {}
        ctx["field"] = field
        ctx["resource"] = resource
        super().__init__(message=message, context=ctx)
        self.field = field
        self.value = value


class NotFoundError(NoteKeeperError):
    """
    Raised when a requested resource does not exist.

    When:    GET /api/notes/{id} with a well-formed but unknown UUID.
    HTTP:    404 Not Found
    """

    status_code = 404
    code = "not_found"

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


class AuthenticationError(NoteKeeperError):
    """Raised when login credentials do not match a stored user."""

    status_code = 401
    code = "authentication_failed"

    def __init__(
        self,
        message: str = "invalid username or password",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StorageUnavailableError(NoteKeeperError):
    """
    Raised when the database cannot be reached or fails mid-operation.

    When:    Connection refused or lost, pool timeout, driver I/O error.
    HTTP:    503 Service Unavailable

    The client always gets a generic message. The operation name and the
    driver error type are kept in context for the server log.
    """

    status_code = 503
    code = "storage_unavailable"

    def __init__(
        self,
        message: str = "The data store is temporarily unavailable. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
