"""
ParcelTrack Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the error scenarios of the API.
How:   Each exception class carries a user-facing message and an optional
       context dict. Global exception handlers (registered in main.py) catch
       these and return structured JSON error responses.
Who:   Raised by the record store and services; caught by global handlers.

Exception Hierarchy:
    ParcelTrackError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── NotFoundError            → 404 Not Found
    ├── StorageError
    │   ├── StorageReadError     → 500 (record store unreadable or malformed)
    │   └── StorageWriteError    → 500 (record store could not be written)
    └── FileStorageError         → 500 (uploaded photo could not be saved)
"""

from typing import Any, Dict, Optional


class ParcelTrackError(Exception):
    """
    Base exception for all ParcelTrack application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client
                  unless the handler says otherwise)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ParcelTrackError):
    """
    Raised when client input fails validation.

    When:    Required package fields missing on create; photo upload with an
             unsupported type, an empty body or an oversize body.
    HTTP:    400 Bad Request

    The context is returned to the client as `details`, so it names the
    failing constraint (e.g. {"missing_fields": ["senderName"]}).
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = dict(context or {})
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(ParcelTrackError):
    """
    Raised when a requested resource does not exist.

    When:    GET/PUT /api/packages/{id} or GET /edit/{id} with an unknown id.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id:
                message = f"{resource} with ID '{resource_id}' was not found"
        ctx = dict(context or {})
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource_id = resource_id


class StorageError(ParcelTrackError):
    """
    Base for record store failures.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic; the store path and
    the underlying OS/JSON error travel in `context` and are only logged.
    """


class StorageReadError(StorageError):
    """
    Raised when the persisted collection cannot be read.

    When:    The store file exists but is unreadable (permissions, I/O error),
             is not valid JSON, is not a JSON array, or holds an element that
             does not validate as a package record.
    """

    def __init__(
        self,
        message: str = "Could not read package records. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StorageWriteError(StorageError):
    """
    Raised when the persisted collection cannot be written.

    When:    Disk full, permission denied, directory missing, or the atomic
             replace of the store file failed. The previous file is left intact.
    """

    def __init__(
        self,
        message: str = "Could not save package records. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(ParcelTrackError):
    """
    Raised when an uploaded photo cannot be written to the uploads directory.

    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
