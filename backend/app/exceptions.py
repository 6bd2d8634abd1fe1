"""
Notes API — Custom Exception Hierarchy
========================================

What:  Defines application-specific exceptions for the Notes API error taxonomy.
Why:   Custom exceptions let services signal failures without knowing about HTTP.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services and the store layer; caught by global handlers.
When:  During request processing.

Exception Hierarchy:
    NotesAPIError (base)
    ├── NotFoundError     → 404 Not Found
    └── StoreError        → 500 Internal Server Error (store message passed through)
"""

from typing import Any, Dict, Optional


class NotesAPIError(Exception):
    """
    Base exception for all Notes API errors.

    Attributes:
        message:  Error description returned in the API response
        context:  Additional debug info (logged, not returned)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NotFoundError(NotesAPIError):
    """
    Raised when a requested note cannot be read.

    HTTP:    404 Not Found

    The store's read path does not separate "absent" from "read failed",
    so both surface here with the same fixed message.
    """

    def __init__(
        self,
        resource: str = "Note",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)


class StoreError(NotesAPIError):
    """
    Raised when a remote store call (key generation, write, read, delete) fails.

    HTTP:    500 Internal Server Error

    The message is the underlying client error text, unchanged. It is
    returned to the caller as-is; there is no redaction.
    """

    def __init__(
        self,
        message: str = "Remote store operation failed",
        operation: Optional[str] = None,
        path: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if operation:
            ctx["operation"] = operation
        if path:
            ctx["path"] = path
        super().__init__(message=message, context=ctx)
        self.operation = operation
        self.path = path
