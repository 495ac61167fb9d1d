"""
Singers API — Custom Exception Hierarchy
==========================================

What:  Application-specific exceptions for request-level failures.
How:   Each exception carries a message and optional context dict. Global
       handlers registered in main.py turn them into 400 responses with the
       body shape each client-facing error uses.
Who:   Raised by routes and key conversion; caught by global handlers.

Exception Hierarchy:
    SingersAPIError (base)
    ├── ValidationError     → 400, validation error object (embedded create/patch)
    ├── InvalidInputError   → 400, {"error": "Invalid Input"} (relational payloads)
    ├── InvalidKeyError     → 400, {"error": message} (path id not convertible)
    ├── InsertFailedError   → 400, {"error": {"message": "Failed to insert Document"}}
    ├── EmptyResultError    → 400, {"error": "No documents in database"}
    └── DatabaseError       → 400, {"error": message}

Services never raise on database failure: they return DbResult(error=...).
Routes inspect the result and raise one of the errors above, so each failed
request produces exactly one response.
"""

from typing import Any, Dict, List, Optional


class SingersAPIError(Exception):
    """
    Base exception for all Singers API errors.

    Attributes:
        message:  Client-facing error description
        context:  Additional debug info (logged, not returned unless stated)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(SingersAPIError):
    """
    Raised when a request body fails its schema.

    `details` is a list of {"message", "path", "type"} entries, one per
    failing field, returned to the client as-is.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        details: Optional[List[Dict[str, Any]]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.details = details or []

    def to_body(self) -> Dict[str, Any]:
        return {
            "name": "ValidationError",
            "message": self.message,
            "details": self.details,
        }


class InvalidInputError(SingersAPIError):
    """Raised for relational payloads; the response never names the bad field."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Invalid Input", context=context)


class InvalidKeyError(SingersAPIError):
    """
    Raised when a path id cannot be turned into the native primary key.

    When:    GET /singer/not-a-uuid (embedded) or GET /singer/abc (relational)
    """

    def __init__(self, raw_key: str, expected: str):
        message = f"'{raw_key}' is not a valid {expected}"
        super().__init__(message=message, context={"raw_key": raw_key})
        self.raw_key = raw_key


class InsertFailedError(SingersAPIError):
    """Raised when the database rejects an insert; handled by the catch-all path."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Failed to insert Document", context=context)


class EmptyResultError(SingersAPIError):
    """
    Raised when a list or get matched no documents.

    HTTP:    400 {"error": "No documents in database"}, not 404. Clients of the
             service rely on this shape.
    """

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="No documents in database", context=context)


class DatabaseError(SingersAPIError):
    """
    Raised by routes when a service handed back a failed DbResult.

    The raw driver error text is returned to the client as {"error": message}.
    """

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
