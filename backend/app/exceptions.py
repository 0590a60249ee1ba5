"""
Product API: Custom Exception Hierarchy
==========================================

What:  Application-specific exceptions for the product CRUD pipeline.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return JSON error responses with the matching HTTP status code.
Who:   Raised by the product store and route dependencies; caught by global handlers.

Exception Hierarchy:
    ProductAPIError (base)
    ├── ValidationError   → 400 Bad Request
    ├── NotFoundError     → 404 Not Found
    ├── InvalidIdError    → 500 Internal Server Error
    └── DatabaseError     → 500 Internal Server Error

The context dict is logged server-side and never returned to the client.
"""

from typing import Any, Dict, List, Optional


class ProductAPIError(Exception):
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


class ValidationError(ProductAPIError):
    """
    Raised when a product payload fails validation.

    When:    Missing required field, wrong type, empty string, non-object body.
    HTTP:    400 Bad Request

    `errors` holds the per-field problems as (field, message) pairs so callers
    can inspect them without parsing the message text.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Optional[List[Any]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.errors = list(errors or [])
        ctx = context or {}
        if self.errors:
            ctx["fields"] = [getattr(e, "field", str(e)) for e in self.errors]
        super().__init__(message=message, context=ctx)


class NotFoundError(ProductAPIError):
    """
    Raised when an id does not resolve to a stored product.

    HTTP:    404 Not Found

    The client always sees the fixed message "Product not found"; the id is
    kept in the context for logs.
    """

    def __init__(
        self,
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message="Product not found", context=ctx)
        self.resource_id = resource_id


class InvalidIdError(ProductAPIError):
    """
    Raised when an id is not a well-formed ObjectId (24 hex characters).

    HTTP:    500 Internal Server Error

    Surfaced the same way as any other store failure; the API makes no
    distinction between a malformed id and a broken database.
    """

    def __init__(
        self,
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource_id"] = resource_id
        super().__init__(
            message=f"'{resource_id}' is not a valid product identifier",
            context=ctx,
        )
        self.resource_id = resource_id


class DatabaseError(ProductAPIError):
    """
    Raised when a database operation fails unexpectedly.

    When:    Connection refused, server selection timeout, write concern failure.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. Driver details
    are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
