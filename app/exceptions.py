"""
Inventory API - Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for the error scenarios of the API.
How:   Each exception class carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return `{"error": <message>}` JSON bodies with the matching status.
Who:   Raised by ProductService; caught by the handlers in main.py.

Exception Hierarchy:
    InventoryAPIError (base)
    ├── ValidationError       → 400 Bad Request
    ├── NotFoundError         → 404 Not Found
    │   └── InvalidIdError    → 404 Not Found (malformed identifier)
    └── StoreError            → 500 Internal Server Error
"""

from typing import Any, Dict, Iterable, Mapping, Optional

PRODUCT_NOT_FOUND = "Producto no encontrado"


class InventoryAPIError(Exception):
    """
    Base exception for all Inventory API errors.

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


class ValidationError(InventoryAPIError):
    """
    Raised when a product payload fails schema validation.

    When:    Missing `name`/`price`, wrong field types, explicit nulls on update.
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


class NotFoundError(InventoryAPIError):
    """
    Raised when the referenced product does not exist.

    When:    GET/PUT/DELETE on /api/productos/{id} with an unknown id.
    HTTP:    404 Not Found

    The driver returns None for missing documents; the service converts
    that None into this exception.
    """

    def __init__(
        self,
        resource_id: Optional[str] = None,
        message: str = PRODUCT_NOT_FOUND,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource_id = resource_id


class InvalidIdError(NotFoundError):
    """
    Raised when an identifier is not a well-formed ObjectId.

    HTTP:    404 Not Found. A malformed id can never match a stored record,
             so clients see the same body as for an absent one.
    """

    def __init__(
        self,
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["reason"] = "malformed_id"
        super().__init__(resource_id=resource_id, context=ctx)


class StoreError(InventoryAPIError):
    """
    Raised when a MongoDB operation fails (connectivity, timeouts, server errors).

    HTTP:    500 Internal Server Error

    The client receives a generic message; the driver's error text is kept
    in `context` and logged server-side only.
    """

    def __init__(
        self,
        message: str = "Error del servidor al acceder a la base de datos",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


def describe_validation_errors(errors: Iterable[Mapping[str, Any]]) -> str:
    """
    Render Pydantic error dicts as a single human-readable line.

    Accepts the output of both `pydantic.ValidationError.errors()` and
    `fastapi.exceptions.RequestValidationError.errors()`; the leading
    "body" segment of request locations is dropped.

    Example:
        "name: Field required; price: Input should be a valid number"
    """
    parts = []
    for error in errors:
        loc = [str(p) for p in error.get("loc", ()) if p != "body"]
        msg = error.get("msg", "Invalid value")
        parts.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return "; ".join(parts) or "Validation failed"
