"""
Geoturismo Backend — Error Taxonomy
=====================================

What:  A closed enumeration of error kinds plus the application exceptions
       that carry them.
How:   Each exception class declares its `kind`. A single exception handler
       (registered in main.py) translates kind → HTTP status and body shape,
       so services never deal with status codes.
Who:   Raised by services; caught by the global handler.

Kinds:
    ErrorKind.VALIDATION  → 400 Bad Request
    ErrorKind.AUTH        → 401 Unauthorized
    ErrorKind.NOT_FOUND   → 404 Not Found
    ErrorKind.CONFLICT    → 409 Conflict
    ErrorKind.INTERNAL    → 500 Internal Server Error

Response body:
    {"error": "<message>", "detalles": {...}, "request_id": "<id>"}

    `detalles` is omitted when empty. INTERNAL errors always answer with a
    generic message; their context is logged server-side only.
"""

import enum
from typing import Any, Dict, Optional


class ErrorKind(str, enum.Enum):
    """Closed set of failure categories exposed by the API."""

    VALIDATION = "validation"
    AUTH = "auth"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"

    @property
    def status_code(self) -> int:
        return _STATUS_BY_KIND[self]


_STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.AUTH: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INTERNAL: 500,
}


class GeoturismoError(Exception):
    """
    Base exception for all Geoturismo application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional info; returned as `detalles` except for INTERNAL errors
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str = "Ha ocurrido un error inesperado",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(GeoturismoError):
    """
    Raised when client input fails validation.

    When:    Missing required fields, empty partial updates, unknown category,
             inconsistent dates, duplicate ids in a request list.
    """

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str = "Faltan campos obligatorios",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["campo"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(GeoturismoError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing records; services convert that
    into NotFoundError so the handler can answer 404.
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        resource: str = "recurso",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"No se ha encontrado {resource}"
        if resource_id is not None:
            message = f"No se ha encontrado {resource} con id '{resource_id}'"
        ctx = context or {}
        ctx["recurso"] = resource
        if resource_id is not None:
            ctx["id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(GeoturismoError):
    """Raised when a write would duplicate a unique field (username, email, name...)."""

    kind = ErrorKind.CONFLICT

    def __init__(
        self,
        message: str = "El recurso ya existe",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["campo"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(GeoturismoError):
    """
    Raised when supplied credentials do not match the stored hash.

    Distinct from NotFoundError: an unknown email is a 404, a wrong
    password for a known email is a 401.
    """

    kind = ErrorKind.AUTH

    def __init__(
        self,
        message: str = "Credenciales incorrectas",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(GeoturismoError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic. Driver error
    text, statement and parameters stay in the server log.
    """

    kind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str = "Error en la base de datos",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
