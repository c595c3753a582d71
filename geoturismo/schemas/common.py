"""
Geoturismo Backend — Shared Response Schemas
==============================================

What:  Error, message and health payloads shared by every router.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "Faltan campos obligatorios",
            "detalles": {"campos": ["nombre"]},
            "request_id": "3f2a9c1e"
        }
    """
    error: str = Field(description="Human-readable error description")
    detalles: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class MensajeResponse(BaseModel):
    """Acknowledgement for mutations that return no entity (deletions)."""
    mensaje: str


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
