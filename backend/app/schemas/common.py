"""
Back Office API - Shared Response Schemas
==========================================

What:  Error and health payloads shared by every route.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "error": "Invalid request payload",
            "details": [{"field": "practiceName", "message": "...", "type": "..."}]
        }

    `details` is omitted when there is nothing structured to add. It is a
    list of field failures for validation errors and a short string for
    storage errors.
    """
    error: str = Field(description="Human-readable error message")
    details: Optional[Any] = Field(default=None, description="Structured failure details")


class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    storage: str = Field(description="Blob storage status: available, unavailable")
    uptime_seconds: float = Field(description="Seconds since service started")
