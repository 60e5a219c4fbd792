"""API response schemas.

Pydantic models for API serialization.

Version: 1.0.0
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class TokenResponse(BaseModel):
    """Response model for GET /token endpoint."""

    token: str = Field(description="CSRF token to post back with the form")


class ErrorResponse(BaseModel):
    """Ajax error body for POST /contact."""

    status: int = Field(description="HTTP status code (400)")
    detail: str = Field(description="Why the submission was rejected")


class HealthResponse(BaseModel):
    """Response model for GET /health endpoint."""

    status: str = Field(description="Overall service status")
    smtp: str = Field(description="SMTP configuration status")
    version: str = Field(description="Service version")
    timestamp: datetime = Field(default_factory=lambda: datetime.now())
