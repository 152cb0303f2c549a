"""Common DTOs for API responses and error handling."""
from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response model."""
    detail: str = Field(..., description="Error message describing what went wrong")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Health status", example="healthy")


class RootResponse(BaseModel):
    """Root endpoint response model."""
    status: str = Field(..., description="API status", example="ok")
    service: str = Field(..., description="Service name", example="docshare-backend")
    version: str = Field(..., description="API version", example="0.1.0")


class PageMeta(BaseModel):
    """Pagination fields shared by list responses."""
    total: int = Field(..., description="Number of matches before pagination", example=42, ge=0)
    page: int = Field(..., description="Page number that was returned (1-based)", example=1, ge=1)
    limit: int = Field(..., description="Effective page size after clamping to 100", example=20, ge=1, le=100)
