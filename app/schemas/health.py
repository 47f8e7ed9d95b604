"""Health check API schemas."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health (liveness)."""

    status: str = Field(default="ok", description="Service status")
    version: str | None = None


class ReadinessResponse(BaseModel):
    """Response for GET /health/ready when ready."""

    status: str = Field(default="ok", description="Readiness status")
    database: str = Field(default="ok", description="Database probe result")


class ReadinessErrorResponse(BaseModel):
    """Response for GET /health/ready when the database is unavailable (503)."""

    status: str = Field(default="not_ready", description="Readiness status")
    database: str = Field(..., description="Database probe result")
    message: str = Field(..., description="Reason (e.g. database unreachable)")
