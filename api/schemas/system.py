"""System and health check schema models."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for health check."""
    status: str = Field(..., description="'ok' when the schema is current, otherwise 'degraded'")
    version: str
    schema_version: int
    latest_schema_version: int
