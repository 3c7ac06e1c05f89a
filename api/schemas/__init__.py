"""API Schema models for helloworldapp."""

from .system import HealthResponse

__all__ = ["HealthResponse"]
