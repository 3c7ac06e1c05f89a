"""helloworldapp - API Module.

This module provides the FastAPI application serving the static pages,
the path-variable demo route and the health check.
"""

from .main import create_app

__all__ = ["create_app"]
