"""API Routers for helloworldapp."""

from .system import router as system_router
from .pages import router as pages_router

__all__ = [
    "system_router",
    "pages_router",
]
