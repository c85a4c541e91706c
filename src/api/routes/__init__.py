"""API routes package.

This module contains all route handlers for the HTTP API.
"""

from src.api.routes.catalog import router as catalog_router
from src.api.routes.health import router as health_router
from src.api.routes.library import router as library_router

__all__ = [
    "catalog_router",
    "health_router",
    "library_router",
]
