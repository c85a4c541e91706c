"""HTTP API package.

Exposes the catalog (banner, popular lists, search) and the per-user
favorites and watchlist over FastAPI.
"""

from src.api.app import create_app
from src.api.dependencies import get_catalog, get_gateway, get_library

__all__ = [
    "create_app",
    "get_catalog",
    "get_gateway",
    "get_library",
]
