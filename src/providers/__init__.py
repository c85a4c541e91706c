"""Catalog provider implementations."""

from src.providers.tmdb_provider import TMDBError, TMDBProvider

__all__ = [
    "TMDBError",
    "TMDBProvider",
]
