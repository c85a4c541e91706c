"""TMDB catalog provider.

Fetches movie and TV listings from The Movie Database v3 API and returns
them as parsed MediaItems. Authentication uses a v4 read access token sent
as a bearer header.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import aiohttp

from src.core.errors import PermanentError, TransientError, retry_with_backoff
from src.core.media import MediaItem, MediaKind, parse_media_items

logger = logging.getLogger(__name__)

TMDB_BASE_URL = "https://api.themoviedb.org/3"
REQUEST_TIMEOUT_SECONDS = 10
TRENDING_MEDIA = ("all", "movie", "tv")
TRENDING_WINDOWS = ("day", "week")


class TMDBError(Exception):
    """Raised when a catalog request fails.

    Attributes:
        status: HTTP status of the failed response, if one was received.
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class TMDBProvider:
    """Async TMDB client for the listings the app browses.

    Example:
        catalog = TMDBProvider()
        movies = await catalog.popular_movies()
        shows = await catalog.popular_tv(page=2)
    """

    def __init__(
        self,
        access_token: str | None = None,
        language: str = "en-US",
        base_url: str = TMDB_BASE_URL,
        max_retries: int = 3,
        base_delay: float = 1.0,
    ) -> None:
        """Initialize the provider.

        Args:
            access_token: TMDB read access token. Falls back to the
                TMDB_ACCESS_TOKEN environment variable at request time.
            language: Language for titles and overviews.
            base_url: API root, overridable for tests.
            max_retries: Retries for transient failures (429, 5xx, network).
            base_delay: First backoff delay in seconds.
        """
        self._access_token = access_token
        self._language = language
        self._base_url = base_url.rstrip("/")
        self._max_retries = max_retries
        self._base_delay = base_delay

    @property
    def is_configured(self) -> bool:
        return bool(self._access_token or os.environ.get("TMDB_ACCESS_TOKEN"))

    def _headers(self) -> dict[str, str]:
        token = self._access_token or os.environ.get("TMDB_ACCESS_TOKEN")
        if not token:
            raise ValueError(
                "TMDB_ACCESS_TOKEN environment variable is not set. "
                "Please set it or provide an access_token parameter."
            )
        return {"Authorization": f"Bearer {token}", "Accept": "application/json"}

    async def _request(
        self, path: str, params: dict[str, str], headers: dict[str, str]
    ) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        async with aiohttp.ClientSession() as session:
            async with session.get(
                url,
                params=params,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=REQUEST_TIMEOUT_SECONDS),
            ) as response:
                if response.status != 200:
                    error_text = await response.text()
                    raise TMDBError(
                        f"TMDB request to {path} failed with status {response.status}: "
                        f"{error_text[:200]}",
                        status=response.status,
                    )
                data: dict[str, Any] = await response.json()
                return data

    async def _get(self, path: str, **params: Any) -> dict[str, Any]:
        headers = self._headers()
        query = {"language": self._language}
        query.update({key: str(value) for key, value in params.items()})

        logger.debug("Requesting TMDB %s", path)
        try:
            return await retry_with_backoff(
                self._request,
                path,
                query,
                headers,
                max_retries=self._max_retries,
                base_delay=self._base_delay,
            )
        except (TransientError, PermanentError) as ex:
            original = ex.original_error
            status = original.status if isinstance(original, TMDBError) else None
            logger.error("TMDB request to %s failed: %s", path, ex)
            raise TMDBError(str(ex), status=status) from ex

    async def _list(
        self, path: str, media_type: MediaKind | None = None, **params: Any
    ) -> list[MediaItem]:
        data = await self._get(path, **params)
        items = parse_media_items(data.get("results", []), media_type)
        logger.debug("TMDB %s returned %d items", path, len(items))
        return items

    async def popular_movies(self, page: int = 1) -> list[MediaItem]:
        return await self._list("/movie/popular", MediaKind.MOVIE, page=page)

    async def popular_tv(self, page: int = 1) -> list[MediaItem]:
        return await self._list("/tv/popular", MediaKind.TV, page=page)

    async def popular(self, kind: MediaKind, page: int = 1) -> list[MediaItem]:
        if kind is MediaKind.TV:
            return await self.popular_tv(page)
        return await self.popular_movies(page)

    async def trending(self, media: str = "all", window: str = "week") -> list[MediaItem]:
        """Trending items; ``media`` is all, movie or tv and ``window`` day or week."""
        if media not in TRENDING_MEDIA:
            raise ValueError(f"media must be one of {TRENDING_MEDIA}, got {media!r}")
        if window not in TRENDING_WINDOWS:
            raise ValueError(f"window must be one of {TRENDING_WINDOWS}, got {window!r}")
        return await self._list(f"/trending/{media}/{window}")

    async def search(self, query: str, page: int = 1) -> list[MediaItem]:
        """Search movies and TV shows; people in the results are dropped."""
        if not query.strip():
            return []
        return await self._list(
            "/search/multi", query=query.strip(), page=page, include_adult="false"
        )
