"""Catalog routes: home banner, popular lists and search."""

import os

from fastapi import APIRouter, Depends, HTTPException, Query, status

from src.api.dependencies import get_catalog
from src.api.schemas import (
    BannerResponse,
    BannerSlideResponse,
    ErrorResponse,
    MediaItemResponse,
    NavigationResponse,
)
from src.core.banner_rotator import DEFAULT_ROTATION_INTERVAL, build_slide
from src.core.logging import get_logger
from src.core.media import MediaItem, MediaKind, navigation_target
from src.providers.tmdb_provider import TMDBError, TMDBProvider

logger = get_logger(__name__)

router = APIRouter(prefix="/catalog", tags=["catalog"])

CATALOG_RESPONSES: dict[int | str, dict[str, object]] = {
    502: {"model": ErrorResponse, "description": "Catalog request failed"},
    503: {"model": ErrorResponse, "description": "Catalog not configured"},
}


def rotation_interval_ms() -> int:
    return int(os.getenv("BANNER_ROTATION_MS", str(int(DEFAULT_ROTATION_INTERVAL * 1000))))


def _catalog_http_error(ex: ValueError | TMDBError) -> HTTPException:
    if isinstance(ex, TMDBError):
        logger.error("catalog_request_failed", status=ex.status, error=str(ex))
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"error": "Catalog request failed", "detail": str(ex), "code": "UPSTREAM"},
        )
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail={"error": "Catalog not configured", "detail": str(ex), "code": "CONFIGURATION"},
    )


async def _fetch_popular(catalog: TMDBProvider, kind: MediaKind, page: int) -> list[MediaItem]:
    try:
        return await catalog.popular(kind, page=page)
    except (ValueError, TMDBError) as ex:
        raise _catalog_http_error(ex) from ex


@router.get("/banner", response_model=BannerResponse, responses=CATALOG_RESPONSES)
async def banner(
    kind: MediaKind = MediaKind.MOVIE,
    limit: int = Query(10, ge=1, le=20),
    catalog: TMDBProvider = Depends(get_catalog),
) -> BannerResponse:
    """Slides for the home screen's rotating banner."""
    items = (await _fetch_popular(catalog, kind, page=1))[:limit]
    slides = []
    for item in items:
        slide = build_slide(item)
        slides.append(
            BannerSlideResponse(
                key=slide.key,
                title=slide.title,
                image_url=slide.image_url,
                rating_text=slide.rating_text,
                navigation=NavigationResponse.from_target(navigation_target(item)),
            )
        )
    logger.info("banner_served", kind=kind.value, slides=len(slides))
    return BannerResponse(
        kind=kind,
        rotation_interval_ms=rotation_interval_ms(),
        slides=slides,
    )


@router.get("/search", response_model=list[MediaItemResponse], responses=CATALOG_RESPONSES)
async def search(
    query: str = Query(..., min_length=1, max_length=200),
    page: int = Query(1, ge=1, le=500),
    catalog: TMDBProvider = Depends(get_catalog),
) -> list[MediaItemResponse]:
    """Search movies and TV shows by title."""
    try:
        items = await catalog.search(query, page=page)
    except (ValueError, TMDBError) as ex:
        raise _catalog_http_error(ex) from ex
    return [MediaItemResponse.from_item(item) for item in items]


@router.get("/{kind}/popular", response_model=list[MediaItemResponse], responses=CATALOG_RESPONSES)
async def popular(
    kind: MediaKind,
    page: int = Query(1, ge=1, le=500),
    catalog: TMDBProvider = Depends(get_catalog),
) -> list[MediaItemResponse]:
    """Popular movies or TV shows (the home screen's two tabs)."""
    items = await _fetch_popular(catalog, kind, page)
    return [MediaItemResponse.from_item(item) for item in items]
