"""Catalog media model.

Catalog payloads are turned into ``Movie`` or ``TVShow`` once, at ingestion,
so the rest of the code branches on a type instead of probing for fields.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, NamedTuple

IMAGE_BASE_URL = "https://image.tmdb.org/t/p"
DEFAULT_IMAGE_SIZE = "w780"

MOVIE_DETAIL_SCREEN = "MovieDetail"
TV_DETAIL_SCREEN = "TVShowDetail"


class MediaKind(Enum):
    MOVIE = "movie"
    TV = "tv"


@dataclass(frozen=True)
class Movie:
    """A feature film from the catalog."""

    id: int
    title: str
    vote_average: float = 0.0
    backdrop_path: str | None = None
    poster_path: str | None = None
    overview: str = ""
    release_date: str = ""

    @property
    def kind(self) -> MediaKind:
        return MediaKind.MOVIE


@dataclass(frozen=True)
class TVShow:
    """A television series from the catalog."""

    id: int
    title: str
    vote_average: float = 0.0
    backdrop_path: str | None = None
    poster_path: str | None = None
    overview: str = ""
    first_air_date: str = ""

    @property
    def kind(self) -> MediaKind:
        return MediaKind.TV


MediaItem = Movie | TVShow


class NavigationTarget(NamedTuple):
    """Screen name plus the params its route expects."""

    screen: str
    params: dict[str, int]


def _resolve_kind(
    payload: dict[str, Any], media_type: MediaKind | str | None
) -> MediaKind | None:
    if media_type is None:
        media_type = payload.get("media_type")
    if media_type is None:
        # Result pages from /movie/* and /tv/* carry no media_type; only TV
        # payloads have a first air date.
        return MediaKind.TV if "first_air_date" in payload else MediaKind.MOVIE
    try:
        return MediaKind(media_type)
    except ValueError:
        return None


def parse_media_item(
    payload: dict[str, Any], media_type: MediaKind | str | None = None
) -> MediaItem | None:
    """Build a Movie or TVShow from a raw catalog payload.

    Args:
        payload: One entry of a catalog result page.
        media_type: Force the kind instead of inferring it. Accepts a
            MediaKind or its string value.

    Returns:
        The parsed item, or None for unsupported kinds (e.g. "person").
    """
    kind = _resolve_kind(payload, media_type)
    if kind is None:
        return None

    common: dict[str, Any] = {
        "id": int(payload["id"]),
        "vote_average": float(payload.get("vote_average") or 0.0),
        "backdrop_path": payload.get("backdrop_path"),
        "poster_path": payload.get("poster_path"),
        "overview": payload.get("overview") or "",
    }
    if kind is MediaKind.TV:
        return TVShow(
            title=payload.get("name") or payload.get("title") or "",
            first_air_date=payload.get("first_air_date") or "",
            **common,
        )
    return Movie(
        title=payload.get("title") or payload.get("name") or "",
        release_date=payload.get("release_date") or "",
        **common,
    )


def parse_media_items(
    payloads: Iterable[dict[str, Any]], media_type: MediaKind | str | None = None
) -> list[MediaItem]:
    """Parse a result page, skipping unsupported kinds and repeated ids."""
    items: list[MediaItem] = []
    seen: set[tuple[MediaKind, int]] = set()
    for payload in payloads:
        item = parse_media_item(payload, media_type)
        if item is None:
            continue
        key = (item.kind, item.id)
        if key in seen:
            continue
        seen.add(key)
        items.append(item)
    return items


def get_image_url(
    path: str | None,
    size: str = DEFAULT_IMAGE_SIZE,
    base_url: str = IMAGE_BASE_URL,
) -> str | None:
    """Resolve a catalog image path to a full URL."""
    if not path:
        return None
    return f"{base_url.rstrip('/')}/{size}/{path.lstrip('/')}"


def format_rating(vote_average: float) -> str:
    """Format a rating to one decimal, rounding halves up (7.25 -> "7.3")."""
    rounded = Decimal(str(vote_average)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f"{rounded:.1f}"


def navigation_target(item: MediaItem) -> NavigationTarget:
    """Detail screen and route params for a selected item."""
    if isinstance(item, TVShow):
        return NavigationTarget(TV_DETAIL_SCREEN, {"showId": item.id})
    return NavigationTarget(MOVIE_DETAIL_SCREEN, {"movieId": item.id})
