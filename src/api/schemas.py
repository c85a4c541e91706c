"""Pydantic schemas for API request/response validation."""

from pydantic import BaseModel, ConfigDict, Field

from src.core.library import MAX_USER_RATING, MIN_USER_RATING, LibraryEntry
from src.core.media import (
    MediaItem,
    MediaKind,
    Movie,
    NavigationTarget,
    TVShow,
    format_rating,
    get_image_url,
    navigation_target,
)


class NavigationResponse(BaseModel):
    """Where a client should navigate when an item is selected."""

    screen: str = Field(..., description="'MovieDetail' or 'TVShowDetail'")
    params: dict[str, int]

    @classmethod
    def from_target(cls, target: NavigationTarget) -> "NavigationResponse":
        return cls(screen=target.screen, params=dict(target.params))


class MediaItemResponse(BaseModel):
    """A catalog item as shown in lists and search results."""

    id: int
    kind: MediaKind
    title: str
    overview: str = ""
    vote_average: float
    rating_text: str
    backdrop_url: str | None = None
    poster_url: str | None = None

    @classmethod
    def from_item(cls, item: MediaItem) -> "MediaItemResponse":
        return cls(
            id=item.id,
            kind=item.kind,
            title=item.title,
            overview=item.overview,
            vote_average=item.vote_average,
            rating_text=format_rating(item.vote_average),
            backdrop_url=get_image_url(item.backdrop_path),
            poster_url=get_image_url(item.poster_path, size="w342"),
        )


class BannerSlideResponse(BaseModel):
    """One page of the home banner."""

    key: str
    title: str
    image_url: str | None = None
    rating_text: str
    navigation: NavigationResponse


class BannerResponse(BaseModel):
    """Slides for the home banner plus its rotation period."""

    kind: MediaKind
    rotation_interval_ms: int
    slides: list[BannerSlideResponse] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "kind": "movie",
                "rotation_interval_ms": 5000,
                "slides": [
                    {
                        "key": "movie-603",
                        "title": "The Matrix",
                        "image_url": "https://image.tmdb.org/t/p/w780/backdrop.jpg",
                        "rating_text": "★ 8.2",
                        "navigation": {"screen": "MovieDetail", "params": {"movieId": 603}},
                    }
                ],
            }
        }
    )


class LibraryItemCreate(BaseModel):
    """Schema for saving a catalog item to a user list."""

    media_id: int = Field(..., gt=0)
    media_kind: MediaKind
    title: str = Field(..., min_length=1, max_length=500)
    backdrop_path: str | None = None
    vote_average: float = Field(0.0, ge=0.0, le=10.0)

    def to_media_item(self) -> MediaItem:
        media_cls = TVShow if self.media_kind is MediaKind.TV else Movie
        return media_cls(
            id=self.media_id,
            title=self.title,
            vote_average=self.vote_average,
            backdrop_path=self.backdrop_path,
        )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "media_id": 1399,
                "media_kind": "tv",
                "title": "Game of Thrones",
                "backdrop_path": "/2OMB0ynKlyIenMJWI2Dy9IWT4c.jpg",
                "vote_average": 8.4,
            }
        }
    )


class LibraryRatingUpdate(BaseModel):
    """Schema for rating an entry on a user list."""

    user_rating: float = Field(..., ge=MIN_USER_RATING, le=MAX_USER_RATING)


class LibraryEntryResponse(BaseModel):
    """An entry on a user list."""

    entry_id: str
    media_id: int
    media_kind: MediaKind
    title: str
    backdrop_url: str | None = None
    vote_average: float
    added_at: str
    user_rating: float | None = None
    navigation: NavigationResponse

    @classmethod
    def from_entry(cls, entry: LibraryEntry) -> "LibraryEntryResponse":
        return cls(
            entry_id=entry.entry_id,
            media_id=entry.media_id,
            media_kind=entry.media_kind,
            title=entry.title,
            backdrop_url=get_image_url(entry.backdrop_path),
            vote_average=entry.vote_average,
            added_at=entry.added_at,
            user_rating=entry.user_rating,
            navigation=NavigationResponse.from_target(
                navigation_target(entry.to_media_item())
            ),
        )


class LibraryListResponse(BaseModel):
    """A user's entries on one list."""

    user_id: str
    list_name: str
    entries: list[LibraryEntryResponse] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Schema for error responses."""

    error: str
    detail: str | None = None
    code: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Store unavailable",
                "detail": "503 The service is currently unavailable.",
                "code": "SERVICE_UNAVAILABLE",
            }
        }
    )
