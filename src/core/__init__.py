"""Core business logic.

Platform-agnostic pieces: the media model, the banner carousel, the document
store gateway and the user library built on it, plus error handling, logging
and health checks.
"""

from src.core.banner_rotator import (
    DEFAULT_ROTATION_INTERVAL,
    BannerRotator,
    BannerSlide,
    DisplaySurface,
    Navigator,
)
from src.core.carousel_logic import (
    CarouselController,
    CarouselState,
    PaginationDot,
    interpolate,
)
from src.core.errors import (
    ErrorCategory,
    PermanentError,
    StoreError,
    TransientError,
    classify_error,
    is_retryable,
    retry_with_backoff,
)
from src.core.gateway import DocumentStoreGateway, StoreResult
from src.core.health import (
    HealthChecker,
    HealthReport,
    ServiceCheck,
    ServiceStatus,
)
from src.core.library import LibraryEntry, LibraryList, UserLibrary
from src.core.logging import (
    bind_contextvars,
    clear_contextvars,
    configure_logging,
    get_logger,
    unbind_contextvars,
)
from src.core.media import (
    MediaItem,
    MediaKind,
    Movie,
    NavigationTarget,
    TVShow,
    format_rating,
    get_image_url,
    navigation_target,
    parse_media_item,
    parse_media_items,
)

__all__ = [
    # Banner carousel
    "BannerRotator",
    "BannerSlide",
    "CarouselController",
    "CarouselState",
    "DEFAULT_ROTATION_INTERVAL",
    "DisplaySurface",
    "Navigator",
    "PaginationDot",
    "interpolate",
    # Error handling
    "ErrorCategory",
    "PermanentError",
    "StoreError",
    "TransientError",
    "classify_error",
    "is_retryable",
    "retry_with_backoff",
    # Document store gateway and user lists
    "DocumentStoreGateway",
    "LibraryEntry",
    "LibraryList",
    "StoreResult",
    "UserLibrary",
    # Health checks
    "HealthChecker",
    "HealthReport",
    "ServiceCheck",
    "ServiceStatus",
    # Logging
    "bind_contextvars",
    "clear_contextvars",
    "configure_logging",
    "get_logger",
    "unbind_contextvars",
    # Media model
    "MediaItem",
    "MediaKind",
    "Movie",
    "NavigationTarget",
    "TVShow",
    "format_rating",
    "get_image_url",
    "navigation_target",
    "parse_media_item",
    "parse_media_items",
]
