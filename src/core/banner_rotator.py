"""Auto-rotating banner of catalog media.

The rotator owns the carousel state and the asyncio task that advances it.
The display surface and the navigator are supplied by the host screen.

Example:
    async with BannerRotator(items, surface, navigator, page_width=390) as banner:
        surface.on_scroll = banner.on_scroll
        ...
    # leaving the block cancels the rotation task
"""

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass
from types import TracebackType
from typing import Protocol

from src.core.carousel_logic import CarouselController, CarouselState, PaginationDot
from src.core.logging import get_logger
from src.core.media import (
    DEFAULT_IMAGE_SIZE,
    MediaItem,
    NavigationTarget,
    format_rating,
    get_image_url,
    navigation_target,
)

logger = get_logger(__name__)

DEFAULT_ROTATION_INTERVAL = 5.0  # seconds


class DisplaySurface(Protocol):
    """Horizontally paged view the banner renders into."""

    def scroll_to(self, x: float, animated: bool) -> None: ...


class Navigator(Protocol):
    """Dispatches navigation to a named screen."""

    def navigate(self, screen: str, params: dict[str, int]) -> None: ...


@dataclass(frozen=True)
class BannerSlide:
    """What one banner page shows."""

    key: str
    title: str
    image_url: str | None
    rating_text: str


def build_slide(item: MediaItem, image_size: str = DEFAULT_IMAGE_SIZE) -> BannerSlide:
    return BannerSlide(
        key=f"{item.kind.value}-{item.id}",
        title=item.title,
        image_url=get_image_url(item.backdrop_path, size=image_size),
        rating_text=f"★ {format_rating(item.vote_average)}",
    )


class BannerRotator:
    """Rotates through media items on a fixed interval.

    The rotation task exists only while the rotator is active and the item
    list is non-empty. Any change of the current index caused by a drag, or a
    new item list, restarts the task so the next tick is a full interval away.
    """

    def __init__(
        self,
        items: Iterable[MediaItem],
        surface: DisplaySurface,
        navigator: Navigator,
        page_width: float,
        interval: float = DEFAULT_ROTATION_INTERVAL,
        image_size: str = DEFAULT_IMAGE_SIZE,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._controller: CarouselController[MediaItem] = CarouselController()
        self._state: CarouselState[MediaItem] = CarouselState(
            items=list(items), page_width=page_width
        )
        self._surface = surface
        self._navigator = navigator
        self._interval = interval
        self._image_size = image_size
        self._active = False
        self._task: asyncio.Task[None] | None = None
        self._retired: set[asyncio.Task[None]] = set()

    async def __aenter__(self) -> "BannerRotator":
        await self.activate()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.deactivate()

    @property
    def state(self) -> CarouselState[MediaItem]:
        return self._state

    @property
    def current_index(self) -> int:
        return self._state.current_index

    @property
    def items(self) -> list[MediaItem]:
        return self._state.items

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def is_rotating(self) -> bool:
        return self._task is not None and not self._task.done()

    async def activate(self) -> None:
        """Start rotating. Does nothing if already active."""
        if self._active:
            return
        self._active = True
        self._restart_timer()
        logger.debug(
            "banner_activated",
            items=self._state.total_items,
            rotating=self.is_rotating,
        )

    async def deactivate(self) -> None:
        """Stop rotating and wait for every rotation task to finish."""
        self._active = False
        self._stop_timer()
        pending = list(self._retired)
        self._retired.clear()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        logger.debug("banner_deactivated", index=self._state.current_index)

    def set_items(self, items: Iterable[MediaItem]) -> None:
        """Replace the item list and start over from the first page."""
        self._state = CarouselState(items=list(items), page_width=self._state.page_width)
        self._surface.scroll_to(0.0, animated=False)
        if self._active:
            self._restart_timer()

    def tick(self) -> None:
        """Advance one page and scroll the surface there."""
        if self._state.is_empty:
            return
        self._state = self._controller.advance(self._state)
        self._surface.scroll_to(self._state.scroll_offset, animated=True)
        logger.debug("banner_advanced", index=self._state.current_index)

    def on_scroll(self, offset: float) -> None:
        """Reconcile a scroll event from the surface with the current index."""
        previous = self._state.current_index
        self._state = self._controller.sync_to_offset(self._state, offset)
        if self._state.current_index != previous and self._active:
            self._restart_timer()

    def press(self, item: MediaItem) -> NavigationTarget:
        """Navigate to the detail screen for ``item``."""
        target = navigation_target(item)
        self._navigator.navigate(target.screen, dict(target.params))
        logger.info(
            "banner_item_pressed",
            screen=target.screen,
            media_id=item.id,
        )
        return target

    def press_index(self, index: int) -> NavigationTarget:
        return self.press(self._state.items[index])

    def slides(self) -> list[BannerSlide]:
        return [build_slide(item, self._image_size) for item in self._state.items]

    def dots(self) -> list[PaginationDot]:
        return self._controller.pagination_dots(self._state)

    def _restart_timer(self) -> None:
        self._stop_timer()
        if not self._active or self._state.is_empty:
            return
        self._task = asyncio.get_running_loop().create_task(self._rotate())

    def _stop_timer(self) -> None:
        if self._task is None:
            return
        if self._task.done():
            # Already logged by _rotate; retrieve it so asyncio doesn't warn.
            if not self._task.cancelled():
                self._task.exception()
        else:
            self._task.cancel()
            self._retired.add(self._task)
            self._task.add_done_callback(self._retired.discard)
        self._task = None

    async def _rotate(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self.tick()
            except Exception:
                logger.exception("banner_rotation_failed", index=self._state.current_index)
                raise
