"""Carousel business logic - platform agnostic.

State is an immutable snapshot; the controller's mutators return the next
snapshot. The auto-rotation timer and user drags both go through these
mutators, so there is exactly one way the current index can change.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Generic, TypeVar

T = TypeVar("T")

DOT_COMPACT_WIDTH = 8.0
DOT_EXPANDED_WIDTH = 16.0
DOT_DIM_OPACITY = 0.3
DOT_FULL_OPACITY = 1.0


@dataclass(frozen=True)
class CarouselState(Generic[T]):
    """State for a carousel/paginated view.

    Attributes:
        items: Ordered items shown one per page.
        current_index: Page considered current, in [0, len(items)).
        scroll_offset: Horizontal scroll position of the display surface.
        page_width: Width of one page in the same units as scroll_offset.
    """

    items: list[T]
    current_index: int = 0
    scroll_offset: float = 0.0
    page_width: float = 1.0

    def __post_init__(self) -> None:
        if self.page_width <= 0:
            raise ValueError(f"page_width must be positive, got {self.page_width}")

    @property
    def total_items(self) -> int:
        return len(self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def current_item(self) -> T | None:
        if 0 <= self.current_index < len(self.items):
            return self.items[self.current_index]
        return None

    @property
    def has_next(self) -> bool:
        return self.current_index < len(self.items) - 1

    @property
    def has_prev(self) -> bool:
        return self.current_index > 0

    def offset_for(self, index: int) -> float:
        """Scroll offset at which page ``index`` is fully in view."""
        return index * self.page_width


@dataclass(frozen=True)
class PaginationDot:
    """Visual properties of one pagination indicator dot."""

    index: int
    width: float
    opacity: float
    is_active: bool


def interpolate(
    value: float,
    input_range: Sequence[float],
    output_range: Sequence[float],
) -> float:
    """Piecewise-linear interpolation, clamped at both ends.

    Args:
        value: Input to map.
        input_range: Strictly increasing breakpoints.
        output_range: Output value at each breakpoint.

    Raises:
        ValueError: If the ranges differ in length or have fewer than two points.
    """
    if len(input_range) != len(output_range) or len(input_range) < 2:
        raise ValueError("input_range and output_range need matching length >= 2")

    if value <= input_range[0]:
        return float(output_range[0])
    if value >= input_range[-1]:
        return float(output_range[-1])

    for i in range(1, len(input_range)):
        lo, hi = input_range[i - 1], input_range[i]
        if value <= hi:
            fraction = (value - lo) / (hi - lo)
            return output_range[i - 1] + fraction * (output_range[i] - output_range[i - 1])
    return float(output_range[-1])


def snap_index(offset: float, page_width: float, total_items: int) -> int:
    """Index of the page whose snap zone contains ``offset``.

    Halves round up, and overscroll past either end clamps to the first or
    last page.
    """
    if total_items == 0:
        return 0
    index = math.floor(offset / page_width + 0.5)
    return max(0, min(index, total_items - 1))


class CarouselController(Generic[T]):
    """Controls carousel navigation and selection."""

    def advance(self, state: CarouselState[T]) -> CarouselState[T]:
        """Rotate to the next item, wrapping to 0 after the last one."""
        if state.is_empty:
            return state
        next_index = (state.current_index + 1) % state.total_items
        return replace(
            state,
            current_index=next_index,
            scroll_offset=state.offset_for(next_index),
        )

    def sync_to_offset(self, state: CarouselState[T], offset: float) -> CarouselState[T]:
        """Record a scroll offset and adopt the page it snaps to."""
        if state.is_empty:
            return replace(state, scroll_offset=offset)
        index = snap_index(offset, state.page_width, state.total_items)
        return replace(state, current_index=index, scroll_offset=offset)

    def next_page(self, state: CarouselState[T]) -> CarouselState[T]:
        """Move to next item without wrapping, returns new state."""
        if state.has_next:
            return self.go_to_index(state, state.current_index + 1)
        return state

    def prev_page(self, state: CarouselState[T]) -> CarouselState[T]:
        """Move to previous item without wrapping, returns new state."""
        if state.has_prev:
            return self.go_to_index(state, state.current_index - 1)
        return state

    def go_to_index(self, state: CarouselState[T], index: int) -> CarouselState[T]:
        """Jump to specific index."""
        if 0 <= index < len(state.items):
            return replace(
                state,
                current_index=index,
                scroll_offset=state.offset_for(index),
            )
        return state

    def select_item(self, state: CarouselState[T]) -> T | None:
        """Get the currently selected item."""
        return state.current_item

    def pagination_dots(self, state: CarouselState[T]) -> list[PaginationDot]:
        """Derive each dot's width and opacity from the scroll offset.

        A dot is widest and fully opaque when its page is exactly in view and
        shrinks/dims linearly over one page width on either side.
        """
        dots: list[PaginationDot] = []
        for index in range(state.total_items):
            center = state.offset_for(index)
            input_range = (center - state.page_width, center, center + state.page_width)
            width = interpolate(
                state.scroll_offset,
                input_range,
                (DOT_COMPACT_WIDTH, DOT_EXPANDED_WIDTH, DOT_COMPACT_WIDTH),
            )
            opacity = interpolate(
                state.scroll_offset,
                input_range,
                (DOT_DIM_OPACITY, DOT_FULL_OPACITY, DOT_DIM_OPACITY),
            )
            dots.append(
                PaginationDot(
                    index=index,
                    width=width,
                    opacity=opacity,
                    is_active=index == state.current_index,
                )
            )
        return dots
