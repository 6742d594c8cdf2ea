from __future__ import annotations

import logging
from typing import Any, Generic

from pagewise.utils.pagination import Page, Placeholder
from pagewise.utils.types import K, LoadDirection, T

logger = logging.getLogger(__name__)


class Window(Generic[K, T]):
    """Ordered run of loaded pages, bounded by ``max_retained_items``.

    Boundary cursors are always read from the edge pages, so dropping a page
    exposes the cursor needed to load it again.
    """

    def __init__(self, max_retained_items: int | None = None) -> None:
        self._max_retained_items = max_retained_items
        self._pages: list[Page[K, T]] = []
        self._size = 0

    # --- Introspection ---

    @property
    def pages(self) -> tuple[Page[K, T], ...]:
        return tuple(self._pages)

    @property
    def size(self) -> int:
        """Number of real items retained."""
        return self._size

    @property
    def is_empty(self) -> bool:
        return not self._pages

    @property
    def prev_key(self) -> K | None:
        """Cursor for the next prepend, or None at the start of data."""
        return self._pages[0].prev_key if self._pages else None

    @property
    def next_key(self) -> K | None:
        """Cursor for the next append, or None at the end of data."""
        return self._pages[-1].next_key if self._pages else None

    def page_at(self, index: int) -> Page[K, T]:
        return self._pages[index]

    def __len__(self) -> int:
        return len(self._pages)

    def page_index_of(self, index: int) -> int | None:
        """Index of the page holding item ``index``, clamped to the edge pages."""
        if not self._pages:
            return None
        end = 0
        for position, page in enumerate(self._pages):
            end += len(page)
            if index < end:
                return position
        return len(self._pages) - 1

    def evictions_for(self, direction: LoadDirection, incoming: int) -> int:
        """Number of retained pages a load of ``incoming`` items would drop."""
        if self._max_retained_items is None:
            return 0
        size = self._size + incoming
        order = self._pages if direction is LoadDirection.APPEND else reversed(self._pages)
        dropped = 0
        for page in order:
            if size <= self._max_retained_items:
                break
            size -= len(page)
            dropped += 1
        return dropped

    # --- Mutation ---

    def reset(self, page: Page[K, T]) -> None:
        """Replace the whole window with a single page."""
        self._pages = [page]
        self._size = len(page)

    def apply_page(self, direction: LoadDirection, page: Page[K, T]) -> int:
        """Insert a page at the edge matching ``direction`` and enforce the bound.

        Returns how many items were added (positive) or removed (negative)
        in front of the content that was already retained.
        """
        if direction is LoadDirection.REFRESH:
            self.reset(page)
            return 0

        if direction is LoadDirection.PREPEND:
            self._pages.insert(0, page)
            self._size += len(page)
            shift = len(page)
        elif direction is LoadDirection.APPEND:
            self._pages.append(page)
            self._size += len(page)
            shift = 0
        else:
            raise ValueError(f"Unknown load direction: {direction!r}")

        shift -= self._trim(grown=direction)
        self._check_invariants()
        return shift

    def _trim(self, grown: LoadDirection) -> int:
        """Drop whole pages from the edge opposite to ``grown``.

        Returns the number of items dropped from the front.
        """
        if self._max_retained_items is None:
            return 0

        dropped_front = 0
        # The just-loaded page always survives
        while self._size > self._max_retained_items and len(self._pages) > 1:
            if grown is LoadDirection.APPEND:
                dropped = self._pages.pop(0)
                dropped_front += len(dropped)
            else:
                dropped = self._pages.pop()
            self._size -= len(dropped)
            logger.debug(
                "Evicted page (prev_key=%r, next_key=%r, %d items) after %s",
                dropped.prev_key,
                dropped.next_key,
                len(dropped),
                grown.value,
            )
        return dropped_front

    def _check_invariants(self) -> None:
        assert self._size == sum(len(p) for p in self._pages), "window size out of sync"
        assert self._max_retained_items is None or len(self._pages) <= 1 or (
            self._size <= self._max_retained_items
        ), "window exceeds max_retained_items"

    # --- Views ---

    def flatten(self, enable_placeholders: bool = False) -> tuple[Any, ...]:
        """Concatenate all retained items in domain order.

        With placeholders enabled, a single marker stands at each edge whose
        boundary cursor is not None.
        """
        items: list[Any] = []
        if enable_placeholders and self.prev_key is not None:
            items.append(Placeholder(LoadDirection.PREPEND))
        for page in self._pages:
            items.extend(page.items)
        if enable_placeholders and self.next_key is not None:
            items.append(Placeholder(LoadDirection.APPEND))
        return tuple(items)

    def leading_placeholders(self, enable_placeholders: bool) -> int:
        return 1 if enable_placeholders and self.prev_key is not None else 0

    def trailing_placeholders(self, enable_placeholders: bool) -> int:
        return 1 if enable_placeholders and self.next_key is not None else 0
