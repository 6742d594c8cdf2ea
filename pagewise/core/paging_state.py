from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic

from pagewise.utils.pagination import Page
from pagewise.utils.settings import PagingConfig
from pagewise.utils.types import K, T


@dataclass(frozen=True)
class PagingState(Generic[K, T]):
    """Read-only view of the loaded pages and the consumer's last anchor.

    Handed to a loader's ``get_refresh_key`` so it can pick where a reload
    should start.
    """

    pages: tuple[Page[K, T], ...]
    anchor_position: int | None
    config: PagingConfig
    leading_placeholders: int = 0

    def _locate(self, position: int) -> tuple[int, int] | None:
        """Return (page index, index within page) for a snapshot position."""
        if not self.pages:
            return None
        index = position - self.leading_placeholders
        if index < 0:
            return 0, 0
        for page_index, page in enumerate(self.pages):
            if index < len(page):
                return page_index, index
            index -= len(page)
        last = len(self.pages) - 1
        return last, max(len(self.pages[last]) - 1, 0)

    def closest_page_to_position(self, position: int) -> Page[K, T] | None:
        """Page covering ``position``, clamped to the first or last page."""
        located = self._locate(position)
        if located is None:
            return None
        return self.pages[located[0]]

    def closest_item_to_position(self, position: int) -> T | None:
        located = self._locate(position)
        if located is None:
            return None
        page = self.pages[located[0]]
        if not page.items:
            return None
        return page.items[located[1]]

    def is_empty(self) -> bool:
        return all(len(page) == 0 for page in self.pages)


def int_refresh_key(state: PagingState[Any, Any]) -> Any | None:
    """Refresh key for integer page numbers.

    Returns the page number covering the anchor, derived from its
    neighbours, or None to restart at the beginning of the data.
    """
    if state.anchor_position is None:
        return None
    page = state.closest_page_to_position(state.anchor_position)
    if page is None:
        return None
    if page.prev_key is not None:
        return page.prev_key + 1
    if page.next_key is not None:
        return page.next_key - 1
    return None
