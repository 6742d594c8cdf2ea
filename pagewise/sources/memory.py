"""In-process page sources keyed by integer page numbers."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Generic, Sequence

from pagewise.core.paging_state import PagingState, int_refresh_key
from pagewise.utils.exceptions import InvalidCursorError
from pagewise.utils.pagination import LoadRequest, Page
from pagewise.utils.types import T


class IndexedPageSource(Generic[T]):
    """Base for sources whose cursor is a page number.

    Page ``n`` always holds the same ``page_size`` slot of the data, so the
    size hint carried by a request is not used to compute offsets.
    """

    def __init__(self, page_size: int = 20, *, first_key: int = 1, latency: float = 0.0) -> None:
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        self.page_size = page_size
        self.first_key = first_key
        self.latency = latency

    def get_refresh_key(self, state: PagingState[int, T]) -> int | None:
        return int_refresh_key(state)

    def _resolve_key(self, request: LoadRequest[Any]) -> int:
        """Validate the request cursor. A None key means the first page."""
        key = request.key if request.key is not None else self.first_key
        if isinstance(key, bool) or not isinstance(key, int):
            raise InvalidCursorError(f"Page key must be an integer, got {key!r}", request=request)
        if key < self.first_key:
            raise InvalidCursorError(
                f"Page key {key} is before the first page ({self.first_key})", request=request
            )
        return key

    def _offset(self, key: int) -> int:
        return (key - self.first_key) * self.page_size

    def _prev_key(self, key: int) -> int | None:
        return key - 1 if key > self.first_key else None

    async def _simulate_latency(self) -> None:
        if self.latency > 0:
            await asyncio.sleep(self.latency)


class SequencePageSource(IndexedPageSource[T]):
    """Pages over a finite in-memory sequence."""

    def __init__(
        self,
        items: Sequence[T],
        page_size: int = 20,
        *,
        first_key: int = 1,
        latency: float = 0.0,
    ) -> None:
        super().__init__(page_size, first_key=first_key, latency=latency)
        self._items = items

    async def load(self, request: LoadRequest[int]) -> Page[int, T]:
        key = self._resolve_key(request)
        offset = self._offset(key)
        if offset >= len(self._items) and key != self.first_key:
            raise InvalidCursorError(f"Page {key} is past the end of the data", request=request)

        await self._simulate_latency()
        end = offset + self.page_size
        return Page(
            items=tuple(self._items[offset:end]),
            prev_key=self._prev_key(key),
            next_key=key + 1 if end < len(self._items) else None,
        )


class GeneratedPageSource(IndexedPageSource[T]):
    """Unbounded source producing item ``i`` of page ``n`` via ``factory(i, n)``.

    ``last_key`` caps the data at that page number.
    """

    def __init__(
        self,
        factory: Callable[[int, int], T],
        page_size: int = 20,
        *,
        first_key: int = 1,
        last_key: int | None = None,
        latency: float = 0.0,
    ) -> None:
        super().__init__(page_size, first_key=first_key, latency=latency)
        self._factory = factory
        self.last_key = last_key

    async def load(self, request: LoadRequest[int]) -> Page[int, T]:
        key = self._resolve_key(request)
        if self.last_key is not None and key > self.last_key:
            raise InvalidCursorError(f"Page {key} is past the last page ({self.last_key})", request=request)

        await self._simulate_latency()
        offset = self._offset(key)
        items = tuple(self._factory(i, key) for i in range(offset, offset + self.page_size))
        at_end = self.last_key is not None and key >= self.last_key
        return Page(items=items, prev_key=self._prev_key(key), next_key=None if at_end else key + 1)


def user_source(page_size: int = 20, *, latency: float = 0.0) -> GeneratedPageSource[str]:
    """Endless list of ``"User <i> (Page <n>)"`` strings, handy for demos."""
    return GeneratedPageSource(
        lambda index, page: f"User {index} (Page {page})",
        page_size,
        latency=latency,
    )
