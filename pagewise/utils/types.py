from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Protocol, TypeVar, Union

if TYPE_CHECKING:
    from pagewise.core.paging_state import PagingState
    from pagewise.utils.pagination import LoadRequest, Page

# Cursor key and item type variables
K = TypeVar("K")
T = TypeVar("T")


class LoadDirection(str, Enum):
    """Direction of a page load. Values are stable across versions."""

    REFRESH = "refresh"
    PREPEND = "prepend"
    APPEND = "append"


class ErrorKind(str, Enum):
    """Stable classification of loader failures."""

    TRANSIENT = "transient"
    INVALID_CURSOR = "invalid_cursor"


class Loader(Protocol[K, T]):
    """Capability that answers "give me the page before/after cursor K"."""

    async def load(self, request: LoadRequest[K]) -> Page[K, T]: ...


class RefreshKeyProvider(Protocol[K]):
    """Optional loader capability for recomputing the refresh cursor."""

    def get_refresh_key(self, state: PagingState) -> K | None: ...


LoadFunction = Callable[["LoadRequest[Any]"], Awaitable["Page[Any, Any]"]]
LoaderLike = Union[Loader[Any, Any], LoadFunction]
