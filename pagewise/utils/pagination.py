from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Iterator

from pagewise.utils.exceptions import classify_error
from pagewise.utils.types import ErrorKind, K, LoadDirection, T


@dataclass(frozen=True)
class Page(Generic[K, T]):
    """One loaded batch of items with the cursors of its neighbours.

    A ``None`` key means no further page exists in that direction.
    """

    items: tuple[T, ...]
    prev_key: K | None = None
    next_key: K | None = None

    def __post_init__(self) -> None:
        # Accept any sequence but store an immutable copy
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))

    @property
    def has_prev(self) -> bool:
        return self.prev_key is not None

    @property
    def has_next(self) -> bool:
        return self.next_key is not None

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class LoadRequest(Generic[K]):
    """What the pager asks a loader for."""

    direction: LoadDirection
    key: K | None
    requested_size: int

    def __post_init__(self) -> None:
        if self.requested_size < 1:
            raise ValueError("requested_size must be >= 1")


@dataclass(frozen=True)
class Placeholder:
    """Marker for an edge whose boundary exists but is not loaded yet."""

    direction: LoadDirection


class LoadStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


@dataclass(frozen=True)
class LoadState:
    """State of a single load direction."""

    status: LoadStatus = LoadStatus.IDLE
    error_kind: ErrorKind | None = None
    error: BaseException | None = field(default=None, compare=False)
    end_of_pagination_reached: bool = False

    @classmethod
    def idle(cls, end_reached: bool = False) -> LoadState:
        return cls(LoadStatus.IDLE, end_of_pagination_reached=end_reached)

    @classmethod
    def loading(cls) -> LoadState:
        return cls(LoadStatus.LOADING)

    @classmethod
    def loaded(cls, end_reached: bool = False) -> LoadState:
        return cls(LoadStatus.LOADED, end_of_pagination_reached=end_reached)

    @classmethod
    def failed(cls, error: BaseException) -> LoadState:
        return cls(LoadStatus.ERROR, error_kind=classify_error(error), error=error)

    @property
    def is_idle(self) -> bool:
        return self.status is LoadStatus.IDLE

    @property
    def is_loading(self) -> bool:
        return self.status is LoadStatus.LOADING

    @property
    def is_error(self) -> bool:
        return self.status is LoadStatus.ERROR


@dataclass(frozen=True)
class CombinedLoadStates:
    """Load states for all three directions."""

    refresh: LoadState = field(default_factory=LoadState.idle)
    prepend: LoadState = field(default_factory=LoadState.idle)
    append: LoadState = field(default_factory=LoadState.idle)

    def __getitem__(self, direction: LoadDirection) -> LoadState:
        return getattr(self, LoadDirection(direction).value)

    @property
    def is_loading(self) -> bool:
        return any(state.is_loading for state in (self.refresh, self.prepend, self.append))

    @property
    def has_error(self) -> bool:
        return any(state.is_error for state in (self.refresh, self.prepend, self.append))


@dataclass(frozen=True)
class Snapshot(Generic[T]):
    """Immutable view handed to consumers after every change.

    ``items`` may contain ``Placeholder`` markers at either edge.
    """

    items: tuple[T | Placeholder, ...] = ()
    load_states: CombinedLoadStates = field(default_factory=CombinedLoadStates)
    version: int = 0
    placeholders_before: int = 0
    placeholders_after: int = 0

    @property
    def loaded_items(self) -> tuple[T, ...]:
        end = len(self.items) - self.placeholders_after
        return tuple(self.items[self.placeholders_before:end])  # type: ignore[arg-type]

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[T | Placeholder]:
        return iter(self.items)

    def __getitem__(self, index: int) -> Any:
        return self.items[index]
