from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Any, Callable, Generic

from pagewise.core.load_state import LoadStateTracker
from pagewise.core.paging_state import PagingState, int_refresh_key
from pagewise.core.window import Window
from pagewise.lifecycle.observability import track_load
from pagewise.utils.exceptions import LoadError, PagerClosed, TransientLoadError
from pagewise.utils.pagination import CombinedLoadStates, LoadRequest, Page, Snapshot
from pagewise.utils.settings import PagingConfig
from pagewise.utils.types import K, LoadDirection, LoaderLike, T

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[Snapshot[Any]], Any]


def resolve_load(loader: LoaderLike) -> Callable[[LoadRequest[Any]], Any]:
    """Accept either an object with a ``load`` coroutine or a bare coroutine function."""
    load = getattr(loader, "load", None)
    if callable(load):
        return load
    if callable(loader):
        return loader
    raise TypeError(f"{type(loader).__name__} is not a loader: expected a load() coroutine")


class SnapshotSubscription(Generic[T]):
    """Latest-wins async iterator over a pager's snapshots.

    Intermediate snapshots may be skipped when the consumer is slow, but a
    version older than one already delivered is never yielded.
    """

    def __init__(self, initial: Snapshot[T], on_close: Callable[[SnapshotSubscription[T]], None]) -> None:
        self._latest = initial
        self._delivered_version = -1
        self._changed = asyncio.Event()
        self._closed = False
        self._on_close = on_close

    def push(self, snapshot: Snapshot[T]) -> None:
        self._latest = snapshot
        self._changed.set()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._changed.set()
        self._on_close(self)

    async def aclose(self) -> None:
        self.close()

    async def __aenter__(self) -> SnapshotSubscription[T]:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> SnapshotSubscription[T]:
        return self

    async def __anext__(self) -> Snapshot[T]:
        while True:
            if self._latest.version > self._delivered_version:
                self._delivered_version = self._latest.version
                return self._latest
            if self._closed:
                raise StopAsyncIteration
            self._changed.clear()
            await self._changed.wait()


class Pager(Generic[K, T]):
    """Loads pages on demand in both directions and publishes snapshots.

    All state lives on one event loop. Loader calls are the only suspension
    points; their results are applied synchronously, so every mutation and
    publication is serialized. At most one load per direction is outstanding.

    Usage:
        async with Pager(source, PagingConfig(page_size=20, initial_key=1)) as pager:
            async for snapshot in pager.subscribe():
                ...
    """

    def __init__(self, loader: LoaderLike, config: PagingConfig | None = None, **options: Any) -> None:
        if config is None:
            config = PagingConfig(**options)
        elif options:
            config = PagingConfig.model_validate({**config.model_dump(), **options})
        self._config = config
        self._load = resolve_load(loader)
        self._refresh_key = getattr(loader, "get_refresh_key", None) or int_refresh_key
        self._source_name = getattr(loader, "__name__", None) or type(loader).__name__

        self._window: Window[K, T] = Window(config.max_retained_items)
        self._states = LoadStateTracker()
        self._anchor: int | None = None
        self._generation = 0
        self._tasks: dict[LoadDirection, asyncio.Task[None]] = {}
        self._failed_requests: dict[LoadDirection, LoadRequest[K]] = {}

        self._snapshot: Snapshot[T] = Snapshot()
        self._listeners: list[SnapshotListener] = []
        self._subscriptions: set[SnapshotSubscription[T]] = set()
        self._started = False
        self._closed = False

    # --- Lifecycle ---

    async def start(self) -> None:
        """Issue the initial refresh with ``config.initial_key``."""
        self._ensure_open()
        if self._started:
            return
        self._started = True
        logger.info(f"Starting pager over {self._source_name} at key {self._config.initial_key!r}")
        self._states.begin(LoadDirection.REFRESH)
        self._launch(
            LoadRequest(
                LoadDirection.REFRESH,
                self._config.initial_key,
                self._config.effective_initial_load_size,
            )
        )

    async def close(self) -> None:
        """Cancel outstanding loads and release subscribers.

        Results that arrive afterwards are dropped.
        """
        if self._closed:
            return
        self._closed = True
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        for subscription in list(self._subscriptions):
            subscription.close()
        self._listeners.clear()
        logger.info(f"Closed pager over {self._source_name} ({len(tasks)} loads cancelled)")

    async def __aenter__(self) -> Pager[K, T]:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    # --- Read side ---

    @property
    def config(self) -> PagingConfig:
        return self._config

    @property
    def snapshot(self) -> Snapshot[T]:
        """The most recently published snapshot."""
        return self._snapshot

    @property
    def load_states(self) -> CombinedLoadStates:
        return self._snapshot.load_states

    @property
    def anchor_position(self) -> int | None:
        return self._anchor

    def paging_state(self) -> PagingState[K, T]:
        return PagingState(
            pages=self._window.pages,
            anchor_position=self._anchor,
            config=self._config,
            leading_placeholders=self._window.leading_placeholders(self._config.enable_placeholders),
        )

    def subscribe(self) -> SnapshotSubscription[T]:
        """Return an async iterator that starts with the current snapshot."""
        self._ensure_open()
        subscription = SnapshotSubscription(self._snapshot, self._subscriptions.discard)
        self._subscriptions.add(subscription)
        return subscription

    def add_listener(self, callback: SnapshotListener) -> None:
        """Register a callback invoked synchronously with every snapshot, in order."""
        self._listeners.append(callback)

    def remove_listener(self, callback: SnapshotListener) -> None:
        self._listeners.remove(callback)

    async def wait_idle(self) -> None:
        """Wait until no load is outstanding, including follow-up loads."""
        while True:
            pending = [task for task in self._tasks.values() if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    # --- Consumer intake ---

    def report_anchor(self, position: int) -> None:
        """Record the position the consumer last showed and grow if near an edge."""
        self._ensure_open()
        if position < 0:
            raise ValueError("position must be >= 0")
        self._anchor = position
        self._check_growth()

    def retry(self, direction: LoadDirection | str) -> bool:
        """Re-issue the request that failed for ``direction``.

        Returns False when that direction is not in an error state.
        """
        self._ensure_open()
        direction = LoadDirection(direction)
        request = self._failed_requests.get(direction)
        if request is None or not self._states.retry(direction):
            return False
        del self._failed_requests[direction]
        logger.info(f"Retrying {direction.value} with key {request.key!r}")
        self._launch(request)
        return True

    def refresh(self) -> None:
        """Reload from a key recomputed around the current anchor.

        Outstanding loads are cancelled and their results discarded.
        """
        self._ensure_open()
        key = self._refresh_key(self.paging_state())
        logger.info(f"Refreshing {self._source_name} from key {key!r}")
        # The old anchor has been consumed by the refresh key
        self._anchor = None

        self._generation += 1
        for task in self._tasks.values():
            task.cancel()
        self._tasks.clear()
        self._failed_requests.clear()
        for direction in LoadDirection:
            self._states.reset(direction)

        self._started = True
        self._states.begin(LoadDirection.REFRESH)
        self._launch(
            LoadRequest(LoadDirection.REFRESH, key, self._config.effective_initial_load_size)
        )

    # --- Internal ---

    def _ensure_open(self) -> None:
        if self._closed:
            raise PagerClosed("Pager has been closed")

    def _check_growth(self, only: LoadDirection | None = None) -> None:
        """Issue prepend/append loads when the anchor is near an open edge."""
        if self._anchor is None or self._window.is_empty:
            return
        if not self._states.get(LoadDirection.REFRESH).is_idle:
            return

        distance = self._config.effective_prefetch_distance
        index = self._anchor - self._window.leading_placeholders(self._config.enable_placeholders)
        items_before = max(index, 0)
        items_after = max(self._window.size - 1 - index, 0)

        if only in (None, LoadDirection.PREPEND) and items_before <= distance and self._window.prev_key is not None:
            if not self._evicts_anchor(LoadDirection.PREPEND, index):
                self._request(LoadDirection.PREPEND, self._window.prev_key)
        if only in (None, LoadDirection.APPEND) and items_after <= distance and self._window.next_key is not None:
            if not self._evicts_anchor(LoadDirection.APPEND, index):
                self._request(LoadDirection.APPEND, self._window.next_key)

    def _evicts_anchor(self, direction: LoadDirection, index: int) -> bool:
        """Whether growing ``direction`` would trim the page holding item ``index``."""
        dropped = self._window.evictions_for(direction, self._config.page_size)
        if not dropped:
            return False
        page = self._window.page_index_of(index)
        if direction is LoadDirection.APPEND:
            held = page < dropped
        else:
            held = page >= len(self._window) - dropped
        if held:
            logger.debug(f"Holding {direction.value}: it would evict the page at the anchor")
        return held

    def _request(self, direction: LoadDirection, key: K) -> None:
        if not self._states.begin(direction):
            return
        self._launch(LoadRequest(direction, key, self._config.page_size))

    def _launch(self, request: LoadRequest[K]) -> None:
        task = asyncio.create_task(
            self._run_load(request, self._generation),
            name=f"pagewise-{request.direction.value}",
        )
        self._tasks[request.direction] = task
        task.add_done_callback(partial(self._forget_task, request.direction))
        self._publish()

    def _forget_task(self, direction: LoadDirection, task: asyncio.Task[None]) -> None:
        if self._tasks.get(direction) is task:
            del self._tasks[direction]

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    async def _run_load(self, request: LoadRequest[K], generation: int) -> None:
        page: Page[K, T] | None = None
        error: LoadError | None = None

        async with track_load(request.direction, request.key, request.requested_size, self._source_name) as ctx:
            try:
                page = await self._load(request)
            except LoadError as exc:
                error = exc
            except Exception as exc:
                logger.exception(f"Loader raised unexpectedly during {request.direction.value}")
                error = TransientLoadError(str(exc) or type(exc).__name__, cause=exc)
            if error is not None:
                if error.request is None:
                    error.request = request
                ctx["error_kind"] = error.kind
            else:
                ctx["item_count"] = len(page)

        if not self._is_current(generation):
            logger.debug(f"Dropping stale {request.direction.value} result for key {request.key!r}")
            return

        if error is not None:
            self._on_failure(request, error)
        else:
            self._on_success(request, page)

    def _on_success(self, request: LoadRequest[K], page: Page[K, T]) -> None:
        direction = request.direction
        enable = self._config.enable_placeholders

        if direction is LoadDirection.REFRESH:
            self._window.reset(page)
            self._states.succeed(direction)
            self._settle_edges()
            self._publish()
            # An anchor reported while the refresh was loading still counts
            self._check_growth()
            return

        boundary = self._window.prev_key if direction is LoadDirection.PREPEND else self._window.next_key
        if request.key != boundary:
            # The edge moved (eviction by the opposite load) while this one was in flight
            logger.debug(f"Discarding {direction.value} page for key {request.key!r}: edge is now {boundary!r}")
            self._states.reset(direction)
            self._settle_edges()
            self._publish()
            return

        leading_before = self._window.leading_placeholders(enable)
        shift = self._window.apply_page(direction, page)
        if self._anchor is not None:
            leading_after = self._window.leading_placeholders(enable)
            self._anchor = max(self._anchor - leading_before + shift + leading_after, 0)

        self._states.succeed(direction)
        self._settle_edges()
        self._publish()
        # Keep growing the same edge while the anchor stays close to it
        self._check_growth(only=direction)

    def _on_failure(self, request: LoadRequest[K], error: LoadError) -> None:
        direction = request.direction
        logger.warning(
            f"{direction.value.capitalize()} failed for key {request.key!r}: "
            f"{error.kind.value} ({error})"
        )
        self._states.fail(direction, error)
        self._failed_requests[direction] = request
        self._publish()

    def _settle_edges(self) -> None:
        """Refresh end-of-pagination flags on idle edges."""
        for direction, key in (
            (LoadDirection.PREPEND, self._window.prev_key),
            (LoadDirection.APPEND, self._window.next_key),
        ):
            if self._states.get(direction).is_idle:
                self._states.reset(direction, end_reached=key is None)

    def _publish(self) -> None:
        enable = self._config.enable_placeholders
        snapshot: Snapshot[T] = Snapshot(
            items=self._window.flatten(enable),
            load_states=self._states.snapshot(),
            version=self._snapshot.version + 1,
            placeholders_before=self._window.leading_placeholders(enable),
            placeholders_after=self._window.trailing_placeholders(enable),
        )
        self._snapshot = snapshot
        for subscription in list(self._subscriptions):
            subscription.push(snapshot)
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception(f"Snapshot listener failed on version {snapshot.version}")
