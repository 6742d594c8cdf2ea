from __future__ import annotations

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Callable

from pagewise.utils.types import ErrorKind, LoadDirection

logger = logging.getLogger("pagewise")


@dataclass(frozen=True)
class LoadEvent:
    """Represents a single loader call for tracing."""

    direction: LoadDirection
    key: Any = None
    requested_size: int = 0
    duration_ms: float = 0.0
    item_count: int | None = None
    error_kind: ErrorKind | None = None
    source: str = ""


class _ObservabilityState:
    """Global mutable state for observability."""

    def __init__(self) -> None:
        self.enabled: bool = False
        self.slow_load_threshold_ms: float = 100.0
        self.listeners: list[Callable[[LoadEvent], Any]] = []
        self.events: list[LoadEvent] = []
        self.capture_events: bool = False


_state = _ObservabilityState()


def enable_tracing(slow_load_ms: float = 100.0, capture_events: bool = False) -> None:
    """Enable load tracing and observability."""
    _state.enabled = True
    _state.slow_load_threshold_ms = slow_load_ms
    _state.capture_events = capture_events


def disable_tracing() -> None:
    """Disable tracing and clear all state."""
    _state.enabled = False
    _state.slow_load_threshold_ms = 100.0
    _state.listeners.clear()
    _state.events.clear()
    _state.capture_events = False


def is_tracing_enabled() -> bool:
    return _state.enabled


def get_events() -> list[LoadEvent]:
    """Return captured events."""
    return list(_state.events)


def clear_events() -> None:
    """Clear captured events."""
    _state.events.clear()


def add_listener(callback: Callable[[LoadEvent], Any]) -> None:
    """Register a listener that receives a LoadEvent for each loader call."""
    _state.listeners.append(callback)


def remove_listener(callback: Callable[[LoadEvent], Any]) -> None:
    """Remove a previously registered listener."""
    _state.listeners.remove(callback)


def emit_event(event: LoadEvent) -> None:
    """Emit a load event: store, log slow loads, notify listeners."""
    if not _state.enabled:
        return

    if _state.capture_events:
        _state.events.append(event)

    if event.duration_ms > _state.slow_load_threshold_ms:
        logger.warning(
            "Slow load: %s with key %r from %s took %.1fms (threshold: %.1fms)",
            event.direction.value,
            event.key,
            event.source or "loader",
            event.duration_ms,
            _state.slow_load_threshold_ms,
        )

    for listener in _state.listeners:
        listener(event)

    _try_emit_otel_span(event)


def _try_emit_otel_span(event: LoadEvent) -> None:
    """Attempt to emit an OpenTelemetry span if the library is available."""
    try:
        from opentelemetry import trace

        tracer = trace.get_tracer("pagewise")
        with tracer.start_as_current_span(f"pagewise.{event.direction.value}") as span:
            span.set_attribute("pagewise.direction", event.direction.value)
            span.set_attribute("pagewise.key", repr(event.key))
            span.set_attribute("pagewise.requested_size", event.requested_size)
            if event.item_count is not None:
                span.set_attribute("pagewise.item_count", event.item_count)
            if event.error_kind is not None:
                span.set_attribute("pagewise.error_kind", event.error_kind.value)
            if event.duration_ms:
                span.set_attribute("pagewise.duration_ms", event.duration_ms)
    except ImportError:
        pass


@asynccontextmanager
async def track_load(direction: LoadDirection, key: Any, requested_size: int, source: str = ""):
    """Context manager that times a loader call and emits a LoadEvent.

    The caller fills ``item_count`` or ``error_kind`` in the yielded dict.
    Cancelled loads produced no outcome and emit nothing.
    """
    if not _state.enabled:
        yield {"item_count": None, "error_kind": None}
        return

    start = time.perf_counter()
    ctx: dict[str, Any] = {"item_count": None, "error_kind": None}
    cancelled = False
    try:
        yield ctx
    except asyncio.CancelledError:
        cancelled = True
        raise
    finally:
        if not cancelled:
            emit_event(
                LoadEvent(
                    direction=direction,
                    key=key,
                    requested_size=requested_size,
                    duration_ms=(time.perf_counter() - start) * 1000,
                    item_count=ctx.get("item_count"),
                    error_kind=ctx.get("error_kind"),
                    source=source,
                )
            )
