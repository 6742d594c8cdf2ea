from pagewise.lifecycle.observability import (
    enable_tracing,
    disable_tracing,
    LoadEvent,
    add_listener,
    remove_listener,
    get_events,
    clear_events,
    track_load,
)

__all__ = [
    "enable_tracing",
    "disable_tracing",
    "LoadEvent",
    "add_listener",
    "remove_listener",
    "get_events",
    "clear_events",
    "track_load",
]
