from pagewise.core import (
    Pager,
    SnapshotSubscription,
    Window,
    LoadStateTracker,
    PagingState,
    int_refresh_key,
)
from pagewise.sources import (
    IndexedPageSource,
    SequencePageSource,
    GeneratedPageSource,
    MongoPageSource,
    user_source,
)
from pagewise.lifecycle import (
    enable_tracing,
    disable_tracing,
    LoadEvent,
    add_listener,
    remove_listener,
    get_events,
    clear_events,
    track_load,
)
from pagewise.integrations import create_page_router, register_exception_handlers
from pagewise.utils import (
    PagewiseError,
    LoadError,
    TransientLoadError,
    InvalidCursorError,
    PagerClosed,
    InvalidStateTransition,
    classify_error,
    ErrorKind,
    LoadDirection,
    Loader,
    Page,
    LoadRequest,
    Placeholder,
    LoadStatus,
    LoadState,
    CombinedLoadStates,
    Snapshot,
    PagingConfig,
)

__all__ = [
    # Core
    "Pager",
    "SnapshotSubscription",
    "Window",
    "LoadStateTracker",
    "PagingState",
    "int_refresh_key",
    # Sources
    "IndexedPageSource",
    "SequencePageSource",
    "GeneratedPageSource",
    "MongoPageSource",
    "user_source",
    # Lifecycle
    "enable_tracing",
    "disable_tracing",
    "LoadEvent",
    "add_listener",
    "remove_listener",
    "get_events",
    "clear_events",
    "track_load",
    # Integrations
    "create_page_router",
    "register_exception_handlers",
    # Utils
    "PagewiseError",
    "LoadError",
    "TransientLoadError",
    "InvalidCursorError",
    "PagerClosed",
    "InvalidStateTransition",
    "classify_error",
    "ErrorKind",
    "LoadDirection",
    "Loader",
    "Page",
    "LoadRequest",
    "Placeholder",
    "LoadStatus",
    "LoadState",
    "CombinedLoadStates",
    "Snapshot",
    "PagingConfig",
]
