from pagewise.utils.exceptions import (
    PagewiseError,
    LoadError,
    TransientLoadError,
    InvalidCursorError,
    PagerClosed,
    InvalidStateTransition,
    classify_error,
)
from pagewise.utils.pagination import (
    Page,
    LoadRequest,
    Placeholder,
    LoadStatus,
    LoadState,
    CombinedLoadStates,
    Snapshot,
)
from pagewise.utils.settings import PagingConfig
from pagewise.utils.types import (
    ErrorKind,
    LoadDirection,
    Loader,
    LoaderLike,
    RefreshKeyProvider,
)

__all__ = [
    "PagewiseError",
    "LoadError",
    "TransientLoadError",
    "InvalidCursorError",
    "PagerClosed",
    "InvalidStateTransition",
    "classify_error",
    "Page",
    "LoadRequest",
    "Placeholder",
    "LoadStatus",
    "LoadState",
    "CombinedLoadStates",
    "Snapshot",
    "PagingConfig",
    "ErrorKind",
    "LoadDirection",
    "Loader",
    "LoaderLike",
    "RefreshKeyProvider",
]
