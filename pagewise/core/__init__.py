from pagewise.core.window import Window
from pagewise.core.load_state import LoadStateTracker
from pagewise.core.paging_state import PagingState, int_refresh_key
from pagewise.core.pager import Pager, SnapshotSubscription

__all__ = [
    "Window",
    "LoadStateTracker",
    "PagingState",
    "int_refresh_key",
    "Pager",
    "SnapshotSubscription",
]
