from __future__ import annotations

from pagewise.utils.exceptions import InvalidStateTransition
from pagewise.utils.pagination import CombinedLoadStates, LoadState
from pagewise.utils.types import LoadDirection


class LoadStateTracker:
    """Per-direction state machine: idle -> loading -> {idle, error}.

    Only one load per direction may be outstanding. ``begin`` on a direction
    that is loading or failed is a no-op so duplicate requests never reach
    the loader.
    """

    def __init__(self) -> None:
        self._states: dict[LoadDirection, LoadState] = {
            direction: LoadState.idle() for direction in LoadDirection
        }

    def get(self, direction: LoadDirection) -> LoadState:
        return self._states[direction]

    def snapshot(self) -> CombinedLoadStates:
        return CombinedLoadStates(
            refresh=self._states[LoadDirection.REFRESH],
            prepend=self._states[LoadDirection.PREPEND],
            append=self._states[LoadDirection.APPEND],
        )

    def begin(self, direction: LoadDirection) -> bool:
        """Mark ``direction`` as loading. Returns False if it was not idle."""
        if not self._states[direction].is_idle:
            return False
        self._states[direction] = LoadState.loading()
        return True

    def retry(self, direction: LoadDirection) -> bool:
        """Move a failed direction back to loading."""
        if not self._states[direction].is_error:
            return False
        self._states[direction] = LoadState.loading()
        return True

    def succeed(self, direction: LoadDirection, end_reached: bool = False) -> None:
        """Settle a successful load. The loaded state collapses into idle."""
        self._require_loading(direction, "succeed")
        # LOADED is never observable between requests
        self._states[direction] = LoadState.idle(end_reached)

    def fail(self, direction: LoadDirection, error: BaseException) -> None:
        self._require_loading(direction, "fail")
        self._states[direction] = LoadState.failed(error)

    def reset(self, direction: LoadDirection, end_reached: bool = False) -> None:
        """Force ``direction`` back to idle, discarding any error."""
        self._states[direction] = LoadState.idle(end_reached)

    def _require_loading(self, direction: LoadDirection, action: str) -> None:
        current = self._states[direction]
        if not current.is_loading:
            raise InvalidStateTransition(
                f"Cannot {action} {direction.value}: state is {current.status.value}"
            )
