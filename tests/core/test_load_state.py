import pytest

from pagewise import (
    ErrorKind,
    InvalidCursorError,
    InvalidStateTransition,
    LoadDirection,
    LoadStateTracker,
    LoadStatus,
    TransientLoadError,
)


class TestTransitions:
    def test_starts_idle(self):
        tracker = LoadStateTracker()
        for direction in LoadDirection:
            assert tracker.get(direction).is_idle

    def test_success_path_returns_to_idle(self):
        tracker = LoadStateTracker()
        assert tracker.begin(LoadDirection.APPEND) is True
        assert tracker.get(LoadDirection.APPEND).is_loading
        tracker.succeed(LoadDirection.APPEND, end_reached=True)
        state = tracker.get(LoadDirection.APPEND)
        assert state.status is LoadStatus.IDLE
        assert state.end_of_pagination_reached is True

    def test_duplicate_begin_is_noop(self):
        tracker = LoadStateTracker()
        assert tracker.begin(LoadDirection.PREPEND) is True
        assert tracker.begin(LoadDirection.PREPEND) is False
        assert tracker.get(LoadDirection.PREPEND).is_loading

    def test_directions_are_independent(self):
        tracker = LoadStateTracker()
        tracker.begin(LoadDirection.PREPEND)
        assert tracker.begin(LoadDirection.APPEND) is True
        assert tracker.get(LoadDirection.REFRESH).is_idle

    def test_failure_records_kind(self):
        tracker = LoadStateTracker()
        tracker.begin(LoadDirection.APPEND)
        tracker.fail(LoadDirection.APPEND, TransientLoadError("timeout"))
        state = tracker.get(LoadDirection.APPEND)
        assert state.is_error
        assert state.error_kind is ErrorKind.TRANSIENT

    def test_error_blocks_begin_until_retry(self):
        tracker = LoadStateTracker()
        tracker.begin(LoadDirection.APPEND)
        tracker.fail(LoadDirection.APPEND, InvalidCursorError("bad key"))
        assert tracker.begin(LoadDirection.APPEND) is False
        assert tracker.retry(LoadDirection.APPEND) is True
        assert tracker.get(LoadDirection.APPEND).is_loading

    def test_retry_without_error_is_noop(self):
        tracker = LoadStateTracker()
        assert tracker.retry(LoadDirection.REFRESH) is False

    def test_reset_clears_error(self):
        tracker = LoadStateTracker()
        tracker.begin(LoadDirection.PREPEND)
        tracker.fail(LoadDirection.PREPEND, TransientLoadError("x"))
        tracker.reset(LoadDirection.PREPEND)
        assert tracker.get(LoadDirection.PREPEND).is_idle


class TestIllegalTransitions:
    def test_succeed_requires_loading(self):
        tracker = LoadStateTracker()
        with pytest.raises(InvalidStateTransition, match="Cannot succeed append"):
            tracker.succeed(LoadDirection.APPEND)

    def test_fail_requires_loading(self):
        tracker = LoadStateTracker()
        with pytest.raises(InvalidStateTransition):
            tracker.fail(LoadDirection.REFRESH, TransientLoadError("x"))


def test_snapshot_combines_directions():
    tracker = LoadStateTracker()
    tracker.begin(LoadDirection.REFRESH)
    combined = tracker.snapshot()
    assert combined.refresh.is_loading
    assert combined[LoadDirection.APPEND].is_idle
    assert combined["prepend"].is_idle
    assert combined.is_loading
    assert not combined.has_error
