import asyncio
from typing import Any, Callable

import pytest

from pagewise import disable_tracing, user_source
from pagewise.utils.pagination import LoadRequest, Page
from pagewise.utils.types import LoadDirection


class RecordingLoader:
    """Wraps a page source, records every request and lets tests inject
    failures or hold a direction in flight."""

    def __init__(self, source: Any) -> None:
        self.source = source
        self.requests: list[LoadRequest] = []
        self._failures: dict[tuple[LoadDirection, Any], BaseException] = {}
        self._gates: dict[LoadDirection, asyncio.Event] = {}

    def get_refresh_key(self, state):
        return self.source.get_refresh_key(state)

    def fail_once(self, direction: LoadDirection, key: Any, error: BaseException) -> None:
        self._failures[(direction, key)] = error

    def hold(self, direction: LoadDirection) -> asyncio.Event:
        gate = asyncio.Event()
        self._gates[direction] = gate
        return gate

    def requests_for(self, direction: LoadDirection) -> list[LoadRequest]:
        return [r for r in self.requests if r.direction is direction]

    async def load(self, request: LoadRequest) -> Page:
        self.requests.append(request)
        gate = self._gates.get(request.direction)
        if gate is not None:
            await gate.wait()
        error = self._failures.pop((request.direction, request.key), None)
        if error is not None:
            raise error
        return await self.source.load(request)


async def settle(predicate: Callable[[], bool], attempts: int = 200) -> None:
    """Yield to the event loop until ``predicate`` holds."""
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition was not reached")


@pytest.fixture
def make_loader() -> Callable[[Any], RecordingLoader]:
    return RecordingLoader


@pytest.fixture
def wait_until() -> Callable:
    return settle


@pytest.fixture
def users() -> RecordingLoader:
    """Endless 'User <i> (Page <n>)' source with 20 items per page."""
    return RecordingLoader(user_source(page_size=20))


@pytest.fixture(autouse=True)
def reset_tracing():
    yield
    # Reset observability state between tests
    disable_tracing()
