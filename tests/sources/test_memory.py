import pytest

from pagewise import (
    GeneratedPageSource,
    InvalidCursorError,
    LoadDirection,
    LoadRequest,
    Page,
    PagingConfig,
    PagingState,
    SequencePageSource,
    user_source,
)


def _request(key, direction=LoadDirection.APPEND, size=10):
    return LoadRequest(direction, key, size)


class TestSequencePageSource:
    async def test_first_page(self):
        source = SequencePageSource(list(range(25)), page_size=10)
        page = await source.load(_request(None, LoadDirection.REFRESH))
        assert page.items == tuple(range(10))
        assert page.prev_key is None
        assert page.next_key == 2

    async def test_last_partial_page(self):
        source = SequencePageSource(list(range(25)), page_size=10)
        page = await source.load(_request(3))
        assert page.items == (20, 21, 22, 23, 24)
        assert page.prev_key == 2
        assert page.next_key is None

    async def test_exact_multiple_has_no_empty_tail(self):
        source = SequencePageSource(list(range(20)), page_size=10)
        page = await source.load(_request(2))
        assert page.next_key is None

    async def test_empty_sequence(self):
        source = SequencePageSource([], page_size=10)
        page = await source.load(_request(None, LoadDirection.REFRESH))
        assert page.items == ()
        assert page.prev_key is None
        assert page.next_key is None

    async def test_key_past_end_rejected(self):
        source = SequencePageSource(list(range(25)), page_size=10)
        with pytest.raises(InvalidCursorError, match="past the end"):
            await source.load(_request(4))

    async def test_key_before_first_rejected(self):
        source = SequencePageSource(list(range(25)), page_size=10)
        with pytest.raises(InvalidCursorError):
            await source.load(_request(0, LoadDirection.PREPEND))

    async def test_non_integer_key_rejected(self):
        source = SequencePageSource(list(range(25)), page_size=10)
        with pytest.raises(InvalidCursorError) as exc_info:
            await source.load(_request("2"))
        assert exc_info.value.request.key == "2"

    def test_invalid_page_size(self):
        with pytest.raises(ValueError, match="page_size must be >= 1"):
            SequencePageSource([1, 2, 3], page_size=0)


class TestGeneratedPageSource:
    async def test_user_source_matches_demo_backend(self):
        source = user_source(page_size=20)
        page = await source.load(_request(1, LoadDirection.REFRESH, 60))
        assert len(page) == 20
        assert page.items[0] == "User 0 (Page 1)"
        assert page.items[-1] == "User 19 (Page 1)"
        assert page.prev_key is None
        assert page.next_key == 2

    async def test_pages_chain_without_gaps(self):
        source = GeneratedPageSource(lambda i, page: i, page_size=5)
        collected = []
        key = 1
        for _ in range(4):
            page = await source.load(_request(key))
            collected.extend(page.items)
            key = page.next_key
        assert collected == list(range(20))

    async def test_last_key_closes_the_end(self):
        source = GeneratedPageSource(lambda i, page: i, page_size=5, last_key=2)
        page = await source.load(_request(2))
        assert page.next_key is None
        with pytest.raises(InvalidCursorError):
            await source.load(_request(3))

    async def test_latency_is_awaited(self):
        source = GeneratedPageSource(lambda i, page: i, page_size=2, latency=0.001)
        page = await source.load(_request(1))
        assert page.items == (0, 1)

    def test_refresh_key_uses_page_numbers(self):
        source = user_source()
        pages = (
            Page(items=["a"] * 20, prev_key=None, next_key=2),
            Page(items=["b"] * 20, prev_key=1, next_key=3),
        )
        state = PagingState(pages=pages, anchor_position=25, config=PagingConfig())
        assert source.get_refresh_key(state) == 2
