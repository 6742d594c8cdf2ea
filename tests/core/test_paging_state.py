from pagewise import Page, PagingConfig, PagingState, int_refresh_key


def _state(pages, anchor, leading=0):
    return PagingState(
        pages=tuple(pages),
        anchor_position=anchor,
        config=PagingConfig(page_size=20),
        leading_placeholders=leading,
    )


FIRST = Page(items=[f"a{i}" for i in range(20)], prev_key=None, next_key=2)
SECOND = Page(items=[f"b{i}" for i in range(20)], prev_key=1, next_key=3)


class TestClosestPage:
    def test_position_inside_second_page(self):
        state = _state([FIRST, SECOND], anchor=25)
        assert state.closest_page_to_position(25) is SECOND
        assert state.closest_item_to_position(25) == "b5"

    def test_position_clamps_to_last_page(self):
        state = _state([FIRST, SECOND], anchor=500)
        assert state.closest_page_to_position(500) is SECOND
        assert state.closest_item_to_position(500) == "b19"

    def test_leading_placeholder_clamps_to_first_page(self):
        state = _state([SECOND], anchor=0, leading=1)
        assert state.closest_page_to_position(0) is SECOND
        assert state.closest_item_to_position(1) == "b0"

    def test_empty_state(self):
        state = _state([], anchor=3)
        assert state.closest_page_to_position(3) is None
        assert state.closest_item_to_position(3) is None
        assert state.is_empty()


class TestIntRefreshKey:
    def test_anchor_in_second_page(self):
        assert int_refresh_key(_state([FIRST, SECOND], anchor=30)) == 2

    def test_anchor_in_first_page_uses_next_key(self):
        assert int_refresh_key(_state([FIRST, SECOND], anchor=3)) == 1

    def test_no_anchor_restarts(self):
        assert int_refresh_key(_state([FIRST, SECOND], anchor=None)) is None

    def test_no_pages_restarts(self):
        assert int_refresh_key(_state([], anchor=4)) is None

    def test_single_page_without_neighbours(self):
        only = Page(items=["x"], prev_key=None, next_key=None)
        assert int_refresh_key(_state([only], anchor=0)) is None
