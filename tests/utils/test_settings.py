import pytest
from pydantic import ValidationError

from pagewise import PagingConfig


class TestDefaults:
    def test_defaults(self):
        config = PagingConfig()
        assert config.page_size == 20
        assert config.enable_placeholders is True
        assert config.max_retained_items is None
        assert not config.is_bounded
        assert config.initial_key is None

    def test_derived_values(self):
        config = PagingConfig(page_size=10)
        assert config.effective_prefetch_distance == 10
        assert config.effective_initial_load_size == 30

    def test_explicit_values_win(self):
        config = PagingConfig(page_size=10, prefetch_distance=0, initial_load_size=15)
        assert config.effective_prefetch_distance == 0
        assert config.effective_initial_load_size == 15

    def test_initial_load_capped_by_retention(self):
        config = PagingConfig(page_size=10, max_retained_items=25)
        assert config.is_bounded
        assert config.effective_initial_load_size == 25

    def test_frozen(self):
        config = PagingConfig()
        with pytest.raises(ValidationError):
            config.page_size = 5


class TestValidation:
    @pytest.mark.parametrize("page_size", [0, -1])
    def test_page_size_must_be_positive(self, page_size):
        with pytest.raises(ValidationError):
            PagingConfig(page_size=page_size)

    def test_retention_must_hold_two_pages(self):
        with pytest.raises(ValidationError, match="max_retained_items must be >= 2 \\* page_size"):
            PagingConfig(page_size=20, max_retained_items=39)

    def test_retention_of_exactly_two_pages(self):
        assert PagingConfig(page_size=20, max_retained_items=40).max_retained_items == 40

    def test_negative_prefetch_rejected(self):
        with pytest.raises(ValidationError):
            PagingConfig(prefetch_distance=-1)

    def test_initial_load_larger_than_retention_rejected(self):
        with pytest.raises(ValidationError, match="initial_load_size"):
            PagingConfig(page_size=10, max_retained_items=20, initial_load_size=30)
