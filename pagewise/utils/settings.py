"""Configuration for a Pager."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, PositiveInt, model_validator


class PagingConfig(BaseModel):
    """Options recognized by the Pager.

    ``prefetch_distance`` and ``initial_load_size`` default to values derived
    from ``page_size`` when left unset.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    page_size: int = Field(default=20, gt=0)
    enable_placeholders: bool = True
    max_retained_items: Optional[PositiveInt] = None
    prefetch_distance: Optional[NonNegativeInt] = None
    initial_key: Optional[Any] = None
    initial_load_size: Optional[PositiveInt] = None

    @model_validator(mode="after")
    def _check_bounds(self) -> PagingConfig:
        if self.max_retained_items is not None and self.max_retained_items < 2 * self.page_size:
            raise ValueError(
                f"max_retained_items must be >= 2 * page_size "
                f"({2 * self.page_size}), got {self.max_retained_items}"
            )
        if (
            self.max_retained_items is not None
            and self.initial_load_size is not None
            and self.initial_load_size > self.max_retained_items
        ):
            raise ValueError("initial_load_size must not exceed max_retained_items")
        return self

    @property
    def effective_prefetch_distance(self) -> int:
        """Prefetch distance, defaulting to one page."""
        if self.prefetch_distance is None:
            return self.page_size
        return self.prefetch_distance

    @property
    def effective_initial_load_size(self) -> int:
        """Size requested by the first refresh, defaulting to three pages."""
        if self.initial_load_size is None:
            if self.max_retained_items is not None:
                return min(self.page_size * 3, self.max_retained_items)
            return self.page_size * 3
        return self.initial_load_size

    @property
    def is_bounded(self) -> bool:
        return self.max_retained_items is not None
