from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel
from pymongo import ASCENDING, DESCENDING
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import ConnectionFailure, PyMongoError

from pagewise.sources.memory import IndexedPageSource
from pagewise.utils.exceptions import InvalidCursorError, TransientLoadError
from pagewise.utils.pagination import LoadRequest, Page

logger = logging.getLogger(__name__)

FilterSpec = dict[str, Any]
SortSpec = list[tuple[str, int]]


def parse_sort(*fields: str) -> SortSpec:
    """Build a sort spec. Prefix with '-' for descending.

    Example: parse_sort("-created_at", "name")
    """
    sort_spec: SortSpec = []
    for field in fields:
        if field.startswith("-"):
            sort_spec.append((field[1:], DESCENDING))
        else:
            sort_spec.append((field, ASCENDING))
    return sort_spec


class MongoPageSource(IndexedPageSource[Any]):
    """Page-number source over a MongoDB collection using skip/limit.

    Documents are sorted by ``sort`` (``_id`` ascending by default) so page
    ``n`` stays stable between loads. When ``document_class`` is a pydantic
    model each raw document is validated into it.
    """

    def __init__(
        self,
        collection: AsyncCollection,
        *,
        filter: FilterSpec | None = None,
        sort: SortSpec | str | None = None,
        projection: dict[str, int] | None = None,
        page_size: int = 20,
        first_key: int = 1,
        document_class: type[BaseModel] | None = None,
    ) -> None:
        super().__init__(page_size, first_key=first_key)
        self._collection = collection
        self._filter: FilterSpec = filter or {}
        if isinstance(sort, str):
            sort = parse_sort(*sort.split(","))
        self._sort: SortSpec = sort or [("_id", ASCENDING)]
        self._projection = projection
        self._document_class = document_class

    async def load(self, request: LoadRequest[int]) -> Page[int, Any]:
        key = self._resolve_key(request)
        offset = self._offset(key)
        logger.debug(f"Loading page {key} from '{self._collection.name}' (skip={offset})")

        try:
            # Fetch one extra document to detect whether a next page exists
            cursor = (
                self._collection.find(self._filter, self._projection)
                .sort(self._sort)
                .skip(offset)
                .limit(self.page_size + 1)
            )
            raw = [doc async for doc in cursor]
        except ConnectionFailure as e:
            raise TransientLoadError(f"MongoDB unreachable: {e}", cause=e, request=request) from e
        except PyMongoError as e:
            raise TransientLoadError(f"MongoDB error: {e}", cause=e, request=request) from e

        if not raw and key != self.first_key:
            raise InvalidCursorError(f"Page {key} is past the end of the collection", request=request)

        has_next = len(raw) > self.page_size
        raw = raw[: self.page_size]
        if self._document_class is not None:
            items = tuple(self._document_class.model_validate(doc) for doc in raw)
        else:
            items = tuple(raw)

        return Page(
            items=items,
            prev_key=self._prev_key(key),
            next_key=key + 1 if has_next else None,
        )
