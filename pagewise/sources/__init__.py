from pagewise.sources.memory import (
    IndexedPageSource,
    SequencePageSource,
    GeneratedPageSource,
    user_source,
)
from pagewise.sources.mongo import MongoPageSource, parse_sort

__all__ = [
    "IndexedPageSource",
    "SequencePageSource",
    "GeneratedPageSource",
    "user_source",
    "MongoPageSource",
    "parse_sort",
]
