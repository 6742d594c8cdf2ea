from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pagewise.utils.types import ErrorKind

if TYPE_CHECKING:
    from pagewise.utils.pagination import LoadRequest


class PagewiseError(Exception):
    """Base exception for all Pagewise errors."""


class LoadError(PagewiseError):
    """Raised by a loader when a page cannot be produced.

    Subclasses fix the ``kind`` so the pager can tell retryable failures
    from terminal ones.
    """

    kind: ErrorKind = ErrorKind.TRANSIENT

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
        request: LoadRequest[Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.request = request


class TransientLoadError(LoadError):
    """Raised for backend hiccups. Retrying the same request is safe."""

    kind = ErrorKind.TRANSIENT


class InvalidCursorError(LoadError):
    """Raised when the loader rejects the supplied cursor."""

    kind = ErrorKind.INVALID_CURSOR


class PagerClosed(PagewiseError):
    """Raised when feeding signals into a pager that has been closed."""


class InvalidStateTransition(PagewiseError):
    """Raised when a load state is moved along an edge that does not exist."""


def classify_error(error: BaseException) -> ErrorKind:
    """Map any loader exception to a stable ErrorKind.

    Unknown exceptions are treated as transient so the consumer can retry.
    """
    if isinstance(error, LoadError):
        return error.kind
    return ErrorKind.TRANSIENT
