from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any, Callable, Optional

from bson import ObjectId
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from pagewise.core.pager import resolve_load
from pagewise.utils.exceptions import InvalidCursorError, LoadError, PagerClosed, PagewiseError
from pagewise.utils.pagination import LoadRequest, Page
from pagewise.utils.types import ErrorKind, LoadDirection, LoaderLike

# Status codes per stable error kind
ERROR_STATUS: dict[ErrorKind, int] = {
    ErrorKind.TRANSIENT: 503,
    ErrorKind.INVALID_CURSOR: 400,
}


class ObjectIdJSONResponse(JSONResponse):
    """JSONResponse that serializes ObjectId and datetime values.

    Lets a router hand raw MongoDB documents straight to the client.
    """

    def render(self, content: Any) -> bytes:
        """Render content to JSON, handling ObjectId serialization."""
        def default_handler(obj: Any) -> Any:
            if isinstance(obj, ObjectId):
                return str(obj)
            if isinstance(obj, (datetime, date)):
                return obj.isoformat()
            raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")

        return json.dumps(content, default=default_handler, separators=(",", ":")).encode("utf-8")


class PageParams:
    """FastAPI dependency for page request parameters."""

    def __init__(
        self,
        direction: LoadDirection = LoadDirection.REFRESH,
        key: Optional[str] = None,
        size: int = 20,
    ):
        self.direction = direction
        self.key = key
        self.size = min(max(1, size), 100)


class LoadRequestModel(BaseModel):
    """Wire form of a LoadRequest."""

    direction: LoadDirection
    key: Optional[Any] = None
    size: int = Field(default=20, ge=1)

    @classmethod
    def from_request(cls, request: LoadRequest[Any]) -> LoadRequestModel:
        return cls(direction=request.direction, key=request.key, size=request.requested_size)

    def to_request(self) -> LoadRequest[Any]:
        return LoadRequest(self.direction, self.key, self.size)


class PageModel(BaseModel):
    """Wire form of a Page."""

    items: list[Any]
    prev_key: Optional[Any] = None
    next_key: Optional[Any] = None

    @classmethod
    def from_page(cls, page: Page[Any, Any]) -> PageModel:
        return cls(items=list(page.items), prev_key=page.prev_key, next_key=page.next_key)

    def to_page(self) -> Page[Any, Any]:
        return Page(items=tuple(self.items), prev_key=self.prev_key, next_key=self.next_key)


class LoadErrorModel(BaseModel):
    """Wire form of a loader failure."""

    kind: ErrorKind
    detail: str
    direction: Optional[LoadDirection] = None
    key: Optional[Any] = None

    @classmethod
    def from_error(cls, error: LoadError) -> LoadErrorModel:
        request = error.request
        return cls(
            kind=error.kind,
            detail=str(error),
            direction=request.direction if request is not None else None,
            key=request.key if request is not None else None,
        )


def error_response(error: LoadError) -> JSONResponse:
    """Build the HTTP response for a loader failure."""
    body = LoadErrorModel.from_error(error).model_dump(mode="json")
    return JSONResponse(status_code=ERROR_STATUS[error.kind], content=body)


def create_page_router(
    loader: LoaderLike,
    *,
    prefix: str = "",
    key_type: Callable[[str], Any] = int,
    tags: list[str] | None = None,
) -> APIRouter:
    """Expose a loader as ``GET {prefix}/pages``.

    Query parameters: ``direction``, ``key`` (parsed with ``key_type``) and
    ``size``. Failures answer with a LoadErrorModel body.
    """
    load = resolve_load(loader)
    router = APIRouter(prefix=prefix, tags=tags or ["pages"])

    @router.get("/pages", response_model=PageModel)
    async def get_page(params: PageParams = Depends()):
        try:
            key = key_type(params.key) if params.key is not None else None
        except (TypeError, ValueError) as e:
            return error_response(InvalidCursorError(f"Malformed key {params.key!r}", cause=e))

        request = LoadRequest(params.direction, key, params.size)
        try:
            page = await load(request)
        except LoadError as e:
            if e.request is None:
                e.request = request
            return error_response(e)
        return ObjectIdJSONResponse(content=PageModel.from_page(page).model_dump(mode="python"))

    return router


def register_exception_handlers(app: Any) -> None:
    """Register pagewise exception handlers on a FastAPI app."""

    @app.exception_handler(LoadError)
    async def load_error_handler(request: Any, exc: LoadError):
        return error_response(exc)

    @app.exception_handler(PagerClosed)
    async def pager_closed_handler(request: Any, exc: PagerClosed):
        return JSONResponse(status_code=410, content={"detail": str(exc)})

    @app.exception_handler(PagewiseError)
    async def pagewise_error_handler(request: Any, exc: PagewiseError):
        return JSONResponse(status_code=500, content={"detail": str(exc)})
