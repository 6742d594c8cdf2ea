from pagewise.integrations.fastapi import (
    create_page_router,
    register_exception_handlers,
    LoadRequestModel,
    LoadErrorModel,
    PageModel,
)

__all__ = [
    "create_page_router",
    "register_exception_handlers",
    "LoadRequestModel",
    "LoadErrorModel",
    "PageModel",
]
