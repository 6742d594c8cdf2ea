"""
Pagewise with FastAPI Example

Demonstrates serving pages from a MongoDB collection over HTTP.

Features covered:
- FastAPI integration
- MongoDB page source
- Stable error bodies for loader failures

Run with:
  pip install uvicorn
  uvicorn example_fastapi:app --reload

Then visit: http://localhost:8000/docs
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from pymongo import AsyncMongoClient

from pagewise import MongoPageSource, SequencePageSource, create_page_router, register_exception_handlers


MONGO_URI = "mongodb://localhost:27017/pagewise_demo"


# ============================================================================
# 1. LIFESPAN
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the MongoDB client for the lifetime of the app."""
    client = AsyncMongoClient(MONGO_URI)
    collection = client.get_default_database()["articles"]
    app.include_router(
        create_page_router(
            MongoPageSource(collection, sort="-published_at", page_size=20),
            prefix="/articles",
            tags=["articles"],
        )
    )
    yield
    await client.close()


# ============================================================================
# 2. APP
# ============================================================================


app = FastAPI(
    title="Pagewise API",
    description="Incremental pages served with Pagewise",
    lifespan=lifespan,
)
register_exception_handlers(app)

app.include_router(
    create_page_router(
        SequencePageSource([f"Color #{i:03d}" for i in range(250)], page_size=25),
        prefix="/colors",
        tags=["colors"],
    )
)


@app.get("/")
async def root():
    return {"message": "Pagewise API", "docs": "/docs"}


# ============================================================================
# EXAMPLE USAGE
# ============================================================================

"""
Example requests:

   # First page
   GET /colors/pages

   # Next page
   GET /colors/pages?direction=append&key=2

   # Previous page
   GET /colors/pages?direction=prepend&key=1

   # Past the end answers 400
   GET /colors/pages?direction=append&key=99
   {"kind": "invalid_cursor", "detail": "...", "direction": "append", "key": 99}

   # Articles from MongoDB, newest first
   GET /articles/pages?key=3
"""
