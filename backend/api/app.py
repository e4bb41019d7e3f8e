"""FastAPI application factory.

Lifespan
--------
On startup the app opens a single SQLite connection (shared across all
requests via ``request.app.state.db``), initialises the schema and opens
the version file store (``request.app.state.store``).  On shutdown it
closes the connection cleanly.

Routers
-------
All endpoint groups are mounted under their respective path prefix:

    /projects : projects and their versions
    /versions : comments visible on a version, page-flow graph
    /comments : replies, resolve toggle, pin reposition

Errors
------
Core exceptions map to HTTP status codes in one place:
``NotFoundError`` → 404, ``ValidationError`` → 400, ``RepositoryError`` → 500.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.db import get_connection, init_db
from backend.errors import NotFoundError, RepositoryError, ValidationError
from backend.logging_config import get_logger, setup_logging
from backend.storage import VersionStore

from backend.api.routers import comments as comments_router
from backend.api.routers import projects as projects_router
from backend.api.routers import versions as versions_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the DB and the file store on startup, close the DB on shutdown."""
    setup_logging()
    conn = get_connection()
    init_db(conn)
    app.state.db = conn
    app.state.store = VersionStore()
    try:
        yield
    finally:
        conn.close()


async def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


async def _invalid(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


async def _repository_failed(request: Request, exc: RepositoryError) -> JSONResponse:
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "storage error"})


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="Design Review API",
        description=(
            "REST interface for the Design Review backend. "
            "Exposes projects and versions, pin comments that carry over "
            "between versions, and the page-flow graph of each version."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(NotFoundError, _not_found)
    app.add_exception_handler(ValidationError, _invalid)
    app.add_exception_handler(RepositoryError, _repository_failed)

    app.include_router(projects_router.router, prefix="/projects", tags=["projects"])
    app.include_router(versions_router.router, prefix="/versions", tags=["versions"])
    app.include_router(comments_router.router, prefix="/comments", tags=["comments"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn backend.api.app:app --reload
app = create_app()
