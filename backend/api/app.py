"""FastAPI application factory.

Lifespan
--------
On startup the app opens a single SQLite connection, initialises the schema
and builds the shared services (morphology dictionaries are loaded once
here).  They are reachable from every request via
``request.app.state.services``.  On shutdown a running crawl is stopped and
the connection is closed.

Tests pass a pre-built :class:`~backend.services.Services` to
:func:`create_app`; the lifespan then leaves it untouched.

Routers
-------
All endpoints are mounted under ``/api``:

    /api/statistics     index totals and per-site details
    /api/startIndexing  start a full crawl of the configured sites
    /api/stopIndexing   cancel the running crawl
    /api/indexPage      re-index one page
    /api/search         free-text search
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.config import settings
from backend.db import get_connection, init_db
from backend.services import Services, build_services

from backend.api.routers import indexing as indexing_router
from backend.api.routers import search as search_router
from backend.api.routers import statistics as statistics_router

logger = logging.getLogger(__name__)


def create_app(services: Optional[Services] = None) -> FastAPI:
    """Return a fully-configured FastAPI application instance."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if services is not None:
            app.state.services = services
            yield
            return

        conn = get_connection()
        init_db(conn)
        app.state.services = build_services(conn)
        try:
            yield
        finally:
            indexing = app.state.services.indexing
            if indexing.is_indexing():
                indexing.stop_indexing()
                indexing.wait(timeout=settings.request_timeout)
            conn.close()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Site Search API",
        description=(
            "Crawls the configured sites, builds a lemma-based inverted index "
            "and serves ranked full-text search with highlighted snippets."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )
    if services is not None:
        app.state.services = services

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(statistics_router.router, prefix="/api", tags=["statistics"])
    app.include_router(indexing_router.router, prefix="/api", tags=["indexing"])
    app.include_router(search_router.router, prefix="/api", tags=["search"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn backend.api.app:app --reload
app = create_app()
