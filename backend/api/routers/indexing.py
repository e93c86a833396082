"""Indexing run control endpoints.

Routes
------
GET  /api/startIndexing          → IndexingService.start_indexing
GET  /api/stopIndexing           → IndexingService.stop_indexing
POST /api/indexPage?url=<url>    → IndexingService.index_single_page
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from backend.responses import ApiResponse

logger = logging.getLogger(__name__)

router = APIRouter()

OUTSIDE_CONFIGURED_SITES = (
    "This page is outside the sites listed in the configuration file"
)


@router.get("/startIndexing")
def start_indexing(request: Request) -> dict[str, Any]:
    return request.app.state.services.indexing.start_indexing().to_dict()


@router.get("/stopIndexing")
def stop_indexing(request: Request) -> dict[str, Any]:
    return request.app.state.services.indexing.stop_indexing().to_dict()


@router.post("/indexPage", response_model=None)
def index_page(request: Request, url: str) -> dict[str, Any] | JSONResponse:
    """Fetch one page and replace it in the index.

    Unexpected failures (network, store) are reported as HTTP 500 with the
    usual ``{result, error}`` body.
    """
    indexing = request.app.state.services.indexing
    try:
        indexed = indexing.index_single_page(url)
    except Exception as exc:
        logger.exception("Single-page indexing failed for %s", url)
        return JSONResponse(
            status_code=500,
            content=ApiResponse.fail(f"{type(exc).__name__}: {exc}").to_dict(),
        )
    if not indexed:
        return ApiResponse.fail(OUTSIDE_CONFIGURED_SITES).to_dict()
    return ApiResponse.ok().to_dict()
