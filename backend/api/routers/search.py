"""Search endpoint.

Routes
------
GET /api/search?query=<text>&site=<root url>&offset=0&limit=20
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Query, Request

router = APIRouter()


@router.get("/search")
def search(
    request: Request,
    query: str = "",
    site: Optional[str] = None,
    offset: int = Query(0, ge=0),
    limit: int = Query(20, ge=0),
) -> dict[str, Any]:
    """Search the index.

    Args:
        query: Free text; every meaningful word must occur on a result page.
        site: Restrict results to the site with this root URL.
        offset: Number of ranked results to skip.
        limit: Maximum number of results to return.
    """
    service = request.app.state.services.search
    return service.search(query, site=site, offset=offset, limit=limit).to_dict()
