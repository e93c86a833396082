"""Statistics endpoint.

Routes
------
GET /api/statistics
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/statistics")
def statistics(request: Request) -> dict[str, Any]:
    return request.app.state.services.statistics.get_statistics().to_dict()
