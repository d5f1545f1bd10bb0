"""
Prometheus metrics endpoint.

Example:
    GET /metrics

    Response:
        # HELP hotel_bookings_written_total Total bookings written to the database
        # TYPE hotel_bookings_written_total counter
        hotel_bookings_written_total{operation="create"} 12.0
        ...
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics", response_class=Response)
async def metrics() -> Any:
    """
    Return all registered metrics in Prometheus text exposition format.

    Returns:
        Response: Metrics with Content-Type ``text/plain; version=0.0.4``
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
