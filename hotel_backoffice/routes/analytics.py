from dataclasses import asdict
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from hotel_backoffice.dependencies import get_db_engine
from hotel_backoffice.responses import ApiError, api_response, internal_errors
from hotel_backoffice.services.revenue import PERIOD_TYPES, InvalidPeriodError, build_revenue_report
from hotel_backoffice.utils.datetime import utc_now

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("/revenue")
def revenue_analytics(
    period: str = Query("monthly", description=f"One of: {', '.join(PERIOD_TYPES)}"),
    year: Optional[int] = Query(None, description="Calendar year, defaults to the current one"),
    month: Optional[int] = Query(
        None, description="Month 1-12, narrows daily/weekly/monthly views"
    ),
    db_engine: Engine = Depends(get_db_engine),
) -> JSONResponse:
    """
    Revenue of paid bookings bucketed by day, ISO week, month or year.

    Args:
        period: daily, weekly, monthly or annually
        year: Requested year (defaults to the current UTC year)
        month: Optional month narrowing the range
        db_engine: Injected database engine

    Returns:
        JSONResponse: ``{summary, total_revenue, average_revenue, period_type}``
        where each summary entry is ``{period, revenue, count, percentage, trend}``

    Example:
        >>> GET /api/analytics/revenue?period=daily&year=2024&month=1
    """
    with internal_errors("revenue_report_failed", period=period, year=year, month=month):
        if period not in PERIOD_TYPES:
            raise ApiError(
                status.HTTP_400_BAD_REQUEST,
                "Invalid period type",
                [f"Period type must be one of: {', '.join(PERIOD_TYPES)}"],
            )
        try:
            with db_engine.connect() as conn:
                report = build_revenue_report(conn, period, year or utc_now().year, month)
        except InvalidPeriodError as e:
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Invalid period", [str(e)]) from e

        return api_response(
            {
                "summary": [asdict(bucket) for bucket in report.summary],
                "total_revenue": report.total_revenue,
                "average_revenue": report.average_revenue,
                "period_type": report.period_type,
            },
            "Revenue analytics retrieved successfully",
        )
