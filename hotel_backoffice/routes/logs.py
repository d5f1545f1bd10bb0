from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.engine import Engine

from hotel_backoffice.db.readers._query import fetch_page
from hotel_backoffice.dependencies import PageParams, get_db_engine
from hotel_backoffice.models.activity_logs import ActivityLog
from hotel_backoffice.responses import api_response, internal_errors, paginated

router = APIRouter(prefix="/logs", tags=["Activity logs"])


@router.get("")
def list_logs(
    action_type: Optional[str] = Query(None, alias="search[action_type]"),
    resource_type: Optional[str] = Query(None, alias="search[resource_type]"),
    page: PageParams = Depends(),
    db_engine: Engine = Depends(get_db_engine),
) -> JSONResponse:
    """
    List activity-log entries, newest first.

    Args:
        action_type: Case-insensitive substring of CREATE/UPDATE/DELETE
        resource_type: Case-insensitive substring of the table name
        page: Pagination parameters
        db_engine: Injected database engine
    """
    with internal_errors("activity_log_list_failed"):
        stmt = select(ActivityLog.__table__).order_by(
            ActivityLog.created_at.desc(), ActivityLog.id.desc()
        )
        if action_type:
            stmt = stmt.where(ActivityLog.action_type.ilike(f"%{action_type}%"))
        if resource_type:
            stmt = stmt.where(ActivityLog.resource_type.ilike(f"%{resource_type}%"))

        with db_engine.connect() as conn:
            rows, total = fetch_page(conn, stmt, page.page, page.limit)
        return api_response(
            paginated(rows, page.page, page.limit, total),
            "Activity logs retrieved successfully",
        )
