from typing import Any, Optional

import structlog
from fastapi.encoders import jsonable_encoder
from sqlalchemy.engine import Connection

from hotel_backoffice.db.writers._crud import insert_row
from hotel_backoffice.models.activity_logs import ActivityLog

logger = structlog.get_logger(__name__)

ACTION_CREATE = "CREATE"
ACTION_UPDATE = "UPDATE"
ACTION_DELETE = "DELETE"


def record_activity(
    conn: Connection,
    action_type: str,
    resource_type: str,
    resource_id: Optional[int],
    changes: Any,
) -> None:
    """
    Append an entry to the activity log inside the caller's transaction.

    Args:
        conn: Connection inside the transaction that made the change
        action_type: CREATE, UPDATE or DELETE
        resource_type: Table name of the changed resource
        resource_id: Primary key of the changed row (None for batch entries)
        changes: Payload written, or the row removed; must be JSON-encodable
    """
    insert_row(
        conn,
        ActivityLog,
        {
            "action_type": action_type,
            "resource_type": resource_type,
            "resource_id": resource_id,
            "changes": jsonable_encoder(changes),
        },
    )
    logger.debug(
        "activity_recorded",
        action_type=action_type,
        resource_type=resource_type,
        resource_id=resource_id,
    )
