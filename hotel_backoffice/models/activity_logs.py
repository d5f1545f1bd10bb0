"""SQLAlchemy model for the dashboard activity log."""

from sqlalchemy import JSON, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from hotel_backoffice.models.base import Base


class ActivityLog(Base):
    """
    ORM model for an audit entry written on every create/update/delete.

    action_type is CREATE, UPDATE or DELETE; resource_type is the table name;
    changes holds the JSON payload that was written (or the deleted row).
    """

    __tablename__ = "activity_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    action_type = Column(String, nullable=False, index=True)
    resource_type = Column(String, nullable=False, index=True)
    resource_id = Column(Integer, nullable=True)
    changes = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
