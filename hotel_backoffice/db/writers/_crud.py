"""
Generic insert/update/delete helpers.

Every resource writer goes through these functions so the database
operation metrics stay consistent. All helpers run on the caller's
Connection; the caller owns the transaction (``with engine.begin() as conn``).
"""

from typing import Any, Iterable

from sqlalchemy import delete, insert, update
from sqlalchemy.engine import Connection

from hotel_backoffice.metrics import db_operations


def insert_row(conn: Connection, model: type, values: dict[str, Any]) -> int:
    """
    Insert one row and return its generated primary key.

    Args:
        conn: Connection inside an open transaction
        model: ORM model class (e.g. Floor, Room)
        values: Column values

    Returns:
        int: The new row id
    """
    result = conn.execute(insert(model).values(**values))
    db_operations.labels(operation="insert", table=model.__tablename__).inc()
    return int(result.inserted_primary_key[0])


def insert_rows(conn: Connection, model: type, rows: list[dict[str, Any]]) -> list[int]:
    """
    Insert rows one by one, preserving input order in the returned ids.

    Returns:
        list[int]: New row ids, aligned with ``rows``
    """
    return [insert_row(conn, model, values) for values in rows]


def update_row(conn: Connection, model: type, row_id: int, values: dict[str, Any]) -> None:
    """
    Update columns of an existing row.

    Args:
        conn: Connection inside an open transaction
        model: ORM model class
        row_id: Primary key of the row
        values: Columns to change (only the keys present are written)
    """
    if not values:
        return
    conn.execute(update(model).where(model.id == row_id).values(**values))
    db_operations.labels(operation="update", table=model.__tablename__).inc()


def delete_rows(conn: Connection, model: type, ids: Iterable[int]) -> int:
    """
    Delete rows by primary key.

    Returns:
        int: Number of rows deleted
    """
    ids = list(ids)
    if not ids:
        return 0
    result = conn.execute(delete(model).where(model.id.in_(ids)))
    db_operations.labels(operation="delete", table=model.__tablename__).inc()
    return result.rowcount


def delete_where(conn: Connection, model: type, *conditions: Any) -> int:
    """Delete every row of ``model`` matching ``conditions``."""
    result = conn.execute(delete(model).where(*conditions))
    db_operations.labels(operation="delete", table=model.__tablename__).inc()
    return result.rowcount
