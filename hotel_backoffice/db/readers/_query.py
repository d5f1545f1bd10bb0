"""
Generic read helpers shared by every resource.

Each helper takes an active Connection and an ORM model class and returns
plain dicts, so route handlers can hand the rows straight to the response
envelope.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from sqlalchemy import String, cast, false, func, select
from sqlalchemy.engine import Connection
from sqlalchemy.sql import Select


def fetch_page(
    conn: Connection, stmt: Select, page: int, limit: int
) -> tuple[list[dict[str, Any]], int]:
    """
    Run ``stmt`` for one page and count the full result set.

    Args:
        conn: Active database connection
        stmt: Filtered and ordered select statement
        page: 1-based page number
        limit: Page size

    Returns:
        tuple: (rows for the page as dicts, total number of matching rows)
    """
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = conn.execute(count_stmt).scalar_one()

    rows = conn.execute(stmt.limit(limit).offset((page - 1) * limit)).mappings().all()
    return [dict(row) for row in rows], total


def fetch_row(conn: Connection, model: type, row_id: int) -> Optional[dict[str, Any]]:
    """
    Fetch a single row by primary key.

    Returns:
        Optional[dict]: The row, or None if it does not exist
    """
    table = model.__table__
    row = conn.execute(select(table).where(table.c.id == row_id)).mappings().fetchone()
    return dict(row) if row else None


def fetch_rows(conn: Connection, model: type, ids: Iterable[int]) -> list[dict[str, Any]]:
    """Fetch every row whose id is in ``ids`` (missing ids are skipped)."""
    ids = list(ids)
    if not ids:
        return []
    table = model.__table__
    result = conn.execute(select(table).where(table.c.id.in_(ids)).order_by(table.c.id))
    return [dict(row) for row in result.mappings()]


def existing_ids(conn: Connection, model: type, ids: Iterable[int]) -> set[int]:
    """Return the subset of ``ids`` that exist in the model's table."""
    ids = list(ids)
    if not ids:
        return set()
    table = model.__table__
    result = conn.execute(select(table.c.id).where(table.c.id.in_(ids)))
    return {row[0] for row in result}


def find_conflicts(
    conn: Connection,
    model: type,
    field: str,
    values: Iterable[Any],
    exclude_ids: Iterable[int] = (),
) -> list[Any]:
    """
    Return stored values of ``field`` that collide with ``values``.

    String values are compared case-insensitively. Rows listed in
    ``exclude_ids`` are ignored (used when a row is being updated).

    Args:
        conn: Active database connection
        model: ORM model class
        field: Column name that must stay unique
        values: Candidate values
        exclude_ids: Row ids to ignore

    Returns:
        list: Stored values that already exist
    """
    values = [v for v in values if v is not None]
    if not values:
        return []

    column = model.__table__.c[field]
    if all(isinstance(v, str) for v in values):
        condition = func.lower(column).in_([v.lower() for v in values])
    else:
        condition = column.in_(values)

    stmt = select(column).where(condition)
    exclude_ids = list(exclude_ids)
    if exclude_ids:
        stmt = stmt.where(model.__table__.c.id.not_in(exclude_ids))

    return [row[0] for row in conn.execute(stmt)]


def is_referenced(conn: Connection, column: Any, ids: Iterable[int]) -> bool:
    """
    Check whether any row references one of ``ids`` through ``column``.

    Args:
        conn: Active database connection
        column: Foreign-key column (e.g. ``Room.floor_id``)
        ids: Referenced primary keys

    Returns:
        bool: True if at least one referencing row exists
    """
    ids = list(ids)
    if not ids:
        return False
    row = conn.execute(select(column).where(column.in_(ids)).limit(1)).fetchone()
    return row is not None


def ilike_text(column: Any, term: str) -> Any:
    """Case-insensitive ``%term%`` match that also works on numeric columns."""
    return cast(column, String).ilike(f"%{term}%")


def _to_float(text: str, default: float) -> float:
    try:
        return float(text)
    except ValueError:
        return default


def price_range(column: Any, term: str) -> Any:
    """
    Filter for the dashboard's price search box.

    ``"10-50"`` matches prices between 10 and 50 (bounds swapped if reversed),
    ``"10-"`` matches 10 and above, and a single number matches that exact price.
    """
    term = term.strip()
    if "-" not in term:
        return column == _to_float(term, 0.0)

    low_text, _, high_text = term.partition("-")
    low = _to_float(low_text.strip(), 0.0)
    high = _to_float(high_text.strip(), float("inf"))
    if low > high:
        low, high = high, low
    if high == float("inf"):
        return column >= low
    return column.between(low, high)


def int_equals(column: Any, term: str) -> Any:
    """``column == int(term)``, or a condition matching nothing for non-numeric input."""
    try:
        return column == int(term)
    except ValueError:
        return false()
