import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import structlog
from sqlalchemy import select
from sqlalchemy.engine import Connection, Engine

from hotel_backoffice.db.writers._crud import insert_row
from hotel_backoffice.logging_config import setup_logging
from hotel_backoffice.models.catalog import PaymentStatus, RoomStatus

setup_logging()
logger = structlog.get_logger(__name__)

PAYMENT_STATUSES = [
    {"name": "Pending", "number": 1, "color": "#FAAD14"},
    {"name": "Paid", "number": 2, "color": "#52C41A"},
    {"name": "Refunded", "number": 3, "color": "#8C8C8C"},
]

ROOM_STATUSES = [
    {"name": "Available", "number": 1, "color": "#52C41A"},
    {"name": "Occupied", "number": 2, "color": "#1677FF"},
    {"name": "Maintenance", "number": 3, "color": "#FF4D4F"},
]


def _seed(conn: Connection, model: type, rows: list[dict]) -> int:
    """Insert rows whose ``number`` is not taken yet; returns how many were added."""
    taken = set(conn.execute(select(model.number)).scalars())
    added = 0
    for row in rows:
        if row["number"] in taken:
            continue
        insert_row(conn, model, row)
        added += 1
    return added


def seed_reference_data(engine: Engine) -> dict[str, int]:
    """
    Insert the default payment and room statuses if they are missing.

    Safe to run repeatedly: statuses are matched on ``number``.

    Returns:
        dict: Number of rows added per table
    """
    with engine.begin() as conn:
        added = {
            PaymentStatus.__tablename__: _seed(conn, PaymentStatus, PAYMENT_STATUSES),
            RoomStatus.__tablename__: _seed(conn, RoomStatus, ROOM_STATUSES),
        }
    logger.info("reference_data_seeded", **added)
    return added


def main() -> None:
    from hotel_backoffice.db.engine import engine

    try:
        seed_reference_data(engine)
    except Exception:
        logger.exception("reference_data_seed_failed")
        raise


if __name__ == "__main__":
    main()
