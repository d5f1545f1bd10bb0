"""
Shared fixtures.

Route tests run the real app against an in-memory SQLite database injected
through the ``get_db_engine`` dependency override, so no PostgreSQL server
is needed.
"""

from __future__ import annotations

import os

# config.py refuses to import without a DATABASE_URL; the application engine
# is never connected to in tests.
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///hotel_backoffice_test.db")

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from hotel_backoffice.db.writers._crud import insert_row
from hotel_backoffice.dependencies import get_db_engine
from hotel_backoffice.main import app
from hotel_backoffice.models.base import Base
from hotel_backoffice.models.bookings import Booking, BookingRoom
from hotel_backoffice.models.catalog import (
    Addon,
    BedType,
    Feature,
    Floor,
    PaymentStatus,
    RoomStatus,
)
from hotel_backoffice.models.guests import Guest
from hotel_backoffice.models.rooms import Room, RoomClass, RoomClassBedType, RoomClassFeature


@pytest.fixture
def db_engine() -> Generator[Engine, None, None]:
    """Fresh in-memory SQLite database with every table created."""
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection: Any, _: Any) -> None:
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def client(db_engine: Engine) -> Generator[TestClient, None, None]:
    """FastAPI test client wired to the test database."""
    app.dependency_overrides[get_db_engine] = lambda: db_engine
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def hotel(db_engine: Engine) -> dict[str, int]:
    """
    Seed a small hotel and return the ids of what was created.

    Floor 1 has rooms 101 and 102 (Available) and 103 (Maintenance), all of
    class "Deluxe". Payment statuses are Pending (1) and Paid (2).
    """
    with db_engine.begin() as conn:
        ids = {
            "floor": insert_row(conn, Floor, {"number": 1}),
            "bed_type": insert_row(conn, BedType, {"name": "Queen"}),
            "feature": insert_row(conn, Feature, {"name": "Balcony", "price": 15.0}),
            "available": insert_row(conn, RoomStatus, {"name": "Available", "number": 1}),
            "maintenance": insert_row(conn, RoomStatus, {"name": "Maintenance", "number": 3}),
            "pending": insert_row(conn, PaymentStatus, {"name": "Pending", "number": 1}),
            "paid": insert_row(conn, PaymentStatus, {"name": "Paid", "number": 2}),
            "addon": insert_row(conn, Addon, {"name": "Breakfast", "price": 12.5}),
            "room_class": insert_row(conn, RoomClass, {"name": "Deluxe", "price": 120.0}),
            "guest": insert_row(
                conn,
                Guest,
                {
                    "nationality": "FOREIGNER",
                    "id_card_type": "PASSPORT",
                    "id_card_number": "X1234567",
                    "name": "Ada Lovelace",
                    "email": "ada@example.com",
                    "phone": "+44 20 7946 0000",
                },
            ),
        }
        insert_row(
            conn,
            RoomClassBedType,
            {"room_class_id": ids["room_class"], "bed_type_id": ids["bed_type"], "num_beds": 2},
        )
        insert_row(
            conn,
            RoomClassFeature,
            {"room_class_id": ids["room_class"], "feature_id": ids["feature"]},
        )
        for number, status_key in ((101, "available"), (102, "available"), (103, "maintenance")):
            ids[f"room_{number}"] = insert_row(
                conn,
                Room,
                {
                    "number": number,
                    "floor_id": ids["floor"],
                    "room_class_id": ids["room_class"],
                    "room_status_id": ids[status_key],
                },
            )
    return ids


@pytest.fixture
def store_booking(db_engine: Engine, hotel: dict[str, int]) -> Callable[..., int]:
    """
    Factory inserting a booking directly, bypassing API validation.

    Used for bookings in the past (revenue history) that the API would reject.
    """

    def _store(
        checkin: datetime,
        checkout: datetime,
        amount: float = 100.0,
        room_ids: tuple[int, ...] = (),
        paid: bool = True,
    ) -> int:
        with db_engine.begin() as conn:
            booking_id = insert_row(
                conn,
                Booking,
                {
                    "guest_id": hotel["guest"],
                    "payment_status_id": hotel["paid"] if paid else hotel["pending"],
                    "checkin_date": checkin,
                    "checkout_date": checkout,
                    "num_adults": 2,
                    "num_children": 0,
                    "booking_amount": amount,
                },
            )
            for room_id in room_ids:
                insert_row(conn, BookingRoom, {"booking_id": booking_id, "room_id": room_id})
        return booking_id

    return _store


@pytest.fixture
def future_day() -> Callable[..., str]:
    """Factory for ISO timestamps ``days`` days from today at ``hour``:00 UTC."""

    def _day(days: int, hour: int = 14) -> str:
        today = datetime.now(timezone.utc).replace(hour=hour, minute=0, second=0, microsecond=0)
        return (today + timedelta(days=days)).isoformat()

    return _day
