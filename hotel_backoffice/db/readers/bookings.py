from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Any, Iterable, Optional

from sqlalchemy import select
from sqlalchemy.engine import Connection

from hotel_backoffice.db.readers._query import fetch_rows
from hotel_backoffice.db.readers.rooms import get_room_details
from hotel_backoffice.models.bookings import Booking, BookingAddon, BookingRoom
from hotel_backoffice.models.catalog import Addon, PaymentStatus
from hotel_backoffice.models.guests import Guest
from hotel_backoffice.services.availability import Occupancy
from hotel_backoffice.utils.datetime import ensure_utc


def get_room_occupancy(
    conn: Connection,
    room_ids: Iterable[int],
    exclude_booking_id: Optional[int] = None,
) -> list[Occupancy]:
    """
    Fetch the (room_id, checkin, checkout) interval of every booking on the rooms.

    Args:
        conn: Active database connection
        room_ids: Rooms to inspect
        exclude_booking_id: Booking to leave out (the one being edited)

    Returns:
        list[Occupancy]: One entry per booked room, datetimes in UTC
    """
    ids = list(room_ids)
    if not ids:
        return []

    stmt = (
        select(BookingRoom.room_id, Booking.checkin_date, Booking.checkout_date)
        .join(Booking, BookingRoom.booking_id == Booking.id)
        .where(BookingRoom.room_id.in_(ids))
    )
    if exclude_booking_id is not None:
        stmt = stmt.where(BookingRoom.booking_id != exclude_booking_id)

    return [
        Occupancy(
            room_id=row.room_id,
            checkin=ensure_utc(row.checkin_date),
            checkout=ensure_utc(row.checkout_date),
        )
        for row in conn.execute(stmt)
    ]


def get_paid_booking_amounts(
    conn: Connection,
    paid_status_number: int,
    start: datetime,
    end: datetime,
) -> list[tuple[datetime, float]]:
    """
    Fetch (checkin_date, booking_amount) for paid bookings in [start, end).

    Args:
        conn: Active database connection
        paid_status_number: payment_status.number that means "paid"
        start: Inclusive lower bound on checkin_date
        end: Exclusive upper bound on checkin_date

    Returns:
        list: (checkin datetime in UTC, amount) ordered by checkin
    """
    stmt = (
        select(Booking.checkin_date, Booking.booking_amount)
        .join(PaymentStatus, Booking.payment_status_id == PaymentStatus.id)
        .where(PaymentStatus.number == paid_status_number)
        .where(Booking.checkin_date >= start)
        .where(Booking.checkin_date < end)
        .order_by(Booking.checkin_date)
    )
    return [
        (ensure_utc(row.checkin_date), float(row.booking_amount)) for row in conn.execute(stmt)
    ]


def get_booking_details(
    conn: Connection, booking_ids: Iterable[int]
) -> dict[int, dict[str, Any]]:
    """
    Fetch bookings with guest, payment status, rooms and addons attached.

    Rooms are expanded with floor, status and room class; addons carry the
    booked ``quantity``.

    Returns:
        dict: booking_id -> booking dict
    """
    bookings = fetch_rows(conn, Booking, booking_ids)
    if not bookings:
        return {}
    ids = [b["id"] for b in bookings]

    guests = {g["id"]: g for g in fetch_rows(conn, Guest, {b["guest_id"] for b in bookings})}
    statuses = {
        s["id"]: s
        for s in fetch_rows(conn, PaymentStatus, {b["payment_status_id"] for b in bookings})
    }

    room_links = conn.execute(
        select(BookingRoom.booking_id, BookingRoom.room_id)
        .where(BookingRoom.booking_id.in_(ids))
        .order_by(BookingRoom.id)
    ).all()
    rooms = get_room_details(conn, {link.room_id for link in room_links})
    rooms_by_booking: dict[int, list[dict[str, Any]]] = defaultdict(list)
    for link in room_links:
        if link.room_id in rooms:
            rooms_by_booking[link.booking_id].append(rooms[link.room_id])

    addon_links = conn.execute(
        select(BookingAddon.booking_id, BookingAddon.addon_id, BookingAddon.quantity)
        .where(BookingAddon.booking_id.in_(ids))
        .order_by(BookingAddon.id)
    ).all()
    addons = {a["id"]: a for a in fetch_rows(conn, Addon, {link.addon_id for link in addon_links})}
    addons_by_booking: dict[int, list[dict[str, Any]]] = defaultdict(list)
    for link in addon_links:
        if link.addon_id in addons:
            addons_by_booking[link.booking_id].append(
                {**addons[link.addon_id], "quantity": link.quantity}
            )

    return {
        booking["id"]: {
            **booking,
            "checkin_date": ensure_utc(booking["checkin_date"]),
            "checkout_date": ensure_utc(booking["checkout_date"]),
            "guest": guests.get(booking["guest_id"]),
            "payment_status": statuses.get(booking["payment_status_id"]),
            "rooms": rooms_by_booking.get(booking["id"], []),
            "addons": addons_by_booking.get(booking["id"], []),
        }
        for booking in bookings
    }
