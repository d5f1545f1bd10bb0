"""
Booking lifecycle: validation, room availability and persistence.

Every write runs inside a single ``engine.begin()`` transaction. The room
rows are locked (``SELECT ... FOR UPDATE`` on PostgreSQL) before the overlap
query runs, so two requests booking the same room are serialised and the
second one sees the first one's stay.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Optional

import structlog
from fastapi import status
from sqlalchemy import select
from sqlalchemy.engine import Connection, Engine

from hotel_backoffice.config import MAX_BOOKABLE_ROOM_STATUS_NUMBER
from hotel_backoffice.db.readers._query import existing_ids, fetch_page, fetch_row
from hotel_backoffice.db.readers.bookings import get_booking_details, get_room_occupancy
from hotel_backoffice.db.readers.rooms import get_rooms_with_status
from hotel_backoffice.db.writers._crud import delete_rows, delete_where, insert_row, update_row
from hotel_backoffice.db.writers.activity_logs import (
    ACTION_CREATE,
    ACTION_DELETE,
    ACTION_UPDATE,
    record_activity,
)
from hotel_backoffice.metrics import booking_conflicts, bookings_written
from hotel_backoffice.models.bookings import Booking, BookingAddon, BookingRoom
from hotel_backoffice.models.catalog import Addon, PaymentStatus
from hotel_backoffice.models.guests import Guest
from hotel_backoffice.responses import INVALID_FIELDS_MESSAGE, ApiError
from hotel_backoffice.schemas.bookings import BookingPayload
from hotel_backoffice.services.availability import find_conflicting_room_ids
from hotel_backoffice.utils.datetime import ensure_utc, utc_now

logger = structlog.get_logger(__name__)


def _unique(ids: Iterable[int]) -> list[int]:
    return list(dict.fromkeys(ids))


def _room_numbers(rooms: Iterable[dict[str, Any]]) -> str:
    return ", ".join(str(room["number"]) for room in rooms)


def _invalid_fields(error: str) -> ApiError:
    return ApiError(status.HTTP_400_BAD_REQUEST, INVALID_FIELDS_MESSAGE, [error])


def validate_booking_payload(payload: BookingPayload, is_create: bool) -> tuple[datetime, datetime]:
    """
    Check required fields and date ordering.

    The past-checkin rule only applies to new bookings so that stays already
    in progress can still be edited. It compares UTC calendar days.

    Args:
        payload: Incoming booking body
        is_create: True for POST, False for PUT

    Returns:
        tuple: (checkin, checkout) as aware UTC datetimes

    Raises:
        ApiError: 400 describing the first failing rule
    """
    if not payload.guest_id:
        raise _invalid_fields("Booking guest is required")
    if not payload.payment_status_id:
        raise _invalid_fields("Booking payment status is required")
    if payload.checkin_date is None:
        raise _invalid_fields("Booking checkin date is required")
    if payload.checkout_date is None:
        raise _invalid_fields("Booking checkout date is required")

    checkin = ensure_utc(payload.checkin_date)
    checkout = ensure_utc(payload.checkout_date)

    if is_create and checkin.date() < utc_now().date():
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            "Invalid checkin date",
            ["Booking checkin date cannot be in the past"],
        )
    if checkout <= checkin:
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            "Invalid checkout date",
            ["Booking checkout date must be after checkin date"],
        )
    if payload.num_adults is None:
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            "Invalid booking number of adults",
            ["Booking number of adults must be a number"],
        )
    if payload.booking_amount is None:
        raise _invalid_fields("Booking booking amount must be a number")
    if not payload.room_ids:
        raise _invalid_fields("Booking rooms are required")

    return checkin, checkout


def ensure_rooms_bookable(
    conn: Connection,
    room_ids: Iterable[int],
    checkin: datetime,
    checkout: datetime,
    exclude_booking_id: Optional[int] = None,
) -> list[dict[str, Any]]:
    """
    Reject the request unless every room can take a stay over [checkin, checkout).

    Locks the room rows for the rest of the transaction, then checks that
    each room exists, that its status allows bookings, and that no other
    booking on it overlaps the interval.

    Args:
        conn: Connection inside the transaction that will write the booking
        room_ids: Requested rooms
        checkin: Candidate check-in (aware)
        checkout: Candidate check-out (aware)
        exclude_booking_id: Booking being edited, ignored in the overlap check

    Returns:
        list: The locked rooms with their status number

    Raises:
        ApiError: 400 when a room is missing, not bookable or already taken
    """
    ids = _unique(room_ids)
    rooms = get_rooms_with_status(conn, ids, lock=True)

    if len(rooms) != len(ids):
        booking_conflicts.labels(reason="missing_room").inc()
        missing = sorted(set(ids) - {room["id"] for room in rooms})
        logger.info("booking_rooms_missing", room_ids=missing)
        raise ApiError(
            status.HTTP_400_BAD_REQUEST, "Invalid booking rooms", ["One or more rooms do not exist"]
        )

    blocked = [room for room in rooms if room["status_number"] > MAX_BOOKABLE_ROOM_STATUS_NUMBER]
    if blocked:
        booking_conflicts.labels(reason="room_status").inc()
        logger.info("rooms_unavailable", room_numbers=[room["number"] for room in blocked])
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            "Rooms not available",
            [f"Rooms {_room_numbers(blocked)} are not available for booking"],
        )

    occupancies = get_room_occupancy(conn, ids, exclude_booking_id=exclude_booking_id)
    taken = find_conflicting_room_ids(occupancies, checkin, checkout)
    if taken:
        booking_conflicts.labels(reason="overlap").inc()
        conflicting = [room for room in rooms if room["id"] in taken]
        logger.info(
            "rooms_already_booked",
            room_numbers=[room["number"] for room in conflicting],
            checkin=checkin.isoformat(),
            checkout=checkout.isoformat(),
        )
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            "Rooms not available for selected dates",
            [f"Rooms {_room_numbers(conflicting)} are already booked for the selected dates"],
        )

    return rooms


def _ensure_references(conn: Connection, payload: BookingPayload) -> None:
    if fetch_row(conn, Guest, payload.guest_id) is None:
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            "Invalid booking guest",
            [f"Guest {payload.guest_id} does not exist"],
        )
    if fetch_row(conn, PaymentStatus, payload.payment_status_id) is None:
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            "Invalid booking payment status",
            [f"Payment status {payload.payment_status_id} does not exist"],
        )
    if payload.addon_ids:
        addon_ids = _unique(payload.addon_ids)
        if len(existing_ids(conn, Addon, addon_ids)) != len(addon_ids):
            raise ApiError(
                status.HTTP_400_BAD_REQUEST,
                "Invalid booking addons",
                ["One or more addons do not exist"],
            )


def _booking_values(
    payload: BookingPayload, checkin: datetime, checkout: datetime
) -> dict[str, Any]:
    return {
        "guest_id": payload.guest_id,
        "payment_status_id": payload.payment_status_id,
        "checkin_date": checkin,
        "checkout_date": checkout,
        "num_adults": payload.num_adults,
        "num_children": payload.num_children,
        "booking_amount": payload.booking_amount,
    }


def _attach_rooms(conn: Connection, booking_id: int, room_ids: Iterable[int]) -> None:
    for room_id in _unique(room_ids):
        insert_row(conn, BookingRoom, {"booking_id": booking_id, "room_id": room_id})


def _attach_addons(conn: Connection, booking_id: int, addon_ids: Iterable[int]) -> None:
    for addon_id in _unique(addon_ids):
        insert_row(conn, BookingAddon, {"booking_id": booking_id, "addon_id": addon_id})


def create_booking(engine: Engine, payload: BookingPayload) -> dict[str, Any]:
    """
    Validate and store a new booking with its rooms and addons.

    Args:
        engine: SQLAlchemy engine
        payload: Booking body

    Returns:
        dict: The stored booking with guest, payment status, rooms and addons

    Raises:
        ApiError: 400 for invalid input or unavailable rooms
    """
    checkin, checkout = validate_booking_payload(payload, is_create=True)

    with engine.begin() as conn:
        _ensure_references(conn, payload)
        ensure_rooms_bookable(conn, payload.room_ids, checkin, checkout)

        booking_id = insert_row(conn, Booking, _booking_values(payload, checkin, checkout))
        _attach_rooms(conn, booking_id, payload.room_ids)
        _attach_addons(conn, booking_id, payload.addon_ids or [])
        record_activity(
            conn, ACTION_CREATE, Booking.__tablename__, booking_id, payload.model_dump()
        )

        booking = get_booking_details(conn, [booking_id])[booking_id]

    bookings_written.labels(operation="create").inc()
    logger.info("booking_created", booking_id=booking_id, room_ids=payload.room_ids)
    return booking


def update_booking(engine: Engine, booking_id: int, payload: BookingPayload) -> dict[str, Any]:
    """
    Replace a booking's fields and room assignments.

    The booking's own stay is left out of the overlap check, so saving a
    booking with unchanged dates never conflicts with itself. Addons are only
    replaced when ``addon_ids`` is sent.

    Raises:
        ApiError: 404 if the booking does not exist, 400 for invalid input
    """
    checkin, checkout = validate_booking_payload(payload, is_create=False)

    with engine.begin() as conn:
        if fetch_row(conn, Booking, booking_id) is None:
            raise ApiError(
                status.HTTP_404_NOT_FOUND,
                "Booking not found",
                ["Booking with the specified ID does not exist"],
            )
        _ensure_references(conn, payload)
        ensure_rooms_bookable(
            conn, payload.room_ids, checkin, checkout, exclude_booking_id=booking_id
        )

        update_row(conn, Booking, booking_id, _booking_values(payload, checkin, checkout))
        delete_where(conn, BookingRoom, BookingRoom.booking_id == booking_id)
        _attach_rooms(conn, booking_id, payload.room_ids)
        if payload.addon_ids is not None:
            delete_where(conn, BookingAddon, BookingAddon.booking_id == booking_id)
            _attach_addons(conn, booking_id, payload.addon_ids)
        record_activity(
            conn, ACTION_UPDATE, Booking.__tablename__, booking_id, payload.model_dump()
        )

        booking = get_booking_details(conn, [booking_id])[booking_id]

    bookings_written.labels(operation="update").inc()
    logger.info("booking_updated", booking_id=booking_id, room_ids=payload.room_ids)
    return booking


def get_booking(conn: Connection, booking_id: int) -> dict[str, Any]:
    """
    Fetch one booking with its relations.

    Raises:
        ApiError: 404 if the booking does not exist
    """
    booking = get_booking_details(conn, [booking_id]).get(booking_id)
    if booking is None:
        raise ApiError(
            status.HTTP_404_NOT_FOUND,
            "Booking not found",
            ["Booking with the specified ID does not exist"],
        )
    return booking


def list_bookings(conn: Connection, page: int, limit: int) -> tuple[list[dict[str, Any]], int]:
    """One page of bookings, latest check-in first, plus the total count."""
    stmt = select(Booking.id).order_by(Booking.checkin_date.desc(), Booking.id.desc())
    rows, total = fetch_page(conn, stmt, page, limit)
    ids = [row["id"] for row in rows]
    details = get_booking_details(conn, ids)
    return [details[booking_id] for booking_id in ids if booking_id in details], total


def delete_booking(engine: Engine, booking_id: int) -> None:
    """
    Delete a booking; its room and addon links go with it.

    Raises:
        ApiError: 404 if the booking does not exist
    """
    with engine.begin() as conn:
        booking = fetch_row(conn, Booking, booking_id)
        if booking is None:
            raise ApiError(
                status.HTTP_404_NOT_FOUND,
                "Booking not found",
                ["Booking with the specified ID does not exist"],
            )
        delete_where(conn, BookingRoom, BookingRoom.booking_id == booking_id)
        delete_where(conn, BookingAddon, BookingAddon.booking_id == booking_id)
        delete_rows(conn, Booking, [booking_id])
        record_activity(conn, ACTION_DELETE, Booking.__tablename__, booking_id, booking)

    logger.info("booking_deleted", booking_id=booking_id)


def _booking_or_404(conn: Connection, booking_id: int) -> dict[str, Any]:
    booking = fetch_row(conn, Booking, booking_id)
    if booking is None:
        raise ApiError(
            status.HTTP_404_NOT_FOUND,
            "Booking not found",
            [f"Booking with ID {booking_id} does not exist"],
        )
    return booking


def add_booking_room(engine: Engine, booking_id: int, room_id: int) -> dict[str, Any]:
    """
    Attach one more room to an existing booking.

    The room must be bookable for the booking's own [checkin, checkout)
    interval; the booking's other rooms are not re-checked.

    Returns:
        dict: The new booking_room row

    Raises:
        ApiError: 404 for an unknown booking, 409 if the room is already on
        the booking, 400 if the room is missing, blocked or taken
    """
    with engine.begin() as conn:
        booking = _booking_or_404(conn, booking_id)
        linked = conn.execute(
            select(BookingRoom.id).where(
                BookingRoom.booking_id == booking_id, BookingRoom.room_id == room_id
            )
        ).fetchone()
        if linked is not None:
            raise ApiError(
                status.HTTP_409_CONFLICT,
                "Booking room already exists",
                [f"Room {room_id} is already part of booking {booking_id}"],
            )

        ensure_rooms_bookable(
            conn,
            [room_id],
            ensure_utc(booking["checkin_date"]),
            ensure_utc(booking["checkout_date"]),
            exclude_booking_id=booking_id,
        )
        values = {"booking_id": booking_id, "room_id": room_id}
        link_id = insert_row(conn, BookingRoom, values)
        record_activity(conn, ACTION_CREATE, BookingRoom.__tablename__, link_id, values)
        link = fetch_row(conn, BookingRoom, link_id)

    logger.info("booking_room_added", booking_id=booking_id, room_id=room_id)
    return link


def add_booking_addon(
    engine: Engine, booking_id: int, addon_id: int, quantity: int
) -> dict[str, Any]:
    """
    Attach an addon to an existing booking.

    Raises:
        ApiError: 404 for an unknown booking or addon, 409 if already attached
    """
    with engine.begin() as conn:
        _booking_or_404(conn, booking_id)
        if fetch_row(conn, Addon, addon_id) is None:
            raise ApiError(
                status.HTTP_404_NOT_FOUND,
                "Addon not found",
                [f"Addon with ID {addon_id} does not exist"],
            )
        linked = conn.execute(
            select(BookingAddon.id).where(
                BookingAddon.booking_id == booking_id, BookingAddon.addon_id == addon_id
            )
        ).fetchone()
        if linked is not None:
            raise ApiError(
                status.HTTP_409_CONFLICT,
                "Booking addon already exists",
                [f"Addon {addon_id} is already part of booking {booking_id}"],
            )

        values = {"booking_id": booking_id, "addon_id": addon_id, "quantity": quantity}
        link_id = insert_row(conn, BookingAddon, values)
        record_activity(conn, ACTION_CREATE, BookingAddon.__tablename__, link_id, values)
        link = fetch_row(conn, BookingAddon, link_id)

    logger.info("booking_addon_added", booking_id=booking_id, addon_id=addon_id)
    return link


def _link_or_404(conn: Connection, model: type, label: str, link_id: int) -> dict[str, Any]:
    link = fetch_row(conn, model, link_id)
    if link is None:
        raise ApiError(
            status.HTTP_404_NOT_FOUND,
            f"{label} not found",
            [f"{label} with ID {link_id} does not exist"],
        )
    return link


def move_booking_room(engine: Engine, link_id: int, room_id: int) -> dict[str, Any]:
    """
    Point a booking_room row at another room.

    The new room goes through the same checks as ``add_booking_room``,
    against the booking's own dates.

    Raises:
        ApiError: 404 for an unknown link, 409 if the room is already on the
        booking, 400 if the room is missing, blocked or taken
    """
    with engine.begin() as conn:
        link = _link_or_404(conn, BookingRoom, "Booking room", link_id)
        if link["room_id"] == room_id:
            return link

        booking = _booking_or_404(conn, link["booking_id"])
        linked = conn.execute(
            select(BookingRoom.id).where(
                BookingRoom.booking_id == booking["id"], BookingRoom.room_id == room_id
            )
        ).fetchone()
        if linked is not None:
            raise ApiError(
                status.HTTP_409_CONFLICT,
                "Booking room already exists",
                [f"Room {room_id} is already part of booking {booking['id']}"],
            )

        ensure_rooms_bookable(
            conn,
            [room_id],
            ensure_utc(booking["checkin_date"]),
            ensure_utc(booking["checkout_date"]),
            exclude_booking_id=booking["id"],
        )
        update_row(conn, BookingRoom, link_id, {"room_id": room_id})
        record_activity(
            conn, ACTION_UPDATE, BookingRoom.__tablename__, link_id, {"room_id": room_id}
        )
        link = fetch_row(conn, BookingRoom, link_id)

    logger.info("booking_room_moved", link_id=link_id, room_id=room_id)
    return link


def update_booking_addon(engine: Engine, link_id: int, values: dict[str, Any]) -> dict[str, Any]:
    """
    Change the addon or quantity of a booking_addon row.

    Args:
        engine: Database engine
        link_id: booking_addon id
        values: ``addon_id`` and/or ``quantity``

    Raises:
        ApiError: 404 for an unknown link or addon, 409 if the new addon is
        already on the booking
    """
    with engine.begin() as conn:
        link = _link_or_404(conn, BookingAddon, "Booking addon", link_id)
        addon_id = values.get("addon_id")
        if addon_id is not None and addon_id != link["addon_id"]:
            if fetch_row(conn, Addon, addon_id) is None:
                raise ApiError(
                    status.HTTP_404_NOT_FOUND,
                    "Addon not found",
                    [f"Addon with ID {addon_id} does not exist"],
                )
            linked = conn.execute(
                select(BookingAddon.id).where(
                    BookingAddon.booking_id == link["booking_id"],
                    BookingAddon.addon_id == addon_id,
                )
            ).fetchone()
            if linked is not None:
                raise ApiError(
                    status.HTTP_409_CONFLICT,
                    "Booking addon already exists",
                    [f"Addon {addon_id} is already part of booking {link['booking_id']}"],
                )

        if values:
            update_row(conn, BookingAddon, link_id, values)
            record_activity(conn, ACTION_UPDATE, BookingAddon.__tablename__, link_id, values)
        link = fetch_row(conn, BookingAddon, link_id)

    logger.info("booking_addon_updated", link_id=link_id, fields=sorted(values))
    return link
