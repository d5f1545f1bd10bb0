"""
Routers for the booking join tables.

Adding a room to a booking goes through the same availability check as
creating the booking, against the booking's own dates.
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.engine import Engine

from hotel_backoffice.db.readers._query import fetch_page, fetch_rows
from hotel_backoffice.db.readers.rooms import get_room_details
from hotel_backoffice.db.writers._crud import delete_rows
from hotel_backoffice.db.writers.activity_logs import ACTION_DELETE, record_activity
from hotel_backoffice.dependencies import PageParams, get_db_engine
from hotel_backoffice.models.bookings import BookingAddon, BookingRoom
from hotel_backoffice.models.catalog import Addon
from hotel_backoffice.responses import ApiError, api_response, internal_errors, paginated
from hotel_backoffice.schemas.bookings import (
    BookingAddonPayload,
    BookingAddonUpdate,
    BookingRoomPayload,
    BookingRoomUpdate,
)
from hotel_backoffice.services.bookings import (
    add_booking_addon,
    add_booking_room,
    move_booking_room,
    update_booking_addon,
)

logger = structlog.get_logger(__name__)

booking_rooms_router = APIRouter(prefix="/booking-rooms", tags=["Booking rooms"])
booking_addons_router = APIRouter(prefix="/booking-addons", tags=["Booking addons"])


def _link_not_found(label: str, link_id: int) -> ApiError:
    return ApiError(
        status.HTTP_404_NOT_FOUND,
        f"{label} not found",
        [f"{label} with ID {link_id} does not exist"],
    )


@booking_rooms_router.get("")
def list_booking_rooms(
    booking_id: Optional[int] = Query(None),
    room_id: Optional[int] = Query(None),
    page: PageParams = Depends(),
    db_engine: Engine = Depends(get_db_engine),
) -> JSONResponse:
    """List booking/room links, optionally for one booking or one room, with the room expanded."""
    with internal_errors("booking_room_list_failed"):
        stmt = select(BookingRoom.__table__).order_by(BookingRoom.id)
        if booking_id is not None:
            stmt = stmt.where(BookingRoom.booking_id == booking_id)
        if room_id is not None:
            stmt = stmt.where(BookingRoom.room_id == room_id)

        with db_engine.connect() as conn:
            rows, total = fetch_page(conn, stmt, page.page, page.limit)
            rooms = get_room_details(conn, {row["room_id"] for row in rows})
        items = [{**row, "room": rooms.get(row["room_id"])} for row in rows]
        return api_response(
            paginated(items, page.page, page.limit, total),
            "Booking rooms retrieved successfully",
        )


@booking_rooms_router.post("", status_code=status.HTTP_201_CREATED)
def create_booking_room(
    payload: BookingRoomPayload,
    db_engine: Engine = Depends(get_db_engine),
) -> JSONResponse:
    with internal_errors("booking_room_create_failed", booking_id=payload.booking_id):
        link = add_booking_room(db_engine, payload.booking_id, payload.room_id)
        return api_response(link, "Booking room created successfully", status.HTTP_201_CREATED)


@booking_rooms_router.get("/{link_id}")
def get_booking_room(link_id: int, db_engine: Engine = Depends(get_db_engine)) -> JSONResponse:
    with internal_errors("booking_room_get_failed", link_id=link_id):
        with db_engine.connect() as conn:
            rows = fetch_rows(conn, BookingRoom, [link_id])
            if not rows:
                raise _link_not_found("Booking room", link_id)
            room = get_room_details(conn, [rows[0]["room_id"]]).get(rows[0]["room_id"])
        return api_response({**rows[0], "room": room}, "Booking room retrieved successfully")


@booking_rooms_router.put("/{link_id}")
def update_booking_room(
    link_id: int,
    payload: BookingRoomUpdate,
    db_engine: Engine = Depends(get_db_engine),
) -> JSONResponse:
    """Move the link to another room, checked against the booking's dates."""
    with internal_errors("booking_room_update_failed", link_id=link_id):
        link = move_booking_room(db_engine, link_id, payload.room_id)
        return api_response(link, "Booking room updated successfully")


@booking_rooms_router.delete("/{link_id}")
def delete_booking_room(link_id: int, db_engine: Engine = Depends(get_db_engine)) -> JSONResponse:
    """
    Remove a room from a booking.

    A booking keeps at least one room; removing its last room is refused.
    """
    with internal_errors("booking_room_delete_failed", link_id=link_id):
        with db_engine.begin() as conn:
            rows = fetch_rows(conn, BookingRoom, [link_id])
            if not rows:
                raise _link_not_found("Booking room", link_id)
            link = rows[0]
            siblings = conn.execute(
                select(BookingRoom.id).where(BookingRoom.booking_id == link["booking_id"])
            ).all()
            if len(siblings) <= 1:
                raise ApiError(
                    status.HTTP_400_BAD_REQUEST,
                    "Cannot delete booking room",
                    ["A booking must keep at least one room"],
                )
            delete_rows(conn, BookingRoom, [link_id])
            record_activity(conn, ACTION_DELETE, BookingRoom.__tablename__, link_id, link)
        logger.info("booking_room_deleted", link_id=link_id, booking_id=link["booking_id"])
        return api_response(link, "Booking room deleted successfully")


@booking_addons_router.get("")
def list_booking_addons(
    booking_id: Optional[int] = Query(None),
    addon_id: Optional[int] = Query(None),
    page: PageParams = Depends(),
    db_engine: Engine = Depends(get_db_engine),
) -> JSONResponse:
    with internal_errors("booking_addon_list_failed"):
        stmt = select(BookingAddon.__table__).order_by(BookingAddon.id)
        if booking_id is not None:
            stmt = stmt.where(BookingAddon.booking_id == booking_id)
        if addon_id is not None:
            stmt = stmt.where(BookingAddon.addon_id == addon_id)

        with db_engine.connect() as conn:
            rows, total = fetch_page(conn, stmt, page.page, page.limit)
            addon_ids = {row["addon_id"] for row in rows}
            addons = {a["id"]: a for a in fetch_rows(conn, Addon, addon_ids)}
        items = [{**row, "addon": addons.get(row["addon_id"])} for row in rows]
        return api_response(
            paginated(items, page.page, page.limit, total),
            "Booking addons retrieved successfully",
        )


@booking_addons_router.post("", status_code=status.HTTP_201_CREATED)
def create_booking_addon(
    payload: BookingAddonPayload,
    db_engine: Engine = Depends(get_db_engine),
) -> JSONResponse:
    with internal_errors("booking_addon_create_failed", booking_id=payload.booking_id):
        link = add_booking_addon(db_engine, payload.booking_id, payload.addon_id, payload.quantity)
        return api_response(link, "Booking addon created successfully", status.HTTP_201_CREATED)


@booking_addons_router.get("/{link_id}")
def get_booking_addon(link_id: int, db_engine: Engine = Depends(get_db_engine)) -> JSONResponse:
    with internal_errors("booking_addon_get_failed", link_id=link_id):
        with db_engine.connect() as conn:
            rows = fetch_rows(conn, BookingAddon, [link_id])
            if not rows:
                raise _link_not_found("Booking addon", link_id)
            addons = fetch_rows(conn, Addon, [rows[0]["addon_id"]])
        addon = addons[0] if addons else None
        return api_response({**rows[0], "addon": addon}, "Booking addon retrieved successfully")


@booking_addons_router.put("/{link_id}")
def update_booking_addon_link(
    link_id: int,
    payload: BookingAddonUpdate,
    db_engine: Engine = Depends(get_db_engine),
) -> JSONResponse:
    with internal_errors("booking_addon_update_failed", link_id=link_id):
        values = payload.model_dump(exclude_none=True)
        link = update_booking_addon(db_engine, link_id, values)
        return api_response(link, "Booking addon updated successfully")


@booking_addons_router.delete("/{link_id}")
def delete_booking_addon(link_id: int, db_engine: Engine = Depends(get_db_engine)) -> JSONResponse:
    with internal_errors("booking_addon_delete_failed", link_id=link_id):
        with db_engine.begin() as conn:
            rows = fetch_rows(conn, BookingAddon, [link_id])
            if not rows:
                raise _link_not_found("Booking addon", link_id)
            delete_rows(conn, BookingAddon, [link_id])
            record_activity(conn, ACTION_DELETE, BookingAddon.__tablename__, link_id, rows[0])
        logger.info("booking_addon_deleted", link_id=link_id)
        return api_response(rows[0], "Booking addon deleted successfully")
