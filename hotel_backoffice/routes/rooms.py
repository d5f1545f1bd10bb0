"""Routers for room classes and rooms."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import status
from sqlalchemy import select
from sqlalchemy.engine import Connection

from hotel_backoffice.db.readers._query import fetch_row, ilike_text, price_range
from hotel_backoffice.db.readers.rooms import expand_rooms, get_room_class_details
from hotel_backoffice.db.writers._crud import delete_where, insert_row
from hotel_backoffice.models.bookings import BookingRoom
from hotel_backoffice.models.catalog import BedType, Feature, Floor, RoomStatus
from hotel_backoffice.models.rooms import Room, RoomClass, RoomClassBedType, RoomClassFeature
from hotel_backoffice.responses import ApiError
from hotel_backoffice.routes._resource import Resource, build_resource_router, ensure_exists
from hotel_backoffice.schemas.rooms import RoomClassCreate, RoomClassUpdate, RoomCreate, RoomUpdate


def _with_bed_type(term: str) -> Any:
    matching = (
        select(RoomClassBedType.room_class_id)
        .join(BedType, RoomClassBedType.bed_type_id == BedType.id)
        .where(BedType.name.ilike(f"%{term}%"))
    )
    return RoomClass.id.in_(matching)


def validate_room_class(conn: Connection, values: dict[str, Any], row_id: Optional[int]) -> None:
    """Check that linked bed types and features exist and are not repeated."""
    bed_types = values.get("bed_types") or []
    bed_type_ids = [entry["id"] for entry in bed_types]
    if len(set(bed_type_ids)) != len(bed_type_ids):
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            "Invalid room class bed types",
            ["Each bed type can only be listed once"],
        )
    ensure_exists(conn, BedType, bed_type_ids, "Bed type")
    ensure_exists(conn, Feature, values.get("feature_ids") or [], "Feature")


def write_room_class_links(conn: Connection, room_class_id: int, relations: dict[str, Any]) -> None:
    """Replace the room class's bed types and/or features with the ones sent."""
    if relations.get("bed_types") is not None:
        delete_where(conn, RoomClassBedType, RoomClassBedType.room_class_id == room_class_id)
        for entry in relations["bed_types"]:
            insert_row(
                conn,
                RoomClassBedType,
                {
                    "room_class_id": room_class_id,
                    "bed_type_id": entry["id"],
                    "num_beds": entry["num_beds"],
                },
            )

    if relations.get("feature_ids") is not None:
        delete_where(conn, RoomClassFeature, RoomClassFeature.room_class_id == room_class_id)
        for feature_id in dict.fromkeys(relations["feature_ids"]):
            insert_row(
                conn, RoomClassFeature, {"room_class_id": room_class_id, "feature_id": feature_id}
            )


def expand_room_classes(conn: Connection, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    details = get_room_class_details(conn, [row["id"] for row in rows])
    return [details.get(row["id"], row) for row in rows]


def validate_room(conn: Connection, values: dict[str, Any], row_id: Optional[int]) -> None:
    """
    Check the room's floor, class and status exist and its number is free on the floor.

    On update only the fields sent are checked; the number/floor pair is
    compared using the stored value for whichever half was not sent.

    Raises:
        ApiError: 404 for a missing floor, class or status; 409 for a taken number
    """
    if values.get("floor_id") is not None:
        ensure_exists(conn, Floor, [values["floor_id"]], "Floor")
    if values.get("room_class_id") is not None:
        ensure_exists(conn, RoomClass, [values["room_class_id"]], "Room class")
    if values.get("room_status_id") is not None:
        ensure_exists(conn, RoomStatus, [values["room_status_id"]], "Room status")

    current = fetch_row(conn, Room, row_id) if row_id is not None else {}
    number = values.get("number", current.get("number"))
    floor_id = values.get("floor_id", current.get("floor_id"))

    stmt = select(Room.id).where(Room.number == number, Room.floor_id == floor_id)
    if row_id is not None:
        stmt = stmt.where(Room.id != row_id)
    if conn.execute(stmt.limit(1)).fetchone() is not None:
        raise ApiError(
            status.HTTP_409_CONFLICT,
            "Room already exists",
            [f"Room number {number} already exists on this floor"],
        )


room_classes = Resource(
    model=RoomClass,
    label="Room class",
    plural_label="Room classes",
    body_key="room_classes",
    create_schema=RoomClassCreate,
    update_schema=RoomClassUpdate,
    order_by=(RoomClass.name,),
    filters={
        "search[name]": lambda term: ilike_text(RoomClass.name, term),
        "search[price]": lambda term: price_range(RoomClass.price, term),
        "search[bed_type]": _with_bed_type,
    },
    unique_fields=("name",),
    references=((Room.room_class_id, "rooms"),),
    relation_fields=("bed_types", "feature_ids"),
    validate=validate_room_class,
    write_relations=write_room_class_links,
    expand=expand_room_classes,
)

rooms = Resource(
    model=Room,
    label="Room",
    plural_label="Rooms",
    body_key="rooms",
    create_schema=RoomCreate,
    update_schema=RoomUpdate,
    order_by=(Room.number,),
    filters={"search": lambda term: ilike_text(Room.number, term)},
    references=((BookingRoom.room_id, "bookings"),),
    validate=validate_room,
    expand=expand_rooms,
    bulk=False,
)

room_classes_router = build_resource_router(room_classes, "/room-classes")
rooms_router = build_resource_router(rooms, "/rooms")
