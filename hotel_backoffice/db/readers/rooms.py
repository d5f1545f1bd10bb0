"""
Readers that expand rooms and room classes with their related rows.

The dashboard shows a room together with its floor, status and room class,
and a room class together with its bed types and features. These helpers
fetch those relations in a handful of batched queries instead of one query
per row.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Iterable

from sqlalchemy import select
from sqlalchemy.engine import Connection

from hotel_backoffice.db.readers._query import fetch_rows
from hotel_backoffice.models.catalog import BedType, Feature, Floor, RoomStatus
from hotel_backoffice.models.rooms import Room, RoomClass, RoomClassBedType, RoomClassFeature


def get_room_class_details(
    conn: Connection, room_class_ids: Iterable[int]
) -> dict[int, dict[str, Any]]:
    """
    Fetch room classes with their bed types and features.

    Args:
        conn: Active database connection
        room_class_ids: Room class ids to expand

    Returns:
        dict: room_class_id -> room class dict with ``bed_types`` (each with
        ``num_beds``, ``bed_type_id`` and the ``bed_type`` row) and
        ``features`` (feature rows)
    """
    ids = sorted(set(room_class_ids))
    classes = {row["id"]: row for row in fetch_rows(conn, RoomClass, ids)}
    if not classes:
        return {}

    bed_types: dict[int, list[dict[str, Any]]] = defaultdict(list)
    bed_rows = conn.execute(
        select(
            RoomClassBedType.room_class_id,
            RoomClassBedType.num_beds,
            RoomClassBedType.bed_type_id,
        )
        .where(RoomClassBedType.room_class_id.in_(ids))
        .order_by(RoomClassBedType.id)
    ).mappings()
    bed_rows = [dict(row) for row in bed_rows]
    bed_type_rows = {
        row["id"]: row for row in fetch_rows(conn, BedType, {r["bed_type_id"] for r in bed_rows})
    }
    for row in bed_rows:
        bed_types[row["room_class_id"]].append(
            {
                "num_beds": row["num_beds"],
                "bed_type_id": row["bed_type_id"],
                "bed_type": bed_type_rows.get(row["bed_type_id"]),
            }
        )

    features: dict[int, list[dict[str, Any]]] = defaultdict(list)
    feature_links = conn.execute(
        select(RoomClassFeature.room_class_id, RoomClassFeature.feature_id)
        .where(RoomClassFeature.room_class_id.in_(ids))
        .order_by(RoomClassFeature.id)
    ).all()
    feature_rows = {
        row["id"]: row for row in fetch_rows(conn, Feature, {link[1] for link in feature_links})
    }
    for room_class_id, feature_id in feature_links:
        if feature_id in feature_rows:
            features[room_class_id].append(feature_rows[feature_id])

    return {
        class_id: {
            **room_class,
            "bed_types": bed_types.get(class_id, []),
            "features": features.get(class_id, []),
        }
        for class_id, room_class in classes.items()
    }


def expand_rooms(conn: Connection, rooms: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Attach ``floor``, ``room_status`` and expanded ``room_class`` to room rows.

    Args:
        conn: Active database connection
        rooms: Plain room rows

    Returns:
        list: Room dicts in the same order, with relations attached
    """
    if not rooms:
        return []

    floors = {row["id"]: row for row in fetch_rows(conn, Floor, {r["floor_id"] for r in rooms})}
    statuses = {
        row["id"]: row for row in fetch_rows(conn, RoomStatus, {r["room_status_id"] for r in rooms})
    }
    classes = get_room_class_details(conn, {r["room_class_id"] for r in rooms})

    return [
        {
            **room,
            "floor": floors.get(room["floor_id"]),
            "room_status": statuses.get(room["room_status_id"]),
            "room_class": classes.get(room["room_class_id"]),
        }
        for room in rooms
    ]


def get_room_details(conn: Connection, room_ids: Iterable[int]) -> dict[int, dict[str, Any]]:
    """Fetch and expand rooms by id; returns room_id -> expanded room."""
    rooms = fetch_rows(conn, Room, room_ids)
    return {room["id"]: room for room in expand_rooms(conn, rooms)}


def get_rooms_with_status(
    conn: Connection, room_ids: Iterable[int], lock: bool = False
) -> list[dict[str, Any]]:
    """
    Fetch rooms with their status number for booking checks.

    Args:
        conn: Active database connection
        room_ids: Room ids to fetch
        lock: If True, lock the room rows (SELECT ... FOR UPDATE) until the
            surrounding transaction ends. Ignored by SQLite.

    Returns:
        list: dicts with ``id``, ``number``, ``status_number`` and ``status_name``
    """
    ids = list(room_ids)
    if not ids:
        return []

    stmt = (
        select(
            Room.id,
            Room.number,
            RoomStatus.number.label("status_number"),
            RoomStatus.name.label("status_name"),
        )
        .join(RoomStatus, Room.room_status_id == RoomStatus.id)
        .where(Room.id.in_(ids))
        .order_by(Room.number)
    )
    if lock:
        stmt = stmt.with_for_update(of=Room)

    return [dict(row) for row in conn.execute(stmt).mappings()]
