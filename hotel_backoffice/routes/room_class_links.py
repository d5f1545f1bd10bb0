"""
Routers for the room class join tables.

``room-class-bed-types`` and ``room-class-features`` can be addressed by row
id or by their natural key, e.g. ``/room-class-bed-types/{room_class_id}/{bed_type_id}``.
"""

from typing import Any, Callable, Optional

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.engine import Connection, Engine

from hotel_backoffice.db.readers._query import fetch_row, fetch_rows, int_equals
from hotel_backoffice.db.writers._crud import delete_rows
from hotel_backoffice.db.writers.activity_logs import ACTION_DELETE, record_activity
from hotel_backoffice.dependencies import get_db_engine
from hotel_backoffice.models.catalog import BedType, Feature
from hotel_backoffice.models.rooms import RoomClass, RoomClassBedType, RoomClassFeature
from hotel_backoffice.responses import ApiError, api_response, internal_errors
from hotel_backoffice.routes._resource import (
    Resource,
    build_resource_router,
    ensure_exists,
    expand_rows,
    update_existing_row,
    update_values,
)
from hotel_backoffice.schemas.rooms import (
    RoomClassBedTypeCreate,
    RoomClassBedTypeUpdate,
    RoomClassFeatureCreate,
    RoomClassFeatureUpdate,
)

logger = structlog.get_logger(__name__)


def _pair_validator(
    model: type, target_field: str, target_model: type, target_label: str, label: str
) -> Callable[[Connection, dict[str, Any], Optional[int]], None]:
    """
    Build the validator for a room class join row.

    The room class and target row must exist, and the (room_class_id, target)
    pair must not be linked twice.
    """

    def validate(conn: Connection, values: dict[str, Any], row_id: Optional[int]) -> None:
        current = fetch_row(conn, model, row_id) if row_id is not None else {}
        room_class_id = values.get("room_class_id", current.get("room_class_id"))
        target_id = values.get(target_field, current.get(target_field))

        ensure_exists(conn, RoomClass, [room_class_id], "Room class")
        ensure_exists(conn, target_model, [target_id], target_label)

        table = model.__table__
        stmt = select(table.c.id).where(
            table.c.room_class_id == room_class_id, table.c[target_field] == target_id
        )
        if row_id is not None:
            stmt = stmt.where(table.c.id != row_id)
        if conn.execute(stmt.limit(1)).fetchone() is not None:
            raise ApiError(
                status.HTTP_409_CONFLICT,
                f"{label} already exists",
                [f"{target_label} {target_id} is already linked to room class {room_class_id}"],
            )

    return validate


def _pair_expander(
    target_field: str, target_model: type, target_key: str
) -> Callable[[Connection, list[dict[str, Any]]], list[dict[str, Any]]]:
    def expand(conn: Connection, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        class_ids = {row["room_class_id"] for row in rows}
        target_ids = {row[target_field] for row in rows}
        classes = {r["id"]: r for r in fetch_rows(conn, RoomClass, class_ids)}
        targets = {r["id"]: r for r in fetch_rows(conn, target_model, target_ids)}
        return [
            {
                **row,
                "room_class": classes.get(row["room_class_id"]),
                target_key: targets.get(row[target_field]),
            }
            for row in rows
        ]

    return expand


room_class_bed_types = Resource(
    model=RoomClassBedType,
    label="Room class bed type",
    plural_label="Room class bed types",
    body_key="room_class_bed_types",
    create_schema=RoomClassBedTypeCreate,
    update_schema=RoomClassBedTypeUpdate,
    filters={
        "room_class_id": lambda term: int_equals(RoomClassBedType.room_class_id, term),
        "bed_type_id": lambda term: int_equals(RoomClassBedType.bed_type_id, term),
    },
    validate=_pair_validator(
        RoomClassBedType, "bed_type_id", BedType, "Bed type", "Room class bed type"
    ),
    expand=_pair_expander("bed_type_id", BedType, "bed_type"),
)

room_class_features = Resource(
    model=RoomClassFeature,
    label="Room class feature",
    plural_label="Room class features",
    body_key="room_class_features",
    create_schema=RoomClassFeatureCreate,
    update_schema=RoomClassFeatureUpdate,
    filters={
        "room_class_id": lambda term: int_equals(RoomClassFeature.room_class_id, term),
        "feature_id": lambda term: int_equals(RoomClassFeature.feature_id, term),
    },
    validate=_pair_validator(
        RoomClassFeature, "feature_id", Feature, "Feature", "Room class feature"
    ),
    expand=_pair_expander("feature_id", Feature, "feature"),
)


def _find_pair(
    conn: Connection, resource: Resource, target_field: str, room_class_id: int, target_id: int
) -> dict[str, Any]:
    table = resource.model.__table__
    row = (
        conn.execute(
            select(table).where(
                table.c.room_class_id == room_class_id, table.c[target_field] == target_id
            )
        )
        .mappings()
        .fetchone()
    )
    if row is None:
        target = target_field.removesuffix("_id").replace("_", " ")
        raise ApiError(
            status.HTTP_404_NOT_FOUND,
            f"{resource.label} not found",
            [f"Room class {room_class_id} has no link to {target} {target_id}"],
        )
    return dict(row)


def add_pair_routes(
    router: APIRouter, resource: Resource, target_field: str, update_schema: type[BaseModel]
) -> APIRouter:
    """
    Register GET/PUT/DELETE ``/{room_class_id}/{target_id}`` on ``router``.

    Args:
        router: Router built by ``build_resource_router``
        resource: Join resource
        target_field: ``bed_type_id`` or ``feature_id``
        update_schema: Body schema for PUT

    Returns:
        The same router
    """
    event = resource.table
    path = "/{room_class_id}/{target_id}"

    @router.get(path)
    def get_pair(
        room_class_id: int, target_id: int, db_engine: Engine = Depends(get_db_engine)
    ) -> JSONResponse:
        with internal_errors(f"{event}_get_failed", room_class_id=room_class_id):
            with db_engine.connect() as conn:
                row = _find_pair(conn, resource, target_field, room_class_id, target_id)
                row = expand_rows(conn, resource, [row])[0]
            return api_response(row, f"{resource.label} retrieved successfully")

    @router.put(path)
    def update_pair(
        room_class_id: int,
        target_id: int,
        payload: update_schema,  # type: ignore[valid-type]
        db_engine: Engine = Depends(get_db_engine),
    ) -> JSONResponse:
        with internal_errors(f"{event}_update_failed", room_class_id=room_class_id):
            values = update_values(resource, payload)
            with db_engine.begin() as conn:
                row = _find_pair(conn, resource, target_field, room_class_id, target_id)
                update_existing_row(conn, resource, row["id"], values)
                stored = fetch_row(conn, resource.model, row["id"])
                updated = expand_rows(conn, resource, [stored])[0]
            logger.info(f"{event}_updated", id=row["id"])
            return api_response(updated, f"{resource.label} updated successfully")

    @router.delete(path)
    def delete_pair(
        room_class_id: int, target_id: int, db_engine: Engine = Depends(get_db_engine)
    ) -> JSONResponse:
        with internal_errors(f"{event}_delete_failed", room_class_id=room_class_id):
            with db_engine.begin() as conn:
                row = _find_pair(conn, resource, target_field, room_class_id, target_id)
                delete_rows(conn, resource.model, [row["id"]])
                record_activity(conn, ACTION_DELETE, resource.table, row["id"], row)
            logger.info(f"{event}_deleted", id=row["id"])
            return api_response(row, f"{resource.label} deleted successfully")

    return router


room_class_bed_types_router = add_pair_routes(
    build_resource_router(room_class_bed_types, "/room-class-bed-types"),
    room_class_bed_types,
    "bed_type_id",
    RoomClassBedTypeUpdate,
)
room_class_features_router = add_pair_routes(
    build_resource_router(room_class_features, "/room-class-features"),
    room_class_features,
    "feature_id",
    RoomClassFeatureUpdate,
)
