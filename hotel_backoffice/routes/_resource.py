"""
Generic list/get/create/update/delete and bulk endpoints for dashboard tables.

Most dashboard resources differ only in their table, payload schema, unique
columns, search boxes and the tables that still point at them. Each one is
described by a ``Resource`` and turned into a router by
``build_resource_router``. Resource-specific rules (foreign keys, nested
links) plug in through the ``validate``/``write_relations``/``expand`` hooks.

All writes of one request run in a single transaction and record an
activity-log entry per row.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

import structlog
from fastapi import APIRouter, Body, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from sqlalchemy import select
from sqlalchemy.engine import Connection, Engine

from hotel_backoffice.db.readers._query import (
    existing_ids,
    fetch_page,
    fetch_row,
    fetch_rows,
    find_conflicts,
    is_referenced,
)
from hotel_backoffice.db.writers._crud import delete_rows, insert_row, update_row
from hotel_backoffice.db.writers.activity_logs import (
    ACTION_CREATE,
    ACTION_DELETE,
    ACTION_UPDATE,
    record_activity,
)
from hotel_backoffice.dependencies import PageParams, get_db_engine
from hotel_backoffice.responses import ApiError, api_response, internal_errors, paginated

logger = structlog.get_logger(__name__)

Validator = Callable[[Connection, dict[str, Any], Optional[int]], None]
RelationWriter = Callable[[Connection, int, dict[str, Any]], None]
Expander = Callable[[Connection, list[dict[str, Any]]], list[dict[str, Any]]]


@dataclass
class Resource:
    """
    Description of one dashboard table exposed over REST.

    Attributes:
        model: ORM model class
        label: Singular display name used in messages ("Bed type")
        plural_label: Plural display name ("Bed types")
        body_key: Key holding the entry list in bulk bodies ("bed_types")
        create_schema: Pydantic model for POST bodies
        update_schema: Pydantic model for PUT bodies (all fields optional)
        order_by: Columns the list endpoint sorts by
        filters: Query parameter name -> builder of a WHERE condition
        unique_fields: Columns that must stay unique (strings case-insensitive)
        references: (referencing column, display name) pairs that block deletes
        relation_fields: Payload keys that are not columns of ``model``
        validate: Extra checks run before a write; receives the row id on update
        write_relations: Writes ``relation_fields`` after the row is stored
        expand: Attaches related rows before responding
        bulk: Whether /bulk endpoints are exposed
    """

    model: type
    label: str
    plural_label: str
    body_key: str
    create_schema: type[BaseModel]
    update_schema: type[BaseModel]
    order_by: tuple[Any, ...] = ()
    filters: dict[str, Callable[[str], Any]] = field(default_factory=dict)
    unique_fields: tuple[str, ...] = ()
    references: tuple[tuple[Any, str], ...] = ()
    relation_fields: tuple[str, ...] = ()
    validate: Optional[Validator] = None
    write_relations: Optional[RelationWriter] = None
    expand: Optional[Expander] = None
    bulk: bool = True

    @property
    def table(self) -> str:
        return self.model.__tablename__


def not_found(resource: Resource, row_id: int) -> ApiError:
    return ApiError(
        status.HTTP_404_NOT_FOUND,
        f"{resource.label} not found",
        [f"{resource.label} with ID {row_id} does not exist"],
    )


def expand_rows(
    conn: Connection, resource: Resource, rows: list[dict[str, Any]]
) -> list[dict[str, Any]]:
    if resource.expand is None or not rows:
        return rows
    return resource.expand(conn, rows)


def get_or_404(conn: Connection, resource: Resource, row_id: int) -> dict[str, Any]:
    """Fetch a row by id or raise a 404 ``ApiError``."""
    row = fetch_row(conn, resource.model, row_id)
    if row is None:
        raise not_found(resource, row_id)
    return row


def ensure_exists(conn: Connection, model: type, ids: Iterable[int], label: str) -> None:
    """
    Check that every id refers to an existing ``model`` row.

    Raises:
        ApiError: 404 naming each missing id
    """
    ids = list(dict.fromkeys(ids))
    found = existing_ids(conn, model, ids)
    missing = [row_id for row_id in ids if row_id not in found]
    if missing:
        raise ApiError(
            status.HTTP_404_NOT_FOUND,
            f"{label} not found",
            [f"{label} with ID {row_id} does not exist" for row_id in missing],
        )


def _field_label(name: str) -> str:
    return name.replace("_", " ")


def _unique_errors(
    conn: Connection,
    resource: Resource,
    rows: list[dict[str, Any]],
    exclude_ids: Iterable[int] = (),
) -> list[str]:
    errors = []
    for name in resource.unique_fields:
        values = [row[name] for row in rows if row.get(name) is not None]
        for taken in find_conflicts(conn, resource.model, name, values, exclude_ids):
            errors.append(f"{resource.label} {_field_label(name)} '{taken}' already exists")
    return errors


def _raise_conflicts(resource: Resource, errors: list[str], count: int) -> None:
    if errors:
        message = (
            f"{resource.label} already exists"
            if count == 1
            else f"Some {resource.plural_label.lower()} already exist"
        )
        raise ApiError(status.HTTP_409_CONFLICT, message, errors)


def ensure_unique(
    conn: Connection,
    resource: Resource,
    rows: list[dict[str, Any]],
    exclude_ids: Iterable[int] = (),
) -> None:
    """
    Reject values of ``unique_fields`` that are already stored.

    Raises:
        ApiError: 409 listing every conflicting value
    """
    _raise_conflicts(resource, _unique_errors(conn, resource, rows, exclude_ids), len(rows))


def ensure_unique_updates(
    conn: Connection, resource: Resource, entries: list[tuple[int, dict[str, Any]]]
) -> None:
    """
    Reject bulk updates whose new values clash with any stored row but their own.

    Rows of the same batch are not excluded: renaming one row to the current
    name of another is refused even if that other row is renamed as well.

    Raises:
        ApiError: 409 listing every conflicting value
    """
    errors = []
    for row_id, values in entries:
        errors.extend(_unique_errors(conn, resource, [values], exclude_ids=[row_id]))
    _raise_conflicts(resource, errors, len(entries))


def update_values(resource: Resource, payload: BaseModel) -> dict[str, Any]:
    """
    Fields sent in an update body.

    ``null`` clears a nullable column and is ignored for every other field.
    """
    columns = resource.model.__table__.c
    return {
        k: v
        for k, v in payload.model_dump(exclude_unset=True).items()
        if v is not None or (k in columns and columns[k].nullable)
    }


def ensure_deletable(conn: Connection, resource: Resource, ids: list[int]) -> None:
    """
    Refuse to delete rows that other tables still point at.

    Raises:
        ApiError: 400 naming the referencing table
    """
    for column, used_by in resource.references:
        if is_referenced(conn, column, ids):
            raise ApiError(
                status.HTTP_400_BAD_REQUEST,
                f"Cannot delete {resource.plural_label.lower()} that are in use",
                [f"One or more {resource.plural_label.lower()} are still used by {used_by}"],
            )


def _split(resource: Resource, values: dict[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    columns = {k: v for k, v in values.items() if k not in resource.relation_fields}
    relations = {k: v for k, v in values.items() if k in resource.relation_fields}
    return columns, relations


def create_row(conn: Connection, resource: Resource, values: dict[str, Any]) -> int:
    """
    Validate and insert one row (plus its relations) inside the caller's transaction.

    Returns:
        int: New row id
    """
    if resource.validate is not None:
        resource.validate(conn, values, None)
    columns, relations = _split(resource, values)
    row_id = insert_row(conn, resource.model, columns)
    if resource.write_relations is not None:
        resource.write_relations(conn, row_id, relations)
    record_activity(conn, ACTION_CREATE, resource.table, row_id, values)
    return row_id


def update_existing_row(
    conn: Connection, resource: Resource, row_id: int, values: dict[str, Any]
) -> None:
    """Validate and apply a partial update inside the caller's transaction."""
    if resource.validate is not None:
        resource.validate(conn, values, row_id)
    columns, relations = _split(resource, values)
    update_row(conn, resource.model, row_id, columns)
    if resource.write_relations is not None and relations:
        resource.write_relations(conn, row_id, relations)
    record_activity(conn, ACTION_UPDATE, resource.table, row_id, values)


def _entry_errors(index: int, error: ValidationError) -> list[str]:
    messages = []
    for item in error.errors():
        name = ".".join(str(part) for part in item["loc"])
        if item["type"] == "missing":
            messages.append(f"Entry at index {index} is missing {name}")
        else:
            messages.append(f"Entry at index {index}: {name}: {item['msg']}")
    return messages


def parse_bulk_entries(
    resource: Resource, body: Any, schema: type[BaseModel], require_id: bool
) -> list[tuple[Optional[int], dict[str, Any]]]:
    """
    Validate every entry of a bulk body before anything is written.

    Args:
        resource: Target resource
        body: Raw JSON body, expected to be ``{<body_key>: [...]}``
        schema: Pydantic model each entry must satisfy
        require_id: True for bulk updates (each entry carries its ``id``)

    Returns:
        list: (row id or None, validated values) per entry, in input order

    Raises:
        ApiError: 400 with one message per problem found across all entries

    Example:
        >>> parse_bulk_entries(floors, {"floors": [{}]}, FloorCreate, require_id=False)
        ApiError: Validation failed (Entry at index 0 is missing number)
    """
    entries = body.get(resource.body_key) if isinstance(body, dict) else None
    if not isinstance(entries, list) or not entries:
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            "Invalid request body",
            [f"{resource.body_key} must be a non-empty array"],
        )

    errors: list[str] = []
    parsed: list[tuple[Optional[int], dict[str, Any]]] = []
    seen_ids: set[int] = set()
    seen_values: dict[str, set[Any]] = {name: set() for name in resource.unique_fields}

    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            errors.append(f"Entry at index {index} must be an object")
            continue

        row_id = None
        if require_id:
            row_id = entry.get("id")
            if not isinstance(row_id, int) or isinstance(row_id, bool):
                errors.append(f"Entry at index {index} is missing id")
            elif row_id in seen_ids:
                errors.append(f"Duplicate id at index {index}")
            else:
                seen_ids.add(row_id)

        try:
            payload = schema.model_validate({k: v for k, v in entry.items() if k != "id"})
        except ValidationError as e:
            errors.extend(_entry_errors(index, e))
            continue
        values = update_values(resource, payload) if require_id else payload.model_dump()

        for name in resource.unique_fields:
            value = values.get(name)
            if value is None:
                continue
            key = value.lower() if isinstance(value, str) else value
            if key in seen_values[name]:
                errors.append(f"Duplicate {_field_label(name)} at index {index}")
            seen_values[name].add(key)

        parsed.append((row_id, values))

    if errors:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Validation failed", errors)
    return parsed


def parse_bulk_ids(body: Any) -> list[int]:
    """Extract ``ids`` from a bulk delete body, or raise 400."""
    ids = body.get("ids") if isinstance(body, dict) else None
    if (
        not isinstance(ids, list)
        or not ids
        or not all(isinstance(i, int) and not isinstance(i, bool) for i in ids)
    ):
        raise ApiError(
            status.HTTP_400_BAD_REQUEST, "Invalid request body", ["ids must be a non-empty array"]
        )
    return list(dict.fromkeys(ids))


def build_resource_router(resource: Resource, prefix: str) -> APIRouter:
    """
    Build the REST router for ``resource``.

    Exposes ``GET ""``, ``POST ""``, ``GET/PUT/DELETE /{row_id}`` and, when
    ``resource.bulk`` is set, ``POST/PUT/DELETE /bulk``. The bulk routes are
    registered first so ``/bulk`` is never parsed as a row id.

    Args:
        resource: Resource description
        prefix: URL prefix, e.g. ``/bed-types``

    Returns:
        APIRouter ready to be included in the app
    """
    router = APIRouter(prefix=prefix, tags=[resource.plural_label])
    CreateSchema = resource.create_schema
    UpdateSchema = resource.update_schema
    event = resource.table

    if resource.bulk:

        @router.post("/bulk", status_code=status.HTTP_201_CREATED)
        def bulk_create(
            body: Any = Body(...), db_engine: Engine = Depends(get_db_engine)
        ) -> JSONResponse:
            with internal_errors(f"{event}_bulk_create_failed"):
                entries = parse_bulk_entries(resource, body, CreateSchema, require_id=False)
                rows = [values for _, values in entries]
                with db_engine.begin() as conn:
                    ensure_unique(conn, resource, rows)
                    ids = [create_row(conn, resource, values) for values in rows]
                    created = expand_rows(conn, resource, fetch_rows(conn, resource.model, ids))
                logger.info(f"{event}_bulk_created", count=len(ids))
                return api_response(
                    created,
                    f"{resource.plural_label} created successfully",
                    status.HTTP_201_CREATED,
                )

        @router.put("/bulk")
        def bulk_update(
            body: Any = Body(...), db_engine: Engine = Depends(get_db_engine)
        ) -> JSONResponse:
            with internal_errors(f"{event}_bulk_update_failed"):
                entries = parse_bulk_entries(resource, body, UpdateSchema, require_id=True)
                ids = [row_id for row_id, _ in entries]
                with db_engine.begin() as conn:
                    found = {row["id"] for row in fetch_rows(conn, resource.model, ids)}
                    missing = [row_id for row_id in ids if row_id not in found]
                    if missing:
                        raise ApiError(
                            status.HTTP_404_NOT_FOUND,
                            f"Some {resource.plural_label.lower()} not found",
                            [
                                f"{resource.label} with ID {row_id} does not exist"
                                for row_id in missing
                            ],
                        )
                    ensure_unique_updates(conn, resource, entries)
                    for row_id, values in entries:
                        update_existing_row(conn, resource, row_id, values)
                    updated = expand_rows(conn, resource, fetch_rows(conn, resource.model, ids))
                logger.info(f"{event}_bulk_updated", count=len(ids))
                return api_response(updated, f"{resource.plural_label} updated successfully")

        @router.delete("/bulk")
        def bulk_delete(
            body: Any = Body(...), db_engine: Engine = Depends(get_db_engine)
        ) -> JSONResponse:
            with internal_errors(f"{event}_bulk_delete_failed"):
                ids = parse_bulk_ids(body)
                with db_engine.begin() as conn:
                    ensure_deletable(conn, resource, ids)
                    rows = fetch_rows(conn, resource.model, ids)
                    deleted = delete_rows(conn, resource.model, ids)
                    for row in rows:
                        record_activity(conn, ACTION_DELETE, resource.table, row["id"], row)
                logger.info(f"{event}_bulk_deleted", count=deleted)
                return api_response(
                    {"deleted_count": deleted},
                    f"{resource.plural_label} deleted successfully",
                )

    @router.get("")
    def list_rows(
        request: Request,
        page: PageParams = Depends(),
        db_engine: Engine = Depends(get_db_engine),
    ) -> JSONResponse:
        with internal_errors(f"{event}_list_failed"):
            table = resource.model.__table__
            stmt = select(table)
            for param, condition in resource.filters.items():
                term = request.query_params.get(param)
                if term:
                    stmt = stmt.where(condition(term))
            stmt = stmt.order_by(*resource.order_by, table.c.id)

            with db_engine.connect() as conn:
                rows, total = fetch_page(conn, stmt, page.page, page.limit)
                items = expand_rows(conn, resource, rows)
            return api_response(
                paginated(items, page.page, page.limit, total),
                f"{resource.label} list retrieved successfully",
            )

    @router.post("", status_code=status.HTTP_201_CREATED)
    def create(payload: CreateSchema, db_engine: Engine = Depends(get_db_engine)) -> JSONResponse:
        with internal_errors(f"{event}_create_failed"):
            values = payload.model_dump()
            with db_engine.begin() as conn:
                ensure_unique(conn, resource, [values])
                row_id = create_row(conn, resource, values)
                created = expand_rows(conn, resource, [get_or_404(conn, resource, row_id)])[0]
            logger.info(f"{event}_created", id=row_id)
            return api_response(
                created, f"{resource.label} created successfully", status.HTTP_201_CREATED
            )

    @router.get("/{row_id}")
    def get_one(row_id: int, db_engine: Engine = Depends(get_db_engine)) -> JSONResponse:
        with internal_errors(f"{event}_get_failed", id=row_id):
            with db_engine.connect() as conn:
                row = expand_rows(conn, resource, [get_or_404(conn, resource, row_id)])[0]
            return api_response(row, f"{resource.label} retrieved successfully")

    @router.put("/{row_id}")
    def update(
        row_id: int, payload: UpdateSchema, db_engine: Engine = Depends(get_db_engine)
    ) -> JSONResponse:
        with internal_errors(f"{event}_update_failed", id=row_id):
            values = update_values(resource, payload)
            with db_engine.begin() as conn:
                get_or_404(conn, resource, row_id)
                ensure_unique(conn, resource, [values], exclude_ids=[row_id])
                update_existing_row(conn, resource, row_id, values)
                updated = expand_rows(conn, resource, [get_or_404(conn, resource, row_id)])[0]
            logger.info(f"{event}_updated", id=row_id, fields=sorted(values))
            return api_response(updated, f"{resource.label} updated successfully")

    @router.delete("/{row_id}")
    def delete(row_id: int, db_engine: Engine = Depends(get_db_engine)) -> JSONResponse:
        with internal_errors(f"{event}_delete_failed", id=row_id):
            with db_engine.begin() as conn:
                row = get_or_404(conn, resource, row_id)
                ensure_deletable(conn, resource, [row_id])
                delete_rows(conn, resource.model, [row_id])
                record_activity(conn, ACTION_DELETE, resource.table, row_id, row)
            logger.info(f"{event}_deleted", id=row_id)
            return api_response(row, f"{resource.label} deleted successfully")

    return router
