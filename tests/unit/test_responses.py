"""
Unit tests for the response envelope helpers.
"""

from __future__ import annotations

import json

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from hotel_backoffice.responses import (
    ApiError,
    api_response,
    format_validation_errors,
    internal_errors,
    paginated,
    register_exception_handlers,
)


@pytest.mark.unit
def test_api_response_builds_envelope() -> None:
    response = api_response({"id": 1}, "Floor retrieved successfully")
    body = json.loads(response.body)

    assert response.status_code == 200
    assert body["code"] == 200
    assert body["success"] is True
    assert body["message"] == "Floor retrieved successfully"
    assert body["errors"] == []
    assert body["data"] == {"id": 1}
    assert body["response_time"].endswith(" ms")


@pytest.mark.unit
def test_api_response_marks_errors_unsuccessful() -> None:
    response = api_response(None, "Floor not found", 404, ["Floor with ID 9 does not exist"])
    body = json.loads(response.body)

    assert response.status_code == 404
    assert body["success"] is False
    assert body["data"] is None


@pytest.mark.unit
@pytest.mark.parametrize(
    "total, limit, expected_pages",
    [(0, 10, 0), (10, 10, 1), (11, 10, 2), (95, 20, 5)],
)
def test_paginated_total_pages(total: int, limit: int, expected_pages: int) -> None:
    payload = paginated([], page=1, limit=limit, total=total)

    assert payload["meta"] == {
        "page": 1,
        "limit": limit,
        "total": total,
        "total_pages": expected_pages,
    }


@pytest.mark.unit
def test_api_error_defaults_errors_to_message() -> None:
    error = ApiError(409, "Floor already exists")

    assert error.code == 409
    assert error.errors == ["Floor already exists"]


@pytest.mark.unit
def test_format_validation_errors_strips_location_prefix() -> None:
    errors = [
        {"loc": ("body", "name"), "msg": "Field required"},
        {"loc": ("query", "page"), "msg": "Input should be greater than or equal to 1"},
        {"loc": ("body",), "msg": "Input should be a valid dictionary"},
    ]

    assert format_validation_errors(errors) == [
        "name: Field required",
        "page: Input should be greater than or equal to 1",
        "Input should be a valid dictionary",
    ]


@pytest.mark.unit
def test_internal_errors_wraps_unexpected_exceptions() -> None:
    with pytest.raises(ApiError) as exc_info:
        with internal_errors("test_failed"):
            raise RuntimeError("boom")

    assert exc_info.value.code == 500
    assert exc_info.value.errors == ["boom"]


@pytest.mark.unit
def test_internal_errors_passes_client_errors_through() -> None:
    with pytest.raises(ApiError) as exc_info:
        with internal_errors("test_failed"):
            raise ApiError(404, "Room not found")

    assert exc_info.value.code == 404


@pytest.mark.unit
def test_registered_handlers_render_envelopes() -> None:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/items/{item_id}")
    def get_item(item_id: int) -> dict[str, int]:
        raise ApiError(404, "Item not found", [f"Item {item_id} does not exist"])

    client = TestClient(app)

    missing = client.get("/items/3")
    assert missing.status_code == 404
    assert missing.json()["errors"] == ["Item 3 does not exist"]

    invalid = client.get("/items/abc")
    assert invalid.status_code == 400
    assert invalid.json()["message"] == "Missing or invalid required fields"
    assert invalid.json()["errors"][0].startswith("item_id:")

    unknown = client.get("/nowhere")
    assert unknown.status_code == 404
    assert unknown.json()["success"] is False


@pytest.mark.unit
def test_unhandled_errors_render_500_envelope() -> None:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/boom")
    def boom() -> None:
        raise RuntimeError("disk full")

    response = TestClient(app, raise_server_exceptions=False).get("/boom")

    assert response.status_code == 500
    assert response.json()["message"] == "Internal server error"
    assert response.json()["errors"] == ["disk full"]
