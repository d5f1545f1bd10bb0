"""
Response envelope and error handling shared by every route.

All endpoints answer with the same JSON envelope::

    {
        "code": 200,
        "message": "Room list retrieved successfully",
        "success": true,
        "response_time": "4 ms",
        "errors": [],
        "data": {...}
    }

Client errors are raised as ``ApiError`` from routes and services and turned
into envelopes by the handlers registered in ``register_exception_handlers``.
"""

from __future__ import annotations

import math
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from hotel_backoffice.middleware import elapsed_ms

logger = structlog.get_logger(__name__)

INVALID_FIELDS_MESSAGE = "Missing or invalid required fields"


class ApiError(Exception):
    """
    A client-facing error carrying the envelope's code, message and errors.

    Example:
        >>> raise ApiError(404, "Room not found", ["Room 7 does not exist"])
    """

    def __init__(self, code: int, message: str, errors: Optional[Iterable[str]] = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.errors = list(errors) if errors is not None else [message]


def api_response(
    data: Any = None,
    message: str = "",
    code: int = status.HTTP_200_OK,
    errors: Optional[list[str]] = None,
) -> JSONResponse:
    """
    Build a JSON envelope response.

    Args:
        data: Payload placed under ``data``
        message: Human readable summary
        code: HTTP status code, mirrored in the body
        errors: Error messages (empty on success)

    Returns:
        JSONResponse with the envelope body
    """
    body = {
        "code": code,
        "message": message,
        "success": code < 400,
        "response_time": f"{elapsed_ms()} ms",
        "errors": errors or [],
        "data": jsonable_encoder(data),
    }
    return JSONResponse(status_code=code, content=body)


def error_response(code: int, message: str, errors: list[str]) -> JSONResponse:
    """Build an error envelope (``success`` false, ``data`` null)."""
    return api_response(data=None, message=message, code=code, errors=errors)


def paginated(items: list[Any], page: int, limit: int, total: int) -> dict[str, Any]:
    """
    Build the ``{items, meta}`` payload used by list endpoints.

    Args:
        items: Rows for the current page
        page: 1-based page number
        limit: Page size
        total: Total number of matching rows

    Returns:
        dict with ``items`` and ``meta`` (page, limit, total, total_pages)
    """
    return {
        "items": items,
        "meta": {
            "page": page,
            "limit": limit,
            "total": total,
            "total_pages": math.ceil(total / limit) if limit else 0,
        },
    }


@contextmanager
def internal_errors(event: str, **fields: Any) -> Iterator[None]:
    """
    Convert unexpected exceptions inside the block into a 500 ``ApiError``.

    Client errors (``ApiError``, ``HTTPException``) pass through untouched;
    anything else is logged under ``event`` and surfaced with its message.

    Example:
        >>> with internal_errors("room_create_failed"):
        ...     create_room(conn, payload)
    """
    try:
        yield
    except (ApiError, StarletteHTTPException):
        raise
    except Exception as e:
        logger.exception(event, error=str(e), **fields)
        raise ApiError(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", [str(e)]
        ) from e


def format_validation_errors(errors: Iterable[dict[str, Any]]) -> list[str]:
    """
    Turn pydantic error dicts into one readable string per failing field.

    Example:
        >>> format_validation_errors([{"loc": ("body", "name"), "msg": "Field required"}])
        ['name: Field required']
    """
    messages = []
    for error in errors:
        location = [
            str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")
        ]
        field = ".".join(location)
        messages.append(f"{field}: {error['msg']}" if field else str(error["msg"]))
    return messages


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    logger.info("api_error", path=request.url.path, code=exc.code, errors=exc.errors)
    return error_response(exc.code, exc.message, exc.errors)


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        INVALID_FIELDS_MESSAGE,
        format_validation_errors(exc.errors()),
    )


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = str(exc.detail)
    return error_response(exc.status_code, detail, [detail])


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path, error=str(exc))
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", [str(exc)]
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope-producing exception handlers on ``app``."""
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
