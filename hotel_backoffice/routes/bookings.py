import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from hotel_backoffice.dependencies import PageParams, get_db_engine
from hotel_backoffice.responses import api_response, internal_errors, paginated
from hotel_backoffice.schemas.bookings import BookingPayload
from hotel_backoffice.services.bookings import (
    create_booking,
    delete_booking,
    get_booking,
    list_bookings,
    update_booking,
)

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.get("")
def list_bookings_endpoint(
    page: PageParams = Depends(),
    db_engine: Engine = Depends(get_db_engine),
) -> JSONResponse:
    """
    List bookings, latest check-in first.

    Args:
        page: Pagination parameters
        db_engine: Injected database engine

    Returns:
        JSONResponse: Envelope with ``{items, meta}``; each booking carries its
        guest, payment status, rooms and addons
    """
    with internal_errors("booking_list_failed"):
        with db_engine.connect() as conn:
            items, total = list_bookings(conn, page.page, page.limit)
        return api_response(
            paginated(items, page.page, page.limit, total),
            "Bookings retrieved successfully",
        )


@router.post("", status_code=status.HTTP_201_CREATED)
def create_booking_endpoint(
    payload: BookingPayload,
    db_engine: Engine = Depends(get_db_engine),
) -> JSONResponse:
    """
    Create a booking after checking that every room is free for the stay.

    Args:
        payload: Booking body (guest, payment status, dates, guests, amount, rooms, addons)
        db_engine: Injected database engine

    Returns:
        JSONResponse: 201 with the stored booking

    Raises:
        ApiError: 400 for invalid fields, past check-in, bad date order or
        rooms that are missing, blocked or already booked
    """
    with internal_errors("booking_create_failed"):
        booking = create_booking(db_engine, payload)
        return api_response(booking, "Booking created successfully", status.HTTP_201_CREATED)


@router.get("/{booking_id}")
def get_booking_endpoint(
    booking_id: int,
    db_engine: Engine = Depends(get_db_engine),
) -> JSONResponse:
    with internal_errors("booking_get_failed", booking_id=booking_id):
        with db_engine.connect() as conn:
            booking = get_booking(conn, booking_id)
        return api_response(booking, "Booking details retrieved successfully")


@router.put("/{booking_id}")
def update_booking_endpoint(
    booking_id: int,
    payload: BookingPayload,
    db_engine: Engine = Depends(get_db_engine),
) -> JSONResponse:
    """
    Replace a booking's details and room assignments.

    The booking's own stay is ignored by the overlap check, and check-in
    dates in the past are accepted so running stays can be edited.
    """
    with internal_errors("booking_update_failed", booking_id=booking_id):
        booking = update_booking(db_engine, booking_id, payload)
        return api_response(booking, "Booking updated successfully")


@router.delete("/{booking_id}")
def delete_booking_endpoint(
    booking_id: int,
    db_engine: Engine = Depends(get_db_engine),
) -> JSONResponse:
    with internal_errors("booking_delete_failed", booking_id=booking_id):
        delete_booking(db_engine, booking_id)
        return api_response(None, "Booking deleted successfully")
