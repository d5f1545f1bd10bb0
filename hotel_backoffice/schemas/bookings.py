from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class BookingPayload(BaseModel):
    """
    Schema for creating or replacing a booking.

    Fields are optional at the schema level so the service can answer with
    the dashboard's field-specific messages ("Booking guest is required", ...)
    instead of generic validation errors.
    """

    guest_id: Optional[int] = Field(None, description="Guest making the booking")
    payment_status_id: Optional[int] = Field(None, description="Current payment status")
    checkin_date: Optional[datetime] = Field(None, description="Check-in instant (ISO 8601)")
    checkout_date: Optional[datetime] = Field(None, description="Check-out instant (ISO 8601)")
    num_adults: Optional[int] = Field(None, ge=0, description="Number of adults")
    num_children: int = Field(0, ge=0, description="Number of children")
    booking_amount: Optional[float] = Field(None, ge=0, description="Total amount charged")
    room_ids: list[int] = Field(default_factory=list, description="Rooms to occupy")
    addon_ids: Optional[list[int]] = Field(
        None, description="Addons sold with the booking; omit on update to keep the current ones"
    )


class BookingRoomPayload(BaseModel):
    """Schema for attaching a room to an existing booking."""

    booking_id: int = Field(..., description="Booking to extend")
    room_id: int = Field(..., description="Room to add")


class BookingAddonPayload(BaseModel):
    """Schema for attaching an addon to an existing booking."""

    booking_id: int = Field(..., description="Booking to extend")
    addon_id: int = Field(..., description="Addon to add")
    quantity: int = Field(1, ge=1, description="Units sold")


class BookingRoomUpdate(BaseModel):
    """Schema for moving a booking_room row to another room."""

    room_id: int = Field(..., description="New room")


class BookingAddonUpdate(BaseModel):
    addon_id: Optional[int] = Field(None, description="Replacement addon")
    quantity: Optional[int] = Field(None, ge=1, description="Units sold")
