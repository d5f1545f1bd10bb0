from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    UniqueConstraint,
)

from hotel_backoffice.models.base import Base, TimestampMixin


class Booking(TimestampMixin, Base):
    """
    ORM model for a guest reservation.

    A booking covers the half-open interval [checkin_date, checkout_date) on
    every room linked through booking_room. checkout_date is always strictly
    after checkin_date. Addons sold with the booking live in booking_addon.
    """

    __tablename__ = "booking"
    __table_args__ = (
        CheckConstraint("checkout_date > checkin_date", name="ck_booking_checkout_after_checkin"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    guest_id = Column(Integer, ForeignKey("guest.id", ondelete="RESTRICT"), nullable=False)
    payment_status_id = Column(
        Integer, ForeignKey("payment_status.id", ondelete="RESTRICT"), nullable=False
    )
    checkin_date = Column(DateTime(timezone=True), nullable=False, index=True)
    checkout_date = Column(DateTime(timezone=True), nullable=False)
    num_adults = Column(Integer, nullable=False)
    num_children = Column(Integer, nullable=False, default=0)
    booking_amount = Column(Float, nullable=False)


class BookingRoom(TimestampMixin, Base):
    """Room occupied by a booking."""

    __tablename__ = "booking_room"
    __table_args__ = (UniqueConstraint("booking_id", "room_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    booking_id = Column(
        Integer, ForeignKey("booking.id", ondelete="CASCADE"), nullable=False, index=True
    )
    room_id = Column(
        Integer, ForeignKey("room.id", ondelete="RESTRICT"), nullable=False, index=True
    )


class BookingAddon(TimestampMixin, Base):
    """Addon sold with a booking."""

    __tablename__ = "booking_addon"
    __table_args__ = (UniqueConstraint("booking_id", "addon_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    booking_id = Column(
        Integer, ForeignKey("booking.id", ondelete="CASCADE"), nullable=False, index=True
    )
    addon_id = Column(Integer, ForeignKey("addon.id", ondelete="RESTRICT"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
