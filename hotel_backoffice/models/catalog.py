"""Reference tables edited from the dashboard's settings screens."""

from sqlalchemy import Column, Float, Integer, String

from hotel_backoffice.models.base import Base, TimestampMixin

BED_TYPE_NAME_MAX_LENGTH = 50
FEATURE_NAME_MAX_LENGTH = 200


class Floor(TimestampMixin, Base):
    """A building floor. Rooms are numbered uniquely within a floor."""

    __tablename__ = "floor"

    id = Column(Integer, primary_key=True, autoincrement=True)
    number = Column(Integer, nullable=False, unique=True)


class BedType(TimestampMixin, Base):
    """Kind of bed (single, queen, ...) fitted in room classes."""

    __tablename__ = "bed_type"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(BED_TYPE_NAME_MAX_LENGTH), nullable=False, unique=True)


class Feature(TimestampMixin, Base):
    """Amenity offered by a room class (balcony, sea view, ...)."""

    __tablename__ = "feature"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(FEATURE_NAME_MAX_LENGTH), nullable=False, unique=True)
    image_url = Column(String, nullable=True)
    price = Column(Float, nullable=False, default=0)


class RoomStatus(TimestampMixin, Base):
    """
    Housekeeping state of a room.

    ``number`` orders the statuses and decides bookability: only rooms whose
    status number is at most MAX_BOOKABLE_ROOM_STATUS_NUMBER accept bookings.
    """

    __tablename__ = "room_status"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, unique=True)
    number = Column(Integer, nullable=False, unique=True)
    color = Column(String, nullable=True)


class PaymentStatus(TimestampMixin, Base):
    """
    Payment state of a booking.

    Revenue analytics only counts bookings whose status number equals
    PAID_PAYMENT_STATUS_NUMBER.
    """

    __tablename__ = "payment_status"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, unique=True)
    number = Column(Integer, nullable=False, unique=True)
    color = Column(String, nullable=True)


class Addon(TimestampMixin, Base):
    """Extra sold with a booking (breakfast, airport pickup, ...)."""

    __tablename__ = "addon"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, unique=True)
    price = Column(Float, nullable=False)
