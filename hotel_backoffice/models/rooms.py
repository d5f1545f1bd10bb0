from sqlalchemy import Column, Float, ForeignKey, Integer, String, UniqueConstraint

from hotel_backoffice.models.base import Base, TimestampMixin

ROOM_CLASS_NAME_MAX_LENGTH = 30


class RoomClass(TimestampMixin, Base):
    """
    ORM model for a sellable category of room.

    A room class carries the nightly price and is linked to its bed types
    (with a bed count) and features through the two join tables below.
    """

    __tablename__ = "room_class"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(ROOM_CLASS_NAME_MAX_LENGTH), nullable=False, unique=True)
    price = Column(Float, nullable=False)
    image_url = Column(String, nullable=True)


class RoomClassBedType(TimestampMixin, Base):
    """How many beds of a given bed type a room class has."""

    __tablename__ = "room_class_bed_type"
    __table_args__ = (UniqueConstraint("room_class_id", "bed_type_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    room_class_id = Column(
        Integer, ForeignKey("room_class.id", ondelete="CASCADE"), nullable=False, index=True
    )
    bed_type_id = Column(
        Integer, ForeignKey("bed_type.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    num_beds = Column(Integer, nullable=False, default=1)


class RoomClassFeature(TimestampMixin, Base):
    """Feature attached to a room class."""

    __tablename__ = "room_class_feature"
    __table_args__ = (UniqueConstraint("room_class_id", "feature_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    room_class_id = Column(
        Integer, ForeignKey("room_class.id", ondelete="CASCADE"), nullable=False, index=True
    )
    feature_id = Column(
        Integer, ForeignKey("feature.id", ondelete="RESTRICT"), nullable=False, index=True
    )


class Room(TimestampMixin, Base):
    """
    ORM model for a physical room.

    Room numbers are unique per floor. The room status decides whether new
    bookings may be placed on the room.
    """

    __tablename__ = "room"
    __table_args__ = (UniqueConstraint("number", "floor_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    number = Column(Integer, nullable=False, index=True)
    floor_id = Column(Integer, ForeignKey("floor.id", ondelete="RESTRICT"), nullable=False)
    room_class_id = Column(
        Integer, ForeignKey("room_class.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    room_status_id = Column(
        Integer, ForeignKey("room_status.id", ondelete="RESTRICT"), nullable=False
    )
