"""SQLAlchemy model for hotel guests."""

from sqlalchemy import Column, Integer, String

from hotel_backoffice.models.base import Base, TimestampMixin

NATIONALITY_TYPES = ("INDONESIAN_CITIZEN", "FOREIGNER")

ID_CARD_TYPES = (
    "NATIONAL_IDENTITY_CARD",
    "PASSPORT",
    "PERMANENT_RESIDENCE_PERMIT",
    "TEMPORARY_STAY_PERMIT",
    "DRIVING_LICENSE",
)


class Guest(TimestampMixin, Base):
    """
    ORM model for a guest.

    nationality and id_card_type hold one of NATIONALITY_TYPES / ID_CARD_TYPES.
    email is optional but unique when present.
    """

    __tablename__ = "guest"

    id = Column(Integer, primary_key=True, autoincrement=True)
    nationality = Column(String, nullable=False)
    id_card_type = Column(String, nullable=False)
    id_card_number = Column(String, nullable=False)
    name = Column(String, nullable=False, index=True)
    email = Column(String, nullable=True, unique=True)
    phone = Column(String, nullable=False)
    address = Column(String, nullable=True)
