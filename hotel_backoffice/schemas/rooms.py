from typing import Optional

from pydantic import BaseModel, Field

from hotel_backoffice.models.rooms import ROOM_CLASS_NAME_MAX_LENGTH


class RoomClassBedTypeEntry(BaseModel):
    id: int = Field(..., description="Bed type id")
    num_beds: int = Field(1, ge=1)


class RoomClassCreate(BaseModel):
    """
    Schema for creating a room class together with its bed types and features.
    """

    name: str = Field(..., min_length=1, max_length=ROOM_CLASS_NAME_MAX_LENGTH)
    price: float = Field(..., ge=0, description="Nightly rate")
    image_url: Optional[str] = None
    bed_types: list[RoomClassBedTypeEntry] = Field(default_factory=list)
    feature_ids: list[int] = Field(default_factory=list)


class RoomClassUpdate(BaseModel):
    """
    Schema for updating a room class. All fields are optional.
    Sending ``bed_types`` or ``feature_ids`` replaces the current links.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=ROOM_CLASS_NAME_MAX_LENGTH)
    price: Optional[float] = Field(None, ge=0)
    image_url: Optional[str] = None
    bed_types: Optional[list[RoomClassBedTypeEntry]] = None
    feature_ids: Optional[list[int]] = None


class RoomCreate(BaseModel):
    number: int = Field(..., description="Room number, unique within its floor")
    floor_id: int
    room_class_id: int
    room_status_id: int


class RoomUpdate(BaseModel):
    number: Optional[int] = None
    floor_id: Optional[int] = None
    room_class_id: Optional[int] = None
    room_status_id: Optional[int] = None


class RoomClassBedTypeCreate(BaseModel):
    room_class_id: int
    bed_type_id: int
    num_beds: int = Field(1, ge=1)


class RoomClassBedTypeUpdate(BaseModel):
    room_class_id: Optional[int] = None
    bed_type_id: Optional[int] = None
    num_beds: Optional[int] = Field(None, ge=1)


class RoomClassFeatureCreate(BaseModel):
    room_class_id: int
    feature_id: int


class RoomClassFeatureUpdate(BaseModel):
    room_class_id: Optional[int] = None
    feature_id: Optional[int] = None
