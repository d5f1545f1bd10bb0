from typing import Literal, Optional

from pydantic import BaseModel, Field

from hotel_backoffice.models.catalog import BED_TYPE_NAME_MAX_LENGTH, FEATURE_NAME_MAX_LENGTH

Nationality = Literal["INDONESIAN_CITIZEN", "FOREIGNER"]
IdCardType = Literal[
    "NATIONAL_IDENTITY_CARD",
    "PASSPORT",
    "PERMANENT_RESIDENCE_PERMIT",
    "TEMPORARY_STAY_PERMIT",
    "DRIVING_LICENSE",
]


class FloorCreate(BaseModel):
    number: int = Field(..., description="Floor number, unique")


class FloorUpdate(BaseModel):
    number: Optional[int] = None


class BedTypeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=BED_TYPE_NAME_MAX_LENGTH)


class BedTypeUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=BED_TYPE_NAME_MAX_LENGTH)


class FeatureCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=FEATURE_NAME_MAX_LENGTH)
    price: float = Field(..., ge=0)
    image_url: Optional[str] = None


class FeatureUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=FEATURE_NAME_MAX_LENGTH)
    price: Optional[float] = Field(None, ge=0)
    image_url: Optional[str] = None


class StatusCreate(BaseModel):
    """
    Schema shared by room statuses and payment statuses.

    ``number`` orders the statuses; it also decides room bookability and
    which payment status counts as paid.
    """

    name: str = Field(..., min_length=1)
    number: int = Field(..., ge=0)
    color: Optional[str] = Field(None, description="Hex colour shown in the dashboard")


class StatusUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    number: Optional[int] = Field(None, ge=0)
    color: Optional[str] = None


class AddonCreate(BaseModel):
    name: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)


class AddonUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)


class GuestCreate(BaseModel):
    """Schema for registering a guest. Email is optional but unique when given."""

    nationality: Nationality
    id_card_type: IdCardType
    id_card_number: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    email: Optional[str] = None
    phone: str = Field(..., min_length=1)
    address: Optional[str] = None


class GuestUpdate(BaseModel):
    nationality: Optional[Nationality] = None
    id_card_type: Optional[IdCardType] = None
    id_card_number: Optional[str] = Field(None, min_length=1)
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = Field(None, min_length=1)
    address: Optional[str] = None
