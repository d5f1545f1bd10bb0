"""Routers for the reference tables edited from the dashboard's settings screens."""

from hotel_backoffice.db.readers._query import ilike_text, price_range
from hotel_backoffice.models.bookings import Booking, BookingAddon
from hotel_backoffice.models.catalog import (
    Addon,
    BedType,
    Feature,
    Floor,
    PaymentStatus,
    RoomStatus,
)
from hotel_backoffice.models.guests import Guest
from hotel_backoffice.models.rooms import Room, RoomClassBedType, RoomClassFeature
from hotel_backoffice.routes._resource import Resource, build_resource_router
from hotel_backoffice.schemas.catalog import (
    AddonCreate,
    AddonUpdate,
    BedTypeCreate,
    BedTypeUpdate,
    FeatureCreate,
    FeatureUpdate,
    FloorCreate,
    FloorUpdate,
    GuestCreate,
    GuestUpdate,
    StatusCreate,
    StatusUpdate,
)

floors = Resource(
    model=Floor,
    label="Floor",
    plural_label="Floors",
    body_key="floors",
    create_schema=FloorCreate,
    update_schema=FloorUpdate,
    order_by=(Floor.number,),
    filters={"search": lambda term: ilike_text(Floor.number, term)},
    unique_fields=("number",),
    references=((Room.floor_id, "rooms"),),
)

bed_types = Resource(
    model=BedType,
    label="Bed type",
    plural_label="Bed types",
    body_key="bed_types",
    create_schema=BedTypeCreate,
    update_schema=BedTypeUpdate,
    order_by=(BedType.name,),
    filters={"search": lambda term: ilike_text(BedType.name, term)},
    unique_fields=("name",),
    references=((RoomClassBedType.bed_type_id, "room classes"),),
)

features = Resource(
    model=Feature,
    label="Feature",
    plural_label="Features",
    body_key="features",
    create_schema=FeatureCreate,
    update_schema=FeatureUpdate,
    order_by=(Feature.name,),
    filters={
        "search[name]": lambda term: ilike_text(Feature.name, term),
        "search[price]": lambda term: price_range(Feature.price, term),
    },
    unique_fields=("name",),
    references=((RoomClassFeature.feature_id, "room classes"),),
)

room_statuses = Resource(
    model=RoomStatus,
    label="Room status",
    plural_label="Room statuses",
    body_key="room_statuses",
    create_schema=StatusCreate,
    update_schema=StatusUpdate,
    order_by=(RoomStatus.number,),
    filters={"search": lambda term: ilike_text(RoomStatus.name, term)},
    unique_fields=("name", "number"),
    references=((Room.room_status_id, "rooms"),),
)

payment_statuses = Resource(
    model=PaymentStatus,
    label="Payment status",
    plural_label="Payment statuses",
    body_key="payment_statuses",
    create_schema=StatusCreate,
    update_schema=StatusUpdate,
    order_by=(PaymentStatus.number,),
    filters={"search": lambda term: ilike_text(PaymentStatus.name, term)},
    unique_fields=("name", "number"),
    references=((Booking.payment_status_id, "bookings"),),
    bulk=False,
)

addons = Resource(
    model=Addon,
    label="Addon",
    plural_label="Addons",
    body_key="addons",
    create_schema=AddonCreate,
    update_schema=AddonUpdate,
    order_by=(Addon.name,),
    filters={
        "search[name]": lambda term: ilike_text(Addon.name, term),
        "search[price]": lambda term: price_range(Addon.price, term),
    },
    unique_fields=("name",),
    references=((BookingAddon.addon_id, "bookings"),),
)

guests = Resource(
    model=Guest,
    label="Guest",
    plural_label="Guests",
    body_key="guests",
    create_schema=GuestCreate,
    update_schema=GuestUpdate,
    order_by=(Guest.created_at.desc(),),
    filters={"search": lambda term: ilike_text(Guest.name, term)},
    unique_fields=("email",),
    references=((Booking.guest_id, "bookings"),),
    bulk=False,
)

floors_router = build_resource_router(floors, "/floors")
bed_types_router = build_resource_router(bed_types, "/bed-types")
features_router = build_resource_router(features, "/features")
room_statuses_router = build_resource_router(room_statuses, "/room-statuses")
payment_statuses_router = build_resource_router(payment_statuses, "/payment-statuses")
addons_router = build_resource_router(addons, "/addons")
guests_router = build_resource_router(guests, "/guests")
