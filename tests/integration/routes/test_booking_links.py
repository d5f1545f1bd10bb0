"""
Integration tests for /api/booking-rooms and /api/booking-addons.
"""

from __future__ import annotations

from typing import Callable

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def booking_id(
    client: TestClient, hotel: dict[str, int], future_day: Callable[..., str]
) -> int:
    """A booking on room 101 from day 10 to day 12."""
    response = client.post(
        "/api/bookings",
        json={
            "guest_id": hotel["guest"],
            "payment_status_id": hotel["paid"],
            "checkin_date": future_day(10),
            "checkout_date": future_day(12),
            "num_adults": 1,
            "booking_amount": 120,
            "room_ids": [hotel["room_101"]],
        },
    )
    assert response.status_code == 201
    return response.json()["data"]["id"]


@pytest.mark.integration
def test_add_room_to_booking(client: TestClient, hotel: dict[str, int], booking_id: int) -> None:
    response = client.post(
        "/api/booking-rooms", json={"booking_id": booking_id, "room_id": hotel["room_102"]}
    )

    assert response.status_code == 201
    assert response.json()["message"] == "Booking room created successfully"

    listing = client.get("/api/booking-rooms", params={"booking_id": booking_id}).json()
    assert [item["room"]["number"] for item in listing["data"]["items"]] == [101, 102]


@pytest.mark.integration
def test_add_room_already_on_booking_conflicts(
    client: TestClient, hotel: dict[str, int], booking_id: int
) -> None:
    response = client.post(
        "/api/booking-rooms", json={"booking_id": booking_id, "room_id": hotel["room_101"]}
    )

    assert response.status_code == 409
    assert response.json()["message"] == "Booking room already exists"


@pytest.mark.integration
def test_add_room_taken_by_another_booking_is_rejected(
    client: TestClient,
    hotel: dict[str, int],
    booking_id: int,
    future_day: Callable[..., str],
) -> None:
    other = client.post(
        "/api/bookings",
        json={
            "guest_id": hotel["guest"],
            "payment_status_id": hotel["paid"],
            "checkin_date": future_day(11),
            "checkout_date": future_day(15),
            "num_adults": 1,
            "booking_amount": 80,
            "room_ids": [hotel["room_102"]],
        },
    )
    assert other.status_code == 201

    response = client.post(
        "/api/booking-rooms", json={"booking_id": booking_id, "room_id": hotel["room_102"]}
    )

    assert response.status_code == 400
    assert response.json()["errors"] == ["Rooms 102 are already booked for the selected dates"]


@pytest.mark.integration
def test_add_blocked_room_is_rejected(
    client: TestClient, hotel: dict[str, int], booking_id: int
) -> None:
    response = client.post(
        "/api/booking-rooms", json={"booking_id": booking_id, "room_id": hotel["room_103"]}
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Rooms not available"


@pytest.mark.integration
def test_add_room_to_unknown_booking_returns_404(
    client: TestClient, hotel: dict[str, int]
) -> None:
    response = client.post("/api/booking-rooms", json={"booking_id": 999, "room_id": 1})

    assert response.status_code == 404
    assert response.json()["message"] == "Booking not found"


@pytest.mark.integration
def test_last_room_of_booking_cannot_be_removed(
    client: TestClient, hotel: dict[str, int], booking_id: int
) -> None:
    links = client.get("/api/booking-rooms", params={"booking_id": booking_id}).json()
    only_link = links["data"]["items"][0]["id"]

    response = client.delete(f"/api/booking-rooms/{only_link}")
    assert response.status_code == 400
    assert response.json()["errors"] == ["A booking must keep at least one room"]

    added = client.post(
        "/api/booking-rooms", json={"booking_id": booking_id, "room_id": hotel["room_102"]}
    ).json()["data"]
    assert client.delete(f"/api/booking-rooms/{added['id']}").status_code == 200
    assert client.get(f"/api/booking-rooms/{added['id']}").status_code == 404


@pytest.mark.integration
def test_booking_addons(client: TestClient, hotel: dict[str, int], booking_id: int) -> None:
    created = client.post(
        "/api/booking-addons",
        json={"booking_id": booking_id, "addon_id": hotel["addon"], "quantity": 2},
    )
    assert created.status_code == 201
    assert created.json()["data"]["quantity"] == 2

    duplicate = client.post(
        "/api/booking-addons", json={"booking_id": booking_id, "addon_id": hotel["addon"]}
    )
    assert duplicate.status_code == 409

    unknown = client.post("/api/booking-addons", json={"booking_id": booking_id, "addon_id": 999})
    assert unknown.status_code == 404
    assert unknown.json()["message"] == "Addon not found"

    booking = client.get(f"/api/bookings/{booking_id}").json()["data"]
    assert booking["addons"][0]["quantity"] == 2

    listing = client.get("/api/booking-addons", params={"booking_id": booking_id}).json()
    assert listing["data"]["items"][0]["addon"]["name"] == "Breakfast"

    link_id = created.json()["data"]["id"]
    assert client.delete(f"/api/booking-addons/{link_id}").status_code == 200
    assert client.delete(f"/api/booking-addons/{link_id}").status_code == 404


@pytest.mark.integration
def test_move_booking_room_to_free_room(
    client: TestClient, hotel: dict[str, int], booking_id: int
) -> None:
    links = client.get("/api/booking-rooms", params={"booking_id": booking_id}).json()
    link_id = links["data"]["items"][0]["id"]

    response = client.put(f"/api/booking-rooms/{link_id}", json={"room_id": hotel["room_102"]})

    assert response.status_code == 200
    assert response.json()["data"]["room_id"] == hotel["room_102"]
    booking = client.get(f"/api/bookings/{booking_id}").json()["data"]
    assert [room["number"] for room in booking["rooms"]] == [102]


@pytest.mark.integration
def test_move_booking_room_checks_availability(
    client: TestClient,
    hotel: dict[str, int],
    booking_id: int,
    future_day: Callable[..., str],
) -> None:
    other = client.post(
        "/api/bookings",
        json={
            "guest_id": hotel["guest"],
            "payment_status_id": hotel["paid"],
            "checkin_date": future_day(9),
            "checkout_date": future_day(11),
            "num_adults": 1,
            "booking_amount": 80,
            "room_ids": [hotel["room_102"]],
        },
    )
    assert other.status_code == 201
    links = client.get("/api/booking-rooms", params={"booking_id": booking_id}).json()
    link_id = links["data"]["items"][0]["id"]

    taken = client.put(f"/api/booking-rooms/{link_id}", json={"room_id": hotel["room_102"]})
    assert taken.status_code == 400
    assert taken.json()["errors"] == ["Rooms 102 are already booked for the selected dates"]

    blocked = client.put(f"/api/booking-rooms/{link_id}", json={"room_id": hotel["room_103"]})
    assert blocked.status_code == 400
    assert blocked.json()["message"] == "Rooms not available"

    unchanged = client.put(f"/api/booking-rooms/{link_id}", json={"room_id": hotel["room_101"]})
    assert unchanged.status_code == 200

    missing = client.put("/api/booking-rooms/999", json={"room_id": hotel["room_102"]})
    assert missing.status_code == 404


@pytest.mark.integration
def test_update_booking_addon(client: TestClient, hotel: dict[str, int], booking_id: int) -> None:
    link_id = client.post(
        "/api/booking-addons", json={"booking_id": booking_id, "addon_id": hotel["addon"]}
    ).json()["data"]["id"]

    fetched = client.get(f"/api/booking-addons/{link_id}")
    assert fetched.status_code == 200
    assert fetched.json()["data"]["addon"]["name"] == "Breakfast"
    assert fetched.json()["data"]["quantity"] == 1

    updated = client.put(f"/api/booking-addons/{link_id}", json={"quantity": 3})
    assert updated.status_code == 200
    assert updated.json()["data"]["quantity"] == 3

    unknown_addon = client.put(f"/api/booking-addons/{link_id}", json={"addon_id": 999})
    assert unknown_addon.status_code == 404
    assert unknown_addon.json()["message"] == "Addon not found"

    invalid = client.put(f"/api/booking-addons/{link_id}", json={"quantity": 0})
    assert invalid.status_code == 400

    assert client.get("/api/booking-addons/999").status_code == 404
    assert client.put("/api/booking-addons/999", json={"quantity": 2}).status_code == 404
