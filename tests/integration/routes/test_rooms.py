"""
Integration tests for /api/room-classes and /api/rooms.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient


@pytest.mark.integration
def test_create_room_class_with_bed_types_and_features(
    client: TestClient, hotel: dict[str, int]
) -> None:
    response = client.post(
        "/api/room-classes",
        json={
            "name": "Suite",
            "price": 300,
            "bed_types": [{"id": hotel["bed_type"], "num_beds": 1}],
            "feature_ids": [hotel["feature"]],
        },
    )

    assert response.status_code == 201
    room_class = response.json()["data"]
    assert room_class["name"] == "Suite"
    assert room_class["bed_types"] == [
        {
            "num_beds": 1,
            "bed_type_id": hotel["bed_type"],
            "bed_type": room_class["bed_types"][0]["bed_type"],
        }
    ]
    assert room_class["bed_types"][0]["bed_type"]["name"] == "Queen"
    assert [feature["name"] for feature in room_class["features"]] == ["Balcony"]


@pytest.mark.integration
def test_room_class_with_unknown_bed_type_is_rejected(
    client: TestClient, hotel: dict[str, int]
) -> None:
    response = client.post(
        "/api/room-classes",
        json={"name": "Suite", "price": 300, "bed_types": [{"id": 999}]},
    )

    assert response.status_code == 404
    assert response.json()["errors"] == ["Bed type with ID 999 does not exist"]
    assert client.get("/api/room-classes").json()["data"]["meta"]["total"] == 1


@pytest.mark.integration
def test_room_class_with_repeated_bed_type_is_rejected(
    client: TestClient, hotel: dict[str, int]
) -> None:
    entry = {"id": hotel["bed_type"], "num_beds": 1}
    response = client.post(
        "/api/room-classes", json={"name": "Suite", "price": 300, "bed_types": [entry, entry]}
    )

    assert response.status_code == 400
    assert response.json()["errors"] == ["Each bed type can only be listed once"]


@pytest.mark.integration
def test_update_room_class_replaces_links_only_when_sent(
    client: TestClient, hotel: dict[str, int]
) -> None:
    class_id = hotel["room_class"]

    renamed = client.put(f"/api/room-classes/{class_id}", json={"price": 150})
    assert renamed.json()["data"]["price"] == 150.0
    assert len(renamed.json()["data"]["bed_types"]) == 1
    assert len(renamed.json()["data"]["features"]) == 1

    cleared = client.put(f"/api/room-classes/{class_id}", json={"feature_ids": []})
    assert cleared.json()["data"]["features"] == []
    assert len(cleared.json()["data"]["bed_types"]) == 1


@pytest.mark.integration
def test_room_class_search_by_bed_type(client: TestClient, hotel: dict[str, int]) -> None:
    client.post("/api/room-classes", json={"name": "Standard", "price": 80})

    response = client.get("/api/room-classes", params={"search[bed_type]": "quee"})

    items = response.json()["data"]["items"]
    assert [item["name"] for item in items] == ["Deluxe"]


@pytest.mark.integration
def test_room_class_in_use_cannot_be_deleted(client: TestClient, hotel: dict[str, int]) -> None:
    response = client.delete(f"/api/room-classes/{hotel['room_class']}")

    assert response.status_code == 400
    assert response.json()["errors"] == ["One or more room classes are still used by rooms"]


@pytest.mark.integration
def test_list_rooms_expands_relations(client: TestClient, hotel: dict[str, int]) -> None:
    response = client.get("/api/rooms")

    assert response.json()["message"] == "Room list retrieved successfully"
    items = response.json()["data"]["items"]
    assert [room["number"] for room in items] == [101, 102, 103]
    assert items[0]["floor"]["number"] == 1
    assert items[0]["room_status"]["name"] == "Available"
    assert items[2]["room_status"]["name"] == "Maintenance"
    assert items[0]["room_class"]["features"][0]["name"] == "Balcony"


@pytest.mark.integration
def test_room_number_is_unique_per_floor(client: TestClient, hotel: dict[str, int]) -> None:
    room = {
        "number": 101,
        "floor_id": hotel["floor"],
        "room_class_id": hotel["room_class"],
        "room_status_id": hotel["available"],
    }

    response = client.post("/api/rooms", json=room)

    assert response.status_code == 409
    assert response.json()["message"] == "Room already exists"
    assert response.json()["errors"] == ["Room number 101 already exists on this floor"]

    other_floor = client.post("/api/floors", json={"number": 2}).json()["data"]["id"]
    moved = client.post("/api/rooms", json={**room, "floor_id": other_floor})
    assert moved.status_code == 201
    assert moved.json()["data"]["floor"]["number"] == 2


@pytest.mark.integration
def test_room_update_checks_number_against_stored_floor(
    client: TestClient, hotel: dict[str, int]
) -> None:
    response = client.put(f"/api/rooms/{hotel['room_102']}", json={"number": 101})

    assert response.status_code == 409

    renumbered = client.put(f"/api/rooms/{hotel['room_102']}", json={"number": 104})
    assert renumbered.status_code == 200
    assert renumbered.json()["data"]["number"] == 104


@pytest.mark.integration
def test_room_with_unknown_status_is_rejected(client: TestClient, hotel: dict[str, int]) -> None:
    response = client.post(
        "/api/rooms",
        json={
            "number": 201,
            "floor_id": hotel["floor"],
            "room_class_id": hotel["room_class"],
            "room_status_id": 999,
        },
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Room status not found"


@pytest.mark.integration
def test_rooms_have_no_bulk_routes(client: TestClient, hotel: dict[str, int]) -> None:
    response = client.request("DELETE", "/api/rooms/bulk", json={"ids": [hotel["room_101"]]})

    assert response.status_code == 400
    assert client.get(f"/api/rooms/{hotel['room_101']}").status_code == 200
