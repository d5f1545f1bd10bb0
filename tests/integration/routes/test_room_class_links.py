"""
Integration tests for /api/room-class-bed-types and /api/room-class-features.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient


@pytest.mark.integration
def test_list_bed_type_links_filtered_by_room_class(
    client: TestClient, hotel: dict[str, int]
) -> None:
    response = client.get(
        "/api/room-class-bed-types", params={"room_class_id": hotel["room_class"]}
    )

    items = response.json()["data"]["items"]
    assert len(items) == 1
    assert items[0]["num_beds"] == 2
    assert items[0]["room_class"]["name"] == "Deluxe"
    assert items[0]["bed_type"]["name"] == "Queen"

    none = client.get("/api/room-class-bed-types", params={"room_class_id": "abc"})
    assert none.json()["data"]["meta"]["total"] == 0


@pytest.mark.integration
def test_create_bed_type_link(client: TestClient, hotel: dict[str, int]) -> None:
    king = client.post("/api/bed-types", json={"name": "King"}).json()["data"]["id"]

    response = client.post(
        "/api/room-class-bed-types",
        json={"room_class_id": hotel["room_class"], "bed_type_id": king, "num_beds": 1},
    )

    assert response.status_code == 201
    assert response.json()["message"] == "Room class bed type created successfully"
    assert response.json()["data"]["bed_type"]["name"] == "King"


@pytest.mark.integration
def test_duplicate_bed_type_link_conflicts(client: TestClient, hotel: dict[str, int]) -> None:
    response = client.post(
        "/api/room-class-bed-types",
        json={"room_class_id": hotel["room_class"], "bed_type_id": hotel["bed_type"]},
    )

    assert response.status_code == 409
    assert response.json()["message"] == "Room class bed type already exists"


@pytest.mark.integration
def test_link_to_unknown_room_class_returns_404(
    client: TestClient, hotel: dict[str, int]
) -> None:
    response = client.post(
        "/api/room-class-features", json={"room_class_id": 999, "feature_id": hotel["feature"]}
    )

    assert response.status_code == 404
    assert response.json()["errors"] == ["Room class with ID 999 does not exist"]


@pytest.mark.integration
def test_pair_routes_get_update_delete(client: TestClient, hotel: dict[str, int]) -> None:
    path = f"/api/room-class-bed-types/{hotel['room_class']}/{hotel['bed_type']}"

    fetched = client.get(path)
    assert fetched.status_code == 200
    assert fetched.json()["data"]["num_beds"] == 2

    updated = client.put(path, json={"num_beds": 3})
    assert updated.status_code == 200
    assert updated.json()["data"]["num_beds"] == 3

    deleted = client.delete(path)
    assert deleted.status_code == 200
    assert client.get(path).status_code == 404


@pytest.mark.integration
def test_pair_route_for_missing_link_returns_404(
    client: TestClient, hotel: dict[str, int]
) -> None:
    response = client.get(f"/api/room-class-features/{hotel['room_class']}/999")

    assert response.status_code == 404
    assert response.json()["message"] == "Room class feature not found"


@pytest.mark.integration
def test_feature_link_by_row_id(client: TestClient, hotel: dict[str, int]) -> None:
    items = client.get("/api/room-class-features").json()["data"]["items"]
    link_id = items[0]["id"]

    response = client.get(f"/api/room-class-features/{link_id}")

    assert response.status_code == 200
    assert response.json()["data"]["feature"]["name"] == "Balcony"


@pytest.mark.integration
def test_bulk_create_feature_links(client: TestClient, hotel: dict[str, int]) -> None:
    spa = client.post("/api/features", json={"name": "Spa bath", "price": 20}).json()["data"]
    standard = client.post("/api/room-classes", json={"name": "Standard", "price": 80}).json()

    response = client.post(
        "/api/room-class-features/bulk",
        json={
            "room_class_features": [
                {"room_class_id": hotel["room_class"], "feature_id": spa["id"]},
                {"room_class_id": standard["data"]["id"], "feature_id": spa["id"]},
            ]
        },
    )

    assert response.status_code == 201
    assert len(response.json()["data"]) == 2
    deluxe = client.get(f"/api/room-classes/{hotel['room_class']}").json()["data"]
    assert sorted(feature["name"] for feature in deluxe["features"]) == ["Balcony", "Spa bath"]
