"""
Integration tests for /api/logs.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient


@pytest.mark.integration
def test_writes_are_logged_newest_first(client: TestClient) -> None:
    floor_id = client.post("/api/floors", json={"number": 3}).json()["data"]["id"]
    client.put(f"/api/floors/{floor_id}", json={"number": 4})
    client.delete(f"/api/floors/{floor_id}")

    response = client.get("/api/logs")

    assert response.status_code == 200
    assert response.json()["message"] == "Activity logs retrieved successfully"
    items = response.json()["data"]["items"]
    assert [item["action_type"] for item in items] == ["DELETE", "UPDATE", "CREATE"]
    assert all(item["resource_type"] == "floor" for item in items)
    assert all(item["resource_id"] == floor_id for item in items)
    assert items[1]["changes"] == {"number": 4}


@pytest.mark.integration
def test_logs_search_by_action_and_resource(client: TestClient) -> None:
    client.post("/api/floors", json={"number": 3})
    client.post("/api/bed-types", json={"name": "Single"})

    by_action = client.get("/api/logs", params={"search[action_type]": "creat"}).json()
    assert by_action["data"]["meta"]["total"] == 2

    by_resource = client.get("/api/logs", params={"search[resource_type]": "BED"}).json()
    assert [item["resource_type"] for item in by_resource["data"]["items"]] == ["bed_type"]


@pytest.mark.integration
def test_failed_writes_leave_no_log(client: TestClient) -> None:
    client.post("/api/floors", json={"number": 3})
    client.post("/api/floors", json={"number": 3})

    assert client.get("/api/logs").json()["data"]["meta"]["total"] == 1
