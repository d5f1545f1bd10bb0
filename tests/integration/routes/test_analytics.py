"""
Integration tests for /api/analytics/revenue.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from hotel_backoffice.main import app


def at(year: int, month: int, day: int, hour: int = 14) -> datetime:
    return datetime(year, month, day, hour, tzinfo=timezone.utc)


@pytest.fixture
def january_revenue(store_booking: Callable[..., int]) -> None:
    """Paid stays on Jan 1 and Jan 2 2024, plus an unpaid one that must be ignored."""
    store_booking(at(2024, 1, 1), at(2024, 1, 3), amount=100.0)
    store_booking(at(2024, 1, 2), at(2024, 1, 4), amount=150.0)
    store_booking(at(2024, 1, 2), at(2024, 1, 5), amount=500.0, paid=False)


@pytest.mark.integration
def test_daily_revenue_for_january(client: TestClient, january_revenue: None) -> None:
    response = client.get("/api/analytics/revenue?period=daily&year=2024&month=1")

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Revenue analytics retrieved successfully"

    data = body["data"]
    assert data["period_type"] == "daily"
    assert len(data["summary"]) == 31
    assert data["total_revenue"] == 250.0
    assert data["average_revenue"] == pytest.approx(250.0 / 31)

    second = data["summary"][1]
    assert second == {
        "period": "2024-01-02",
        "revenue": 150.0,
        "count": 1,
        "percentage": 50,
        "trend": "up",
    }


@pytest.mark.integration
def test_monthly_revenue_defaults(client: TestClient, january_revenue: None) -> None:
    """``period`` defaults to monthly."""
    response = client.get("/api/analytics/revenue?year=2024")

    data = response.json()["data"]
    assert data["period_type"] == "monthly"
    assert [entry["period"] for entry in data["summary"]][:2] == ["2024-01", "2024-02"]
    assert data["summary"][0]["revenue"] == 250.0
    assert data["summary"][0]["count"] == 2


@pytest.mark.integration
def test_monthly_trend_uses_previous_year_december(
    client: TestClient, store_booking: Callable[..., int]
) -> None:
    store_booking(at(2023, 12, 20), at(2023, 12, 22), amount=200.0)
    store_booking(at(2024, 1, 10), at(2024, 1, 12), amount=300.0)

    response = client.get("/api/analytics/revenue?period=monthly&year=2024&month=1")

    summary = response.json()["data"]["summary"]
    assert summary == [
        {"period": "2024-01", "revenue": 300.0, "count": 1, "percentage": 50, "trend": "up"}
    ]


@pytest.mark.integration
def test_weekly_revenue_lists_only_weeks_with_bookings(
    client: TestClient, store_booking: Callable[..., int]
) -> None:
    store_booking(at(2024, 1, 3), at(2024, 1, 4), amount=100.0)  # 2024-W01
    store_booking(at(2024, 1, 10), at(2024, 1, 11), amount=80.0)  # 2024-W02

    response = client.get("/api/analytics/revenue?period=weekly&year=2024&month=1")

    summary = response.json()["data"]["summary"]
    assert [entry["period"] for entry in summary] == ["2024-W01", "2024-W02"]
    assert summary[1]["percentage"] == 20
    assert summary[1]["trend"] == "down"


@pytest.mark.integration
def test_annual_revenue(client: TestClient, store_booking: Callable[..., int]) -> None:
    store_booking(at(2023, 5, 1), at(2023, 5, 2), amount=100.0)
    store_booking(at(2024, 5, 1), at(2024, 5, 2), amount=100.0)

    response = client.get("/api/analytics/revenue?period=annually&year=2024")

    summary = response.json()["data"]["summary"]
    assert summary == [
        {"period": "2024", "revenue": 100.0, "count": 1, "percentage": 0, "trend": "up"}
    ]


@pytest.mark.integration
def test_year_defaults_to_current_year(client: TestClient, hotel: dict[str, int]) -> None:
    response = client.get("/api/analytics/revenue?period=annually")

    summary = response.json()["data"]["summary"]
    assert summary == []

    monthly = client.get("/api/analytics/revenue?period=monthly").json()["data"]["summary"]
    current_year = datetime.now(timezone.utc).year
    assert monthly[0]["period"] == f"{current_year}-01"


@pytest.mark.integration
def test_invalid_period_type_is_rejected(client: TestClient, hotel: dict[str, int]) -> None:
    response = client.get("/api/analytics/revenue?period=hourly&year=2024")

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Invalid period type"
    assert body["errors"] == ["Period type must be one of: daily, weekly, monthly, annually"]


@pytest.mark.integration
def test_invalid_month_is_rejected(client: TestClient, hotel: dict[str, int]) -> None:
    response = client.get("/api/analytics/revenue?period=daily&year=2024&month=13")

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid period"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_revenue_over_async_client(
    client: TestClient, january_revenue: None
) -> None:
    """The endpoint also answers through an ASGI transport client."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as async_client:
        response = await async_client.get(
            "/api/analytics/revenue", params={"period": "annually", "year": 2024}
        )

    assert response.status_code == 200
    assert response.json()["data"]["total_revenue"] == 250.0


@pytest.mark.integration
@pytest.mark.parametrize("period", ["daily", "weekly", "monthly", "annually"])
def test_year_past_calendar_end_is_rejected(
    client: TestClient, hotel: dict[str, int], period: str
) -> None:
    response = client.get(f"/api/analytics/revenue?period={period}&year=9999")

    assert response.status_code == 400
    assert response.json()["errors"] == ["Year must be between 2 and 9998"]
