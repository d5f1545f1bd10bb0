"""
Unit tests for metrics endpoint.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from hotel_backoffice.main import app
from hotel_backoffice.metrics import (
    booking_conflicts,
    bookings_written,
    db_operations,
    http_request_duration,
    revenue_queries,
)


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client."""
    return TestClient(app)


@pytest.mark.unit
def test_metrics_endpoint_returns_prometheus_format(client: TestClient) -> None:
    """Test that /metrics endpoint returns Prometheus text format."""
    response = client.get("/metrics")

    assert response.status_code == 200
    assert "text/plain" in response.headers["content-type"]


@pytest.mark.unit
def test_metrics_endpoint_contains_custom_metrics(client: TestClient) -> None:
    """Test that /metrics endpoint includes the hotel metrics."""
    bookings_written.labels(operation="create").inc()
    booking_conflicts.labels(reason="overlap").inc()
    revenue_queries.labels(period_type="monthly").inc()
    db_operations.labels(operation="insert", table="booking").inc()
    http_request_duration.labels(method="GET").observe(0.02)

    response = client.get("/metrics")
    content = response.text

    assert "hotel_bookings_written_total" in content
    assert "hotel_booking_conflicts_total" in content
    assert "hotel_revenue_queries_total" in content
    assert "hotel_db_operations_total" in content
    assert "hotel_http_request_duration_seconds" in content


@pytest.mark.unit
def test_metrics_endpoint_includes_help_and_type_metadata(client: TestClient) -> None:
    """Test that metrics include Prometheus HELP and TYPE metadata."""
    response = client.get("/metrics")
    content = response.text

    assert "# HELP" in content
    assert "# TYPE" in content
    assert "counter" in content or "histogram" in content or "gauge" in content
