"""
Prometheus metrics for monitoring bookings, analytics and database operations.

Metrics are exposed via the /metrics endpoint for scraping by Prometheus.

Metric Types:
    - Counter: Cumulative metrics that only increase (e.g., bookings created)
    - Histogram: Observations bucketed by value (e.g., request latency)

Example:
    >>> from hotel_backoffice.metrics import booking_conflicts
    >>> booking_conflicts.labels(reason="overlap").inc()
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# =============================================================================
# Booking Metrics
# =============================================================================

bookings_written = Counter(
    "hotel_bookings_written_total",
    "Total bookings written to the database",
    ["operation"],
)
"""
Counter for booking writes.

Labels:
    operation: create or update
"""

booking_conflicts = Counter(
    "hotel_booking_conflicts_total",
    "Booking requests rejected because a room could not be booked",
    ["reason"],
)
"""
Counter for rejected bookings.

Labels:
    reason: missing_room, room_status or overlap
"""

# =============================================================================
# Analytics Metrics
# =============================================================================

revenue_queries = Counter(
    "hotel_revenue_queries_total",
    "Total revenue analytics requests served",
    ["period_type"],
)
"""
Counter for revenue analytics requests.

Labels:
    period_type: daily, weekly, monthly or annually
"""

# =============================================================================
# Database Metrics
# =============================================================================

db_operations = Counter(
    "hotel_db_operations_total",
    "Total database write operations performed",
    ["operation", "table"],
)
"""
Counter for database operations.

Labels:
    operation: Type of operation (insert, update, delete)
    table: Database table name
"""

# =============================================================================
# HTTP Metrics
# =============================================================================

http_request_duration = Histogram(
    "hotel_http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, float("inf")),
)
"""
Histogram for HTTP request latency.

Labels:
    method: HTTP method

Buckets: 0.01s, 0.05s, 0.1s, 0.25s, 0.5s, 1s, 2.5s, 5s, +Inf
"""
