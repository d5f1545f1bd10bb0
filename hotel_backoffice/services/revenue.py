"""
Revenue analytics: bucket paid bookings into calendar periods.

Bookings are keyed by the UTC calendar day of their check-in:

* daily     -> ``YYYY-MM-DD``
* weekly    -> ``YYYY-Www`` (ISO year and ISO week number)
* monthly   -> ``YYYY-MM``
* annually  -> ``YYYY``

Each bucket in the requested range is compared with the bucket immediately
before it (previous day/week/month/year). To make that comparison possible
for the first bucket, data is fetched from one period before the range.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

import structlog
from sqlalchemy.engine import Connection

from hotel_backoffice.config import PAID_PAYMENT_STATUS_NUMBER
from hotel_backoffice.db.readers.bookings import get_paid_booking_amounts
from hotel_backoffice.metrics import revenue_queries
from hotel_backoffice.utils.datetime import ensure_utc, start_of_day

logger = structlog.get_logger(__name__)

PERIOD_TYPES = ("daily", "weekly", "monthly", "annually")

TREND_UP = "up"
TREND_DOWN = "down"


class InvalidPeriodError(ValueError):
    """Raised for an unknown period type or an out-of-range month."""


@dataclass
class RevenueBucket:
    period: str
    revenue: float = 0.0
    count: int = 0
    percentage: int = 0
    trend: Optional[str] = None


@dataclass
class RevenueReport:
    period_type: str
    summary: list[RevenueBucket] = field(default_factory=list)
    total_revenue: float = 0.0
    average_revenue: float = 0.0


def validate_period(period_type: str, year: int, month: Optional[int]) -> None:
    """
    Reject unknown period types, months outside 1-12 and years whose lookback
    or following day falls outside the calendar.

    Raises:
        InvalidPeriodError: If the request cannot be served
    """
    if period_type not in PERIOD_TYPES:
        raise InvalidPeriodError(f"Period type must be one of: {', '.join(PERIOD_TYPES)}")
    if month is not None and not 1 <= month <= 12:
        raise InvalidPeriodError("Month must be between 1 and 12")
    if not 1 < year < 9999:
        raise InvalidPeriodError("Year must be between 2 and 9998")


def week_label(day: date) -> str:
    iso_year, iso_week, _ = day.isocalendar()
    return f"{iso_year}-W{iso_week:02d}"


def period_label(period_type: str, day: date) -> str:
    """Bucket key for ``day`` under ``period_type``."""
    if period_type == "daily":
        return day.isoformat()
    if period_type == "weekly":
        return week_label(day)
    if period_type == "monthly":
        return f"{day.year}-{day.month:02d}"
    return str(day.year)


def previous_period_label(period_type: str, label: str) -> str:
    """
    Key of the period immediately before ``label``.

    Example:
        >>> previous_period_label("weekly", "2021-W01")
        '2020-W53'
        >>> previous_period_label("monthly", "2024-01")
        '2023-12'
    """
    if period_type == "daily":
        return (date.fromisoformat(label) - timedelta(days=1)).isoformat()
    if period_type == "weekly":
        iso_year, week = label.split("-W")
        monday = date.fromisocalendar(int(iso_year), int(week), 1)
        return week_label(monday - timedelta(days=7))
    if period_type == "monthly":
        year, month = (int(part) for part in label.split("-"))
        if month == 1:
            return f"{year - 1}-12"
        return f"{year}-{month - 1:02d}"
    return str(int(label) - 1)


def requested_range(period_type: str, year: int, month: Optional[int]) -> tuple[date, date]:
    """
    First and last calendar day covered by the request (both inclusive).

    ``month`` narrows daily, weekly and monthly requests to that month;
    annual requests always cover the whole year.
    """
    if month is None or period_type == "annually":
        return date(year, 1, 1), date(year, 12, 31)
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


def lookback_window(period_type: str, first_day: date, last_day: date) -> tuple[date, date]:
    """
    Days to fetch: the requested range plus one full period before it.

    Returns:
        tuple: (first day to fetch, day after the last day to fetch)
    """
    if period_type == "daily":
        return first_day - timedelta(days=1), last_day + timedelta(days=1)
    if period_type == "weekly":
        first_monday = first_day - timedelta(days=first_day.weekday())
        last_sunday = last_day + timedelta(days=6 - last_day.weekday())
        return first_monday - timedelta(days=7), last_sunday + timedelta(days=1)
    if period_type == "monthly":
        if first_day.month == 1:
            start = date(first_day.year - 1, 12, 1)
        else:
            start = date(first_day.year, first_day.month - 1, 1)
        return start, last_day + timedelta(days=1)
    return date(first_day.year - 1, 1, 1), last_day + timedelta(days=1)


def _days(first_day: date, last_day: date) -> Iterable[date]:
    day = first_day
    while day <= last_day:
        yield day
        day += timedelta(days=1)


def compute_trend(current: float, previous: Optional[float]) -> tuple[int, Optional[str]]:
    """
    Percentage change against the previous period and its direction.

    Returns (0, None) when there is no previous revenue to compare with.
    Equal revenue counts as ``up``.

    Example:
        >>> compute_trend(150, 100)
        (50, 'up')
    """
    if not previous:
        return 0, None
    change = (current - previous) / previous * 100
    percentage = int(Decimal(str(abs(change))).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return percentage, TREND_UP if change >= 0 else TREND_DOWN


def summarize_revenue(
    bookings: Iterable[tuple[datetime, float]],
    period_type: str,
    year: int,
    month: Optional[int] = None,
) -> RevenueReport:
    """
    Bucket paid bookings and compute period-over-period trends.

    Args:
        bookings: (checkin datetime, amount) pairs, including the lookback period
        period_type: daily, weekly, monthly or annually
        year: Requested year
        month: Optional month (1-12) narrowing daily/weekly/monthly requests

    Returns:
        RevenueReport: Buckets in the requested range sorted by label, with
        total and average revenue over those buckets

    Raises:
        InvalidPeriodError: For an unknown period type or month
    """
    validate_period(period_type, year, month)
    first_day, last_day = requested_range(period_type, year, month)
    in_range = {period_label(period_type, day) for day in _days(first_day, last_day)}

    buckets: dict[str, RevenueBucket] = {}
    if period_type in ("daily", "monthly"):
        for label in sorted(in_range):
            buckets[label] = RevenueBucket(period=label)

    for checkin, amount in bookings:
        label = period_label(period_type, ensure_utc(checkin).date())
        bucket = buckets.setdefault(label, RevenueBucket(period=label))
        bucket.revenue += amount
        bucket.count += 1

    summary = []
    for label in sorted(buckets):
        if label not in in_range:
            continue
        bucket = buckets[label]
        previous = buckets.get(previous_period_label(period_type, label))
        bucket.percentage, bucket.trend = compute_trend(
            bucket.revenue, previous.revenue if previous else None
        )
        summary.append(bucket)

    total = sum(bucket.revenue for bucket in summary)
    average = total / len(summary) if summary else 0.0
    return RevenueReport(
        period_type=period_type,
        summary=summary,
        total_revenue=total,
        average_revenue=average,
    )


def build_revenue_report(
    conn: Connection, period_type: str, year: int, month: Optional[int] = None
) -> RevenueReport:
    """
    Fetch paid bookings for the request (plus lookback) and summarise them.

    Args:
        conn: Active database connection
        period_type: daily, weekly, monthly or annually
        year: Requested year
        month: Optional month (1-12)

    Returns:
        RevenueReport

    Raises:
        InvalidPeriodError: For an unknown period type or month
    """
    validate_period(period_type, year, month)
    first_day, last_day = requested_range(period_type, year, month)
    fetch_from, fetch_until = lookback_window(period_type, first_day, last_day)

    bookings = get_paid_booking_amounts(
        conn,
        paid_status_number=PAID_PAYMENT_STATUS_NUMBER,
        start=start_of_day(fetch_from),
        end=start_of_day(fetch_until),
    )
    report = summarize_revenue(bookings, period_type, year, month)

    revenue_queries.labels(period_type=period_type).inc()
    logger.info(
        "revenue_report_built",
        period_type=period_type,
        year=year,
        month=month,
        bookings=len(bookings),
        buckets=len(report.summary),
    )
    return report
