"""
Unit tests for the half-open interval overlap rule.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from hotel_backoffice.services.availability import (
    Occupancy,
    find_conflicting_room_ids,
    intervals_overlap,
    rooms_are_free,
)

BASE = datetime(2025, 3, 1, 14, tzinfo=timezone.utc)


def day(n: int) -> datetime:
    return BASE + timedelta(days=n)


@pytest.mark.unit
def test_back_to_back_stays_do_not_overlap() -> None:
    """Checking in on the instant the previous guest checks out is allowed."""
    assert intervals_overlap(day(3), day(5), day(1), day(3)) is False
    assert intervals_overlap(day(1), day(3), day(3), day(5)) is False


@pytest.mark.unit
@pytest.mark.parametrize(
    "start, end",
    [
        (day(0), day(2)),  # starts before, ends inside
        (day(2), day(6)),  # starts inside, ends after
        (day(2), day(3)),  # fully inside
        (day(0), day(6)),  # fully covers
        (day(1), day(5)),  # identical
    ],
)
def test_intersecting_stays_overlap(start: datetime, end: datetime) -> None:
    """Any shared instant with [day1, day5) is a conflict."""
    assert intervals_overlap(start, end, day(1), day(5)) is True


@pytest.mark.unit
def test_disjoint_stays_do_not_overlap() -> None:
    assert intervals_overlap(day(10), day(12), day(1), day(5)) is False


@pytest.mark.unit
def test_overlap_compares_instants_across_timezones() -> None:
    """The same instant written in another offset is still the same instant."""
    plus_two = timezone(timedelta(hours=2))
    checkout_local = day(3).astimezone(plus_two)

    assert intervals_overlap(day(3), day(5), day(1), checkout_local) is False
    assert intervals_overlap(day(3) - timedelta(minutes=1), day(5), day(1), checkout_local) is True


@pytest.mark.unit
def test_find_conflicting_room_ids_only_reports_taken_rooms() -> None:
    occupancies = [
        Occupancy(room_id=1, checkin=day(1), checkout=day(3)),
        Occupancy(room_id=2, checkin=day(2), checkout=day(4)),
        Occupancy(room_id=3, checkin=day(10), checkout=day(12)),
    ]

    assert find_conflicting_room_ids(occupancies, day(3), day(5)) == {2}
    assert find_conflicting_room_ids(occupancies, day(0), day(11)) == {1, 2, 3}


@pytest.mark.unit
def test_rooms_are_free_with_no_existing_stays() -> None:
    assert rooms_are_free([], day(1), day(2)) is True


@pytest.mark.unit
def test_rooms_are_free_false_when_any_room_conflicts() -> None:
    occupancies = [
        Occupancy(room_id=1, checkin=day(1), checkout=day(3)),
        Occupancy(room_id=2, checkin=day(6), checkout=day(8)),
    ]

    assert rooms_are_free(occupancies, day(3), day(6)) is True
    assert rooms_are_free(occupancies, day(3), day(7)) is False
