"""
Room availability checks for bookings.

A booking occupies each of its rooms over the half-open interval
[checkin, checkout). Two stays on the same room conflict only when their
intervals intersect, so a guest may check in on the instant the previous
guest checks out.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable


@dataclass(frozen=True)
class Occupancy:
    """An existing stay on one room."""

    room_id: int
    checkin: datetime
    checkout: datetime


def intervals_overlap(
    start: datetime, end: datetime, other_start: datetime, other_end: datetime
) -> bool:
    """
    Half-open interval intersection test.

    Args:
        start: Candidate check-in
        end: Candidate check-out
        other_start: Existing check-in
        other_end: Existing check-out

    Returns:
        bool: True if [start, end) and [other_start, other_end) share an instant

    Example:
        >>> intervals_overlap(d(1), d(3), d(3), d(5))  # back-to-back
        False
    """
    return start < other_end and end > other_start


def find_conflicting_room_ids(
    occupancies: Iterable[Occupancy], checkin: datetime, checkout: datetime
) -> set[int]:
    """
    Return the rooms whose existing stays overlap [checkin, checkout).

    Args:
        occupancies: Existing stays for the candidate rooms
        checkin: Candidate check-in
        checkout: Candidate check-out

    Returns:
        set[int]: Ids of rooms that are already taken
    """
    return {
        occ.room_id
        for occ in occupancies
        if intervals_overlap(checkin, checkout, occ.checkin, occ.checkout)
    }


def rooms_are_free(
    occupancies: Iterable[Occupancy], checkin: datetime, checkout: datetime
) -> bool:
    """True if no existing stay overlaps [checkin, checkout) on any room."""
    return not find_conflicting_room_ids(occupancies, checkin, checkout)
