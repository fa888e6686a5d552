"""Buffered overlap rule shared by slot search and booking creation."""

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from studio_booking.services.conflict_checker import (
    booking_conflicts_with,
    buffered_interval,
    find_conflicting,
)


def at(hour: int, minute: int = 0) -> datetime:
    return datetime(2030, 1, 7, hour, minute, tzinfo=timezone.utc)


EXISTING = (at(10), at(11))


class TestBookingConflictsWith:
    @pytest.mark.parametrize(
        "start,end",
        [
            (at(10), at(11)),  # identical
            (at(10, 30), at(11, 30)),  # starts inside
            (at(9), at(10)),  # ends inside the leading buffer
            (at(11), at(12)),  # starts inside the trailing buffer
            (at(9), at(12)),  # contains
            (at(10, 15), at(10, 45)),  # contained
        ],
    )
    def test_overlapping_candidates_conflict(self, start, end):
        assert booking_conflicts_with(start, end, *EXISTING, buffer_minutes=15)

    @pytest.mark.parametrize(
        "start,end",
        [
            (at(11, 15), at(12, 15)),  # starts exactly when the trailing buffer ends
            (at(8, 45), at(9, 45)),  # ends exactly when the leading buffer starts
            (at(12), at(13)),
            (at(7), at(8)),
        ],
    )
    def test_touching_or_clear_candidates_do_not_conflict(self, start, end):
        assert not booking_conflicts_with(start, end, *EXISTING, buffer_minutes=15)

    def test_zero_buffer_allows_back_to_back(self):
        assert not booking_conflicts_with(at(11), at(12), *EXISTING, buffer_minutes=0)
        assert not booking_conflicts_with(at(9), at(10), *EXISTING, buffer_minutes=0)

    def test_naive_datetimes_are_treated_as_utc(self):
        naive_start = datetime(2030, 1, 7, 10, 30)
        naive_end = datetime(2030, 1, 7, 11, 30)
        assert booking_conflicts_with(naive_start, naive_end, *EXISTING, buffer_minutes=15)


def test_buffered_interval_widens_both_sides():
    start, end = buffered_interval(at(10), at(11), 30)
    assert start == at(9, 30)
    assert end == at(11, 30)


def test_find_conflicting_filters_bookings():
    first = SimpleNamespace(id="a", start_time=at(10), end_time=at(11))
    second = SimpleNamespace(id="b", start_time=at(14), end_time=at(15))

    conflicts = find_conflicting(at(10, 30), at(11, 30), [first, second], buffer_minutes=15)

    assert [booking.id for booking in conflicts] == ["a"]
