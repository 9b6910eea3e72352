"""Unit tests for the Mietfach schedule (pure availability logic)."""

from __future__ import annotations

from datetime import date

import pytest

from apps.rentals.domain.availability import MietfachSchedule, Occupancy
from shared.domain.value_objects import DateRange


def _occupancy(booking_id: int, start: date, end: date, vendor: str = "Hof Müller") -> Occupancy:
    return Occupancy(booking_id=booking_id, dates=DateRange(start, end), vendor_name=vendor, status="active")


def test_empty_schedule_is_available() -> None:
    result = MietfachSchedule(mietfach_id=1).check(DateRange(date(2025, 3, 1), date(2025, 6, 1)))

    assert result.available is True
    assert result.conflicts == ()
    assert result.next_available is None


def test_disjoint_ranges_do_not_conflict() -> None:
    schedule = MietfachSchedule(1, [_occupancy(10, date(2025, 1, 1), date(2025, 3, 1))])

    assert schedule.check(DateRange(date(2025, 4, 1), date(2025, 5, 1))).available is True


def test_adjacent_ranges_do_not_conflict() -> None:
    schedule = MietfachSchedule(1, [_occupancy(10, date(2025, 3, 1), date(2025, 6, 1))])

    assert schedule.check(DateRange(date(2025, 6, 1), date(2025, 9, 1))).available is True
    assert schedule.check(DateRange(date(2025, 1, 1), date(2025, 3, 1))).available is True


def test_overlap_reports_conflicting_booking() -> None:
    schedule = MietfachSchedule(1, [_occupancy(10, date(2025, 3, 1), date(2025, 6, 1))])

    result = schedule.check(DateRange(date(2025, 5, 1), date(2025, 8, 1)))

    assert result.available is False
    assert [conflict.booking_id for conflict in result.conflicts] == [10]
    assert result.conflicts[0].vendor_name == "Hof Müller"
    assert result.next_available == date(2025, 6, 1)


def test_next_available_is_latest_conflicting_end() -> None:
    schedule = MietfachSchedule(
        1,
        [
            _occupancy(11, date(2025, 5, 1), date(2025, 9, 1), vendor="Imkerei Berg"),
            _occupancy(10, date(2025, 1, 1), date(2025, 4, 1)),
            _occupancy(12, date(2026, 1, 1), date(2026, 2, 1)),
        ],
    )

    result = schedule.check(DateRange(date(2025, 3, 1), date(2025, 6, 1)))

    assert [conflict.booking_id for conflict in result.conflicts] == [10, 11]
    assert result.next_available == date(2025, 9, 1)


def test_result_serializes_dates_as_iso_strings() -> None:
    schedule = MietfachSchedule(7, [_occupancy(10, date(2025, 3, 1), date(2025, 6, 1))])

    data = schedule.check(DateRange(date(2025, 4, 1), date(2025, 5, 1))).to_dict()

    assert data["mietfach_id"] == 7
    assert data["available"] is False
    assert data["next_available"] == "2025-06-01"
    assert data["conflicts"][0] == {
        "booking_id": 10,
        "start": "2025-03-01",
        "end": "2025-06-01",
        "vendor_name": "Hof Müller",
        "status": "active",
    }


def test_invalid_range_is_rejected() -> None:
    with pytest.raises(ValueError):
        DateRange(date(2025, 6, 1), date(2025, 6, 1))
