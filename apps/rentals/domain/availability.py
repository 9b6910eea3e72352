"""
Mietfach schedule

Pure availability logic for a single Mietfach. The service layer loads
the occupancies (service lines of active or scheduled contracts) and asks
the schedule whether a requested period is free.

Periods are half-open: a contract ending on 01.06. and one starting on
01.06. do not conflict.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable

from shared.domain.value_objects import DateRange


@dataclass(frozen=True)
class Occupancy:
    """A contract occupying the Mietfach for a period."""

    booking_id: int
    dates: DateRange
    vendor_name: str = ""
    status: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "booking_id": self.booking_id,
            "start": self.dates.start_date.isoformat(),
            "end": self.dates.end_date.isoformat(),
            "vendor_name": self.vendor_name,
            "status": self.status,
        }


@dataclass(frozen=True)
class AvailabilityResult:
    mietfach_id: int
    requested: DateRange
    conflicts: tuple[Occupancy, ...] = ()

    @property
    def available(self) -> bool:
        return not self.conflicts

    @property
    def next_available(self) -> date | None:
        """Frühester Termin, an dem alle kollidierenden Belegungen geendet haben."""
        if not self.conflicts:
            return None
        return max(conflict.dates.end_date for conflict in self.conflicts)

    def to_dict(self) -> dict[str, Any]:
        next_available = self.next_available
        return {
            "mietfach_id": self.mietfach_id,
            "start": self.requested.start_date.isoformat(),
            "end": self.requested.end_date.isoformat(),
            "available": self.available,
            "conflicts": [conflict.to_dict() for conflict in self.conflicts],
            "next_available": next_available.isoformat() if next_available else None,
        }


@dataclass
class MietfachSchedule:
    """
    Occupancy list of one Mietfach

    Usage:
        schedule = MietfachSchedule(mietfach_id, occupancies)
        result = schedule.check(DateRange(start, end))
        if not result.available:
            ...  # result.conflicts, result.next_available
    """

    mietfach_id: int
    occupancies: list[Occupancy] = field(default_factory=list)

    @classmethod
    def from_occupancies(cls, mietfach_id: int, occupancies: Iterable[Occupancy]) -> "MietfachSchedule":
        return cls(mietfach_id=mietfach_id, occupancies=list(occupancies))

    def conflicts_with(self, dates: DateRange) -> list[Occupancy]:
        return [occupancy for occupancy in self.occupancies if occupancy.dates.overlaps_with(dates)]

    def check(self, dates: DateRange) -> AvailabilityResult:
        conflicts = sorted(self.conflicts_with(dates), key=lambda item: item.dates.start_date)
        return AvailabilityResult(mietfach_id=self.mietfach_id, requested=dates, conflicts=tuple(conflicts))
