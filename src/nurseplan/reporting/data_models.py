from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PreferenceStats:
    """How the assigned shifts line up with what nurses asked for."""

    matches: int
    mismatches: int
    neutral: int  # shifts given to nurses without preferences

    @property
    def total(self) -> int:
        return self.matches + self.mismatches + self.neutral

    def rate(self, value: int) -> float:
        return value / self.total if self.total else 0.0

    @property
    def match_rate(self) -> float:
        return self.rate(self.matches)


@dataclass(frozen=True)
class WorkloadSpread:
    """Shifts-per-nurse distribution across the whole roster (idle nurses included)."""

    mean: float
    std: float
    min_shifts: int
    max_shifts: int
    idle_nurses: int


@dataclass(frozen=True)
class ConstraintViolations:
    """Counts of hard-rule breaches found in a finished schedule."""

    duplicate_slot_assignments: int  # same nurse twice in one (day, shift)
    double_booked_days: int  # (nurse, day) pairs with more than one shift
    over_cap_nurses: int  # nurses above MAX_SHIFTS_PER_WEEK
    staffing_mismatches: int  # slots where assigned != required

    @property
    def total(self) -> int:
        return (
            self.duplicate_slot_assignments
            + self.double_booked_days
            + self.over_cap_nurses
            + self.staffing_mismatches
        )
