from __future__ import annotations

from datetime import date, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from nurseplan.result_types import ShiftAssignment

MAX_SHIFTS_PER_WEEK = 5


class DayOfWeek(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    def __str__(self) -> str:
        return self.value


class ShiftType(str, Enum):
    DAY = "day"
    NIGHT = "night"

    def __str__(self) -> str:
        return self.value


# Canonical week order, also the iteration order everywhere
DAYS: tuple[DayOfWeek, ...] = tuple(DayOfWeek)

Slot = tuple[DayOfWeek, ShiftType]


def day_index(day: DayOfWeek) -> int:
    """Monday=0 .. Sunday=6 (matches date.weekday())."""
    return DAYS.index(day)


def previous_day(day: DayOfWeek) -> Optional[DayOfWeek]:
    """Previous day in the canonical week, None for Monday."""
    idx = day_index(day)
    if idx <= 0:
        return None
    return DAYS[idx - 1]


def date_for_day(day: DayOfWeek, today: date) -> date:
    """
    Nearest date on or after `today` that falls on `day` (0..6 days ahead).
    """
    days_to_add = (day_index(day) - today.weekday()) % 7
    return today + timedelta(days=days_to_add)


def create_shift(
    nurse_id: int, on: date, shift_type: ShiftType, day_of_week: DayOfWeek
) -> "ShiftAssignment":
    from nurseplan.result_types import ShiftAssignment

    return ShiftAssignment(
        nurse_id=nurse_id, date=on, day_of_week=day_of_week, shift_type=shift_type
    )
