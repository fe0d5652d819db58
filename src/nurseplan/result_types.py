# nurseplan/result_types.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

import pandas as pd

from nurseplan.week import DayOfWeek, ShiftType

SCHEDULE_COLUMNS = ["nurse_id", "date", "day_of_week", "shift_type"]


class SchedulingAlgorithm(str, Enum):
    HEURISTIC = "heuristic"
    ILP = "ilp"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class ShiftAssignment:
    nurse_id: int
    date: date
    day_of_week: DayOfWeek
    shift_type: ShiftType


@dataclass(frozen=True, slots=True)
class Understaffing:
    """A slot that ended with fewer eligible nurses than required."""

    day_of_week: DayOfWeek
    shift_type: ShiftType
    required: int
    assigned: int

    @property
    def deficit(self) -> int:
        return max(self.required - self.assigned, 0)


@dataclass
class ScheduleResult:
    """Structured output of one schedule generation."""

    algorithm: SchedulingAlgorithm
    shifts: list[ShiftAssignment]
    status_name: str
    objective_value: Optional[float] = None
    understaffed: list[Understaffing] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.shifts)

    @property
    def is_complete(self) -> bool:
        return not self.understaffed

    def to_frame(self) -> pd.DataFrame:
        """One row per assignment, sorted by date, shift and nurse."""
        if not self.shifts:
            return pd.DataFrame(columns=SCHEDULE_COLUMNS)
        rows = [
            {
                "nurse_id": s.nurse_id,
                "date": s.date.isoformat(),
                "day_of_week": s.day_of_week.value,
                "shift_type": s.shift_type.value,
            }
            for s in self.shifts
        ]
        return (
            pd.DataFrame(rows, columns=SCHEDULE_COLUMNS)
            .sort_values(["date", "shift_type", "nurse_id"])
            .reset_index(drop=True)
        )
