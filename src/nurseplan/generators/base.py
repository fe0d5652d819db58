# src/nurseplan/generators/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Iterable, Optional

from nurseplan.config import Config
from nurseplan.input_data import InputData, build_input
from nurseplan.precheck import ensure_schedule_possible
from nurseplan.result_types import SchedulingAlgorithm, ScheduleResult, ShiftAssignment
from nurseplan.week import DayOfWeek, ShiftType, create_shift, date_for_day


class ScheduleGenerator(ABC):
    """
    Single-use schedule generator.

    Construction normalises the inputs and runs the aggregate capacity gate, so an
    InfeasibleDemandError surfaces before any scheduling work. `generate_schedule()`
    may then be called exactly once.
    """

    algorithm: SchedulingAlgorithm

    def __init__(
        self,
        requirements: Iterable[Any],
        preferences: Iterable[Any],
        cfg: Optional[Config] = None,
        today: Optional[date] = None,
    ) -> None:
        self.cfg: Config = cfg or Config()
        self.data: InputData = build_input(requirements, preferences)
        self.today: date = today or self.cfg.REFERENCE_DATE or date.today()
        self._generated = False
        ensure_schedule_possible(
            self.data.requirements, self.data.nurses, self.cfg.MAX_SHIFTS_PER_WEEK
        )

    @property
    def requirements(self):
        return self.data.requirements

    @property
    def nurses(self):
        return self.data.nurses

    @property
    def max_shifts(self) -> int:
        return int(self.cfg.MAX_SHIFTS_PER_WEEK)

    def _mark_generated(self) -> None:
        if self._generated:
            raise RuntimeError(
                f"{type(self).__name__} is single-use; construct a new generator."
            )
        self._generated = True

    @abstractmethod
    def generate_schedule(self) -> ScheduleResult: ...

    def date_for_day(self, day: DayOfWeek) -> date:
        return date_for_day(day, self.today)

    def create_shift(
        self, nurse_id: int, shift_type: ShiftType, day: DayOfWeek
    ) -> ShiftAssignment:
        return create_shift(nurse_id, self.date_for_day(day), shift_type, day)
