from __future__ import annotations

import math
from typing import TypeAlias

from nurseplan.config import Config
from nurseplan.input_data import NursePreference, ShiftRequirement
from nurseplan.result_types import (
    SchedulingAlgorithm,
    ScheduleResult,
    ShiftAssignment,
    Understaffing,
)
from nurseplan.week import DAYS, DayOfWeek, ShiftType, previous_day

from .base import ScheduleGenerator

DailySchedule: TypeAlias = dict[ShiftType, list[int]]
WeeklySchedule: TypeAlias = dict[DayOfWeek, DailySchedule]

UNAVAILABLE = -math.inf


def init_weekly_schedule() -> WeeklySchedule:
    return {day: {shift: [] for shift in ShiftType} for day in DAYS}


def is_nurse_available(
    nurse_id: int,
    day: DayOfWeek,
    schedule: WeeklySchedule,
    shift_count: int,
    max_shifts: int,
) -> bool:
    """Under the weekly cap and not already on any shift that day."""
    if shift_count >= max_shifts:
        return False
    return not any(nurse_id in ids for ids in schedule[day].values())


def had_previous_night(nurse_id: int, day: DayOfWeek, schedule: WeeklySchedule) -> bool:
    prev = previous_day(day)
    if prev is None:
        return False
    return nurse_id in schedule[prev][ShiftType.NIGHT]


def preference_score(
    nurse: NursePreference, day: DayOfWeek, shift: ShiftType, cfg: Config
) -> float:
    """
    NO_PREFERENCE_SCORE if the nurse listed nothing,
    PREFERENCE_MATCH_SCORE if this exact slot was requested,
    ANTI_PREFERENCE_SCORE otherwise.
    """
    if nurse.is_indifferent:
        return cfg.NO_PREFERENCE_SCORE
    if nurse.prefers(day, shift):
        return cfg.PREFERENCE_MATCH_SCORE
    return cfg.ANTI_PREFERENCE_SCORE


def score_nurse(
    nurse: NursePreference,
    day: DayOfWeek,
    shift: ShiftType,
    schedule: WeeklySchedule,
    shift_count: int,
    cfg: Config,
) -> float:
    """
    Score for putting `nurse` on (day, shift); higher is better, -inf when unavailable.

      AVAILABLE_SCORE
      + CONSECUTIVE_NIGHT_PENALTY   night shift after a night shift the day before
      + preference_score(...)
      + FAIR_DISTRIBUTION_SCORE * (MAX_SHIFTS_PER_WEEK - shift_count)
    """
    max_shifts = int(cfg.MAX_SHIFTS_PER_WEEK)
    if not is_nurse_available(nurse.nurse_id, day, schedule, shift_count, max_shifts):
        return UNAVAILABLE

    score = cfg.AVAILABLE_SCORE
    if shift == ShiftType.NIGHT and had_previous_night(nurse.nurse_id, day, schedule):
        score += cfg.CONSECUTIVE_NIGHT_PENALTY
    score += preference_score(nurse, day, shift, cfg)
    score += cfg.FAIR_DISTRIBUTION_SCORE * (max_shifts - shift_count)
    return score


class HeuristicScheduleGenerator(ScheduleGenerator):
    """
    Greedy scorer. Slots are filled in order of descending demand (stable), each
    with the best scoring nurses at that point. Fast, no backtracking, so it can
    miss solutions the ILP finds.
    """

    algorithm = SchedulingAlgorithm.HEURISTIC

    def generate_schedule(self) -> ScheduleResult:
        self._mark_generated()
        cfg = self.cfg
        legacy = bool(cfg.LEGACY_TOP_N)

        weekly = init_weekly_schedule()
        shift_counts: dict[int, int] = {n.nurse_id: 0 for n in self.nurses}
        shifts: list[ShiftAssignment] = []
        understaffed: list[Understaffing] = []
        total_score = 0.0

        # sorted() is stable: equal demand keeps input order
        ordered = sorted(self.requirements, key=lambda r: r.nurses_required, reverse=True)

        for req in ordered:
            day, shift = req.day_of_week, req.shift_type
            scores = [
                (
                    n.nurse_id,
                    score_nurse(n, day, shift, weekly, shift_counts[n.nurse_id], cfg),
                )
                for n in self.nurses
            ]
            chosen = self._select(scores, req, legacy)

            if legacy:
                weekly[day][shift] = [nid for nid, _ in chosen]
            else:
                weekly[day][shift].extend(nid for nid, _ in chosen)
                if len(chosen) < req.nurses_required:
                    understaffed.append(
                        Understaffing(
                            day_of_week=day,
                            shift_type=shift,
                            required=req.nurses_required,
                            assigned=len(chosen),
                        )
                    )

            for nurse_id, score in chosen:
                shift_counts[nurse_id] += 1
                if score != UNAVAILABLE:
                    total_score += score
                shifts.append(self.create_shift(nurse_id, shift, day))

        return ScheduleResult(
            algorithm=self.algorithm,
            shifts=shifts,
            status_name="UNDERSTAFFED" if understaffed else "COMPLETE",
            objective_value=total_score,
            understaffed=understaffed,
        )

    @staticmethod
    def _select(
        scores: list[tuple[int, float]], req: ShiftRequirement, legacy: bool
    ) -> list[tuple[int, float]]:
        """Top `nurses_required` by score; ties keep nurse input order."""
        ranked = sorted(scores, key=lambda item: item[1], reverse=True)
        if not legacy:
            ranked = [item for item in ranked if item[1] != UNAVAILABLE]
        return ranked[: req.nurses_required]
