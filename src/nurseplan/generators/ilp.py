from __future__ import annotations

import threading
from collections import Counter
from datetime import date
from typing import Any, Iterable, Optional

from nurseplan.config import Config
from nurseplan.errors import SolverError
from nurseplan.input_data import InputData, NursePreference
from nurseplan.result_types import SchedulingAlgorithm, ScheduleResult, ShiftAssignment
from nurseplan.solver import IlpProblem, MipSolver, SolverOutcome, SolverStatus, setup_solver
from nurseplan.week import DAYS, DayOfWeek, ShiftType

from .base import ScheduleGenerator


def var_name(nurse_id: int, day: DayOfWeek, shift: ShiftType) -> str:
    return f"x_{nurse_id}_{day.value}_{shift.value}"


def parse_var_name(name: str) -> tuple[int, DayOfWeek, ShiftType]:
    _, nurse, day, shift = name.split("_")
    return int(nurse), DayOfWeek(day), ShiftType(shift)


def objective_coefficient(
    nurse: NursePreference, day: DayOfWeek, shift: ShiftType, cfg: Config
) -> float:
    """
    BASE_ASSIGNMENT_WEIGHT
      + PREFERENCE_WEIGHT        if the nurse asked for this slot
      + ANTI_PREFERENCE_PENALTY  if the nurse asked for other slots only
    With the default weights: 1.1 preferred, 0.1 indifferent, -0.1 against.
    """
    prefers = nurse.prefers(day, shift)
    coef = cfg.BASE_ASSIGNMENT_WEIGHT
    if prefers:
        coef += cfg.PREFERENCE_WEIGHT
    elif not nurse.is_indifferent:
        coef += cfg.ANTI_PREFERENCE_PENALTY
    return coef


def build_problem(data: InputData, cfg: Config) -> IlpProblem:
    """
    Binary program over x[n,d,s] (nurse n works shift s on day d):

      maximize   Σ coef[n,d,s] * x[n,d,s]
      subject to Σ_n x[n,d,s]      =  required[d,s]          per requirement
                 Σ_{d,s} x[n,d,s]  <= MAX_SHIFTS_PER_WEEK    per nurse
                 Σ_s x[n,d,s]      <= 1                      per nurse and day
                 Σ_n x[n,d,s]      =  0                      per unlisted slot (optional)
    """
    problem = IlpProblem(name="Nurse Scheduling", maximize=True)
    nurse_ids = data.nurse_ids

    for nurse in data.nurses:
        for day in DAYS:
            for shift in ShiftType:
                problem.add_binary(
                    var_name(nurse.nurse_id, day, shift),
                    objective_coefficient(nurse, day, shift, cfg),
                )

    # staffing: one equality per requirement record
    seen: Counter = Counter()
    for req in data.requirements:
        day, shift = req.day_of_week, req.shift_type
        seen[req.slot] += 1
        suffix = "" if seen[req.slot] == 1 else f"_{seen[req.slot]}"
        problem.add_constraint(
            f"req_{day.value}_{shift.value}{suffix}",
            [var_name(n, day, shift) for n in nurse_ids],
            lb=req.nurses_required,
            ub=req.nurses_required,
        )

    if cfg.ILP_PIN_UNLISTED_SLOTS:
        for day in DAYS:
            for shift in ShiftType:
                if (day, shift) in seen:
                    continue
                problem.add_constraint(
                    f"unlisted_{day.value}_{shift.value}",
                    [var_name(n, day, shift) for n in nurse_ids],
                    lb=0,
                    ub=0,
                )

    for n in nurse_ids:
        problem.add_constraint(
            f"max_shifts_{n}",
            [var_name(n, day, shift) for day in DAYS for shift in ShiftType],
            lb=0,
            ub=int(cfg.MAX_SHIFTS_PER_WEEK),
        )

    for n in nurse_ids:
        for day in DAYS:
            problem.add_constraint(
                f"one_shift_{n}_{day.value}",
                [var_name(n, day, shift) for shift in ShiftType],
                lb=0,
                ub=1,
            )

    return problem


class IlpScheduleGenerator(ScheduleGenerator):
    """
    Optimal schedule under the hard constraints via a branch-and-cut MIP solve.
    The solver is injected; by default it follows cfg.SOLVER_BACKEND.
    """

    algorithm = SchedulingAlgorithm.ILP

    def __init__(
        self,
        requirements: Iterable[Any],
        preferences: Iterable[Any],
        cfg: Optional[Config] = None,
        today: Optional[date] = None,
        solver: Optional[MipSolver] = None,
    ) -> None:
        super().__init__(requirements, preferences, cfg=cfg, today=today)
        self.solver: MipSolver = solver or setup_solver(self.cfg)
        self.problem: Optional[IlpProblem] = None
        self.outcome: Optional[SolverOutcome] = None

    def build(self) -> IlpProblem:
        self.problem = build_problem(self.data, self.cfg)
        return self.problem

    def generate_schedule(
        self,
        time_limit_sec: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
    ) -> ScheduleResult:
        """
        Solve the model and decode it into shift assignments.

        Parameters:
        time_limit_sec (float, optional): solver time limit, defaults to cfg.TIME_LIMIT_SEC
        cancel (threading.Event, optional): set it to interrupt the solve

        Returns:
        ScheduleResult: complete schedule meeting every hard constraint

        Raises:
        SolverError: infeasible/unbounded/undefined status, an empty solution,
        or any failure inside the solver call
        """
        self._mark_generated()
        problem = self.problem or self.build()
        limit = time_limit_sec if time_limit_sec is not None else self.cfg.TIME_LIMIT_SEC

        try:
            outcome = self.solver.solve(problem, time_limit_sec=limit, cancel=cancel)
        except SolverError:
            raise
        except Exception as exc:
            raise SolverError(
                f"Failed to generate optimal schedule: {exc}",
                status=SolverStatus.UNDEFINED.value,
                detail=type(exc).__name__,
            ) from exc
        self.outcome = outcome

        if not outcome.has_solution:
            raise SolverError(
                "Failed to generate optimal schedule: "
                f"Failed to find optimal solution. Status: {outcome.status.value}"
                + (f" ({outcome.detail})" if outcome.detail else ""),
                status=outcome.status.value,
                detail=outcome.detail,
            )

        shifts = self._decode(outcome)
        if not shifts:
            raise SolverError(
                "Failed to generate optimal schedule: "
                "Generated schedule has no shifts despite solver reporting success",
                status=outcome.status.value,
                detail=outcome.detail,
            )

        return ScheduleResult(
            algorithm=self.algorithm,
            shifts=shifts,
            status_name=outcome.status.value,
            objective_value=outcome.objective_value,
        )

    def _decode(self, outcome: SolverOutcome) -> list[ShiftAssignment]:
        shifts: list[ShiftAssignment] = []
        for name, value in outcome.values.items():
            if round(value) != 1:
                continue
            nurse_id, day, shift = parse_var_name(name)
            shifts.append(self.create_shift(nurse_id, shift, day))
        return shifts
