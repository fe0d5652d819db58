# nurseplan/solver.py
from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Protocol

from ortools.linear_solver import pywraplp
from ortools.sat.python import cp_model

from nurseplan.config import Config
from nurseplan.errors import SolverError


class SolverStatus(str, Enum):
    OPTIMAL = "OPTIMAL"
    FEASIBLE = "FEASIBLE"
    INFEASIBLE = "INFEASIBLE"
    UNBOUNDED = "UNBOUNDED"
    UNDEFINED = "UNDEFINED"

    def __str__(self) -> str:
        return self.value


@dataclass
class LinearConstraint:
    """lb <= Σ coefs[v] * v <= ub  (lb == ub for equality)."""

    name: str
    coefs: dict[str, float]
    lb: float
    ub: float

    @property
    def is_equality(self) -> bool:
        return self.lb == self.ub


@dataclass
class IlpProblem:
    """Solver-agnostic binary program: objective + linear constraints."""

    name: str
    objective: dict[str, float] = field(default_factory=dict)
    constraints: list[LinearConstraint] = field(default_factory=list)
    binaries: list[str] = field(default_factory=list)
    maximize: bool = True

    def add_binary(self, name: str, coef: float) -> None:
        self.binaries.append(name)
        self.objective[name] = coef

    def add_constraint(
        self, name: str, var_names: list[str], lb: float, ub: float
    ) -> LinearConstraint:
        ct = LinearConstraint(name=name, coefs={v: 1.0 for v in var_names}, lb=lb, ub=ub)
        self.constraints.append(ct)
        return ct

    def check(self) -> None:
        """Every constraint must reference declared variables only."""
        known = set(self.binaries)
        for ct in self.constraints:
            unknown = [v for v in ct.coefs if v not in known]
            if unknown:
                raise ValueError(
                    f"Constraint {ct.name} references undeclared variables: {unknown[:3]}"
                )


@dataclass
class SolverOutcome:
    status: SolverStatus
    values: dict[str, float]
    objective_value: Optional[float]
    detail: str = ""
    wall_time: float = 0.0

    @property
    def has_solution(self) -> bool:
        return self.status in (SolverStatus.OPTIMAL, SolverStatus.FEASIBLE)


class MipSolver(Protocol):
    """Anything that accepts an IlpProblem and returns status + variable values."""

    def solve(
        self,
        problem: IlpProblem,
        time_limit_sec: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
    ) -> SolverOutcome: ...


class _CancelWatcher:
    """Calls `interrupt` from a side thread as soon as `cancel` is set."""

    def __init__(self, cancel: Optional[threading.Event], interrupt: Callable[[], object]):
        self.cancel = cancel
        self.interrupt = interrupt
        self.interrupted = False
        self._done = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def _run(self) -> None:
        assert self.cancel is not None
        while not self._done.is_set():
            if self.cancel.wait(0.05):
                self.interrupted = True
                self.interrupt()
                return

    def __enter__(self) -> "_CancelWatcher":
        if self.cancel is not None:
            self._thread = threading.Thread(target=self._run, daemon=True)
            self._thread.start()
        return self

    def __exit__(self, *exc) -> None:
        self._done.set()
        if self._thread is not None:
            self._thread.join()


def _cancelled_outcome(wall_time: float = 0.0) -> SolverOutcome:
    return SolverOutcome(
        status=SolverStatus.UNDEFINED,
        values={},
        objective_value=None,
        detail="CANCELLED",
        wall_time=wall_time,
    )


# ----------------------------
# OR-Tools linear solver (SCIP / CBC branch-and-cut)
# ----------------------------
_LP_STATUS = {
    pywraplp.Solver.OPTIMAL: (SolverStatus.OPTIMAL, "OPTIMAL"),
    pywraplp.Solver.FEASIBLE: (SolverStatus.FEASIBLE, "FEASIBLE"),
    pywraplp.Solver.INFEASIBLE: (SolverStatus.INFEASIBLE, "INFEASIBLE"),
    pywraplp.Solver.UNBOUNDED: (SolverStatus.UNBOUNDED, "UNBOUNDED"),
    pywraplp.Solver.ABNORMAL: (SolverStatus.UNDEFINED, "ABNORMAL"),
    pywraplp.Solver.NOT_SOLVED: (SolverStatus.UNDEFINED, "NOT_SOLVED"),
    pywraplp.Solver.MODEL_INVALID: (SolverStatus.UNDEFINED, "MODEL_INVALID"),
}


class LinearSolver:
    """
    Mixed-integer solver backed by OR-Tools' linear solver wrapper.
    SCIP (default) and CBC both run branch-and-cut.
    """

    def __init__(self, backend: str = "SCIP", fallback: Optional[str] = "CBC") -> None:
        self.backend = backend
        self.fallback = fallback

    def _create(self) -> pywraplp.Solver:
        solver = pywraplp.Solver.CreateSolver(self.backend)
        if solver is None and self.fallback:
            solver = pywraplp.Solver.CreateSolver(self.fallback)
        if solver is None:
            raise SolverError(
                f"Solver backend {self.backend!r} is not available",
                status=SolverStatus.UNDEFINED.value,
            )
        return solver

    def solve(
        self,
        problem: IlpProblem,
        time_limit_sec: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
    ) -> SolverOutcome:
        if cancel is not None and cancel.is_set():
            return _cancelled_outcome()
        problem.check()

        solver = self._create()
        if time_limit_sec:
            solver.SetTimeLimit(int(time_limit_sec * 1000))

        xs = {name: solver.BoolVar(name) for name in problem.binaries}
        for ct in problem.constraints:
            row = solver.Constraint(float(ct.lb), float(ct.ub), ct.name)
            for name, coef in ct.coefs.items():
                row.SetCoefficient(xs[name], float(coef))

        objective = solver.Objective()
        for name, coef in problem.objective.items():
            objective.SetCoefficient(xs[name], float(coef))
        if problem.maximize:
            objective.SetMaximization()
        else:
            objective.SetMinimization()

        started = time.perf_counter()
        with _CancelWatcher(cancel, solver.InterruptSolve) as watcher:
            status_code = solver.Solve()
        wall = time.perf_counter() - started

        status, detail = _LP_STATUS.get(
            status_code, (SolverStatus.UNDEFINED, f"STATUS_{status_code}")
        )
        if watcher.interrupted and status is not SolverStatus.OPTIMAL:
            return _cancelled_outcome(wall)

        values: dict[str, float] = {}
        obj_val: Optional[float] = None
        if status in (SolverStatus.OPTIMAL, SolverStatus.FEASIBLE):
            values = {name: var.solution_value() for name, var in xs.items()}
            obj_val = objective.Value()

        return SolverOutcome(
            status=status,
            values=values,
            objective_value=obj_val,
            detail=detail,
            wall_time=wall,
        )


# ----------------------------
# CP-SAT
# ----------------------------
_CP_STATUS = {
    "OPTIMAL": SolverStatus.OPTIMAL,
    "FEASIBLE": SolverStatus.FEASIBLE,
    "INFEASIBLE": SolverStatus.INFEASIBLE,
}


class CpSatSolver:
    """
    CP-SAT backend. Objective coefficients are scaled to integers by
    OBJECTIVE_SCALE and scaled back in the outcome.
    """

    def __init__(self, cfg: Config, progress_cb=None) -> None:
        self.cfg = cfg
        self.progress_cb = progress_cb

    def _setup(self, time_limit_sec: Optional[float]) -> cp_model.CpSolver:
        solver = cp_model.CpSolver()
        solver.parameters.max_time_in_seconds = float(
            time_limit_sec or self.cfg.TIME_LIMIT_SEC
        )
        solver.parameters.num_workers = self.cfg.NUM_PARALLEL_WORKERS
        solver.parameters.log_search_progress = False
        return solver

    def solve(
        self,
        problem: IlpProblem,
        time_limit_sec: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
    ) -> SolverOutcome:
        if cancel is not None and cancel.is_set():
            return _cancelled_outcome()
        problem.check()

        scale = int(self.cfg.OBJECTIVE_SCALE)
        m = cp_model.CpModel()
        xs = {name: m.NewBoolVar(name) for name in problem.binaries}
        for ct in problem.constraints:
            coefs = {}
            for name, coef in ct.coefs.items():
                if float(coef) != int(coef):
                    raise ValueError(
                        f"CP-SAT needs integer constraint coefficients ({ct.name})"
                    )
                coefs[name] = int(coef)
            if not coefs:
                if not (ct.lb <= 0 <= ct.ub):
                    return SolverOutcome(
                        status=SolverStatus.INFEASIBLE,
                        values={},
                        objective_value=None,
                        detail=f"INFEASIBLE ({ct.name} has no variables)",
                    )
                continue
            expr = sum(c * xs[name] for name, c in coefs.items())
            m.AddLinearConstraint(expr, int(ct.lb), int(ct.ub))

        obj = sum(int(round(coef * scale)) * xs[name] for name, coef in problem.objective.items())
        if problem.maximize:
            m.Maximize(obj)
        else:
            m.Minimize(obj)

        solver = self._setup(time_limit_sec)
        started = time.perf_counter()
        with _CancelWatcher(cancel, solver.stop_search) as watcher:
            if self.progress_cb is not None:
                status_code = solver.SolveWithSolutionCallback(m, self.progress_cb)
            else:
                status_code = solver.Solve(m)
        wall = time.perf_counter() - started

        detail = solver.StatusName(status_code)
        status = _CP_STATUS.get(detail, SolverStatus.UNDEFINED)
        if watcher.interrupted and status is not SolverStatus.OPTIMAL:
            return _cancelled_outcome(wall)

        values: dict[str, float] = {}
        obj_val: Optional[float] = None
        if status in (SolverStatus.OPTIMAL, SolverStatus.FEASIBLE):
            values = {name: float(solver.Value(var)) for name, var in xs.items()}
            obj_val = solver.ObjectiveValue() / scale

        return SolverOutcome(
            status=status,
            values=values,
            objective_value=obj_val,
            detail=detail,
            wall_time=wall,
        )


def setup_solver(cfg: Config, progress_cb=None) -> MipSolver:
    """Solver matching cfg.SOLVER_BACKEND."""
    if cfg.SOLVER_BACKEND == "CP-SAT":
        return CpSatSolver(cfg, progress_cb=progress_cb)
    return LinearSolver(cfg.SOLVER_BACKEND)
