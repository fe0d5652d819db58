import threading

import pytest

from nurseplan.config import Config
from nurseplan.solver import (
    CpSatSolver,
    IlpProblem,
    LinearSolver,
    SolverStatus,
    _CancelWatcher,
    setup_solver,
)


def pick_one_problem() -> IlpProblem:
    """Maximise 0.1 a + 1.1 b with a + b <= 1."""
    p = IlpProblem(name="tiny")
    p.add_binary("a", 0.1)
    p.add_binary("b", 1.1)
    p.add_constraint("at_most_one", ["a", "b"], lb=0, ub=1)
    return p


@pytest.mark.parametrize(
    "solver",
    [LinearSolver("SCIP"), CpSatSolver(Config(NUM_PARALLEL_WORKERS=1))],
    ids=["scip", "cp-sat"],
)
def test_backends_pick_the_better_variable(solver):
    outcome = solver.solve(pick_one_problem(), time_limit_sec=5.0)
    assert outcome.status is SolverStatus.OPTIMAL
    assert outcome.has_solution
    assert round(outcome.values["a"]) == 0
    assert round(outcome.values["b"]) == 1
    assert outcome.objective_value == pytest.approx(1.1)


def test_cbc_backend():
    outcome = LinearSolver("CBC").solve(pick_one_problem(), time_limit_sec=5.0)
    assert outcome.status is SolverStatus.OPTIMAL
    assert outcome.objective_value == pytest.approx(1.1)


def test_infeasible_problem():
    p = pick_one_problem()
    p.add_constraint("both", ["a", "b"], lb=2, ub=2)
    outcome = LinearSolver("SCIP").solve(p, time_limit_sec=5.0)
    assert outcome.status is SolverStatus.INFEASIBLE
    assert outcome.values == {}
    assert outcome.objective_value is None


def test_problem_check_rejects_unknown_variables():
    p = pick_one_problem()
    p.add_constraint("bad", ["a", "zzz"], lb=0, ub=1)
    with pytest.raises(ValueError, match="undeclared"):
        p.check()


def test_cp_sat_rejects_fractional_constraint_coefficients():
    p = pick_one_problem()
    p.constraints[0].coefs["a"] = 0.5
    with pytest.raises(ValueError, match="integer constraint coefficients"):
        CpSatSolver(Config()).solve(p)


def test_cp_sat_empty_constraint_outside_bounds_is_infeasible():
    p = pick_one_problem()
    p.add_constraint("empty", [], lb=1, ub=1)
    outcome = CpSatSolver(Config()).solve(p)
    assert outcome.status is SolverStatus.INFEASIBLE


@pytest.mark.parametrize("solver", [LinearSolver(), CpSatSolver(Config())])
def test_preset_cancel_skips_the_solve(solver):
    cancel = threading.Event()
    cancel.set()
    outcome = solver.solve(pick_one_problem(), cancel=cancel)
    assert outcome.status is SolverStatus.UNDEFINED
    assert outcome.detail == "CANCELLED"
    assert not outcome.has_solution


def test_cancel_watcher_calls_interrupt():
    cancel = threading.Event()
    interrupted = threading.Event()
    with _CancelWatcher(cancel, interrupted.set) as watcher:
        cancel.set()
        assert interrupted.wait(2.0)
    assert watcher.interrupted


def test_cancel_watcher_without_event_is_inert():
    with _CancelWatcher(None, lambda: None) as watcher:
        pass
    assert not watcher.interrupted


def test_setup_solver_follows_backend():
    assert isinstance(setup_solver(Config(SOLVER_BACKEND="CP-SAT")), CpSatSolver)
    lin = setup_solver(Config(SOLVER_BACKEND="CBC"))
    assert isinstance(lin, LinearSolver)
    assert lin.backend == "CBC"
