# tests/nurseplan/test_progress.py
import re
import threading
from unittest.mock import patch

import pytest
from ortools.sat.python import cp_model

from nurseplan.progress import MinimalProgress


@pytest.fixture
def solver():
    """CpSolver with a short time limit so the test runs fast."""
    s = cp_model.CpSolver()
    s.parameters.max_time_in_seconds = 0.2
    s.parameters.num_workers = 1
    s.parameters.log_search_progress = False
    return s


@pytest.fixture
def mock_print():
    """Patch print in the progress module to capture output."""
    with patch("nurseplan.progress.print") as m:
        yield m


def build_tiny_model():
    """Maximize x + y subject to bounds."""
    m = cp_model.CpModel()
    x = m.NewIntVar(0, 50, "x")
    y = m.NewIntVar(0, 50, "y")
    m.Maximize(x + y)
    return m


def test_progress_callback_prints_fields(solver, mock_print):
    callback = MinimalProgress(time_limit_sec=0.2, log_every_sec=0.0)
    status = solver.SolveWithSolutionCallback(build_tiny_model(), callback)

    assert status in (cp_model.OPTIMAL, cp_model.FEASIBLE)
    assert mock_print.call_count >= 2, "Expected intro plus at least one progress line"

    args, _ = mock_print.call_args
    line = args[0] if args else ""
    for field in ("pct of time limit=", "best=", "bound=", "gap=", "sols="):
        assert field in line
    assert re.match(r"^\[\s*\d+(\.\d+)?s\]\s", line)


def test_progress_divides_by_scale(solver, mock_print):
    callback = MinimalProgress(time_limit_sec=0.2, log_every_sec=0.0, scale=100)
    solver.SolveWithSolutionCallback(build_tiny_model(), callback)

    history = callback.solution_history()
    assert len(history) == callback.sols
    _, best, _ = history[-1]
    assert best == pytest.approx(1.0)


def test_progress_intro_printed_once(solver, mock_print):
    callback = MinimalProgress(time_limit_sec=0.2, log_every_sec=0.0)
    solver.SolveWithSolutionCallback(build_tiny_model(), callback)
    intros = [c for c in mock_print.call_args_list if "bound: solver upper bound" in c.args[0]]
    assert len(intros) == 1


def test_progress_stops_search_when_cancelled(solver, mock_print):
    cancel = threading.Event()
    cancel.set()
    callback = MinimalProgress(time_limit_sec=0.2, log_every_sec=0.0, cancel=cancel)
    status = solver.SolveWithSolutionCallback(build_tiny_model(), callback)
    assert status in (cp_model.OPTIMAL, cp_model.FEASIBLE)
    assert callback.sols >= 1
