# nurseplan/precheck.py
from __future__ import annotations

import sys
from typing import Sequence, Tuple

from nurseplan.config import Config
from nurseplan.errors import InfeasibleDemandError
from nurseplan.input_data import InputData, NursePreference, ShiftRequirement
from nurseplan.week import DAYS, DayOfWeek


def shift_capacity(nurse_count: int, max_shifts: int) -> int:
    """Upper bound on assignable shifts: every nurse works the weekly cap."""
    return int(nurse_count) * int(max_shifts)


def shift_demand(requirements: Sequence[ShiftRequirement]) -> int:
    return sum(int(r.nurses_required) for r in requirements)


def ensure_schedule_possible(
    requirements: Sequence[ShiftRequirement],
    nurses: Sequence[NursePreference],
    max_shifts: int,
) -> None:
    """
    Aggregate admission gate run before any scheduling work.

    Raises InfeasibleDemandError iff Σ nurses_required > len(nurses) * max_shifts.
    Per-day and per-shift distribution is not considered.
    """
    required = shift_demand(requirements)
    capacity = shift_capacity(len(nurses), max_shifts)
    if required > capacity:
        raise InfeasibleDemandError(required=required, capacity=capacity)


def _day_shortfalls(data: InputData) -> list[Tuple[DayOfWeek, int, int]]:
    """
    Days whose summed requirement (day + night) exceeds the number of nurses.
    With one shift per nurse per day these can never be fully staffed.
    """
    per_day = {d: 0 for d in DAYS}
    for r in data.requirements:
        per_day[r.day_of_week] += int(r.nurses_required)
    n = len(data.nurses)
    return [(d, need, n) for d, need in per_day.items() if need > n]


def precheck_capacity(
    data: InputData,
    cfg: Config,
    *,
    verbose: bool = True,
    stream=None,
) -> Tuple[int, int, bool, list[Tuple[DayOfWeek, int, int]]]:
    """
    Returns:
      cap: shift capacity (nurses * MAX_SHIFTS_PER_WEEK)
      dem: total required shifts
      ok_cap: cap >= dem
      day_shortfalls: list of (day, required_on_day, nurses) where required_on_day > nurses
    Never raises; use ensure_schedule_possible() for the hard gate.
    """
    stream = stream or sys.stdout
    cap = shift_capacity(len(data.nurses), cfg.MAX_SHIFTS_PER_WEEK)
    dem = data.total_required
    ok_cap = cap >= dem
    shortfalls = _day_shortfalls(data)

    if verbose:
        print_precheck_header(cap, dem, ok_cap, stream=stream)
        print_day_shortfalls(shortfalls, stream=stream)

    return cap, dem, ok_cap, shortfalls


def print_precheck_header(cap: int, dem: int, ok_cap: bool, *, stream=sys.stdout) -> None:
    """Print 'Pre-check' on its own line, then capacity line with ✅/❌"""
    print("\nPre-check:\n", file=stream)
    if ok_cap:
        print(f"✅ Capacity = {cap:,} shifts | required = {dem:,} | OK", file=stream)
    else:
        print(f"❌ Capacity = {cap:,} shifts | required = {dem:,} | NOT OK", file=stream)
    print(
        "ℹ️  Pre-check only compares aggregate capacity; the ILP may still be infeasible "
        "because of the one-shift-per-day rule.",
        file=stream,
    )


def print_day_shortfalls(
    shortfalls: list[Tuple[DayOfWeek, int, int]], *, stream=sys.stdout
) -> None:
    """One line per day that needs more nurses than exist."""
    print("\nPer-day check:", file=stream)
    if not shortfalls:
        print("✅ Every day can be staffed with one shift per nurse.", file=stream)
        return
    for day, need, have in shortfalls:
        print(
            f"❌ {day}: requires {need} nurses across shifts, only {have} nurses exist",
            file=stream,
        )
