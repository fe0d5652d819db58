from __future__ import annotations

import sys
from typing import Sequence

import pandas as pd

from nurseplan.config import Config
from nurseplan.input_data import InputData
from nurseplan.result_types import ScheduleResult

from .metrics import (
    constraint_violations,
    coverage_by_slot,
    preference_stats,
    shifts_per_nurse,
    workload_spread,
)


def _fmt_pct(x: float, nd: int = 1) -> str:
    return f"{100 * x:.{nd}f}%"


def _fmt_obj(x: float | None) -> str:
    if x is None:
        return "n/a"
    return f"{x:,.2f}"


def _print_workload_histogram(df: pd.DataFrame, stream) -> None:
    if df.empty:
        print("\nShifts per nurse: (no data)", file=stream)
        return
    counts = df["shifts"].value_counts().sort_index()
    print("\nShifts per nurse (nurses at each weekly total):", file=stream)
    for k, n in counts.items():
        bar = "█" * min(int(n), 50)
        print(f"  {k:>2} shifts : {n:>4} nurses  {bar}", file=stream)


def render_text_report(
    result: ScheduleResult,
    data: InputData,
    cfg: Config | None = None,
    *,
    stream=None,
    show_slots: bool = True,
) -> None:
    """Print a summary for a single schedule."""
    stream = stream or sys.stdout
    cfg = cfg or Config()

    print(f"\n=== {result.algorithm.value.upper()} schedule ===", file=stream)
    print(
        f"Status: {result.status_name} | shifts assigned: {len(result.shifts)} "
        f"| required: {data.total_required} | objective: {_fmt_obj(result.objective_value)}",
        file=stream,
    )

    prefs = preference_stats(result, data.nurses)
    if prefs.total:
        print(
            f"Preferences: matched {prefs.matches} ({_fmt_pct(prefs.rate(prefs.matches))}), "
            f"against {prefs.mismatches} ({_fmt_pct(prefs.rate(prefs.mismatches))}), "
            f"neutral {prefs.neutral} ({_fmt_pct(prefs.rate(prefs.neutral))})",
            file=stream,
        )

    spread = workload_spread(result, data.nurses)
    print(
        f"Workload: mean={spread.mean:.2f} std={spread.std:.2f} "
        f"min={spread.min_shifts} max={spread.max_shifts} idle nurses={spread.idle_nurses}",
        file=stream,
    )

    viol = constraint_violations(result, data.requirements, cfg.MAX_SHIFTS_PER_WEEK)
    if viol.total == 0:
        print("✅ No hard-rule violations.", file=stream)
    else:
        print(
            f"❌ Violations: duplicate slot={viol.duplicate_slot_assignments}, "
            f"double-booked days={viol.double_booked_days}, "
            f"over cap={viol.over_cap_nurses}, "
            f"staffing mismatches={viol.staffing_mismatches}",
            file=stream,
        )

    for u in result.understaffed:
        print(
            f"⚠️  {u.day_of_week} {u.shift_type}: {u.assigned}/{u.required} nurses "
            f"(short by {u.deficit})",
            file=stream,
        )

    if show_slots:
        cov = coverage_by_slot(result, data.requirements)
        print("\nCoverage by slot:", file=stream)
        print(cov.to_string(index=False), file=stream)

    _print_workload_histogram(shifts_per_nurse(result, data.nurses), stream)


def render_comparison(
    results: Sequence[ScheduleResult],
    data: InputData,
    cfg: Config | None = None,
    *,
    stream=None,
) -> pd.DataFrame:
    """Print and return one summary row per algorithm."""
    stream = stream or sys.stdout
    cfg = cfg or Config()
    rows = []
    for res in results:
        prefs = preference_stats(res, data.nurses)
        spread = workload_spread(res, data.nurses)
        viol = constraint_violations(res, data.requirements, cfg.MAX_SHIFTS_PER_WEEK)
        rows.append(
            {
                "algorithm": res.algorithm.value,
                "status": res.status_name,
                "shifts": len(res.shifts),
                "pref_match_rate": round(prefs.match_rate, 3),
                "workload_std": round(spread.std, 3),
                "violations": viol.total,
            }
        )
    df = pd.DataFrame(rows)
    print("\nAlgorithm comparison:", file=stream)
    print(df.to_string(index=False) if not df.empty else "(no results)", file=stream)
    return df
