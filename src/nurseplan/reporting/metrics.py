from __future__ import annotations

from collections import Counter
from typing import Sequence

import numpy as np
import pandas as pd

from nurseplan.input_data import NursePreference, ShiftRequirement
from nurseplan.result_types import ScheduleResult
from nurseplan.week import DAYS, ShiftType

from .data_models import ConstraintViolations, PreferenceStats, WorkloadSpread

COVERAGE_COLUMNS = ["day_of_week", "shift_type", "required", "assigned", "deficit"]


def coverage_by_slot(
    result: ScheduleResult, requirements: Sequence[ShiftRequirement]
) -> pd.DataFrame:
    """
    One row per (day, shift) of the week in canonical order.
    `required` sums duplicate requirements; `deficit` = max(required - assigned, 0).
    """
    required: Counter = Counter()
    for r in requirements:
        required[(r.day_of_week, r.shift_type)] += int(r.nurses_required)
    assigned = Counter((s.day_of_week, s.shift_type) for s in result.shifts)

    rows = []
    for day in DAYS:
        for shift in ShiftType:
            req = required.get((day, shift), 0)
            got = assigned.get((day, shift), 0)
            rows.append(
                {
                    "day_of_week": day.value,
                    "shift_type": shift.value,
                    "required": req,
                    "assigned": got,
                    "deficit": max(req - got, 0),
                }
            )
    return pd.DataFrame(rows, columns=COVERAGE_COLUMNS)


def preference_stats(
    result: ScheduleResult, nurses: Sequence[NursePreference]
) -> PreferenceStats:
    by_id = {n.nurse_id: n for n in nurses}
    matches = mismatches = neutral = 0
    for s in result.shifts:
        nurse = by_id.get(s.nurse_id)
        if nurse is None or nurse.is_indifferent:
            neutral += 1
        elif nurse.prefers(s.day_of_week, s.shift_type):
            matches += 1
        else:
            mismatches += 1
    return PreferenceStats(matches=matches, mismatches=mismatches, neutral=neutral)


def shifts_per_nurse(
    result: ScheduleResult, nurses: Sequence[NursePreference]
) -> pd.DataFrame:
    """Per-nurse totals (day/night split), busiest first; nurses without shifts included."""
    counts = {n.nurse_id: {"day": 0, "night": 0} for n in nurses}
    for s in result.shifts:
        counts.setdefault(s.nurse_id, {"day": 0, "night": 0})[s.shift_type.value] += 1
    rows = [
        {
            "nurse_id": nid,
            "day": c["day"],
            "night": c["night"],
            "shifts": c["day"] + c["night"],
        }
        for nid, c in counts.items()
    ]
    if not rows:
        return pd.DataFrame(columns=["nurse_id", "day", "night", "shifts"])
    return (
        pd.DataFrame(rows)
        .sort_values(["shifts", "nurse_id"], ascending=[False, True])
        .reset_index(drop=True)
    )


def workload_spread(
    result: ScheduleResult, nurses: Sequence[NursePreference]
) -> WorkloadSpread:
    df = shifts_per_nurse(result, nurses)
    if df.empty:
        return WorkloadSpread(0.0, 0.0, 0, 0, 0)
    vals = df["shifts"].to_numpy(dtype=float)
    return WorkloadSpread(
        mean=float(np.mean(vals)),
        std=float(np.std(vals)),
        min_shifts=int(vals.min()),
        max_shifts=int(vals.max()),
        idle_nurses=int((vals == 0).sum()),
    )


def constraint_violations(
    result: ScheduleResult,
    requirements: Sequence[ShiftRequirement],
    max_shifts: int,
) -> ConstraintViolations:
    per_slot = Counter((s.nurse_id, s.day_of_week, s.shift_type) for s in result.shifts)
    per_day = Counter(
        (nid, day) for (nid, day, _shift) in per_slot.keys()
    )
    per_nurse = Counter(s.nurse_id for s in result.shifts)
    coverage = coverage_by_slot(result, requirements)

    listed = {(r.day_of_week.value, r.shift_type.value) for r in requirements}
    mismatched = sum(
        1
        for row in coverage.itertuples(index=False)
        if (row.day_of_week, row.shift_type) in listed and row.required != row.assigned
    )

    return ConstraintViolations(
        duplicate_slot_assignments=sum(1 for c in per_slot.values() if c > 1),
        double_booked_days=sum(1 for c in per_day.values() if c > 1),
        over_cap_nurses=sum(1 for c in per_nurse.values() if c > max_shifts),
        staffing_mismatches=mismatched,
    )
