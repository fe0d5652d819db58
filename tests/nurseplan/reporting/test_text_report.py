from __future__ import annotations

import io
from datetime import date

from nurseplan.config import Config
from nurseplan.input_data import NursePreference, ShiftRequirement, build_input
from nurseplan.reporting.text_report import render_comparison, render_text_report
from nurseplan.result_types import (
    SchedulingAlgorithm,
    ScheduleResult,
    ShiftAssignment,
    Understaffing,
)
from nurseplan.week import DayOfWeek, ShiftType

MON = DayOfWeek.MONDAY
DAY, NIGHT = ShiftType.DAY, ShiftType.NIGHT


def make_data():
    return build_input(
        [ShiftRequirement(MON, DAY, 1), ShiftRequirement(MON, NIGHT, 1)],
        [NursePreference(1), NursePreference(2)],
    )


def make_result(alg=SchedulingAlgorithm.ILP, shifts=None, understaffed=None):
    if shifts is None:
        shifts = [
            ShiftAssignment(1, date(2024, 1, 1), MON, DAY),
            ShiftAssignment(2, date(2024, 1, 1), MON, NIGHT),
        ]
    return ScheduleResult(
        algorithm=alg,
        shifts=shifts,
        status_name="OPTIMAL",
        objective_value=0.2,
        understaffed=understaffed or [],
    )


def test_text_report_for_clean_schedule():
    out = io.StringIO()
    render_text_report(make_result(), make_data(), Config(), stream=out)
    text = out.getvalue()

    assert "=== ILP schedule ===" in text
    assert "Status: OPTIMAL | shifts assigned: 2 | required: 2 | objective: 0.20" in text
    assert "✅ No hard-rule violations." in text
    assert "Coverage by slot:" in text
    assert "Shifts per nurse" in text


def test_text_report_lists_violations_and_gaps():
    res = make_result(
        alg=SchedulingAlgorithm.HEURISTIC,
        shifts=[ShiftAssignment(1, date(2024, 1, 1), MON, DAY)],
        understaffed=[Understaffing(MON, NIGHT, required=1, assigned=0)],
    )
    out = io.StringIO()
    render_text_report(res, make_data(), stream=out, show_slots=False)
    text = out.getvalue()

    assert "❌ Violations" in text
    assert "staffing mismatches=1" in text
    assert "monday night: 0/1 nurses (short by 1)" in text
    assert "Coverage by slot:" not in text


def test_comparison_table():
    out = io.StringIO()
    results = [make_result(SchedulingAlgorithm.HEURISTIC), make_result()]
    df = render_comparison(results, make_data(), stream=out)

    assert df["algorithm"].tolist() == ["heuristic", "ilp"]
    assert list(df.columns) == [
        "algorithm",
        "status",
        "shifts",
        "pref_match_rate",
        "workload_std",
        "violations",
    ]
    assert df["violations"].tolist() == [0, 0]
    assert "Algorithm comparison:" in out.getvalue()
