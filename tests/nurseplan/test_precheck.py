import io

import pytest

from nurseplan.config import Config
from nurseplan.errors import InfeasibleDemandError
from nurseplan.generators import HeuristicScheduleGenerator, IlpScheduleGenerator
from nurseplan.input_data import NursePreference, ShiftRequirement, build_input
from nurseplan.precheck import ensure_schedule_possible, precheck_capacity
from nurseplan.week import DAYS, DayOfWeek, ShiftType


def six_day_shifts() -> list[ShiftRequirement]:
    return [ShiftRequirement(day, ShiftType.DAY, 1) for day in DAYS[:6]]


def test_gate_rejects_demand_above_capacity():
    with pytest.raises(InfeasibleDemandError) as excinfo:
        ensure_schedule_possible(six_day_shifts(), [NursePreference(1)], max_shifts=5)
    assert str(excinfo.value) == "Schedule is not possible. 6 shifts needed, 5 shifts available"
    assert excinfo.value.required == 6
    assert excinfo.value.capacity == 5


def test_gate_accepts_demand_equal_to_capacity():
    ensure_schedule_possible(six_day_shifts()[:5], [NursePreference(1)], max_shifts=5)


def test_gate_ignores_per_day_distribution():
    # two shifts on the same day for one nurse passes the aggregate gate
    reqs = [
        ShiftRequirement(DayOfWeek.MONDAY, ShiftType.DAY, 1),
        ShiftRequirement(DayOfWeek.MONDAY, ShiftType.NIGHT, 1),
    ]
    ensure_schedule_possible(reqs, [NursePreference(1)], max_shifts=5)


@pytest.mark.parametrize("generator_cls", [HeuristicScheduleGenerator, IlpScheduleGenerator])
def test_generators_fail_before_scheduling(generator_cls):
    with pytest.raises(InfeasibleDemandError):
        generator_cls(six_day_shifts(), [NursePreference(1)], cfg=Config())


def test_precheck_capacity_reports_day_shortfalls():
    data = build_input(
        [
            ShiftRequirement(DayOfWeek.MONDAY, ShiftType.DAY, 2),
            ShiftRequirement(DayOfWeek.MONDAY, ShiftType.NIGHT, 1),
        ],
        [NursePreference(1), NursePreference(2)],
    )
    out = io.StringIO()
    cap, dem, ok_cap, shortfalls = precheck_capacity(data, Config(), stream=out)

    assert (cap, dem, ok_cap) == (10, 3, True)
    assert shortfalls == [(DayOfWeek.MONDAY, 3, 2)]
    text = out.getvalue()
    assert "✅ Capacity = 10 shifts | required = 3 | OK" in text
    assert "❌ monday" in text


def test_precheck_capacity_quiet_mode():
    data = build_input(six_day_shifts(), [NursePreference(1)])
    out = io.StringIO()
    cap, dem, ok_cap, _ = precheck_capacity(data, Config(), verbose=False, stream=out)
    assert (cap, dem, ok_cap) == (5, 6, False)
    assert out.getvalue() == ""
