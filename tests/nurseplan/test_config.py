import pytest

from nurseplan.config import Config, cfg
from nurseplan.week import MAX_SHIFTS_PER_WEEK


def test_default_config_is_valid():
    Config().validate()
    cfg.validate()


@pytest.mark.parametrize(
    "kwargs, match",
    [
        ({"MAX_SHIFTS_PER_WEEK": 0}, "MAX_SHIFTS_PER_WEEK"),
        ({"MAX_SHIFTS_PER_WEEK": 8}, "MAX_SHIFTS_PER_WEEK"),
        ({"SOLVER_BACKEND": "GLPK"}, "SOLVER_BACKEND"),
        ({"TIME_LIMIT_SEC": 0}, "TIME_LIMIT_SEC"),
        ({"NUM_PARALLEL_WORKERS": 0}, "NUM_PARALLEL_WORKERS"),
        ({"OBJECTIVE_SCALE": 0}, "OBJECTIVE_SCALE"),
        ({"AVAILABLE_SCORE": 0}, "AVAILABLE_SCORE"),
        ({"CONSECUTIVE_NIGHT_PENALTY": 5}, "CONSECUTIVE_NIGHT_PENALTY"),
        ({"ANTI_PREFERENCE_PENALTY": 0.3}, "ANTI_PREFERENCE_PENALTY"),
        ({"PREFERENCE_WEIGHT": -1}, "PREFERENCE_WEIGHT"),
    ],
)
def test_validate_rejects(kwargs, match):
    with pytest.raises(ValueError, match=match):
        Config(**kwargs).validate()


def test_weekly_cap_defaults_to_week_constant():
    assert Config().MAX_SHIFTS_PER_WEEK == MAX_SHIFTS_PER_WEEK == 5


def test_unlisted_slots_are_not_pinned_by_default():
    assert Config().ILP_PIN_UNLISTED_SLOTS is False
