from __future__ import annotations

from .data_models import ConstraintViolations, PreferenceStats, WorkloadSpread
from .metrics import (
    constraint_violations,
    coverage_by_slot,
    preference_stats,
    shifts_per_nurse,
    workload_spread,
)
from .reporter import Reporter

__all__ = [
    "Reporter",
    "ConstraintViolations",
    "PreferenceStats",
    "WorkloadSpread",
    "constraint_violations",
    "coverage_by_slot",
    "preference_stats",
    "shifts_per_nurse",
    "workload_spread",
]
