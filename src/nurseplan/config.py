from dataclasses import dataclass
from datetime import date
from typing import Optional

from nurseplan.week import MAX_SHIFTS_PER_WEEK as WEEKLY_SHIFT_CAP

SOLVER_BACKENDS = ("SCIP", "CBC", "CP-SAT")


@dataclass
class Config:

    # Weekly cap on shifts per nurse
    MAX_SHIFTS_PER_WEEK: int = WEEKLY_SHIFT_CAP

    ### HEURISTIC SCORES (higher is better) ###

    AVAILABLE_SCORE: float = 100.0
    CONSECUTIVE_NIGHT_PENALTY: float = -10.0
    PREFERENCE_MATCH_SCORE: float = 15.0
    NO_PREFERENCE_SCORE: float = 0.0
    ANTI_PREFERENCE_SCORE: float = -2.0
    FAIR_DISTRIBUTION_SCORE: float = 1.0

    # True keeps the legacy selection: take the top N scores even when
    # some of them are -inf (unavailable nurses).
    LEGACY_TOP_N: bool = False

    ### ILP OBJECTIVE WEIGHTS ###

    BASE_ASSIGNMENT_WEIGHT: float = 0.1
    PREFERENCE_WEIGHT: float = 1.0
    ANTI_PREFERENCE_PENALTY: float = -0.2

    # Opt-in: pin slots that have no requirement to zero staff
    ILP_PIN_UNLISTED_SLOTS: bool = False

    ### SOLVER SETUP ###

    SOLVER_BACKEND: str = "SCIP"
    TIME_LIMIT_SEC: float = 30.0
    NUM_PARALLEL_WORKERS: int = 4
    LOG_SOLUTIONS_FREQUENCY_SECONDS: float = 5.0

    # CP-SAT needs integer objective coefficients
    OBJECTIVE_SCALE: int = 1000

    # Date the week is resolved against; None = today
    REFERENCE_DATE: Optional[date] = None

    # RANDOM SEED
    SEED: Optional[int] = None

    def validate(self):
        """
        Validate the Config object has sensible values before scheduling.
        """
        if self.MAX_SHIFTS_PER_WEEK <= 0:
            raise ValueError("MAX_SHIFTS_PER_WEEK must be > 0.")
        if self.MAX_SHIFTS_PER_WEEK > 7:
            raise ValueError("MAX_SHIFTS_PER_WEEK cannot exceed one shift per day.")
        if self.SOLVER_BACKEND not in SOLVER_BACKENDS:
            raise ValueError(f"SOLVER_BACKEND must be one of {SOLVER_BACKENDS}.")
        if self.TIME_LIMIT_SEC <= 0.0:
            raise ValueError("TIME_LIMIT_SEC must be > 0.")
        if self.NUM_PARALLEL_WORKERS <= 0:
            raise ValueError("NUM_PARALLEL_WORKERS must be > 0.")
        if self.OBJECTIVE_SCALE <= 0:
            raise ValueError("OBJECTIVE_SCALE must be > 0.")
        if self.AVAILABLE_SCORE <= 0:
            raise ValueError("AVAILABLE_SCORE must be > 0.")
        for attr in (
            "CONSECUTIVE_NIGHT_PENALTY",
            "ANTI_PREFERENCE_SCORE",
            "ANTI_PREFERENCE_PENALTY",
        ):
            if getattr(self, attr) > 0:
                raise ValueError(f"{attr} must be <= 0.")
        if self.PREFERENCE_WEIGHT < 0 or self.BASE_ASSIGNMENT_WEIGHT < 0:
            raise ValueError("PREFERENCE_WEIGHT and BASE_ASSIGNMENT_WEIGHT must be >= 0.")


cfg = Config(
    MAX_SHIFTS_PER_WEEK=WEEKLY_SHIFT_CAP,
    SOLVER_BACKEND="SCIP",
    TIME_LIMIT_SEC=30.0,
    NUM_PARALLEL_WORKERS=4,
    LOG_SOLUTIONS_FREQUENCY_SECONDS=5.0,
    SEED=7,
)
