# nurseplan/generate/preferences.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from nurseplan.input_data import NursePreference, Preference, ShiftRequirement
from nurseplan.week import DAYS, ShiftType


# ----------------------------
# Configuration container
# ----------------------------
@dataclass(slots=True)
class PreferenceGenConfig:
    """
    Configuration for generation of synthetic nurse preference data.
    """

    n: int = 10

    # Share of nurses who list no preferences at all
    indifferent_pct: float = 0.20

    # Per-slot probability that a non-indifferent nurse asks for it
    pref_prob: float = 0.25

    # Relative weight of night vs day picks for non-indifferent nurses
    night_bias: float = 0.35

    # First nurse id; ids are consecutive
    first_id: int = 1

    # RNG seed
    seed: Optional[int] = 7

    def validate(self) -> None:
        if self.n <= 0:
            raise ValueError("n must be > 0.")
        for attr in ("indifferent_pct", "pref_prob", "night_bias"):
            val = getattr(self, attr)
            if not (0.0 <= val <= 1.0):
                raise ValueError(f"{attr} must be in [0,1].")
        if self.seed is not None and not isinstance(self.seed, int):
            raise ValueError("seed must be an int or None.")


def create_nurse_preferences(gen_cfg: PreferenceGenConfig) -> list[NursePreference]:
    """
    Draw one NursePreference per nurse.

    Non-indifferent nurses pick each day with probability `pref_prob` and then
    one shift type for that day (night with probability `night_bias`). A nurse
    that ends up with nothing gets one random slot so the indifferent share stays
    what was asked for.
    """
    gen_cfg.validate()
    rng = np.random.default_rng(gen_cfg.seed)

    out: list[NursePreference] = []
    for i in range(gen_cfg.n):
        nurse_id = gen_cfg.first_id + i
        if rng.random() < gen_cfg.indifferent_pct:
            out.append(NursePreference(nurse_id=nurse_id, preferences=()))
            continue

        picks = rng.random(len(DAYS)) < gen_cfg.pref_prob
        if not picks.any():
            picks[int(rng.integers(len(DAYS)))] = True
        nights = rng.random(len(DAYS)) < gen_cfg.night_bias

        prefs = tuple(
            Preference(
                day_of_week=day,
                shift_type=ShiftType.NIGHT if nights[d] else ShiftType.DAY,
            )
            for d, day in enumerate(DAYS)
            if picks[d]
        )
        out.append(NursePreference(nurse_id=nurse_id, preferences=prefs))
    return out


def default_requirements(
    day_nurses: int = 2,
    night_nurses: int = 1,
    weekend: Optional[Tuple[int, int]] = None,
) -> list[ShiftRequirement]:
    """
    One requirement per (day, shift) slot of the week.
    `weekend=(day, night)` overrides the counts for Saturday and Sunday.
    """
    reqs: list[ShiftRequirement] = []
    for idx, day in enumerate(DAYS):
        d_n, n_n = (day_nurses, night_nurses)
        if weekend is not None and idx >= 5:
            d_n, n_n = weekend
        reqs.append(ShiftRequirement(day, ShiftType.DAY, int(d_n)))
        reqs.append(ShiftRequirement(day, ShiftType.NIGHT, int(n_n)))
    return reqs
