# tests/conftest.py
from __future__ import annotations

import os
import random
from datetime import date
from pathlib import Path

import numpy as np
import pytest

from nurseplan.config import Config
from nurseplan.generate.preferences import (
    PreferenceGenConfig,
    create_nurse_preferences,
    default_requirements,
)
from nurseplan.input_data import InputData, build_input


# -----------------------------
# Global, deterministic seeding
# -----------------------------
@pytest.fixture(autouse=True, scope="session")
def _seed_everything() -> None:
    """
    Make tests deterministic across runs. If you need a different seed in a test,
    override locally.
    """
    seed = int(os.environ.get("PYTEST_SEED", "1234"))
    os.environ["PYTHONHASHSEED"] = str(seed)
    random.seed(seed)
    np.random.seed(seed)


# -----------------------------
# Path helpers
# -----------------------------
@pytest.fixture(scope="session")
def project_root() -> Path:
    """Repository root (where pyproject.toml lives)."""
    return Path(__file__).resolve().parents[1]


# -----------------------------
# Scheduling fixtures
# -----------------------------
@pytest.fixture
def ref_date() -> date:
    """A Wednesday, so the week wraps around to the following Monday."""
    return date(2024, 1, 3)


@pytest.fixture
def small_cfg(ref_date: date) -> Config:
    return Config(
        TIME_LIMIT_SEC=10.0,
        NUM_PARALLEL_WORKERS=1,
        LOG_SOLUTIONS_FREQUENCY_SECONDS=1.0,
        REFERENCE_DATE=ref_date,
        SEED=3,
    )


@pytest.fixture
def synthetic_input() -> InputData:
    """Ten nurses, three day and two night nurses every day (35 shifts)."""
    nurses = create_nurse_preferences(PreferenceGenConfig(n=10, seed=3))
    return build_input(default_requirements(day_nurses=3, night_nurses=2), nurses)
