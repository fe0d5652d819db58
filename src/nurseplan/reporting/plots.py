from __future__ import annotations

from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import LinearSegmentedColormap

from nurseplan.input_data import InputData
from nurseplan.result_types import ScheduleResult
from nurseplan.week import DAYS, ShiftType

from .metrics import coverage_by_slot, shifts_per_nurse


def _save_and_show(fig: plt.Figure, out_dir: Path, filename: str, show: bool) -> Path:
    """Persist the plot under out_dir and optionally show it."""
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / filename
    fig.savefig(path, dpi=fig.dpi, bbox_inches="tight")
    if show:
        plt.show()
    plt.close(fig)
    return path


def plot_coverage_heatmap(
    result: ScheduleResult,
    data: InputData,
    out_dir: Path = Path("outputs"),
    show: bool = False,
) -> Path:
    """Assigned minus required per (shift, day); 0 is exact staffing."""
    cov = coverage_by_slot(result, data.requirements)
    grid = np.zeros((len(ShiftType), len(DAYS)), dtype=int)
    for row in cov.itertuples(index=False):
        s = [t.value for t in ShiftType].index(row.shift_type)
        d = [day.value for day in DAYS].index(row.day_of_week)
        grid[s, d] = int(row.assigned) - int(row.required)

    span = max(1, int(np.abs(grid).max()))
    cmap = LinearSegmentedColormap.from_list(
        "short_exact_over", ["#F87171", "#F8FAFC", "#60A5FA"]
    )
    fig, ax = plt.subplots(figsize=(8, 2.6), dpi=150)
    im = ax.imshow(grid, cmap=cmap, vmin=-span, vmax=span, aspect="auto")
    ax.set_xticks(range(len(DAYS)), [d.value[:3].title() for d in DAYS])
    ax.set_yticks(range(len(ShiftType)), [t.value for t in ShiftType])
    for (s, d), val in np.ndenumerate(grid):
        ax.text(d, s, f"{val:+d}", ha="center", va="center", fontsize=8)
    ax.set_title(f"Staffing vs requirement ({result.algorithm.value})", fontsize=11)
    fig.colorbar(im, ax=ax, fraction=0.025)
    fig.tight_layout()
    return _save_and_show(fig, out_dir, f"coverage_{result.algorithm.value}.png", show)


def plot_shifts_per_nurse(
    results: Sequence[ScheduleResult],
    data: InputData,
    out_dir: Path = Path("outputs"),
    show: bool = False,
) -> Path:
    """Grouped bars of weekly shifts per nurse, one group per algorithm."""
    nurse_ids = data.nurse_ids
    x = np.arange(len(nurse_ids))
    width = 0.8 / max(len(results), 1)

    fig, ax = plt.subplots(figsize=(max(6, 0.4 * len(nurse_ids)), 3.5), dpi=150)
    for i, res in enumerate(results):
        df = shifts_per_nurse(res, data.nurses).set_index("nurse_id")
        vals = [int(df.loc[n, "shifts"]) if n in df.index else 0 for n in nurse_ids]
        ax.bar(x + i * width, vals, width=width, label=res.algorithm.value, alpha=0.85)

    ax.set_xticks(x + width * (len(results) - 1) / 2, [str(n) for n in nurse_ids])
    ax.set_xlabel("Nurse")
    ax.set_ylabel("Shifts this week")
    ax.set_title("Shifts per nurse", fontsize=11)
    for spine in ("top", "right"):
        ax.spines[spine].set_visible(False)
    if results:
        ax.legend(frameon=False)
    fig.tight_layout()
    return _save_and_show(fig, out_dir, "shifts_per_nurse.png", show)
