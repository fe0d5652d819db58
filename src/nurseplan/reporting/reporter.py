from __future__ import annotations

import sys
from pathlib import Path
from typing import Sequence

from nurseplan.config import Config
from nurseplan.input_data import InputData
from nurseplan.precheck import precheck_capacity
from nurseplan.result_types import ScheduleResult

from .plots import plot_coverage_heatmap, plot_shifts_per_nurse
from .text_report import render_comparison, render_text_report


class Reporter:
    """High-level orchestrator: runs the capacity pre-check and renders reports."""

    def __init__(
        self,
        cfg: Config,
        enable_plots: bool = False,
        show_plots: bool = False,
        out_dir: Path = Path("outputs"),
        stream=None,
    ) -> None:
        self.cfg = cfg
        self.enable_plots = enable_plots
        self.show_plots = show_plots
        self.out_dir = out_dir
        self.stream = stream or sys.stdout

    def pre_solve(self, data: InputData) -> bool:
        """Print the pre-check and return whether aggregate capacity suffices."""
        _cap, _dem, ok_cap, _short = precheck_capacity(
            data, self.cfg, verbose=True, stream=self.stream
        )
        return ok_cap

    def render_text_report(self, result: ScheduleResult, data: InputData) -> None:
        render_text_report(result, data, self.cfg, stream=self.stream)

    def post_solve(self, results: Sequence[ScheduleResult], data: InputData) -> None:
        """Render one text report per result, the comparison table and optional plots."""
        for res in results:
            self.render_text_report(res, data)
        if len(results) > 1:
            render_comparison(results, data, self.cfg, stream=self.stream)

        if not self.enable_plots:
            return
        for res in results:
            plot_coverage_heatmap(res, data, out_dir=self.out_dir, show=self.show_plots)
        plot_shifts_per_nurse(results, data, out_dir=self.out_dir, show=self.show_plots)
