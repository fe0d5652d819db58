import threading
from typing import Optional

from ortools.sat.python import cp_model

INTRO = (
    "\nbest: preference objective of best schedule found so far\n"
    "bound: solver upper bound on the objective\n"
    "gap: bound - best\n"
)


class MinimalProgress(cp_model.CpSolverSolutionCallback):
    """
    Logs each improving ILP schedule found by CP-SAT, at most once per `log_every_sec`.

    Objective values are divided by `scale` (the integer scaling applied to the
    preference weights) before printing. When `cancel` is set the search stops at the
    next solution.
    """

    def __init__(
        self,
        time_limit_sec: float,
        log_every_sec: float = 5.0,
        scale: float = 1.0,
        cancel: Optional[threading.Event] = None,
    ):
        super().__init__()
        self.time_limit = float(time_limit_sec) if time_limit_sec and time_limit_sec > 0 else None
        self.log_every = float(log_every_sec)
        self.scale = float(scale) if scale else 1.0
        self.cancel = cancel
        self.sols = 0
        self.history: list[tuple[float, float, float]] = []
        self._last_logged = -1.0
        self._best_width = 0
        self._intro_done = False

    def _pct_of_limit(self, now: float) -> str:
        if not self.time_limit:
            return "  n/a "
        return f"{min(100.0, 100.0 * now / self.time_limit):6.2f}%"

    def _format_line(self, now: float, best: float, bound: float) -> str:
        best_str = f"{best:,.2f}"
        self._best_width = max(self._best_width, len(best_str))
        return (
            f"[{now:5.1f}s] pct of time limit={self._pct_of_limit(now)} "
            f"| best={best_str.ljust(self._best_width)} | bound={bound:,.2f} "
            f"| gap={bound - best:,.2f} | sols={self.sols:<5d}"
        )

    def OnSolutionCallback(self):
        if not self._intro_done:
            print(INTRO)
            self._intro_done = True

        self.sols += 1
        now = self.WallTime()
        best = self.ObjectiveValue() / self.scale
        bound = self.BestObjectiveBound() / self.scale
        self.history.append((now, best, bound))

        due = self._last_logged < 0 or (now - self._last_logged) >= self.log_every
        if due:
            print(self._format_line(now, best, bound), flush=True)
            self._last_logged = now

        if self.cancel is not None and self.cancel.is_set():
            self.StopSearch()

    def solution_history(self) -> list[tuple[float, float, float]]:
        """Return collected (wall_time, best_obj, best_bound) tuples."""
        return list(self.history)
