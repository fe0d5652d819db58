from .base import ScheduleGenerator
from .heuristic import HeuristicScheduleGenerator, score_nurse
from .ilp import IlpScheduleGenerator, build_problem

__all__ = [
    "ScheduleGenerator",
    "HeuristicScheduleGenerator",
    "IlpScheduleGenerator",
    "build_problem",
    "score_nurse",
]
