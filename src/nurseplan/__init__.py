from .config import Config, cfg
from .input_data import InputData, build_input
from .main import generate_schedule, run_scheduler
from .result_types import ScheduleResult, SchedulingAlgorithm

__all__ = [
    "Config",
    "cfg",
    "InputData",
    "build_input",
    "generate_schedule",
    "run_scheduler",
    "ScheduleResult",
    "SchedulingAlgorithm",
]
