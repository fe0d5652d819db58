from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from pathlib import Path
from typing import Any, Callable, Iterable, Optional

from nurseplan.config import Config, cfg
from nurseplan.generate.preferences import (
    PreferenceGenConfig,
    create_nurse_preferences,
    default_requirements,
)
from nurseplan.generators import (
    HeuristicScheduleGenerator,
    IlpScheduleGenerator,
    ScheduleGenerator,
)
from nurseplan.input_data import InputData, build_input
from nurseplan.progress import MinimalProgress
from nurseplan.reporting import Reporter
from nurseplan.result_types import SchedulingAlgorithm, ScheduleResult
from nurseplan.solver import MipSolver, setup_solver
from nurseplan.store import ScheduleStore

InputBuilder = Callable[[Config], InputData]


def default_input_builder(config: Config) -> InputData:
    """Build synthetic input data using the project's helper."""
    seed = config.SEED if config.SEED is not None else 42
    nurses = create_nurse_preferences(PreferenceGenConfig(n=10, seed=seed))
    return build_input(default_requirements(day_nurses=3, night_nurses=2), nurses)


def make_generator(
    algorithm: SchedulingAlgorithm | str,
    requirements: Iterable[Any],
    preferences: Iterable[Any],
    config: Optional[Config] = None,
    today: Optional[date] = None,
    solver: Optional[MipSolver] = None,
) -> ScheduleGenerator:
    """Construct the generator for `algorithm`; raises InfeasibleDemandError early."""
    alg = SchedulingAlgorithm(algorithm)
    if alg is SchedulingAlgorithm.ILP:
        return IlpScheduleGenerator(
            requirements, preferences, cfg=config, today=today, solver=solver
        )
    return HeuristicScheduleGenerator(requirements, preferences, cfg=config, today=today)


def generate_schedule(
    algorithm: SchedulingAlgorithm | str,
    requirements: Iterable[Any],
    preferences: Iterable[Any],
    config: Optional[Config] = None,
    today: Optional[date] = None,
    store: Optional[ScheduleStore] = None,
    solver: Optional[MipSolver] = None,
    time_limit_sec: Optional[float] = None,
    cancel: Optional[threading.Event] = None,
) -> ScheduleResult:
    """
    Run one algorithm end to end and save the result when a store is given.
    Failures propagate; nothing is stored for a failed run.
    """
    generator = make_generator(
        algorithm, requirements, preferences, config=config, today=today, solver=solver
    )
    if isinstance(generator, IlpScheduleGenerator):
        result = generator.generate_schedule(time_limit_sec=time_limit_sec, cancel=cancel)
    else:
        result = generator.generate_schedule()
    if store is not None:
        store.save(result)
    return result


def run_scheduler(
    config: Config | None = None,
    data: InputData | None = None,
    input_builder: InputBuilder | None = None,
    today: date | None = None,
    store: ScheduleStore | None = None,
    reporter: Reporter | None = None,
    validate_config: bool = True,
    enable_reporting: bool = True,
    parallel: bool = False,
    export_dir: Path | None = None,
    cancel: threading.Event | None = None,
) -> list[ScheduleResult]:
    """
    Generate a heuristic and an ILP schedule for the same input.

    Parameters
    ----------
    config:
        The configuration for the run. Defaults to `nurseplan.config.cfg` when omitted.
    data:
        Pre-built `InputData`. When omitted then `input_builder` (or the default synthetic
        builder) is used to construct data from the given config.
    today:
        Reference date both schedules are resolved against. Defaults to
        `config.REFERENCE_DATE`, then the current date.
    store:
        Optional `ScheduleStore`; each result is saved after it is generated.
    reporter:
        Custom reporter instance. When `enable_reporting` is True and no reporter is
        provided, the default `Reporter` is used.
    parallel:
        Run both algorithms on a two-thread pool instead of one after the other.
    export_dir:
        When set, each schedule is written to `schedule_<algorithm>.csv` there.
    cancel:
        Event that interrupts the ILP solve when set.

    Returns
    -------
    list[ScheduleResult]
        `[heuristic_result, ilp_result]`.
    """
    cfg_obj = config or cfg
    if validate_config:
        cfg_obj.validate()

    input_data = data
    if input_data is None:
        builder = input_builder or default_input_builder
        input_data = builder(cfg_obj)

    ref_date = today or cfg_obj.REFERENCE_DATE or date.today()

    active_reporter = reporter if enable_reporting else None
    if active_reporter is None and enable_reporting:
        active_reporter = Reporter(cfg_obj)
    if active_reporter is not None:
        active_reporter.pre_solve(input_data)

    progress = None
    if enable_reporting and cfg_obj.SOLVER_BACKEND == "CP-SAT":
        progress = MinimalProgress(
            cfg_obj.TIME_LIMIT_SEC,
            cfg_obj.LOG_SOLUTIONS_FREQUENCY_SECONDS,
            scale=cfg_obj.OBJECTIVE_SCALE,
            cancel=cancel,
        )
    solver = setup_solver(cfg_obj, progress_cb=progress)

    def _run(alg: SchedulingAlgorithm) -> ScheduleResult:
        return generate_schedule(
            alg,
            input_data.requirements,
            input_data.nurses,
            config=cfg_obj,
            today=ref_date,
            store=store,
            solver=solver,
            cancel=cancel,
        )

    algorithms = [SchedulingAlgorithm.HEURISTIC, SchedulingAlgorithm.ILP]
    if parallel:
        with ThreadPoolExecutor(max_workers=len(algorithms)) as pool:
            results = list(pool.map(_run, algorithms))
    else:
        results = [_run(alg) for alg in algorithms]

    if active_reporter is not None:
        active_reporter.post_solve(results, input_data)

    if export_dir is not None:
        export_schedules(results, export_dir)

    return results


def export_schedules(results: Iterable[ScheduleResult], out_dir: Path) -> list[Path]:
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    paths: list[Path] = []
    for res in results:
        path = out_dir / f"schedule_{res.algorithm.value}.csv"
        res.to_frame().to_csv(path, index=False)
        paths.append(path)
    return paths


def main() -> list[ScheduleResult]:
    """CLI entry point: both algorithms on the default synthetic scenario."""
    return run_scheduler(
        config=cfg,
        validate_config=True,
        input_builder=default_input_builder,
        reporter=Reporter(cfg, enable_plots=True),
        enable_reporting=True,
        export_dir=Path("outputs"),
    )


if __name__ == "__main__":
    main()
