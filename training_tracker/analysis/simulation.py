"""Monte-Carlo simulation of fitness, fatigue and burnout for training plans.

Every run starts from zero fitness and fatigue and walks day by day through
the plan: a workout happens with probability ``sessions_per_week / 7`` and
adds a randomly perturbed stimulus to both fitness and fatigue, then both
decay. The net score ``fitness - 0.5 * fatigue`` of every simulated day is
pooled across runs and reduced to an ``ExperimentResult``.
"""

import hashlib
import logging
import math
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable, List, Optional

import numpy as np
import pandas as pd

from ..config import config
from .plans import TrainingPlan

logger = logging.getLogger(__name__)

# Model constants
FITNESS_RETENTION = 0.995  # daily fitness carry-over
BURNOUT_FATIGUE_RATIO = 2.2  # fatigue above this multiple of fitness = burnout
FATIGUE_SCORE_WEIGHT = 0.5
PERCENTILE = 0.95


class ExperimentCancelled(RuntimeError):
    """Raised when a batch is cancelled before all plans were simulated."""


@dataclass(frozen=True)
class ExperimentResult:
    """Aggregate statistics of one plan over all simulated runs."""
    plan_name: str
    average_fitness: float
    fitness_percentile_95: float
    burnout_probability: float  # 0-1
    stability: float  # 0-1, share of days with fitness above fatigue


@dataclass(frozen=True, eq=False)
class PlanSimulation:
    """Raw output of the day-by-day loop for one plan.

    ``scores`` holds the net score of every day of every run with shape
    ``(total_days, runs)``. The trajectory arrays have one entry per day.
    """
    plan: TrainingPlan
    weeks: int
    sessions_per_week: int
    runs: int
    scores: np.ndarray
    burnout: np.ndarray  # bool per run
    stability_hits: int
    mean_fitness: np.ndarray
    mean_fatigue: np.ndarray
    min_fitness: np.ndarray
    burnout_share: np.ndarray

    @property
    def total_days(self) -> int:
        return self.weeks * 7

    @property
    def sample_count(self) -> int:
        return int(self.scores.size)


def derive_seed(plan_name: str, weeks: int, sessions_per_week: int, runs: int) -> int:
    """Derive a stable 64-bit seed from the plan name and run parameters."""
    key = f"{plan_name}|{weeks}|{sessions_per_week}|{runs}".encode("utf-8")
    return int.from_bytes(hashlib.sha256(key).digest()[:8], "big")


def _check_preconditions(weeks: int, sessions_per_week: int, runs: int) -> None:
    if weeks < 1:
        raise ValueError(f"weeks must be at least 1, got {weeks}")
    if sessions_per_week < 0:
        raise ValueError(f"sessions_per_week must not be negative, got {sessions_per_week}")
    if runs < 1:
        raise ValueError(f"runs must be at least 1, got {runs}")


def _raise_if_cancelled(cancel_event: Optional[threading.Event], plan: TrainingPlan) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise ExperimentCancelled(f"Experiment cancelled during '{plan.name}'")


def simulate_plan(
    plan: TrainingPlan,
    weeks: int,
    sessions_per_week: int,
    runs: int,
    cancel_event: Optional[threading.Event] = None,
) -> PlanSimulation:
    """Simulate ``runs`` independent trajectories of a plan.

    All runs advance together as numpy vectors, one lane per run. Each lane
    only ever touches its own state, so the result equals running the runs
    one after another and pooling their samples.

    Args:
        plan: Training plan to simulate
        weeks: Plan length in weeks
        sessions_per_week: Expected number of workouts per week
        runs: Number of independent repetitions
        cancel_event: Checked at the start of every simulated week

    Returns:
        PlanSimulation with the per-day samples of every run

    Raises:
        ExperimentCancelled: If cancel_event is set before the last week
    """
    _check_preconditions(weeks, sessions_per_week, runs)

    total_days = weeks * 7
    workout_probability = sessions_per_week / 7
    seed = derive_seed(plan.name, weeks, sessions_per_week, runs)
    rng = np.random.default_rng(seed)
    logger.debug(f"Simulating '{plan.name}' with seed {seed}")

    fitness = np.zeros(runs)
    fatigue = np.zeros(runs)
    burnout = np.zeros(runs, dtype=bool)
    stability_hits = 0

    scores = np.empty((total_days, runs))
    mean_fitness = np.empty(total_days)
    mean_fatigue = np.empty(total_days)
    min_fitness = np.empty(total_days)
    burnout_share = np.empty(total_days)

    for day in range(total_days):
        if day % 7 == 0:
            _raise_if_cancelled(cancel_event, plan)

        # Both uniforms are drawn every day so the stream layout is fixed
        workout_draw, stimulus_draw = rng.random((2, runs))
        workout = workout_draw < workout_probability

        stimulus = plan.base_stimulus * (1 + stimulus_draw * plan.variation - plan.variation / 2)
        stimulus = np.where(workout, stimulus, 0.0)
        fitness = fitness + stimulus * plan.adaptation_rate
        fatigue = fatigue + stimulus * plan.fatigue_rate

        # Stability is sampled after the workout and before decay
        stability_hits += int(np.count_nonzero(fitness > fatigue))

        fatigue = np.maximum(0.0, fatigue - plan.recovery_speed)
        fitness = np.maximum(0.0, fitness * FITNESS_RETENTION)

        burnout |= fatigue > fitness * BURNOUT_FATIGUE_RATIO

        scores[day] = fitness - fatigue * FATIGUE_SCORE_WEIGHT
        mean_fitness[day] = fitness.mean()
        mean_fatigue[day] = fatigue.mean()
        min_fitness[day] = fitness.min()
        burnout_share[day] = burnout.mean()

    return PlanSimulation(
        plan=plan,
        weeks=weeks,
        sessions_per_week=sessions_per_week,
        runs=runs,
        scores=scores,
        burnout=burnout,
        stability_hits=stability_hits,
        mean_fitness=mean_fitness,
        mean_fatigue=mean_fatigue,
        min_fitness=min_fitness,
        burnout_share=burnout_share,
    )


def summarize(simulation: PlanSimulation) -> ExperimentResult:
    """Reduce the pooled day samples of a simulation to summary statistics."""
    samples = np.sort(simulation.scores, axis=None)
    count = samples.size
    # Nearest-rank percentile, no interpolation
    percentile_index = int(math.floor(PERCENTILE * count))

    return ExperimentResult(
        plan_name=simulation.plan.name,
        average_fitness=float(samples.mean()),
        fitness_percentile_95=float(samples[percentile_index]),
        burnout_probability=int(np.count_nonzero(simulation.burnout)) / simulation.runs,
        stability=simulation.stability_hits / (simulation.runs * simulation.total_days),
    )


def run_experiment(
    plan: TrainingPlan,
    weeks: int,
    sessions_per_week: int,
    runs: int,
    cancel_event: Optional[threading.Event] = None,
) -> ExperimentResult:
    """Simulate a single plan and summarize it."""
    logger.info(f"Running experiment for '{plan.name}' ({weeks} weeks, {sessions_per_week}/week, {runs} runs)")
    return summarize(simulate_plan(plan, weeks, sessions_per_week, runs, cancel_event))


def run_batch(
    plans: Iterable[TrainingPlan],
    weeks: int,
    sessions_per_week: int,
    runs: int,
    max_workers: Optional[int] = None,
    cancel_event: Optional[threading.Event] = None,
) -> List[ExperimentResult]:
    """Simulate several plans and rank them by average fitness.

    Args:
        plans: Plans to simulate
        weeks: Plan length in weeks
        sessions_per_week: Expected number of workouts per week
        runs: Number of repetitions per plan
        max_workers: Threads used to simulate plans in parallel (None = sequential)
        cancel_event: Checked before each plan and every simulated week

    Returns:
        One ExperimentResult per plan, highest average fitness first

    Raises:
        ExperimentCancelled: If cancel_event was set before every plan finished
    """
    plans = list(plans)
    _check_preconditions(weeks, sessions_per_week, runs)

    def _run(plan: TrainingPlan) -> ExperimentResult:
        _raise_if_cancelled(cancel_event, plan)
        return run_experiment(plan, weeks, sessions_per_week, runs, cancel_event)

    if max_workers and max_workers > 1 and len(plans) > 1:
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="plan") as pool:
            futures = [pool.submit(_run, plan) for plan in plans]
            try:
                results = [future.result() for future in futures]
            except ExperimentCancelled:
                for future in futures:
                    future.cancel()
                raise
    else:
        results = [_run(plan) for plan in plans]

    return sorted(results, key=lambda r: r.average_fitness, reverse=True)


def daily_trajectory(simulation: PlanSimulation) -> pd.DataFrame:
    """Get per-day averages across all runs of a simulation."""
    return pd.DataFrame({
        'day': np.arange(1, simulation.total_days + 1),
        'fitness': simulation.mean_fitness,
        'fatigue': simulation.mean_fatigue,
        'score': simulation.scores.mean(axis=1),
        'burnout_share': simulation.burnout_share,
    })


def plan_trajectory(
    plan: TrainingPlan,
    weeks: int,
    sessions_per_week: int,
    runs: int,
    cancel_event: Optional[threading.Event] = None,
) -> pd.DataFrame:
    """Simulate a plan and return its per-day averages."""
    return daily_trajectory(simulate_plan(plan, weeks, sessions_per_week, runs, cancel_event))


class ExperimentRunner:
    """Run experiment batches on a background thread.

    The caller submits a batch, keeps its own thread responsive and joins the
    returned future once for the complete, ranked result list.
    """

    def __init__(self, max_workers: Optional[int] = None):
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="experiment")
        self._cancel_event = threading.Event()

    def submit(
        self,
        plans: Iterable[TrainingPlan],
        weeks: int,
        sessions_per_week: int,
        runs: int,
    ) -> "Future[List[ExperimentResult]]":
        """Start a batch and return its future."""
        plans = list(plans)
        self._cancel_event.clear()
        workers = self.max_workers
        if workers is None:
            workers = config.get_simulation_workers(len(plans))
        return self._executor.submit(
            run_batch, plans, weeks, sessions_per_week, runs, workers, self._cancel_event
        )

    def submit_trajectory(
        self,
        plan: TrainingPlan,
        weeks: int,
        sessions_per_week: int,
        runs: int,
    ) -> "Future[pd.DataFrame]":
        """Start a per-day trajectory simulation of one plan."""
        self._cancel_event.clear()
        return self._executor.submit(
            plan_trajectory, plan, weeks, sessions_per_week, runs, self._cancel_event
        )

    def cancel(self):
        """Ask the running work to stop at its next weekly checkpoint."""
        self._cancel_event.set()

    def shutdown(self, wait: bool = True):
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "ExperimentRunner":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
