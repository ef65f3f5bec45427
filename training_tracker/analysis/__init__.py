"""Analysis module for training plan experiments."""

from .plans import TrainingPlan, predefined_plans, find_plan
from .simulation import (
    ExperimentCancelled,
    ExperimentResult,
    ExperimentRunner,
    PlanSimulation,
    run_batch,
    run_experiment,
    simulate_plan,
)
from .summary import ExperimentSummary, summarize_results

__all__ = [
    "TrainingPlan",
    "predefined_plans",
    "find_plan",
    "ExperimentCancelled",
    "ExperimentResult",
    "ExperimentRunner",
    "PlanSimulation",
    "run_batch",
    "run_experiment",
    "simulate_plan",
    "ExperimentSummary",
    "summarize_results",
]
