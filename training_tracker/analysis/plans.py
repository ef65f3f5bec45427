"""Catalog of training regimens used by the Monte-Carlo experiment."""

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class TrainingPlan:
    """Parameters describing how a training regimen loads the athlete.

    Attributes:
        name: Display name, also part of the simulation seed
        base_stimulus: Nominal training impulse of one workout
        adaptation_rate: Share of the stimulus that becomes fitness
        fatigue_rate: Share of the stimulus that becomes fatigue
        recovery_speed: Fatigue removed per day
        variation: Relative spread of the stimulus (0.2 = +/-10%)
    """
    name: str
    base_stimulus: float
    adaptation_rate: float
    fatigue_rate: float
    recovery_speed: float
    variation: float


_PREDEFINED = (
    TrainingPlan("Base Endurance", 6.0, 0.85, 0.9, 1.5, 0.10),
    TrainingPlan("Balanced Progression", 7.5, 0.9, 1.1, 1.4, 0.12),
    TrainingPlan("High Intensity Block", 10.0, 1.0, 1.6, 1.2, 0.20),
    TrainingPlan("Polarized", 8.0, 0.95, 1.2, 1.6, 0.25),
    TrainingPlan("Recovery Focus", 4.5, 0.8, 0.7, 1.8, 0.08),
)


def predefined_plans() -> List[TrainingPlan]:
    """Get the fixed plan catalog in display order."""
    return list(_PREDEFINED)


def find_plan(name: str) -> TrainingPlan:
    """Look up a catalog plan by name (case-insensitive)."""
    wanted = name.strip().lower()
    for plan in _PREDEFINED:
        if plan.name.lower() == wanted:
            return plan
    raise KeyError(f"Unknown training plan: {name}")
