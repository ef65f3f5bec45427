"""Highlights across the results of one experiment batch."""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from .simulation import ExperimentResult


@dataclass(frozen=True)
class ExperimentSummary:
    """Best plan by each criterion."""
    best_overall: ExperimentResult
    most_stable: ExperimentResult
    safest: ExperimentResult


def summarize_results(results: Sequence[ExperimentResult]) -> Optional[ExperimentSummary]:
    """Pick the best, most stable and safest plan. Ties go to the earlier result."""
    if not results:
        return None

    return ExperimentSummary(
        best_overall=max(results, key=lambda r: r.average_fitness),
        most_stable=max(results, key=lambda r: r.stability),
        safest=min(results, key=lambda r: r.burnout_probability),
    )


def describe(summary: ExperimentSummary) -> List[str]:
    return [
        f"Best average form: {summary.best_overall.plan_name} ({summary.best_overall.average_fitness:.1f})",
        f"Highest stability: {summary.most_stable.plan_name} ({summary.most_stable.stability:.2f})",
        f"Lowest burnout risk: {summary.safest.plan_name} ({summary.safest.burnout_probability * 100:.1f}%)",
    ]
