"""CSV export of experiment results and the workout log."""

import logging
from datetime import date
from pathlib import Path
from typing import Sequence, Union

import pandas as pd

from .analysis.simulation import ExperimentResult
from .analysis.summary import ExperimentSummary
from .config import config
from .journal import TrainingSession

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

EXPERIMENT_COLUMNS = ["Plan", "Average form", "95% form", "Burnout probability (%)", "Stability"]
SESSION_COLUMNS = ["Date", "Type", "Duration (min)", "Intensity", "Notes"]


class ExportError(OSError):
    """Raised when a report cannot be written."""


def default_report_name(today: date = None) -> str:
    """Get the suggested file name for an experiment report."""
    today = today or date.today()
    return f"experiment-report-{today:%Y%m%d}.csv"


def experiment_frame(results: Sequence[ExperimentResult]) -> pd.DataFrame:
    """Format results the way they are exported (invariant, fixed decimals)."""
    return pd.DataFrame(
        [
            [
                r.plan_name,
                f"{r.average_fitness:.1f}",
                f"{r.fitness_percentile_95:.1f}",
                f"{r.burnout_probability * 100:.1f}",
                f"{r.stability:.2f}",
            ]
            for r in results
        ],
        columns=EXPERIMENT_COLUMNS,
    )


def summary_frame(summary: ExperimentSummary) -> pd.DataFrame:
    best, stable, safest = summary.best_overall, summary.most_stable, summary.safest
    return pd.DataFrame(
        [
            ["Best average form", f"{best.plan_name} ({best.average_fitness:.1f})"],
            ["Most stable plan", f"{stable.plan_name} ({stable.stability:.2f})"],
            ["Safest plan", f"{safest.plan_name} ({safest.burnout_probability * 100:.1f}% burnout)"],
        ],
        columns=["Summary", "Value"],
    )


def csv_escape(value, sep: str = None) -> str:
    """Quote a field only if it contains the delimiter, doubling inner quotes."""
    sep = sep or config.EXPORT_DELIMITER
    text = str(value)
    if sep in text:
        return '"' + text.replace('"', '""') + '"'
    return text


def write_frame(handle, frame: pd.DataFrame, sep: str) -> None:
    """Write a header line and one line per row of a frame."""
    handle.write(sep.join(csv_escape(column, sep) for column in frame.columns) + "\n")
    for row in frame.itertuples(index=False, name=None):
        handle.write(sep.join(csv_escape(value, sep) for value in row) + "\n")


def write_experiment_report(
    path: PathLike,
    results: Sequence[ExperimentResult],
    summary: ExperimentSummary,
) -> Path:
    """Write the ranked results followed by the summary block.

    Raises:
        ExportError: If the file cannot be written
    """
    path = Path(path)
    sep = config.EXPORT_DELIMITER
    try:
        with path.open("w", encoding="utf-8", newline="") as handle:
            write_frame(handle, experiment_frame(results), sep)
            handle.write("\n")
            write_frame(handle, summary_frame(summary), sep)
    except OSError as e:
        raise ExportError(f"Could not write report to {path}: {e}") from e

    logger.info(f"Experiment report with {len(results)} plans written to {path}")
    return path


def write_sessions_csv(path: PathLike, sessions: Sequence[TrainingSession]) -> Path:
    """Export the workout log.

    Raises:
        ExportError: If the file cannot be written
    """
    path = Path(path)
    df = pd.DataFrame(
        [
            [s.date_formatted, s.type, s.duration_minutes, s.intensity, s.notes]
            for s in sessions
        ],
        columns=SESSION_COLUMNS,
    )
    try:
        with path.open("w", encoding="utf-8", newline="") as handle:
            write_frame(handle, df, config.EXPORT_DELIMITER)
    except OSError as e:
        raise ExportError(f"Could not write sessions to {path}: {e}") from e

    logger.info(f"{len(sessions)} sessions exported to {path}")
    return path
