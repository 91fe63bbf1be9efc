"""Experiment layer: experiment files, the batch runner and the CSV summary."""

from .config import DEFAULT_SEED, ExperimentSpec, load_experiments, parse_experiment_line, read_experiment_lines
from .results import default_output_path, summary_row, summary_text, write_summary_csv
from .runner import ExperimentResult, TrialFailure, experiment_streams, run_experiment, run_experiments

__all__ = [
    "DEFAULT_SEED",
    "ExperimentResult",
    "ExperimentSpec",
    "TrialFailure",
    "default_output_path",
    "experiment_streams",
    "load_experiments",
    "parse_experiment_line",
    "read_experiment_lines",
    "run_experiment",
    "run_experiments",
    "summary_row",
    "summary_text",
    "write_summary_csv",
]
