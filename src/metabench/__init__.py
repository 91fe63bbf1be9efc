"""metabench: single-objective metaheuristics on classic benchmark functions.

Typical use::

    from metabench import ExperimentSpec, run_experiment

    spec = ExperimentSpec(strategy="de", method="best1", crossover="bin", dimension=10,
                          population_size=30, function_id="rastrigin", bound=5.12, trials=5)
    result = run_experiment(spec, seed=7)
"""

from .engine import (
    BlindSearchConfig,
    CrossoverFamily,
    DEConfig,
    DEMethod,
    LocalSearchConfig,
    OptimizationEngine,
    PSOConfig,
    Population,
    StrategyKind,
    TrialResult,
)
from .experiment import ExperimentResult, ExperimentSpec, load_experiments, run_experiment, run_experiments, write_summary_csv
from .foundation.exceptions import ConfigurationError, MetabenchError, OptimizationError
from .foundation.logging import configure_metabench_logging
from .foundation.problem import BenchmarkProblem, FunctionId, evaluate, evaluate_batch
from .foundation.rng import RandomSource
from .scheduling import neh_schedule

__version__ = "0.1.0"

__all__ = [
    "BenchmarkProblem",
    "BlindSearchConfig",
    "ConfigurationError",
    "CrossoverFamily",
    "DEConfig",
    "DEMethod",
    "ExperimentResult",
    "ExperimentSpec",
    "FunctionId",
    "LocalSearchConfig",
    "MetabenchError",
    "OptimizationEngine",
    "OptimizationError",
    "PSOConfig",
    "Population",
    "RandomSource",
    "StrategyKind",
    "TrialResult",
    "configure_metabench_logging",
    "evaluate",
    "evaluate_batch",
    "load_experiments",
    "neh_schedule",
    "run_experiment",
    "run_experiments",
    "write_summary_csv",
    "__version__",
]
