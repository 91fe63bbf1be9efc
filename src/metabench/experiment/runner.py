from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np

from metabench.foundation.exceptions import ConfigurationError, MetabenchError
from metabench.foundation.rng import RandomSource
from metabench.engine.algorithm import GenerationObserver
from metabench.engine.optimizer import OptimizationEngine
from metabench.engine.population import Population
from .config import DEFAULT_SEED, ExperimentSpec

__all__ = ["TrialFailure", "ExperimentResult", "experiment_streams", "run_experiment", "run_experiments"]


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


@dataclass(frozen=True)
class TrialFailure:
    trial_index: int
    reason: str
    error_type: str


@dataclass
class ExperimentResult:
    """Outcome of one experiment; ``fitness[i] is None`` marks a failed or skipped trial."""

    spec: ExperimentSpec
    fitness: list[float | None] = field(default_factory=list)
    solutions: list[np.ndarray | None] = field(default_factory=list)
    trial_times_ns: list[int] = field(default_factory=list)
    failures: list[TrialFailure] = field(default_factory=list)
    error: ConfigurationError | None = None

    @property
    def rejected(self) -> bool:
        return self.error is not None

    @property
    def elapsed_ms(self) -> float:
        return sum(self.trial_times_ns) / 1_000_000

    def completed_fitness(self) -> np.ndarray:
        return np.array([f for f in self.fitness if f is not None], dtype=float)


def experiment_streams(seed: int, position: int, trials: int) -> tuple[RandomSource, list[RandomSource]]:
    """Population stream plus one independent stream per trial."""
    root = RandomSource((seed, position))
    children = root.spawn(trials + 1)
    return children[0], children[1:]


def run_experiment(
    spec: ExperimentSpec,
    *,
    seed: int = DEFAULT_SEED,
    position: int = 0,
    observer: GenerationObserver | None = None,
) -> ExperimentResult:
    """Validate ``spec`` and run its trials, recording results into population slots.

    Configuration errors are raised before any trial runs. A
    :class:`MetabenchError` raised inside one trial is logged and recorded as
    a :class:`TrialFailure`; the remaining trials still run.
    """
    spec.validate()
    effective_seed = spec.seed if spec.seed is not None else seed
    pop_rng, trial_rngs = experiment_streams(effective_seed, position, spec.trials)
    population = Population.initialize(spec.population_size, spec.dimension, spec.bound, pop_rng)
    settings = spec.engine_settings()
    result = ExperimentResult(spec=spec)

    _logger().info("[Experiment] %s", spec.describe())
    for i, rng in enumerate(trial_rngs):
        engine = OptimizationEngine(population, settings, rng, observer=observer)
        start = time.perf_counter_ns()
        try:
            trial = engine.run(spec.strategy, i)
        except MetabenchError as exc:
            result.trial_times_ns.append(time.perf_counter_ns() - start)
            result.failures.append(TrialFailure(i, exc.message, type(exc).__name__))
            result.fitness.append(None)
            result.solutions.append(None)
            _logger().warning(
                "[Experiment] trial %d of %s failed: %s (%s)",
                i,
                spec.describe(),
                exc.message,
                type(exc).__name__,
            )
            continue
        result.trial_times_ns.append(time.perf_counter_ns() - start)
        population.record_result(i, trial.fitness, trial.solution)
        result.fitness.append(trial.fitness)
        result.solutions.append(trial.solution)
        _logger().debug("[Experiment] trial %d f=%.10g", i, trial.fitness)

    _logger().info(
        "[Experiment] %s finished in %.3f ms (%d failed)",
        spec.strategy_label,
        result.elapsed_ms,
        len(result.failures),
    )
    return result


def run_experiments(specs: Sequence[ExperimentSpec], *, seed: int = DEFAULT_SEED) -> list[ExperimentResult]:
    """Run a batch; a rejected experiment is logged and does not stop the others."""
    results = []
    for position, spec in enumerate(specs):
        try:
            results.append(run_experiment(spec, seed=seed, position=position))
        except ConfigurationError as exc:
            _logger().warning("[Experiment] rejected %s: %s", spec.source or spec.describe(), exc.message)
            results.append(ExperimentResult(spec=spec, error=exc))
    return results
