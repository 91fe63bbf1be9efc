"""Runs one search strategy for one trial of an experiment."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from metabench.foundation.exceptions import OptimizationError, PopulationSizeError
from metabench.foundation.problem import FunctionId, evaluate, get_function_spec, resolve_function_id
from metabench.foundation.rng import RandomSource
from .algorithm import (
    MIN_DE_POPULATION,
    BlindSearch,
    BlindSearchConfig,
    DEConfig,
    DifferentialEvolution,
    GenerationObserver,
    IteratedLocalSearch,
    LocalSearchConfig,
    Objective,
    ParticleSwarm,
    PSOConfig,
    StrategyKind,
    StrategyResult,
)
from .population import Population

__all__ = ["EngineSettings", "TrialResult", "OptimizationEngine"]


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineSettings:
    """Function to minimize plus the parameters of every strategy."""

    function_id: FunctionId
    de: DEConfig = field(default_factory=DEConfig)
    pso: PSOConfig = field(default_factory=PSOConfig)
    blind_search: BlindSearchConfig = field(default_factory=BlindSearchConfig)
    local_search: LocalSearchConfig = field(default_factory=LocalSearchConfig)

    def __post_init__(self) -> None:
        object.__setattr__(self, "function_id", resolve_function_id(self.function_id))

    def validate(self, strategy: StrategyKind, population: Population) -> None:
        """Check everything a run of ``strategy`` needs before it starts."""
        get_function_spec(self.function_id).check_dimension(population.dimension)
        if strategy is StrategyKind.DE:
            self.de.validate()
            if population.size < MIN_DE_POPULATION:
                raise PopulationSizeError("Differential evolution", population.size, MIN_DE_POPULATION)
        elif strategy is StrategyKind.PSO:
            self.pso.validate()
            if self.pso.swarm_size is not None and self.pso.swarm_size > population.size:
                raise PopulationSizeError("Particle swarm", population.size, self.pso.swarm_size)
        elif strategy is StrategyKind.BLIND_SEARCH:
            self.blind_search.validate()
        elif strategy is StrategyKind.ITERATED_LOCAL_SEARCH:
            self.local_search.validate()
        else:
            raise OptimizationError(f"Unhandled strategy {strategy!r}.")

    def label(self, strategy: StrategyKind) -> str:
        if strategy is StrategyKind.DE:
            return self.de.label
        return strategy.label


@dataclass(frozen=True, eq=False)
class TrialResult:
    strategy: StrategyKind
    trial_index: int
    solution: np.ndarray
    fitness: float
    evaluations: int
    stats: dict = field(default_factory=dict)


class OptimizationEngine:
    """Runs exactly one strategy per call against a shared population.

    Differential evolution evolves ``population.matrix`` in place; the other
    strategies leave the matrix untouched. Blind search and iterated local
    search start from row ``trial_index``.

    Examples
    --------
    >>> rng = RandomSource(7)
    >>> pop = Population.initialize(10, 2, 5.12, rng)
    >>> engine = OptimizationEngine(pop, EngineSettings(FunctionId.SPHERE), rng)
    >>> result = engine.run(StrategyKind.BLIND_SEARCH, trial_index=0)
    >>> result.fitness == engine.fitness()
    True
    """

    def __init__(
        self,
        population: Population,
        settings: EngineSettings,
        rng: RandomSource,
        observer: GenerationObserver | None = None,
    ) -> None:
        self.population = population
        self.settings = settings
        self.rng = rng
        self.observer = observer
        self._result: TrialResult | None = None

    def _dispatch(self, strategy: StrategyKind, trial_index: int, objective: Objective) -> StrategyResult:
        s = self.settings
        if strategy is StrategyKind.DE:
            return DifferentialEvolution(s.de, objective, self.rng, self.observer).run(self.population)
        if strategy is StrategyKind.PSO:
            return ParticleSwarm(s.pso, objective, self.rng, self.observer).run(self.population)
        if strategy is StrategyKind.BLIND_SEARCH:
            return BlindSearch(s.blind_search, objective, self.rng).run(self.population)
        if strategy is StrategyKind.ITERATED_LOCAL_SEARCH:
            start = self.population.row(trial_index)
            return IteratedLocalSearch(s.local_search, objective, self.rng).run(self.population, start)
        raise OptimizationError(f"Unhandled strategy {strategy!r}.")

    def run(self, strategy: StrategyKind | int | str, trial_index: int) -> TrialResult:
        kind = StrategyKind.parse(strategy)
        if not 0 <= trial_index < self.population.size:
            raise IndexError(f"trial_index {trial_index} is outside [0, {self.population.size}).")
        self.settings.validate(kind, self.population)

        objective = Objective(self.settings.function_id)
        outcome = self._dispatch(kind, trial_index, objective)
        solution = np.asarray(outcome.solution, dtype=float).copy()
        fitness = evaluate(solution, self.settings.function_id)
        self._result = TrialResult(
            strategy=kind,
            trial_index=trial_index,
            solution=solution,
            fitness=fitness,
            evaluations=outcome.evaluations,
            stats=dict(outcome.stats),
        )
        _logger().debug(
            "[Engine] trial %d %s: f=%.6g after %d evaluations",
            trial_index,
            self.settings.label(kind),
            fitness,
            outcome.evaluations,
        )
        return self._result

    @property
    def result(self) -> TrialResult:
        if self._result is None:
            raise OptimizationError(
                "No trial has been run yet.",
                suggestion="Call run(strategy, trial_index) first.",
            )
        return self._result

    def solution(self) -> np.ndarray:
        return self.result.solution.copy()

    def fitness(self) -> float:
        return self.result.fitness
