"""Differential evolution over the shared population matrix.

The population is evolved in place: each trial vector that is at least as
good (by absolute fitness) as its target replaces the target row immediately,
so later targets in the same generation already see the replacement.

Reference:
    Storn, R. and Price, K. (1997). Differential Evolution - A Simple and
    Efficient Heuristic for Global Optimization over Continuous Spaces.
    Journal of Global Optimization 11, pp. 341-359.
"""

from __future__ import annotations

import logging

import numpy as np

from metabench.foundation.exceptions import OptimizationError, PopulationSizeError
from metabench.foundation.rng import RandomSource
from metabench.engine.population import Population
from .base import GenerationObserver, NullObserver, Objective, StrategyResult
from .config import MIN_DE_POPULATION, CrossoverFamily, DEConfig, DEMethod

__all__ = ["DifferentialEvolution", "MAX_CROSSOVER_PASSES", "draw_donors"]

# Upper bound on exponential-crossover passes over one trial vector.
MAX_CROSSOVER_PASSES = 1000


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


def draw_donors(i: int, n: int, rng: RandomSource) -> tuple[int, int, int, int, int]:
    """Draw five donor indices, pairwise distinct and distinct from ``i``.

    The whole tuple is redrawn until the constraint holds.
    """
    if n < MIN_DE_POPULATION:
        raise PopulationSizeError("Differential evolution", n, MIN_DE_POPULATION)
    while True:
        donors = tuple(rng.integer(n) for _ in range(5))
        if i not in donors and len(set(donors)) == 5:
            return donors  # type: ignore[return-value]


def _best_index(abs_fitness: np.ndarray) -> int:
    # last index among ties
    return int(abs_fitness.size - 1 - np.argmin(abs_fitness[::-1]))


class DifferentialEvolution:
    """DE with the best/1, rand/1, rand-to-best/1, best/2 and rand/2 operators.

    Parameters
    ----------
    config : DEConfig
        Operator, crossover family and numeric parameters.
    objective : Objective
        Benchmark function to minimize (compared by absolute value).
    rng : RandomSource
        Stream used for every draw of the run.
    observer : GenerationObserver, optional
        Called after every generation with the best |fitness| and the
        population's |fitness| vector.
    """

    def __init__(
        self,
        config: DEConfig,
        objective: Objective,
        rng: RandomSource,
        observer: GenerationObserver | None = None,
    ) -> None:
        config.validate()
        self.cfg = config
        self.objective = objective
        self.rng = rng
        self.observer = observer or NullObserver()

    def _mutant(
        self,
        X: np.ndarray,
        i: int,
        k: int,
        best: int,
        donors: tuple[int, int, int, int, int],
    ) -> float:
        r1, r2, r3, r4, r5 = donors
        F = self.cfg.f
        method = self.cfg.method
        if method is DEMethod.BEST_1:
            return X[best, k] + F * (X[r1, k] - X[r2, k])
        if method is DEMethod.RAND_1:
            return X[r1, k] + F * (X[r2, k] - X[r3, k])
        if method is DEMethod.RAND_TO_BEST_1:
            return X[i, k] + self.cfg.lam * (X[best, k] - X[i, k]) + F * (X[r1, k] - X[r2, k])
        if method is DEMethod.BEST_2:
            return X[best, k] + F * (X[r1, k] + X[r2, k] - X[r3, k] - X[r4, k])
        if method is DEMethod.RAND_2:
            return X[r5, k] + F * (X[r1, k] + X[r2, k] - X[r3, k] - X[r4, k])
        raise OptimizationError(f"Unhandled DE method {method!r}.")

    def trial_vector(self, X: np.ndarray, i: int, best: int) -> np.ndarray:
        """Build the trial vector for target ``i``.

        ``jrand`` is drawn first, then the donors. Every coordinate consumes
        one uniform draw; coordinate ``jrand`` is mutated regardless of it.
        The binomial family makes one pass; the exponential family repeats
        the pass until at least one coordinate was mutated.
        """
        n, m = X.shape
        jrand = self.rng.integer(m)
        donors = draw_donors(i, n, self.rng)
        u = np.empty(m)
        for _ in range(MAX_CROSSOVER_PASSES):
            crossed = False
            for k in range(m):
                if self.rng.uniform() < self.cfg.cr or k == jrand:
                    u[k] = self._mutant(X, i, k, best, donors)
                    crossed = True
                else:
                    u[k] = X[i, k]
            if crossed or self.cfg.crossover is CrossoverFamily.BIN:
                return u
        raise OptimizationError(
            f"Exponential crossover made no mutation in {MAX_CROSSOVER_PASSES} passes.",
            details={"cr": self.cfg.cr},
        )

    def run(self, population: Population) -> StrategyResult:
        X = population.matrix
        n = X.shape[0]
        if n < MIN_DE_POPULATION:
            raise PopulationSizeError("Differential evolution", n, MIN_DE_POPULATION)

        abs_fitness = np.abs(self.objective.batch(X))
        replacements = 0
        for generation in range(self.cfg.generations):
            for i in range(n):
                best = _best_index(abs_fitness)
                u = self.trial_vector(X, i, best)
                candidate = abs(self.objective(u))
                if candidate <= abs_fitness[i]:
                    X[i, :] = u
                    abs_fitness[i] = candidate
                    replacements += 1
            self.observer.on_generation(generation, float(abs_fitness.min()), abs_fitness.copy())

        best = _best_index(abs_fitness)
        _logger().debug(
            "[DE] %s finished %d generations, best |f|=%.6g, %d replacements",
            self.cfg.label,
            self.cfg.generations,
            abs_fitness[best],
            replacements,
        )
        solution = X[best].copy()
        return StrategyResult(
            solution=solution,
            fitness=self.objective(solution),
            evaluations=self.objective.evaluations,
            stats={"replacements": replacements, "generations": self.cfg.generations},
        )
