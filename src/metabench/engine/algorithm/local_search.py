"""Iterated (repeated) local search.

Hill climbing moves to the best neighbor only when it beats ``running_best``,
the lowest raw fitness accepted by any climb of this run. Because the value
carries over between restarts, later climbs only move when they improve on
everything seen so far. Restart vectors after the first are fresh uniform
samples, independent of the previous local optimum.
"""

from __future__ import annotations

import logging

import numpy as np

from metabench.foundation.rng import RandomSource
from metabench.engine.population import Population
from .base import Objective, StrategyResult
from .config import LocalSearchConfig

__all__ = ["IteratedLocalSearch"]


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


class IteratedLocalSearch:
    def __init__(self, config: LocalSearchConfig, objective: Objective, rng: RandomSource) -> None:
        config.validate()
        self.cfg = config
        self.objective = objective
        self.rng = rng
        self.running_best: float | None = None
        self.moves = 0

    def local_search(self, start: np.ndarray, population: Population, neighborhood_size: int) -> np.ndarray:
        """Climb from ``start`` until no neighbor improves on ``running_best``."""
        current = np.asarray(start, dtype=float)
        m = current.shape[0]
        while True:
            neighbors = population.sample_neighborhood(neighborhood_size, m, current, self.rng)
            F = self.objective.batch(neighbors)
            j = int(np.argmin(F))
            if self.running_best is not None and not F[j] < self.running_best:
                return current
            self.running_best = float(F[j])
            current = neighbors[j]
            self.moves += 1

    def run(self, population: Population, start: np.ndarray) -> StrategyResult:
        restarts = self.cfg.restarts or population.size
        neighborhood_size = self.cfg.neighborhood_size or population.size
        m = population.dimension

        global_best = np.array(start, dtype=float, copy=True)
        global_f = self.objective(global_best)
        restart = global_best
        for _ in range(restarts):
            local = self.local_search(restart, population, neighborhood_size)
            local_f = self.objective(local)
            if local_f < global_f:
                global_best, global_f = local, local_f
            restart = population.sample_vector(m, self.rng)

        _logger().debug(
            "[ILS] %d restarts, %d moves, best f=%.6g",
            restarts,
            self.moves,
            global_f,
        )
        return StrategyResult(
            solution=global_best.copy(),
            fitness=global_f,
            evaluations=self.objective.evaluations,
            stats={"restarts": restarts, "moves": self.moves},
        )
