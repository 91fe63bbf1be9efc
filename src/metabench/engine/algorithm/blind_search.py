from __future__ import annotations

import logging

import numpy as np

from metabench.foundation.rng import RandomSource
from metabench.engine.population import Population
from .base import Objective, StrategyResult
from .config import BlindSearchConfig

__all__ = ["BlindSearch"]


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


class BlindSearch:
    """Pure random sampling; keeps the vector with the lowest raw fitness."""

    def __init__(self, config: BlindSearchConfig, objective: Objective, rng: RandomSource) -> None:
        config.validate()
        self.cfg = config
        self.objective = objective
        self.rng = rng
        self.trace: list[float] = []

    def _sample(self, population: Population, m: int) -> tuple[np.ndarray, float]:
        x = population.sample_vector(m, self.rng)
        f = self.objective(x)
        self.trace.append(f)
        return x, f

    def run(self, population: Population) -> StrategyResult:
        iterations = self.cfg.iterations or population.size
        m = population.dimension
        best_x, best_f = self._sample(population, m)
        for _ in range(iterations - 1):
            x, f = self._sample(population, m)
            if f < best_f:
                best_x, best_f = x, f

        _logger().debug("[Blind] %d samples, best f=%.6g", iterations, best_f)
        return StrategyResult(
            solution=best_x,
            fitness=best_f,
            evaluations=self.objective.evaluations,
            stats={"iterations": iterations},
        )
