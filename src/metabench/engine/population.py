"""Candidate population shared by the trials of one experiment."""

from __future__ import annotations

import math

import numpy as np

from metabench.foundation.exceptions import InvalidParameterError, ResultAlreadyRecordedError
from metabench.foundation.rng import RandomSource

__all__ = ["Population"]


def _check_positive_int(name: str, value: int) -> int:
    if isinstance(value, bool) or int(value) != value or value < 1:
        raise InvalidParameterError(name, value, "must be a positive integer")
    return int(value)


def _check_bound(bound: float) -> float:
    bound = float(bound)
    if not math.isfinite(bound) or bound <= 0.0:
        raise InvalidParameterError("range", bound, "must be a positive finite number")
    return bound


class Population:
    """An ``n x m`` candidate matrix sampled from ``[-bound, bound]`` plus per-slot results.

    The matrix is owned by the population and mutated in place by differential
    evolution. The fitness and solution records hold one entry per trial slot;
    ``None`` means the slot has not been recorded yet.

    Parameters
    ----------
    matrix : np.ndarray
        Candidate matrix of shape ``(n, m)``. It is copied.
    bound : float
        Half-width of the sampling domain.
    """

    def __init__(self, matrix: np.ndarray, bound: float) -> None:
        X = np.array(matrix, dtype=float, copy=True)
        if X.ndim != 2 or X.shape[0] < 1 or X.shape[1] < 1:
            raise InvalidParameterError("matrix", X.shape, "must be a non-empty (n, m) matrix")
        self._X = X
        self._bound = _check_bound(bound)
        self._fitness: list[float | None] = [None] * X.shape[0]
        self._solutions: list[np.ndarray | None] = [None] * X.shape[0]

    @classmethod
    def initialize(cls, n: int, m: int, bound: float, rng: RandomSource) -> "Population":
        """Fill an ``n x m`` matrix with uniform draws from ``[-bound, bound]``."""
        n = _check_positive_int("population_size", n)
        m = _check_positive_int("dimension", m)
        bound = _check_bound(bound)
        return cls(rng.uniform_array(-bound, bound, (n, m)), bound)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def matrix(self) -> np.ndarray:
        """Live candidate matrix (rows are independent)."""
        return self._X

    @property
    def bound(self) -> float:
        return self._bound

    @property
    def size(self) -> int:
        return self._X.shape[0]

    @property
    def dimension(self) -> int:
        return self._X.shape[1]

    @property
    def fitness(self) -> tuple[float | None, ...]:
        return tuple(self._fitness)

    @property
    def solutions(self) -> tuple[np.ndarray | None, ...]:
        return tuple(None if s is None else s.copy() for s in self._solutions)

    def row(self, index: int) -> np.ndarray:
        """Return a copy of candidate ``index``."""
        return self._X[index].copy()

    def is_recorded(self, index: int) -> bool:
        return self._fitness[index] is not None

    # ------------------------------------------------------------------
    # Sampling
    # ------------------------------------------------------------------

    def sample_vector(self, m: int, rng: RandomSource) -> np.ndarray:
        """Draw one fresh vector uniformly from ``[-bound, bound]^m``."""
        return rng.uniform_array(-self._bound, self._bound, m)

    def sample_neighborhood(self, count: int, m: int, base: np.ndarray, rng: RandomSource) -> np.ndarray:
        """Perturb ``base`` ``count`` times and clamp into the domain.

        Each coordinate becomes ``base[j] + uniform(-bound, bound)``. The step
        spans the full domain width and does not shrink between calls.
        """
        base = np.asarray(base, dtype=float)
        if base.shape != (m,):
            raise InvalidParameterError("base", base.shape, f"must have shape ({m},)")
        step = rng.uniform_array(-self._bound, self._bound, (count, m))
        return np.clip(base + step, -self._bound, self._bound)

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def record_result(self, index: int, fitness: float, solution: np.ndarray) -> None:
        """Store the outcome of trial ``index``; each slot is written once."""
        if not 0 <= index < self.size:
            raise IndexError(f"Result slot {index} is outside [0, {self.size}).")
        if self._fitness[index] is not None:
            raise ResultAlreadyRecordedError(index)
        self._fitness[index] = float(fitness)
        self._solutions[index] = np.array(solution, dtype=float, copy=True)

    def __repr__(self) -> str:
        recorded = sum(f is not None for f in self._fitness)
        return f"Population(n={self.size}, m={self.dimension}, bound={self._bound}, recorded={recorded})"
