"""Closed-form benchmark functions.

Every function takes a batch ``X`` of shape ``(N, m)`` and returns an array of
``N`` fitness values. Pairwise functions sum over consecutive coordinate pairs
``(x_i, x_{i+1})`` and therefore need ``m >= 2``.
"""

from __future__ import annotations

import math

import numpy as np

__all__ = [
    "schwefel",
    "sphere",
    "rosenbrock",
    "rastrigin",
    "griewank",
    "sine_envelope",
    "sine_wave",
    "ackley_one",
    "ackley_two",
    "egg_holder",
]

SCHWEFEL_CONSTANT = 418.9829


def _pairs(X: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    return X[:, :-1], X[:, 1:]


def schwefel(X: np.ndarray) -> np.ndarray:
    m = X.shape[1]
    return SCHWEFEL_CONSTANT * m - np.sum(X * np.sin(np.sqrt(np.abs(X))), axis=1)


def sphere(X: np.ndarray) -> np.ndarray:
    """De Jong's first function."""
    return np.sum(X * X, axis=1)


def rosenbrock(X: np.ndarray) -> np.ndarray:
    a, b = _pairs(X)
    return np.sum(100.0 * (a * a - b) ** 2 + (1.0 - a) ** 2, axis=1)


def rastrigin(X: np.ndarray) -> np.ndarray:
    m = X.shape[1]
    return 10.0 * m + np.sum(X * X - 10.0 * np.cos(2.0 * math.pi * X), axis=1)


def griewank(X: np.ndarray) -> np.ndarray:
    # divisors are sqrt(i) for the 1-based coordinate index i
    idx = np.sqrt(np.arange(1, X.shape[1] + 1, dtype=float))
    return np.sum(X * X, axis=1) / 4000.0 - np.prod(np.cos(X / idx), axis=1) + 1.0


def sine_envelope(X: np.ndarray) -> np.ndarray:
    """Negated sine envelope sine wave; values are <= 0."""
    a, b = _pairs(X)
    r2 = a * a + b * b
    top = np.sin(r2 - 0.5) ** 2
    bottom = (1.0 + 0.001 * r2) ** 2
    return -np.sum(0.5 + top / bottom, axis=1)


def sine_wave(X: np.ndarray) -> np.ndarray:
    """Stretched V sine wave."""
    a, b = _pairs(X)
    r2 = a * a + b * b
    return np.sum(np.power(r2, 0.25) * np.sin(50.0 * np.power(r2, 0.1)) ** 2 + 1.0, axis=1)


def ackley_one(X: np.ndarray) -> np.ndarray:
    a, b = _pairs(X)
    first = math.exp(-0.2) * np.sqrt(a * a + b * b)
    second = 3.0 * (np.cos(2.0 * a) + np.sin(2.0 * b))
    return np.sum(first + second, axis=1)


def ackley_two(X: np.ndarray) -> np.ndarray:
    a, b = _pairs(X)
    first = np.exp(0.2 * np.sqrt((a * a + b * b) / 2.0))
    second = np.exp(0.5 * (np.cos(2.0 * math.pi * a) + np.cos(2.0 * math.pi * b)))
    return np.sum(20.0 + math.e - 20.0 / first - second, axis=1)


def egg_holder(X: np.ndarray) -> np.ndarray:
    a, b = _pairs(X)
    first = -a * np.sin(np.sqrt(np.abs(a - b - 47.0)))
    second = (b + 47.0) * np.sin(np.sqrt(np.abs(b + 47.0 + a / 2.0)))
    return np.sum(first - second, axis=1)
