"""Shared building blocks for the search strategies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

import numpy as np

from metabench.foundation.problem import FunctionId, evaluate, evaluate_batch, resolve_function_id

__all__ = ["Objective", "StrategyResult", "GenerationObserver", "NullObserver"]


class Objective:
    """Catalog function bound to one id, counting evaluations."""

    def __init__(self, function_id: FunctionId | int | str) -> None:
        self.function_id = resolve_function_id(function_id)
        self.evaluations = 0

    def __call__(self, x: np.ndarray) -> float:
        self.evaluations += 1
        return evaluate(x, self.function_id)

    def batch(self, X: np.ndarray) -> np.ndarray:
        F = evaluate_batch(X, self.function_id)
        self.evaluations += F.shape[0]
        return F


@dataclass
class StrategyResult:
    solution: np.ndarray
    fitness: float
    evaluations: int
    stats: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class GenerationObserver(Protocol):
    """Receives progress once per generation (DE) or iteration (PSO)."""

    def on_generation(
        self,
        generation: int,
        best_fitness: float,
        fitness: np.ndarray | None = None,
    ) -> None: ...


class NullObserver:
    def on_generation(
        self,
        generation: int,
        best_fitness: float,
        fitness: np.ndarray | None = None,
    ) -> None:
        return None
