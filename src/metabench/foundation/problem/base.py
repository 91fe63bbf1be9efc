"""
Batch-evaluation adapter for catalog functions.
"""

from __future__ import annotations

import numpy as np

from .catalog import FunctionId, evaluate_batch, get_function_spec


class BenchmarkProblem:
    """Single-objective view of one catalog function over ``[-range, range]^m``.

    Public adapter for callers that feed catalog functions to a batch
    evaluator. The built-in strategies evaluate through ``Objective`` and do
    not go through this class.

    Exposes ``n_var``, ``n_obj``, ``xl``, ``xu`` and ``evaluate(X, out)`` so a
    batch evaluator can fill ``out["F"]`` with shape ``(N, 1)``.

    Example::

        problem = BenchmarkProblem(FunctionId.RASTRIGIN, n_var=2, bound=5.12)
        out = {"F": np.empty((len(X), 1))}
        problem.evaluate(X, out)
    """

    n_obj: int = 1

    def __init__(self, function_id: FunctionId | int | str, n_var: int, bound: float | None = None) -> None:
        self.spec = get_function_spec(function_id)
        self.spec.check_dimension(n_var)
        self.n_var = int(n_var)
        self.bound = float(self.spec.default_range if bound is None else bound)
        self.xl = np.full(self.n_var, -self.bound)
        self.xu = np.full(self.n_var, self.bound)

    @property
    def function_id(self) -> FunctionId:
        return self.spec.id

    def objectives(self, X: np.ndarray) -> np.ndarray:
        return evaluate_batch(X, self.spec.id)

    def evaluate(self, X: np.ndarray, out: dict[str, np.ndarray]) -> None:
        F_computed = self.objectives(np.asarray(X, dtype=float)).reshape(-1, 1)
        F_buf = out.get("F")
        if F_buf is not None and F_buf.shape == F_computed.shape:
            F_buf[:] = F_computed
        else:
            out["F"] = F_computed

    def __repr__(self) -> str:
        return f"BenchmarkProblem({self.spec.key!r}, n_var={self.n_var}, bound={self.bound})"


__all__ = ["BenchmarkProblem"]
