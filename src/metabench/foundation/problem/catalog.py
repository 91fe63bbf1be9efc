from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from metabench.foundation.exceptions import InvalidProblemError, NumericError, ProblemDimensionError
from . import functions

BatchFunction = Callable[[np.ndarray], np.ndarray]


class FunctionId(enum.IntEnum):
    """Integer identifiers of the benchmark catalog (1..10)."""

    SCHWEFEL = 1
    SPHERE = 2
    ROSENBROCK = 3
    RASTRIGIN = 4
    GRIEWANK = 5
    SINE_ENVELOPE = 6
    SINE_WAVE = 7
    ACKLEY_ONE = 8
    ACKLEY_TWO = 9
    EGG_HOLDER = 10


@dataclass(frozen=True)
class FunctionSpec:
    """Metadata and implementation of one benchmark function."""

    id: FunctionId
    key: str
    label: str
    function: BatchFunction
    min_n_var: int = 1
    default_range: float = 100.0
    description: str = ""

    def check_dimension(self, n_var: int) -> None:
        if n_var < self.min_n_var:
            raise ProblemDimensionError(
                f"{self.label} is undefined for dimension {n_var}.",
                n_var=n_var,
                min_n_var=self.min_n_var,
            )


_SPECS: dict[FunctionId, FunctionSpec] = {
    spec.id: spec
    for spec in (
        FunctionSpec(
            FunctionId.SCHWEFEL,
            "schwefel",
            "Schwefel",
            functions.schwefel,
            default_range=512.0,
            description="Deceptive; global minimum 0 at x_i = 420.9687.",
        ),
        FunctionSpec(
            FunctionId.SPHERE,
            "sphere",
            "Sphere (De Jong 1)",
            functions.sphere,
            default_range=100.0,
            description="Convex bowl; global minimum 0 at the origin.",
        ),
        FunctionSpec(
            FunctionId.ROSENBROCK,
            "rosenbrock",
            "Rosenbrock",
            functions.rosenbrock,
            min_n_var=2,
            default_range=100.0,
            description="Narrow curved valley; global minimum 0 at x_i = 1.",
        ),
        FunctionSpec(
            FunctionId.RASTRIGIN,
            "rastrigin",
            "Rastrigin",
            functions.rastrigin,
            default_range=30.0,
            description="Highly multimodal, non-negative; global minimum 0 at the origin.",
        ),
        FunctionSpec(
            FunctionId.GRIEWANK,
            "griewank",
            "Griewank",
            functions.griewank,
            default_range=500.0,
            description="Product term couples all coordinates; global minimum 0 at the origin.",
        ),
        FunctionSpec(
            FunctionId.SINE_ENVELOPE,
            "sine_envelope",
            "Sine Envelope",
            functions.sine_envelope,
            min_n_var=2,
            default_range=30.0,
            description="Negative-valued landscape.",
        ),
        FunctionSpec(
            FunctionId.SINE_WAVE,
            "sine_wave",
            "Sine Wave",
            functions.sine_wave,
            min_n_var=2,
            default_range=30.0,
            description="Stretched V sine wave.",
        ),
        FunctionSpec(
            FunctionId.ACKLEY_ONE,
            "ackley_one",
            "Ackley One",
            functions.ackley_one,
            min_n_var=2,
            default_range=32.0,
        ),
        FunctionSpec(
            FunctionId.ACKLEY_TWO,
            "ackley_two",
            "Ackley Two",
            functions.ackley_two,
            min_n_var=2,
            default_range=32.0,
        ),
        FunctionSpec(
            FunctionId.EGG_HOLDER,
            "egg_holder",
            "Egg Holder",
            functions.egg_holder,
            min_n_var=2,
            default_range=500.0,
            description="Negative-valued, very rugged landscape.",
        ),
    )
}

_BY_KEY: dict[str, FunctionId] = {spec.key: fid for fid, spec in _SPECS.items()}


def available_function_names() -> tuple[str, ...]:
    return tuple(spec.key for spec in _SPECS.values())


def resolve_function_id(value: FunctionId | int | str) -> FunctionId:
    """Map an integer code, catalog key or enum member to a ``FunctionId``."""
    if isinstance(value, FunctionId):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _BY_KEY:
            return _BY_KEY[text]
        if not text.lstrip("-").isdigit():
            raise InvalidProblemError(value, list(available_function_names()))
        value = int(text)
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidProblemError(value, list(available_function_names()))
    try:
        return FunctionId(int(value))
    except ValueError as exc:
        raise InvalidProblemError(value, list(available_function_names())) from exc


def get_function_spec(value: FunctionId | int | str) -> FunctionSpec:
    return _SPECS[resolve_function_id(value)]


def function_specs() -> tuple[FunctionSpec, ...]:
    return tuple(_SPECS.values())


def evaluate_batch(X: np.ndarray, function_id: FunctionId | int | str) -> np.ndarray:
    """Evaluate every row of ``X`` against one benchmark function.

    Raises
    ------
    ProblemDimensionError
        If ``X`` is not two-dimensional or is too narrow for the function.
    NumericError
        If any fitness value is NaN or infinite.
    """
    spec = get_function_spec(function_id)
    X = np.asarray(X, dtype=float)
    if X.ndim != 2:
        raise ProblemDimensionError(f"Expected a (N, m) matrix, got shape {X.shape}.")
    spec.check_dimension(X.shape[1])
    with np.errstate(over="ignore", invalid="ignore"):
        F = np.asarray(spec.function(X), dtype=float)
    bad = ~np.isfinite(F)
    if np.any(bad):
        row = int(np.flatnonzero(bad)[0])
        raise NumericError(
            f"{spec.label} produced a non-finite fitness ({F[row]}) for candidate {row}.",
            function=spec.key,
            solution=X[row].tolist(),
        )
    return F


def evaluate(vector: np.ndarray, function_id: FunctionId | int | str) -> float:
    """Return the fitness of a single candidate vector."""
    x = np.asarray(vector, dtype=float)
    if x.ndim != 1:
        raise ProblemDimensionError(f"Expected a candidate vector, got shape {x.shape}.")
    return float(evaluate_batch(x.reshape(1, -1), function_id)[0])


__all__ = [
    "FunctionId",
    "FunctionSpec",
    "available_function_names",
    "resolve_function_id",
    "get_function_spec",
    "function_specs",
    "evaluate_batch",
    "evaluate",
]
