"""
metabench exception hierarchy.

Provides user-friendly exceptions with helpful error messages and suggestions.
All metabench-specific exceptions inherit from MetabenchError for easy catching.

Example:
    try:
        result = run_experiment(spec)
    except MetabenchError as e:
        logger.warning("Experiment failed: %s", e)
"""

from __future__ import annotations

from collections.abc import Sequence
from difflib import get_close_matches
from typing import Any


class MetabenchError(Exception):
    """
    Base exception for all metabench errors.

    Attributes:
        message: Human-readable error description
        suggestion: Optional suggestion for fixing the error
        details: Optional dict with additional context
    """

    def __init__(
        self,
        message: str,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the full error message with suggestion."""
        msg = self.message
        if self.suggestion:
            msg += f"\n\nSuggestion: {self.suggestion}"
        return msg


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(MetabenchError):
    """Raised when configuration is invalid or incomplete."""

    pass


ConfigError = ConfigurationError


def _choices(available: Sequence[str] | None) -> str | None:
    if not available:
        return None
    return ", ".join(available)


def _suggest_names(name: str, options: Sequence[str]) -> list[str]:
    if not name or not options:
        return []
    lookup = {option.lower(): option for option in options}
    matches = get_close_matches(name.lower(), lookup.keys(), n=3, cutoff=0.6)
    return [lookup[match] for match in matches]


class InvalidStrategyError(ConfigurationError):
    """Raised when an unknown search strategy is specified."""

    def __init__(self, strategy: Any, available: Sequence[str] | None = None) -> None:
        choices = _choices(available)
        message = f"Unknown strategy '{strategy}'."
        suggestion = f"Available strategies: {choices}" if choices else None
        super().__init__(message, suggestion, {"strategy": strategy})


class InvalidMethodError(ConfigurationError):
    """Raised when an unknown differential evolution mutation method is specified."""

    def __init__(self, method: Any, available: Sequence[str] | None = None) -> None:
        choices = _choices(available)
        message = f"Unknown DE mutation method '{method}'."
        suggestion = f"Available methods: {choices}" if choices else None
        super().__init__(message, suggestion, {"method": method})


class InvalidCrossoverError(ConfigurationError):
    """Raised when an unknown crossover family is specified."""

    def __init__(self, crossover: Any, available: Sequence[str] | None = None) -> None:
        choices = _choices(available)
        message = f"Unknown crossover family '{crossover}'."
        suggestion = f"Available crossover families: {choices}" if choices else None
        super().__init__(message, suggestion, {"crossover": crossover})


class InvalidProblemError(ConfigurationError):
    """Raised when an unknown benchmark function is specified."""

    def __init__(self, problem: Any, available: Sequence[str] | None = None) -> None:
        message = f"Unknown benchmark function '{problem}'."
        close = _suggest_names(str(problem), available or [])
        if close:
            suggestion = "Did you mean: " + ", ".join(f"'{item}'" for item in close) + "?"
        elif available:
            suggestion = f"Available functions: {', '.join(available)}"
        else:
            suggestion = "Use available_function_names() to see the catalog."
        super().__init__(message, suggestion, {"problem": problem})


class ProblemDimensionError(ConfigurationError):
    """Raised when a vector or matrix does not have a usable dimension."""

    def __init__(self, message: str, n_var: int | None = None, min_n_var: int | None = None) -> None:
        suggestion = "Check the dimension of the search space"
        if min_n_var is not None:
            suggestion += f" (this function needs at least {min_n_var} variables)"
        super().__init__(message, suggestion, {"n_var": n_var, "min_n_var": min_n_var})


class InvalidParameterError(ConfigurationError):
    """Raised when a numeric parameter is outside its admissible range."""

    def __init__(self, name: str, value: Any, requirement: str) -> None:
        message = f"Invalid value {value!r} for '{name}': {requirement}."
        super().__init__(message, None, {"parameter": name, "value": value})


class PopulationSizeError(ConfigurationError):
    """Raised when a population is too small for the requested strategy."""

    def __init__(self, strategy: str, size: int, minimum: int) -> None:
        message = f"{strategy} needs a population of at least {minimum} candidates, got {size}."
        suggestion = f"Increase the population size to {minimum} or more"
        super().__init__(message, suggestion, {"strategy": strategy, "size": size, "minimum": minimum})


class ExperimentFileError(ConfigurationError):
    """Raised when an experiment file cannot be parsed."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        line: int | None = None,
        suggestion: str | None = None,
    ) -> None:
        location = path or "<experiments>"
        if line is not None:
            location += f":{line}"
        if suggestion is None:
            suggestion = "Each line must read: algorithm method crosstype dimension population problem range trials"
        super().__init__(f"{location}: {message}", suggestion, {"path": path, "line": line})


# =============================================================================
# Runtime Errors
# =============================================================================


class OptimizationError(MetabenchError):
    """Raised when optimization fails during execution."""

    pass


class NumericError(OptimizationError):
    """Raised when a benchmark evaluation produces NaN or an overflow."""

    def __init__(self, message: str, function: str | None = None, solution: Any = None) -> None:
        suggestion = "The search diverged; reduce the step factors or the domain range"
        super().__init__(message, suggestion, {"function": function, "solution": solution})


# =============================================================================
# Data Errors
# =============================================================================


class DataError(MetabenchError):
    """Base class for data-related errors."""

    pass


class ResultAlreadyRecordedError(DataError):
    """Raised when a population result slot is written twice."""

    def __init__(self, index: int) -> None:
        message = f"Result slot {index} was already recorded for this batch."
        super().__init__(message, None, {"index": index})


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    # Base
    "MetabenchError",
    # Configuration
    "ConfigurationError",
    "ConfigError",
    "InvalidStrategyError",
    "InvalidMethodError",
    "InvalidCrossoverError",
    "InvalidProblemError",
    "ProblemDimensionError",
    "InvalidParameterError",
    "PopulationSizeError",
    "ExperimentFileError",
    # Runtime
    "OptimizationError",
    "NumericError",
    # Data
    "DataError",
    "ResultAlreadyRecordedError",
]
