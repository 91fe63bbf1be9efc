"""Strategy selectors and per-strategy parameter sets."""

from __future__ import annotations

import abc
import enum
import json
import math
from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, TypeVar

from metabench.foundation.exceptions import (
    ConfigurationError,
    InvalidCrossoverError,
    InvalidMethodError,
    InvalidParameterError,
    InvalidStrategyError,
)

__all__ = [
    "StrategyKind",
    "DEMethod",
    "CrossoverFamily",
    "DEConfig",
    "PSOConfig",
    "BlindSearchConfig",
    "LocalSearchConfig",
    "MIN_DE_POPULATION",
]

# i plus five mutually distinct donors
MIN_DE_POPULATION = 6

_E = TypeVar("_E", bound="_CodedEnum")


class _CodedEnum(enum.IntEnum):
    """Integer-coded enum that also accepts its aliases."""

    @classmethod
    def _aliases(cls) -> dict[str, int]:
        return {}

    @classmethod
    def _error(cls, value: Any) -> ConfigurationError:
        return ConfigurationError(
            f"Unknown {cls.__name__} value '{value}'.",
            suggestion=f"Available values: {', '.join(cls.choices())}",
        )

    @classmethod
    def choices(cls) -> list[str]:
        return [f"{member.value}={member.label}" for member in cls]

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls: type[_E], value: Any) -> _E:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            text = value.strip().lower()
            if text in cls._aliases():
                return cls(cls._aliases()[text])
            if text.upper() in cls.__members__:
                return cls[text.upper()]
            if not text.isdigit():
                raise cls._error(value)
            value = int(text)
        if isinstance(value, bool) or not isinstance(value, int):
            raise cls._error(value)
        try:
            return cls(value)
        except ValueError as exc:
            raise cls._error(value) from exc


class StrategyKind(_CodedEnum):
    DE = 1
    PSO = 2
    BLIND_SEARCH = 3
    ITERATED_LOCAL_SEARCH = 4

    @classmethod
    def _aliases(cls) -> dict[str, int]:
        return {
            "differential_evolution": 1,
            "particle_swarm": 2,
            "blind": 3,
            "blindsearch": 3,
            "ils": 4,
            "local_search": 4,
            "iteratedlocalsearch": 4,
        }

    @classmethod
    def _error(cls, value: Any) -> ConfigurationError:
        return InvalidStrategyError(value, cls.choices())

    @property
    def label(self) -> str:
        return {
            StrategyKind.DE: "Differential Evolution",
            StrategyKind.PSO: "Particle Swarm Optimization",
            StrategyKind.BLIND_SEARCH: "Blind Search",
            StrategyKind.ITERATED_LOCAL_SEARCH: "Iterated Local Search",
        }[self]


class DEMethod(_CodedEnum):
    BEST_1 = 1
    RAND_1 = 2
    RAND_TO_BEST_1 = 3
    BEST_2 = 4
    RAND_2 = 5

    @classmethod
    def _aliases(cls) -> dict[str, int]:
        aliases: dict[str, int] = {}
        for member in cls:
            short = member.label.lower()
            aliases[short] = member.value
            aliases[short.removeprefix("de/")] = member.value
            aliases[short.removeprefix("de/").replace("/", "")] = member.value
        return aliases

    @classmethod
    def _error(cls, value: Any) -> ConfigurationError:
        return InvalidMethodError(value, cls.choices())

    @property
    def label(self) -> str:
        return {
            DEMethod.BEST_1: "DE/best/1",
            DEMethod.RAND_1: "DE/rand/1",
            DEMethod.RAND_TO_BEST_1: "DE/rand-to-best/1",
            DEMethod.BEST_2: "DE/best/2",
            DEMethod.RAND_2: "DE/rand/2",
        }[self]


class CrossoverFamily(_CodedEnum):
    EXP = 1
    BIN = 2

    @classmethod
    def _aliases(cls) -> dict[str, int]:
        return {"exponential": 1, "binomial": 2}

    @classmethod
    def _error(cls, value: Any) -> ConfigurationError:
        return InvalidCrossoverError(value, cls.choices())


# =============================================================================
# Parameter sets
# =============================================================================


def _positive_int(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidParameterError(name, value, "must be a positive integer")


def _finite(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise InvalidParameterError(name, value, "must be a finite number")


_C = TypeVar("_C", bound="_StrategyConfig")


class _StrategyConfig(abc.ABC):
    """Mixin for frozen dataclass configs: serialization and overrides."""

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)  # type: ignore[call-overload]
        return {k: (v.name.lower() if isinstance(v, enum.Enum) else v) for k, v in data.items()}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)

    def with_overrides(self: _C, overrides: Mapping[str, Any] | None) -> _C:
        if not overrides:
            return self
        known = {f.name for f in fields(self)}  # type: ignore[arg-type]
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown {type(self).__name__} field(s): {', '.join(unknown)}.",
                suggestion=f"Valid fields: {', '.join(sorted(known))}",
            )
        return replace(self, **dict(overrides))  # type: ignore[type-var]

    @abc.abstractmethod
    def validate(self) -> None:
        """Raise :class:`InvalidParameterError` for any out-of-range field."""


@dataclass(frozen=True)
class DEConfig(_StrategyConfig):
    """Differential evolution parameters.

    ``cr`` is the crossover rate, ``f`` the difference scale factor and
    ``lam`` the pull towards the best candidate used by rand-to-best/1.
    """

    method: DEMethod = DEMethod.BEST_1
    crossover: CrossoverFamily = CrossoverFamily.BIN
    cr: float = 0.6
    f: float = 0.9
    lam: float = 0.8
    generations: int = 100

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", DEMethod.parse(self.method))
        object.__setattr__(self, "crossover", CrossoverFamily.parse(self.crossover))

    def validate(self) -> None:
        _finite("cr", self.cr)
        if not 0.0 <= self.cr <= 1.0:
            raise InvalidParameterError("cr", self.cr, "must lie in [0, 1]")
        _finite("f", self.f)
        _finite("lam", self.lam)
        _positive_int("generations", self.generations)

    @property
    def label(self) -> str:
        return f"{self.method.label}/{self.crossover.label}"


@dataclass(frozen=True)
class PSOConfig(_StrategyConfig):
    """Particle swarm parameters; ``swarm_size=None`` uses the whole population."""

    iterations: int = 100
    c1: float = 0.8
    c2: float = 1.2
    swarm_size: int | None = None

    def validate(self) -> None:
        _positive_int("iterations", self.iterations)
        _finite("c1", self.c1)
        _finite("c2", self.c2)
        if self.swarm_size is not None:
            _positive_int("swarm_size", self.swarm_size)


@dataclass(frozen=True)
class BlindSearchConfig(_StrategyConfig):
    """``iterations=None`` uses the population size."""

    iterations: int | None = None

    def validate(self) -> None:
        if self.iterations is not None:
            _positive_int("iterations", self.iterations)


@dataclass(frozen=True)
class LocalSearchConfig(_StrategyConfig):
    """Restart count (t_max) and neighborhood size; ``None`` uses the population size."""

    restarts: int | None = None
    neighborhood_size: int | None = None

    def validate(self) -> None:
        if self.restarts is not None:
            _positive_int("restarts", self.restarts)
        if self.neighborhood_size is not None:
            _positive_int("neighborhood_size", self.neighborhood_size)
