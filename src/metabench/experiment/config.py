"""Experiment definitions and the experiment-file readers.

Two input formats are accepted:

* the line format, one experiment per line::

      # algorithm method crosstype dimension population problem range trials
      1 2 2 10 30 4 5.12 30

* YAML (``.yaml``/``.yml``) or JSON with an ``experiments`` list of mappings
  using the field names of :class:`ExperimentSpec`.
"""

from __future__ import annotations

import json
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from metabench.foundation.exceptions import (
    ConfigurationError,
    ExperimentFileError,
    InvalidParameterError,
    PopulationSizeError,
)
from metabench.foundation.problem import FunctionId, get_function_spec, resolve_function_id
from metabench.engine.algorithm import (
    MIN_DE_POPULATION,
    BlindSearchConfig,
    CrossoverFamily,
    DEConfig,
    DEMethod,
    LocalSearchConfig,
    PSOConfig,
    StrategyKind,
)
from metabench.engine.optimizer import EngineSettings

__all__ = [
    "DEFAULT_SEED",
    "ExperimentSpec",
    "parse_experiment_line",
    "read_experiment_lines",
    "load_experiments",
]

DEFAULT_SEED = 42
LINE_FIELDS = ("algorithm", "method", "crossover", "dimension", "population_size", "function", "range", "trials")

_OVERRIDE_SECTIONS = {
    "de": DEConfig,
    "pso": PSOConfig,
    "blind_search": BlindSearchConfig,
    "local_search": LocalSearchConfig,
}


@dataclass(frozen=True)
class ExperimentSpec:
    """One line of an experiment file: a strategy run ``trials`` times.

    ``method`` and ``crossover`` only matter for differential evolution but
    are always parsed, as in the line format.
    """

    strategy: StrategyKind
    method: DEMethod
    crossover: CrossoverFamily
    dimension: int
    population_size: int
    function_id: FunctionId
    bound: float
    trials: int
    seed: int | None = None
    de: DEConfig | None = None
    pso: PSOConfig = field(default_factory=PSOConfig)
    blind_search: BlindSearchConfig = field(default_factory=BlindSearchConfig)
    local_search: LocalSearchConfig = field(default_factory=LocalSearchConfig)
    source: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "strategy", StrategyKind.parse(self.strategy))
        object.__setattr__(self, "method", DEMethod.parse(self.method))
        object.__setattr__(self, "crossover", CrossoverFamily.parse(self.crossover))
        object.__setattr__(self, "function_id", resolve_function_id(self.function_id))
        de = self.de or DEConfig()
        object.__setattr__(self, "de", replace(de, method=self.method, crossover=self.crossover))

    # ------------------------------------------------------------------

    def validate(self) -> None:
        """Run every configuration check before any trial starts."""
        for name in ("dimension", "population_size", "trials"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidParameterError(name, value, "must be a positive integer")
        if isinstance(self.bound, bool) or not isinstance(self.bound, (int, float)):
            raise InvalidParameterError("range", self.bound, "must be a number")
        if not math.isfinite(self.bound) or self.bound <= 0:
            raise InvalidParameterError("range", self.bound, "must be a positive finite number")
        if self.trials > self.population_size:
            raise InvalidParameterError(
                "trials",
                self.trials,
                f"cannot exceed the population size ({self.population_size}); each trial fills one slot",
            )
        get_function_spec(self.function_id).check_dimension(self.dimension)
        if self.strategy is StrategyKind.DE:
            self.de.validate()  # type: ignore[union-attr]
            if self.population_size < MIN_DE_POPULATION:
                raise PopulationSizeError("Differential evolution", self.population_size, MIN_DE_POPULATION)
        elif self.strategy is StrategyKind.PSO:
            self.pso.validate()
            if self.pso.swarm_size is not None and self.pso.swarm_size > self.population_size:
                raise PopulationSizeError("Particle swarm", self.population_size, self.pso.swarm_size)
        elif self.strategy is StrategyKind.BLIND_SEARCH:
            self.blind_search.validate()
        else:
            self.local_search.validate()

    def engine_settings(self) -> EngineSettings:
        return EngineSettings(
            function_id=self.function_id,
            de=self.de,  # type: ignore[arg-type]
            pso=self.pso,
            blind_search=self.blind_search,
            local_search=self.local_search,
        )

    @property
    def strategy_label(self) -> str:
        return self.engine_settings().label(self.strategy)

    def describe(self) -> str:
        return (
            f"{self.strategy_label} on {get_function_spec(self.function_id).label} "
            f"(m={self.dimension}, n={self.population_size}, range={self.bound}, trials={self.trials})"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "strategy": self.strategy.name.lower(),
            "method": self.method.name.lower(),
            "crossover": self.crossover.name.lower(),
            "dimension": self.dimension,
            "population_size": self.population_size,
            "function": get_function_spec(self.function_id).key,
            "range": self.bound,
            "trials": self.trials,
            "seed": self.seed,
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, source: str | None = None) -> "ExperimentSpec":
        """Build a spec from a YAML/JSON mapping.

        Accepted keys: ``strategy`` (or ``algorithm``), ``method``,
        ``crossover``, ``dimension``, ``population_size``, ``function`` (or
        ``problem``), ``range``, ``trials``, ``seed`` and the override
        sections ``de``, ``pso``, ``blind_search``, ``local_search``.
        """
        data = dict(data)
        aliases = {"algorithm": "strategy", "problem": "function", "crosstype": "crossover"}
        for alias, name in aliases.items():
            if alias in data:
                data.setdefault(name, data.pop(alias))

        overrides: dict[str, Any] = {}
        for section, config_cls in _OVERRIDE_SECTIONS.items():
            payload = data.pop(section, None)
            if payload is None:
                continue
            if not isinstance(payload, Mapping):
                raise ConfigurationError(f"'{section}' must be a mapping, got {type(payload).__name__}.")
            overrides[section] = config_cls().with_overrides(payload)

        required = ("strategy", "dimension", "population_size", "function", "range", "trials")
        missing = [key for key in required if key not in data]
        if missing:
            raise ConfigurationError(
                f"Experiment is missing required field(s): {', '.join(missing)}.",
                suggestion=f"Required fields: {', '.join(required)}",
            )
        known = set(required) | {"method", "crossover", "seed"}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown experiment field(s): {', '.join(unknown)}.")

        de_defaults = overrides.get("de", DEConfig())
        return cls(
            strategy=data["strategy"],
            method=data.get("method", de_defaults.method),
            crossover=data.get("crossover", de_defaults.crossover),
            dimension=data["dimension"],
            population_size=data["population_size"],
            function_id=data["function"],
            bound=data["range"],
            trials=data["trials"],
            seed=data.get("seed"),
            source=source,
            **overrides,
        )


# =============================================================================
# Readers
# =============================================================================


def _parse_int(token: str, name: str, path: str | None, lineno: int) -> int:
    try:
        return int(token)
    except ValueError as exc:
        raise ExperimentFileError(f"'{name}' must be an integer, got '{token}'.", path, lineno) from exc


def parse_experiment_line(line: str, *, path: str | None = None, lineno: int = 1) -> ExperimentSpec | None:
    """Parse one line of the line format; blank and comment lines give ``None``."""
    text = line.split("#", 1)[0].strip()
    if not text:
        return None
    parts = text.split()
    if len(parts) != len(LINE_FIELDS):
        raise ExperimentFileError(f"expected {len(LINE_FIELDS)} fields, got {len(parts)}.", path, lineno)
    algorithm, method, crossover, dimension, population, function, bound, trials = parts
    try:
        range_value = float(bound)
    except ValueError as exc:
        raise ExperimentFileError(f"'range' must be a number, got '{bound}'.", path, lineno) from exc
    try:
        return ExperimentSpec(
            strategy=_parse_int(algorithm, "algorithm", path, lineno),
            method=_parse_int(method, "method", path, lineno),
            crossover=_parse_int(crossover, "crossover", path, lineno),
            dimension=_parse_int(dimension, "dimension", path, lineno),
            population_size=_parse_int(population, "population", path, lineno),
            function_id=_parse_int(function, "problem", path, lineno),
            bound=range_value,
            trials=_parse_int(trials, "trials", path, lineno),
            source=f"{path or '<experiments>'}:{lineno}",
        )
    except ExperimentFileError:
        raise
    except ConfigurationError as exc:
        raise ExperimentFileError(exc.message, path, lineno) from exc


def read_experiment_lines(lines: Iterable[str], *, path: str | None = None) -> list[ExperimentSpec]:
    specs: list[ExperimentSpec] = []
    for lineno, line in enumerate(lines, start=1):
        spec = parse_experiment_line(line, path=path, lineno=lineno)
        if spec is not None:
            specs.append(spec)
    return specs


def _load_structured(path: Path) -> list[ExperimentSpec]:
    if path.suffix.lower() in {".yaml", ".yml"}:
        import yaml

        with path.open("r", encoding="utf-8") as fh:
            payload = yaml.safe_load(fh) or {}
    else:
        with path.open("r", encoding="utf-8") as fh:
            payload = json.load(fh)

    if isinstance(payload, list):
        payload = {"experiments": payload}
    if not isinstance(payload, Mapping) or not isinstance(payload.get("experiments"), list):
        raise ExperimentFileError("expected an 'experiments' list.", str(path))
    default_seed = payload.get("seed")
    specs = []
    for idx, item in enumerate(payload["experiments"], start=1):
        if not isinstance(item, Mapping):
            raise ExperimentFileError(f"experiment #{idx} must be a mapping.", str(path))
        if default_seed is not None and "seed" not in item:
            item = {**item, "seed": default_seed}
        specs.append(ExperimentSpec.from_mapping(item, source=f"{path}#{idx}"))
    return specs


def load_experiments(path: str | Path) -> list[ExperimentSpec]:
    """Read an experiment file in the line, YAML or JSON format."""
    exp_path = Path(path).expanduser()
    if not exp_path.exists():
        raise FileNotFoundError(f"Experiment file '{exp_path}' not found.")
    if exp_path.suffix.lower() in {".yaml", ".yml", ".json"}:
        return _load_structured(exp_path)
    with exp_path.open("r", encoding="utf-8") as fh:
        return read_experiment_lines(fh, path=str(exp_path))
