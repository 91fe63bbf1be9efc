from __future__ import annotations

import json

import pytest

from metabench.foundation.exceptions import (
    ConfigurationError,
    InvalidCrossoverError,
    InvalidMethodError,
    InvalidParameterError,
    InvalidStrategyError,
)
from metabench.engine.algorithm import (
    BlindSearchConfig,
    CrossoverFamily,
    DEConfig,
    DEMethod,
    LocalSearchConfig,
    PSOConfig,
    StrategyKind,
)
from metabench.engine.algorithm.config import _CodedEnum, _StrategyConfig


def test_defaults():
    de = DEConfig()
    assert (de.method, de.crossover) == (DEMethod.BEST_1, CrossoverFamily.BIN)
    assert (de.cr, de.f, de.lam, de.generations) == (0.6, 0.9, 0.8, 100)
    pso = PSOConfig()
    assert (pso.iterations, pso.c1, pso.c2, pso.swarm_size) == (100, 0.8, 1.2, None)


@pytest.mark.parametrize(
    "value, expected",
    [
        (1, DEMethod.BEST_1),
        ("2", DEMethod.RAND_1),
        ("rand-to-best1", DEMethod.RAND_TO_BEST_1),
        ("DE/best/2", DEMethod.BEST_2),
        ("rand_2", DEMethod.RAND_2),
    ],
)
def test_method_parsing(value, expected):
    assert DEMethod.parse(value) is expected


def test_enum_errors_list_choices():
    with pytest.raises(InvalidMethodError) as info:
        DEMethod.parse(6)
    assert "1=DE/best/1" in info.value.suggestion
    with pytest.raises(InvalidCrossoverError):
        CrossoverFamily.parse(3)
    with pytest.raises(InvalidStrategyError):
        StrategyKind.parse(True)
    assert CrossoverFamily.parse("binomial") is CrossoverFamily.BIN
    assert StrategyKind.parse("Differential_Evolution") is StrategyKind.DE


@pytest.mark.parametrize(
    "config",
    [
        DEConfig(cr=-0.1),
        DEConfig(f=float("nan")),
        DEConfig(generations=0),
        PSOConfig(iterations=0),
        PSOConfig(c1=float("inf")),
        PSOConfig(swarm_size=0),
        BlindSearchConfig(iterations=-3),
        LocalSearchConfig(restarts=0),
        LocalSearchConfig(neighborhood_size=1.5),
    ],
)
def test_validate_rejects_bad_values(config):
    with pytest.raises(InvalidParameterError):
        config.validate()


def test_overrides_and_serialization():
    de = DEConfig().with_overrides({"cr": 0.3, "method": "rand1"})
    assert de.cr == 0.3 and de.method is DEMethod.RAND_1
    assert de.label == "DE/rand/1/bin"
    assert json.loads(de.to_json())["method"] == "rand_1"
    assert PSOConfig().with_overrides(None) == PSOConfig()
    with pytest.raises(ConfigurationError):
        PSOConfig().with_overrides({"inertia": 0.7})


class _Shade(_CodedEnum):
    LIGHT = 1
    DARK = 2


def test_coded_enum_without_custom_error_reports_choices():
    assert _Shade.parse("dark") is _Shade.DARK
    with pytest.raises(ConfigurationError) as excinfo:
        _Shade.parse("grey")
    assert "_Shade" in str(excinfo.value)
    assert excinfo.value.suggestion == "Available values: 1=light, 2=dark"
    with pytest.raises(ConfigurationError):
        _Shade.parse(3)


def test_strategy_config_base_requires_validate():
    with pytest.raises(TypeError):
        _StrategyConfig()
