from __future__ import annotations

import json

import pytest
import yaml

from metabench.foundation.exceptions import (
    ConfigurationError,
    ExperimentFileError,
    InvalidParameterError,
    PopulationSizeError,
    ProblemDimensionError,
)
from metabench.foundation.problem import FunctionId
from metabench.engine.algorithm import CrossoverFamily, DEMethod, StrategyKind
from metabench.experiment import ExperimentSpec, load_experiments, parse_experiment_line, read_experiment_lines


def _spec(**overrides):
    data = dict(
        strategy=StrategyKind.BLIND_SEARCH,
        method=DEMethod.BEST_1,
        crossover=CrossoverFamily.BIN,
        dimension=2,
        population_size=10,
        function_id=FunctionId.RASTRIGIN,
        bound=5.12,
        trials=3,
    )
    data.update(overrides)
    return ExperimentSpec(**data)


def test_parse_line():
    spec = parse_experiment_line("1 3 1 10 30 4 5.12 5", path="runs.txt", lineno=2)
    assert spec.strategy is StrategyKind.DE
    assert spec.method is DEMethod.RAND_TO_BEST_1
    assert spec.crossover is CrossoverFamily.EXP
    assert (spec.dimension, spec.population_size, spec.trials) == (10, 30, 5)
    assert spec.function_id is FunctionId.RASTRIGIN
    assert spec.bound == 5.12
    assert spec.de.method is DEMethod.RAND_TO_BEST_1
    assert spec.strategy_label == "DE/rand-to-best/1/exp"
    assert spec.source == "runs.txt:2"


@pytest.mark.parametrize("line", ["", "   ", "# algorithm method crosstype", "\n"])
def test_blank_and_comment_lines(line):
    assert parse_experiment_line(line) is None


def test_inline_comment_is_ignored():
    spec = parse_experiment_line("2 1 2 5 10 2 100 4  # sphere with PSO")
    assert spec.strategy is StrategyKind.PSO


@pytest.mark.parametrize(
    "line, fragment",
    [
        ("1 1 2 10 30 4 5.12", "expected 8 fields"),
        ("1 1 2 ten 30 4 5.12 5", "'dimension' must be an integer"),
        ("1 1 2 10 30 4 wide 5", "'range' must be a number"),
        ("9 1 2 10 30 4 5.12 5", "Unknown strategy '9'"),
        ("1 1 2 10 30 42 5.12 5", "Unknown benchmark function '42'"),
    ],
)
def test_malformed_lines(line, fragment):
    with pytest.raises(ExperimentFileError) as info:
        parse_experiment_line(line, path="runs.txt", lineno=7)
    assert fragment in info.value.message
    assert info.value.message.startswith("runs.txt:7:")


def test_read_lines_keeps_line_numbers():
    lines = ["# header", "3 1 2 2 10 4 5.12 3", "", "bad line"]
    with pytest.raises(ExperimentFileError) as info:
        read_experiment_lines(lines, path="batch.txt")
    assert info.value.details["line"] == 4
    assert len(read_experiment_lines(lines[:3])) == 1


@pytest.mark.parametrize(
    "overrides, error",
    [
        ({"dimension": 0}, InvalidParameterError),
        ({"population_size": -1}, InvalidParameterError),
        ({"bound": 0.0}, InvalidParameterError),
        ({"bound": float("nan")}, InvalidParameterError),
        ({"trials": 11}, InvalidParameterError),
        ({"strategy": StrategyKind.DE, "population_size": 5, "trials": 2}, PopulationSizeError),
        ({"function_id": FunctionId.SINE_WAVE, "dimension": 1}, ProblemDimensionError),
    ],
)
def test_validate(overrides, error):
    with pytest.raises(error):
        _spec(**overrides).validate()


def test_validate_accepts_sound_spec():
    _spec().validate()
    assert "Blind Search on Rastrigin" in _spec().describe()


def test_from_mapping_with_aliases_and_overrides():
    spec = ExperimentSpec.from_mapping(
        {
            "algorithm": "de",
            "crosstype": "exp",
            "dimension": 4,
            "population_size": 12,
            "problem": "griewank",
            "range": 600,
            "trials": 2,
            "de": {"method": "best2", "cr": 0.3, "generations": 5},
            "pso": {"iterations": 7},
        }
    )
    assert spec.de.method is DEMethod.BEST_2
    assert spec.method is DEMethod.BEST_2
    assert spec.de.crossover is CrossoverFamily.EXP
    assert spec.de.cr == 0.3 and spec.de.generations == 5
    assert spec.pso.iterations == 7
    assert spec.to_dict()["function"] == "griewank"


@pytest.mark.parametrize(
    "data, fragment",
    [
        ({"strategy": "pso", "dimension": 2}, "missing required field"),
        (
            {"strategy": 2, "dimension": 2, "population_size": 5, "function": 2, "range": 1, "trials": 1, "speed": 3},
            "Unknown experiment field",
        ),
        (
            {"strategy": 2, "dimension": 2, "population_size": 5, "function": 2, "range": 1, "trials": 1, "pso": 3},
            "'pso' must be a mapping",
        ),
    ],
)
def test_from_mapping_errors(data, fragment):
    with pytest.raises(ConfigurationError) as info:
        ExperimentSpec.from_mapping(data)
    assert fragment in info.value.message


def test_load_yaml(tmp_path):
    path = tmp_path / "batch.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "seed": 11,
                "experiments": [
                    {"strategy": "blind_search", "dimension": 2, "population_size": 10,
                     "function": "rastrigin", "range": 5.12, "trials": 3},
                    {"strategy": "ils", "dimension": 3, "population_size": 8,
                     "function": 2, "range": 10, "trials": 2, "seed": 4,
                     "local_search": {"restarts": 3}},
                ],
            }
        ),
        encoding="utf-8",
    )
    specs = load_experiments(path)
    assert [s.seed for s in specs] == [11, 4]
    assert specs[1].local_search.restarts == 3
    assert specs[0].source.endswith("batch.yaml#1")


def test_load_json_list(tmp_path):
    path = tmp_path / "batch.json"
    path.write_text(
        json.dumps([{"strategy": 2, "dimension": 2, "population_size": 6, "function": 2, "range": 1.0, "trials": 1}]),
        encoding="utf-8",
    )
    (spec,) = load_experiments(path)
    assert spec.strategy is StrategyKind.PSO
    assert spec.seed is None


def test_load_structured_requires_experiments_list(tmp_path):
    path = tmp_path / "bad.yml"
    path.write_text("runs: []\n", encoding="utf-8")
    with pytest.raises(ExperimentFileError):
        load_experiments(path)


def test_load_line_format(tmp_path):
    path = tmp_path / "experiments.txt"
    path.write_text("# a b c\n3 1 2 2 10 4 5.12 3\n4 1 2 3 6 2 10 2\n", encoding="utf-8")
    specs = load_experiments(path)
    assert [s.strategy for s in specs] == [StrategyKind.BLIND_SEARCH, StrategyKind.ITERATED_LOCAL_SEARCH]


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_experiments(tmp_path / "nope.txt")
