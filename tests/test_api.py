from __future__ import annotations

import pytest

import metabench


@pytest.mark.smoke
def test_top_level_quickstart():
    spec = metabench.ExperimentSpec(
        strategy="de",
        method="best1",
        crossover="bin",
        dimension=3,
        population_size=8,
        function_id="rastrigin",
        bound=5.12,
        trials=2,
        de=metabench.DEConfig(generations=5),
    )
    result = metabench.run_experiment(spec, seed=7)
    assert len(result.fitness) == 2
    assert result.spec.de.generations == 5


def test_version_and_exports():
    assert metabench.__version__ == "0.1.0"
    for name in metabench.__all__:
        assert hasattr(metabench, name)


def test_benchmark_problem_is_exported():
    problem = metabench.BenchmarkProblem("sphere", n_var=2, bound=1.0)
    assert "BenchmarkProblem" in metabench.__all__
    assert problem.n_var == 2
