from __future__ import annotations

import numpy as np
import pytest

from metabench.foundation.exceptions import ConfigError, InvalidParameterError, ResultAlreadyRecordedError
from metabench.foundation.rng import RandomSource
from metabench.engine.population import Population


def test_initialize_is_deterministic():
    a = Population.initialize(20, 5, 5.12, RandomSource(123))
    b = Population.initialize(20, 5, 5.12, RandomSource(123))
    assert np.array_equal(a.matrix, b.matrix)
    c = Population.initialize(20, 5, 5.12, RandomSource(124))
    assert not np.array_equal(a.matrix, c.matrix)


def test_initialize_respects_domain():
    pop = Population.initialize(50, 4, 2.0, RandomSource(0))
    assert pop.matrix.shape == (50, 4)
    assert pop.size == 50 and pop.dimension == 4
    assert np.all(np.abs(pop.matrix) <= 2.0)
    assert pop.fitness == (None,) * 50


@pytest.mark.parametrize("base_value", [0.0, 5.12, -5.12])
def test_neighborhood_stays_in_domain(base_value):
    pop = Population.initialize(5, 3, 5.12, RandomSource(1))
    rng = RandomSource(2)
    for _ in range(20):
        N = pop.sample_neighborhood(40, 3, np.full(3, base_value), rng)
        assert N.shape == (40, 3)
        assert np.all(N >= -5.12) and np.all(N <= 5.12)


def test_neighborhood_rejects_wrong_base_shape():
    pop = Population.initialize(5, 3, 1.0, RandomSource(1))
    with pytest.raises(InvalidParameterError):
        pop.sample_neighborhood(4, 3, np.zeros(2), RandomSource(0))


def test_sample_vector_in_domain():
    pop = Population.initialize(5, 3, 1.5, RandomSource(1))
    x = pop.sample_vector(3, RandomSource(8))
    assert x.shape == (3,)
    assert np.all(np.abs(x) <= 1.5)


def test_row_is_a_copy():
    pop = Population.initialize(4, 2, 1.0, RandomSource(3))
    row = pop.row(0)
    row[:] = 99.0
    assert not np.any(pop.matrix[0] == 99.0)


def test_results_are_write_once():
    pop = Population.initialize(3, 2, 1.0, RandomSource(3))
    solution = np.array([0.1, 0.2])
    pop.record_result(1, 0.5, solution)
    solution[0] = 7.0
    assert pop.is_recorded(1) and not pop.is_recorded(0)
    assert pop.fitness[1] == 0.5
    assert pop.solutions[1][0] == 0.1
    with pytest.raises(ResultAlreadyRecordedError):
        pop.record_result(1, 0.1, solution)
    with pytest.raises(IndexError):
        pop.record_result(3, 0.1, solution)


@pytest.mark.parametrize(
    "n, m, bound",
    [(0, 2, 1.0), (3, 0, 1.0), (3, 2, 0.0), (3, 2, -1.0), (3, 2, float("inf"))],
)
def test_invalid_shapes_are_config_errors(n, m, bound):
    with pytest.raises(ConfigError):
        Population.initialize(n, m, bound, RandomSource(0))
