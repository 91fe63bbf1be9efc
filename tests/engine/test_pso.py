from __future__ import annotations

import numpy as np
import pytest

from metabench.foundation.exceptions import PopulationSizeError
from metabench.foundation.problem import FunctionId, evaluate
from metabench.foundation.rng import RandomSource
from metabench.engine.algorithm import Objective, ParticleSwarm, PSOConfig
from metabench.engine.particle import Particle, Snapshot
from metabench.engine.population import Population


class BestTrace:
    def __init__(self) -> None:
        self.values: list[float] = []

    def on_generation(self, generation, best_fitness, fitness=None):
        self.values.append(best_fitness)


@pytest.mark.smoke
def test_global_best_is_non_increasing_on_sphere():
    pop = Population.initialize(10, 2, 5.12, RandomSource(21))
    trace = BestTrace()
    cfg = PSOConfig(iterations=50, c1=0.8, c2=1.2)
    pso = ParticleSwarm(cfg, Objective(FunctionId.SPHERE), RandomSource(22), trace)

    result = pso.run(pop)

    assert len(trace.values) == 50
    assert all(b <= a for a, b in zip(trace.values, trace.values[1:]))
    assert abs(result.fitness) == pytest.approx(trace.values[-1])
    assert result.stats["swarm_size"] == 10
    assert result.evaluations == 10 + 10 * 50 + 1


def test_initial_velocity_scales_with_domain():
    pop = Population.initialize(6, 3, 2.0, RandomSource(0))
    pso = ParticleSwarm(PSOConfig(), Objective(FunctionId.SPHERE), RandomSource(1))
    particles = pso.initialize(pop)
    assert len(particles) == 6
    assert all(0.0 <= p.velocity < 2.0 for p in particles)
    for j, p in enumerate(particles):
        assert np.array_equal(p.position, pop.matrix[j])
        p.position[0] = 50.0
    assert np.all(np.abs(pop.matrix) <= 2.0)


def test_initialize_evaluates_each_particle_through_the_objective():
    pop = Population.initialize(5, 3, 5.12, RandomSource(4))
    objective = Objective(FunctionId.RASTRIGIN)
    particles = ParticleSwarm(PSOConfig(), objective, RandomSource(5)).initialize(pop)
    assert objective.evaluations == len(particles) == 5
    for j, p in enumerate(particles):
        assert p.fitness == evaluate(pop.row(j), FunctionId.RASTRIGIN)
        assert p.best.fitness == p.fitness


def test_leader_prefers_smallest_magnitude_first_on_ties():
    a = Particle(np.array([1.0, 0.0]), 0.0, 1.0)
    b = Particle(np.array([0.0, 1.0]), 0.0, 1.0)
    c = Particle(np.array([2.0, 0.0]), 0.0, 4.0)
    leader = ParticleSwarm.leader([c, a, b])
    assert np.array_equal(leader.position, a.position)


def test_personal_best_is_an_independent_snapshot():
    p = Particle(np.array([1.0, 2.0]), 0.5, 5.0)
    assert p.best.fitness == 5.0
    p.position[0] = -3.0
    assert p.best.position[0] == 1.0
    with pytest.raises(ValueError):
        p.best.position[0] = 0.0
    snap = Snapshot.of(np.array([-2.0]), -4.0)
    assert snap.magnitude == 4.0


def test_swarm_larger_than_population_is_rejected():
    pop = Population.initialize(4, 2, 1.0, RandomSource(0))
    pso = ParticleSwarm(PSOConfig(swarm_size=5), Objective(FunctionId.SPHERE), RandomSource(1))
    with pytest.raises(PopulationSizeError):
        pso.run(pop)


def test_explicit_swarm_size():
    pop = Population.initialize(8, 2, 1.0, RandomSource(0))
    pso = ParticleSwarm(PSOConfig(iterations=3, swarm_size=4), Objective(FunctionId.SPHERE), RandomSource(1))
    assert pso.run(pop).stats["swarm_size"] == 4
