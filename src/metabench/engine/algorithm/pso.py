"""Particle swarm optimization with one scalar velocity per particle.

The velocity is accumulated coordinate by coordinate and the running value
is added to each coordinate in turn; there is no per-dimension velocity and
no inertia weight. Personal and global bests are compared by absolute
fitness and stored as snapshots.
"""

from __future__ import annotations

import logging

from metabench.foundation.exceptions import PopulationSizeError
from metabench.foundation.rng import RandomSource
from metabench.engine.particle import Particle, Snapshot
from metabench.engine.population import Population
from .base import GenerationObserver, NullObserver, Objective, StrategyResult
from .config import PSOConfig

__all__ = ["ParticleSwarm"]


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


class ParticleSwarm:
    def __init__(
        self,
        config: PSOConfig,
        objective: Objective,
        rng: RandomSource,
        observer: GenerationObserver | None = None,
    ) -> None:
        config.validate()
        self.cfg = config
        self.objective = objective
        self.rng = rng
        self.observer = observer or NullObserver()

    def _swarm_size(self, population: Population) -> int:
        size = self.cfg.swarm_size or population.size
        if size > population.size:
            raise PopulationSizeError("Particle swarm", population.size, size)
        return size

    def initialize(self, population: Population) -> list[Particle]:
        """Seed one particle per population row, velocity ``uniform() * bound``."""
        particles = []
        for j in range(self._swarm_size(population)):
            velocity = self.rng.uniform() * population.bound
            position = population.row(j)
            particles.append(Particle(position, velocity, self.objective(position)))
        return particles

    @staticmethod
    def leader(particles: list[Particle]) -> Snapshot:
        """Snapshot of the particle with the smallest |fitness| (first on ties)."""
        best = particles[0]
        for p in particles[1:]:
            if abs(p.fitness) < abs(best.fitness):
                best = p
        return best.snapshot()

    def step(self, particle: Particle, gbest: Snapshot) -> Snapshot:
        """Move one particle and return the (possibly updated) global best."""
        x = particle.position
        pbest = particle.best.position
        for k in range(x.shape[0]):
            pull = self.cfg.c1 * self.rng.uniform() * (pbest[k] - x[k])
            pull += self.cfg.c2 * self.rng.uniform() * (gbest.position[k] - x[k])
            particle.velocity += pull
            x[k] += particle.velocity

        fitness = self.objective(x)
        particle.fitness = fitness
        if abs(fitness) < particle.best.magnitude:
            particle.best = particle.snapshot()
        if abs(fitness) < gbest.magnitude:
            return particle.snapshot()
        return gbest

    def run(self, population: Population) -> StrategyResult:
        particles = self.initialize(population)
        gbest = self.leader(particles)
        for t in range(self.cfg.iterations):
            for particle in particles:
                gbest = self.step(particle, gbest)
            self.observer.on_generation(t, gbest.magnitude)

        _logger().debug(
            "[PSO] %d particles, %d iterations, best |f|=%.6g",
            len(particles),
            self.cfg.iterations,
            gbest.magnitude,
        )
        solution = gbest.position.copy()
        return StrategyResult(
            solution=solution,
            fitness=self.objective(solution),
            evaluations=self.objective.evaluations,
            stats={"swarm_size": len(particles), "iterations": self.cfg.iterations},
        )
