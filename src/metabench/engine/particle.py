from __future__ import annotations

from dataclasses import dataclass

import numpy as np

__all__ = ["Snapshot", "Particle"]


@dataclass(frozen=True, eq=False)
class Snapshot:
    """Immutable copy of a position and its fitness."""

    position: np.ndarray
    fitness: float

    @classmethod
    def of(cls, position: np.ndarray, fitness: float) -> "Snapshot":
        frozen = np.array(position, dtype=float, copy=True)
        frozen.setflags(write=False)
        return cls(frozen, float(fitness))

    @property
    def magnitude(self) -> float:
        return abs(self.fitness)


class Particle:
    """PSO state unit with a single scalar velocity.

    The velocity is shared by all coordinates; the personal best is kept as
    a :class:`Snapshot`, never as a reference to another particle. ``fitness``
    is the caller-evaluated fitness of ``position``.
    """

    __slots__ = ("position", "velocity", "fitness", "best")

    def __init__(self, position: np.ndarray, velocity: float, fitness: float) -> None:
        self.position = np.array(position, dtype=float, copy=True)
        self.velocity = float(velocity)
        self.fitness = float(fitness)
        self.best = Snapshot.of(self.position, self.fitness)

    def snapshot(self) -> Snapshot:
        return Snapshot.of(self.position, self.fitness)

    def __repr__(self) -> str:
        return f"Particle(fitness={self.fitness:.6g}, velocity={self.velocity:.6g}, best={self.best.fitness:.6g})"
