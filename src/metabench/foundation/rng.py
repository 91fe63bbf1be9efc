"""Reproducible random streams.

Every component that needs randomness receives a :class:`RandomSource`
explicitly, so all draws made during one trial form a single sequence that
can be replayed from its seed.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

__all__ = ["RandomSource", "SeedLike"]

SeedLike = int | Sequence[int] | np.random.SeedSequence | None


class RandomSource:
    """Seedable uniform draws backed by ``numpy.random.Generator`` (PCG64).

    Parameters
    ----------
    seed : int, sequence of int, SeedSequence or None
        Entropy for the stream. ``None`` draws fresh OS entropy, which makes
        the run non-reproducible.
    """

    def __init__(self, seed: SeedLike = None) -> None:
        if isinstance(seed, np.random.SeedSequence):
            self._seq = seed
        else:
            self._seq = np.random.SeedSequence(seed)
        self.generator = np.random.Generator(np.random.PCG64(self._seq))

    @classmethod
    def from_seed(cls, seed: SeedLike) -> "RandomSource":
        return cls(seed)

    @property
    def seed_sequence(self) -> np.random.SeedSequence:
        return self._seq

    def uniform(self) -> float:
        """Return one float in ``[0, 1)``."""
        return float(self.generator.random())

    def integer(self, bound: int) -> int:
        """Return one integer in ``[0, bound)``."""
        if bound <= 0:
            raise ValueError(f"bound must be positive, got {bound}.")
        return int(self.generator.integers(0, bound))

    def uniform_array(self, low: float, high: float, size: int | tuple[int, ...]) -> np.ndarray:
        """Return an array of floats drawn uniformly from ``[low, high)``.

        Values are produced as ``u * (high - low) + low`` from ``[0, 1)``
        draws, so a single stream yields the same numbers whether it is
        consumed element by element or as an array.
        """
        u = self.generator.random(size)
        return u * (high - low) + low

    def spawn(self, n: int) -> list["RandomSource"]:
        """Return ``n`` independent, non-overlapping child streams."""
        if n < 0:
            raise ValueError(f"n must be non-negative, got {n}.")
        return [RandomSource(child) for child in self._seq.spawn(n)]

    def __repr__(self) -> str:
        return f"RandomSource(entropy={self._seq.entropy!r}, spawn_key={self._seq.spawn_key!r})"
