"""Engine layer: population, particles, search strategies and the trial runner."""

from .algorithm import (
    BlindSearchConfig,
    CrossoverFamily,
    DEConfig,
    DEMethod,
    LocalSearchConfig,
    PSOConfig,
    StrategyKind,
)
from .optimizer import EngineSettings, OptimizationEngine, TrialResult
from .particle import Particle, Snapshot
from .population import Population

__all__ = [
    "BlindSearchConfig",
    "CrossoverFamily",
    "DEConfig",
    "DEMethod",
    "EngineSettings",
    "LocalSearchConfig",
    "OptimizationEngine",
    "PSOConfig",
    "Particle",
    "Population",
    "Snapshot",
    "StrategyKind",
    "TrialResult",
]
