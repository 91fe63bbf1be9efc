from .base import GenerationObserver, NullObserver, Objective, StrategyResult
from .blind_search import BlindSearch
from .config import (
    MIN_DE_POPULATION,
    BlindSearchConfig,
    CrossoverFamily,
    DEConfig,
    DEMethod,
    LocalSearchConfig,
    PSOConfig,
    StrategyKind,
)
from .de import MAX_CROSSOVER_PASSES, DifferentialEvolution, draw_donors
from .local_search import IteratedLocalSearch
from .pso import ParticleSwarm

__all__ = [
    "MAX_CROSSOVER_PASSES",
    "MIN_DE_POPULATION",
    "BlindSearch",
    "BlindSearchConfig",
    "CrossoverFamily",
    "DEConfig",
    "DEMethod",
    "DifferentialEvolution",
    "GenerationObserver",
    "IteratedLocalSearch",
    "LocalSearchConfig",
    "NullObserver",
    "Objective",
    "PSOConfig",
    "ParticleSwarm",
    "StrategyKind",
    "StrategyResult",
    "draw_donors",
]
