"""Foundation layer: errors, logging, random streams and the benchmark catalog."""

from .exceptions import ConfigError, ConfigurationError, MetabenchError, NumericError
from .rng import RandomSource

__all__ = ["ConfigError", "ConfigurationError", "MetabenchError", "NumericError", "RandomSource"]
