"""
Sampling distributions for initial particle positions and velocities.

Author: Nik Jois <nikjois@llamasearch.ai>
"""

import numpy as np
from abc import ABC, abstractmethod
from dataclasses import dataclass

from openswarm.models.errors import ConfigurationError


class Distribution(ABC):
    """Source of i.i.d. scalars used to build initial vectors."""

    @abstractmethod
    def sample(self, size: int, rng: np.random.Generator) -> np.ndarray:
        """Draw ``size`` independent values."""
        pass


@dataclass(frozen=True)
class Uniform(Distribution):
    """Uniform distribution over [low, high)."""
    low: float
    high: float

    def __post_init__(self):
        if not self.low < self.high:
            raise ConfigurationError(
                f"Uniform distribution requires low < high, got [{self.low}, {self.high})"
            )

    def sample(self, size: int, rng: np.random.Generator) -> np.ndarray:
        return rng.uniform(self.low, self.high, size=size)


@dataclass(frozen=True)
class Normal(Distribution):
    """Normal distribution with the given mean and standard deviation."""
    mean: float = 0.0
    std: float = 1.0

    def __post_init__(self):
        if self.std <= 0:
            raise ConfigurationError(f"Normal distribution requires std > 0, got {self.std}")

    def sample(self, size: int, rng: np.random.Generator) -> np.ndarray:
        return rng.normal(self.mean, self.std, size=size)


@dataclass(frozen=True)
class Constant(Distribution):
    """Degenerate distribution that always yields ``value``."""
    value: float = 0.0

    def sample(self, size: int, rng: np.random.Generator) -> np.ndarray:
        return np.full(size, self.value, dtype=float)
