"""Per-step parameters for the particle swarm."""

import math
from dataclasses import dataclass, replace
from typing import Optional

import numpy as np

from openswarm.models.errors import ConfigurationError


@dataclass(frozen=True)
class SwarmOptions:
    """Velocity update coefficients.

    When ``omega`` is None a fresh inertia weight is drawn uniformly from
    [0, 1) at the start of every step and shared by all particles.
    """
    omega: Optional[float] = None
    phi_1: float = 2.0
    phi_2: float = 2.0

    def __post_init__(self):
        for name in ("phi_1", "phi_2"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ConfigurationError(f"{name} must be finite, got {value}")

    @property
    def is_resolved(self) -> bool:
        return self.omega is not None

    def resolve(self, rng: np.random.Generator) -> "SwarmOptions":
        """Return options with a concrete inertia weight for one step."""
        if self.omega is not None:
            return self
        return replace(self, omega=float(rng.random()))
