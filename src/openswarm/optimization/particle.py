"""Particle state and update rule for Particle Swarm Optimization.

Author: Nik Jois <nikjois@llamasearch.ai>
"""

import numpy as np
from enum import Enum
from typing import Optional
import logging

from .fitness import Objective
from .options import SwarmOptions
from openswarm.models.errors import ConfigurationError, UnresolvedInertiaError

logger = logging.getLogger(__name__)


class UpdateSign(Enum):
    """How the new velocity is applied to the position."""
    ADD = "add"            # x' = x + v' (canonical PSO)
    SUBTRACT = "subtract"  # x' = x - v'

    @classmethod
    def parse(cls, value) -> "UpdateSign":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ConfigurationError(
                f"Unknown update sign '{value}', expected one of {[s.value for s in cls]}"
            )


def _read_only(array: np.ndarray) -> np.ndarray:
    view = array.view()
    view.flags.writeable = False
    return view


class Particle:
    """A candidate solution with a position, a velocity and a personal best.

    All three vectors share the dimensionality fixed at construction.
    ``rng`` supplies the per-step coefficients r1 and r2; any object with a
    ``random()`` method returning floats in [0, 1) is accepted.
    """

    def __init__(
        self,
        position: np.ndarray,
        velocity: np.ndarray,
        rng: Optional[np.random.Generator] = None,
        update_sign: UpdateSign = UpdateSign.ADD,
    ):
        position = np.array(position, dtype=float)
        velocity = np.array(velocity, dtype=float)

        if position.ndim != 1 or position.size == 0:
            raise ConfigurationError(
                f"Particle position must be a non-empty vector, got shape {position.shape}"
            )
        if velocity.shape != position.shape:
            raise ConfigurationError(
                f"Velocity shape {velocity.shape} does not match position shape {position.shape}"
            )

        self._position = position
        self._best = position.copy()
        self._velocity = velocity
        self.rng = rng if rng is not None else np.random.default_rng()
        self.update_sign = UpdateSign.parse(update_sign)

    @property
    def dimensions(self) -> int:
        return self._position.size

    @property
    def position(self) -> np.ndarray:
        return _read_only(self._position)

    @property
    def velocity(self) -> np.ndarray:
        return _read_only(self._velocity)

    @property
    def personal_best(self) -> np.ndarray:
        return _read_only(self._best)

    def update_velocity(self, global_best: np.ndarray, options: SwarmOptions) -> None:
        """v' = omega * v + phi_1 * r1 * (pbest - x) + phi_2 * r2 * (gbest - x)."""
        if options.omega is None:
            raise UnresolvedInertiaError()

        global_best = np.asarray(global_best, dtype=float)
        if global_best.shape != self._position.shape:
            raise ConfigurationError(
                f"Global best shape {global_best.shape} does not match particle shape {self._position.shape}"
            )

        inertia = options.omega * self._velocity

        r1 = float(self.rng.random())
        cognitive = options.phi_1 * r1 * (self._best - self._position)

        r2 = float(self.rng.random())
        social = options.phi_2 * r2 * (global_best - self._position)

        logger.debug(f"r1: {r1}, r2: {r2}")

        self._velocity = inertia + cognitive + social

    def update_position(self) -> None:
        if self.update_sign is UpdateSign.ADD:
            self._position = self._position + self._velocity
        else:
            self._position = self._position - self._velocity

    def update_best(self, objective: Objective) -> bool:
        """Replace the personal best if the current position is strictly better."""
        if objective.is_improvement(self._position, self._best):
            self._best = self._position.copy()
            return True
        return False

    def update(self, global_best: np.ndarray, options: SwarmOptions, objective: Objective) -> bool:
        """Run one full iteration: velocity, then position, then personal best."""
        self.update_velocity(global_best, options)
        self.update_position()
        return self.update_best(objective)

    def __repr__(self) -> str:
        return f"Particle(x={self._position}, v={self._velocity}, best={self._best})"
