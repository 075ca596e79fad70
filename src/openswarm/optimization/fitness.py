"""Objective wrapper used by the particle swarm.

The swarm only ever compares positions through the maximize view of an
objective, so minimization and maximization problems share one rule:
a larger maximize-view value is better.

Author: Nik Jois <nikjois@llamasearch.ai>
"""

import math
from typing import Callable, Sequence

import numpy as np

from openswarm.models.errors import NonFiniteFitnessError


class Objective:
    """Scalar objective function tagged with its optimization direction."""

    def __init__(self, func: Callable[[np.ndarray], float], minimize: bool = True):
        if not callable(func):
            raise TypeError("Objective function must be callable")
        self._func = func
        self._minimize = bool(minimize)

    @property
    def is_minimization(self) -> bool:
        return self._minimize

    def evaluate(self, x: np.ndarray) -> float:
        """Return f(x) in the caller's own direction."""
        return float(self._func(x))

    def evaluate_for_maximization(self, x: np.ndarray) -> float:
        """Return f(x) for maximization problems and -f(x) for minimization."""
        value = self.evaluate(x)
        return -value if self._minimize else value

    def _checked(self, x: np.ndarray) -> float:
        value = self.evaluate_for_maximization(x)
        if math.isnan(value):
            raise NonFiniteFitnessError(
                "Objective returned NaN, positions cannot be ordered",
                details={"position": np.asarray(x).tolist()}
            )
        return value

    def is_improvement(self, candidate: np.ndarray, incumbent: np.ndarray) -> bool:
        """True when candidate is strictly better than incumbent.

        Ties keep the incumbent.
        """
        return self._checked(incumbent) < self._checked(candidate)

    def fittest_index(self, positions: Sequence[np.ndarray]) -> int:
        """Index of the best position; the first one wins on ties."""
        if len(positions) == 0:
            raise ValueError("Cannot select the fittest of an empty population")

        best_index = 0
        best_value = self._checked(positions[0])
        for index in range(1, len(positions)):
            value = self._checked(positions[index])
            if best_value < value:
                best_index = index
                best_value = value
        return best_index

    def __repr__(self) -> str:
        direction = "minimize" if self._minimize else "maximize"
        name = getattr(self._func, "__name__", repr(self._func))
        return f"Objective({name}, {direction})"
