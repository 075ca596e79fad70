"""
Shared fixtures for OpenSwarm tests.
"""

import numpy as np
import pytest

from openswarm.optimization import Objective


class FixedRandom:
    """Random source that replays a fixed sequence of draws."""

    def __init__(self, *values):
        self.values = list(values)
        self.calls = 0

    def random(self):
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


def sum_of_squares(x):
    return float(np.sum(np.asarray(x) ** 2))


@pytest.fixture
def fixed_random():
    """Factory for deterministic r1/r2 sources."""
    return FixedRandom


@pytest.fixture
def sphere_objective():
    """f(x) = sum(x^2), minimized."""
    return Objective(sum_of_squares, minimize=True)
