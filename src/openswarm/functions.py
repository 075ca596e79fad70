"""
Benchmark objective functions for driving the swarm.
"""

import numpy as np
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from openswarm.models.errors import ConfigurationError


def booth(x: np.ndarray) -> float:
    """Booth function, minimum 0 at (1, 3)."""
    return float((x[0] + 2.0 * x[1] - 7.0) ** 2 + (2.0 * x[0] + x[1] - 5.0) ** 2)


def sphere(x: np.ndarray) -> float:
    x = np.asarray(x, dtype=np.float64)
    return float(np.dot(x, x))


def rosenbrock(x: np.ndarray) -> float:
    x = np.asarray(x, dtype=np.float64)
    return float(np.sum(100.0 * (x[1:] - x[:-1] ** 2) ** 2 + (1.0 - x[:-1]) ** 2))


def rastrigin(x: np.ndarray) -> float:
    x = np.asarray(x, dtype=np.float64)
    n = x.size
    return float(10 * n + np.sum(x ** 2 - 10 * np.cos(2 * np.pi * x)))


def ackley(x: np.ndarray) -> float:
    x = np.asarray(x, dtype=np.float64)
    n = x.size
    a, b, c = 20.0, 0.2, 2 * np.pi
    mean_sq = np.dot(x, x) / n
    mean_cos = np.mean(np.cos(c * x))
    # FP roundoff can push mean_sq slightly negative
    return float(-a * np.exp(-b * np.sqrt(max(mean_sq, 0.0)))
                 - np.exp(mean_cos) + a + np.e)


def himmelblau(x: np.ndarray) -> float:
    """Himmelblau function, four minima of value 0."""
    return float((x[0] ** 2 + x[1] - 11.0) ** 2 + (x[0] + x[1] ** 2 - 7.0) ** 2)


@dataclass(frozen=True)
class Benchmark:
    """A named test function with its usual search domain."""
    name: str
    func: Callable[[np.ndarray], float]
    bounds: Tuple[float, float]
    minimum: float = 0.0
    dimensions: Optional[int] = None  # None: any dimensionality
    description: str = ""


BENCHMARKS: Dict[str, Benchmark] = {
    "booth": Benchmark("booth", booth, (-10.0, 10.0), dimensions=2,
                       description="(x + 2y - 7)^2 + (2x + y - 5)^2"),
    "sphere": Benchmark("sphere", sphere, (-5.12, 5.12),
                        description="sum of squares"),
    "rosenbrock": Benchmark("rosenbrock", rosenbrock, (-5.0, 10.0),
                            description="banana valley"),
    "rastrigin": Benchmark("rastrigin", rastrigin, (-5.12, 5.12),
                           description="highly multimodal"),
    "ackley": Benchmark("ackley", ackley, (-32.768, 32.768),
                        description="nearly flat outer region"),
    "himmelblau": Benchmark("himmelblau", himmelblau, (-5.0, 5.0), dimensions=2,
                            description="four identical minima"),
}


def get_benchmark(name: str) -> Benchmark:
    """Look up a benchmark by name."""
    try:
        return BENCHMARKS[name.lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown objective '{name}'. Available: {', '.join(sorted(BENCHMARKS))}"
        )
