"""
Outer optimization loop: builds a swarm from a Config and iterates it.

Author: Nik Jois <nikjois@llamasearch.ai>
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import numpy as np

from .core.config import Config
from .functions import get_benchmark
from .models.errors import ConfigurationError
from .monitoring import SwarmMonitor, IterationMetrics
from .optimization import Objective, Swarm, StepReport, Uniform, UpdateSign
from .plotting import SwarmPlotter

logger = logging.getLogger(__name__)

StepCallback = Callable[[Swarm, StepReport], None]


@dataclass
class RunResult:
    """Outcome of a complete run."""
    best_position: np.ndarray
    best_fitness: float
    iterations: int
    history: List[IterationMetrics] = field(default_factory=list)
    execution_time: float = 0.0
    plot_path: Optional[Path] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "best_position": self.best_position.tolist(),
            "best_fitness": self.best_fitness,
            "iterations": self.iterations,
            "execution_time": self.execution_time,
            "plot_path": str(self.plot_path) if self.plot_path else None,
        }


def build_objective(config: Config) -> Objective:
    benchmark = get_benchmark(config.objective)
    if benchmark.dimensions is not None and benchmark.dimensions != config.swarm.dimensions:
        raise ConfigurationError(
            f"Objective '{benchmark.name}' is defined for {benchmark.dimensions} dimensions, "
            f"got {config.swarm.dimensions}"
        )
    return Objective(benchmark.func, minimize=not config.maximize)


def build_swarm(config: Config, objective: Optional[Objective] = None) -> Swarm:
    """Create the initial swarm described by ``config``."""
    if objective is None:
        objective = build_objective(config)

    return Swarm(
        size=config.swarm.size,
        dimensions=config.swarm.dimensions,
        position_distribution=Uniform(*config.swarm.position_range),
        velocity_distribution=Uniform(*config.swarm.velocity_range),
        objective=objective,
        seed=config.seed,
        update_sign=UpdateSign.parse(config.swarm.update_sign),
        max_workers=config.swarm.max_workers,
    )


def describe_parameters(config: Config) -> Dict[str, str]:
    """Human readable run parameters."""
    low, high = config.swarm.velocity_range
    omega = config.options.omega
    return {
        "Objective": f"{config.objective} ({'maximize' if config.maximize else 'minimize'})",
        "Population size": str(config.swarm.size),
        "Dimensions": str(config.swarm.dimensions),
        "Initial velocity": f"between ({low}, {high})",
        "Omega (w)": "random in [0, 1) each iteration" if omega is None else str(omega),
        "rand1, rand2": "random in [0, 1) for each particle",
        "Phi_1": str(config.options.phi_1),
        "Phi_2": str(config.options.phi_2),
        "Iterations": str(config.iterations),
    }


def run(
    config: Config,
    objective: Optional[Objective] = None,
    on_start: Optional[Callable[[Swarm], None]] = None,
    on_step: Optional[StepCallback] = None,
) -> RunResult:
    """Run ``config.iterations`` steps and return the best position found."""
    start_time = time.time()

    swarm = build_swarm(config, objective)
    options = config.options.to_options()
    monitor = SwarmMonitor(swarm)

    if on_start is not None:
        on_start(swarm)

    plotter = None
    if config.output.plot_path:
        plotter = SwarmPlotter(bounds=config.output.plot_bounds)
        plotter.add_frame(swarm, 0)

    for _ in range(config.iterations):
        report = swarm.step(options)
        monitor.record(report)

        if plotter is not None:
            plotter.add_frame(swarm, report.iteration)

        if on_step is not None:
            on_step(swarm, report)

    plot_path = None
    if plotter is not None:
        plot_path = plotter.save(config.output.plot_path, config.output.frame_duration)

    result = RunResult(
        best_position=swarm.best().copy(),
        best_fitness=swarm.best_fitness(),
        iterations=swarm.iteration,
        history=monitor.history,
        execution_time=time.time() - start_time,
        plot_path=plot_path,
    )

    logger.info(
        f"Run finished after {result.iterations} iterations: "
        f"x: {result.best_position}, fitness: {result.best_fitness}"
    )
    return result
