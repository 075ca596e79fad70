"""
Per-iteration metrics collection for swarm runs.
"""

import time
from typing import Dict, List, Any, Optional
from dataclasses import dataclass, field
from datetime import datetime
import logging

import numpy as np

from .optimization.particle_swarm import Swarm, StepReport

logger = logging.getLogger(__name__)


@dataclass
class IterationMetrics:
    """Snapshot of a swarm after one iteration."""

    iteration: int
    best_fitness: float
    local_fitness: float
    mean_fitness: float
    omega: Optional[float] = None
    global_best_changed: bool = False
    personal_bests_improved: int = 0
    duration: float = 0.0
    timestamp: datetime = field(default_factory=datetime.utcnow)


class SwarmMonitor:
    """
    Collects fitness statistics across the iterations of a run.

    Fitness values are reported in the objective's own direction.
    """

    def __init__(self, swarm: Swarm):
        self.swarm = swarm
        self.history: List[IterationMetrics] = []
        self._last_tick = time.perf_counter()

        # Iteration 0 is the freshly initialized swarm
        fitness = self._particle_fitness()
        self.history.append(IterationMetrics(
            iteration=swarm.iteration,
            best_fitness=swarm.best_fitness(),
            local_fitness=self._best_of(fitness),
            mean_fitness=float(np.mean(fitness)),
        ))

        logger.info("SwarmMonitor initialized")

    def _particle_fitness(self) -> np.ndarray:
        return np.array([self.swarm.objective.evaluate(p.position) for p in self.swarm.particles])

    def _best_of(self, fitness: np.ndarray) -> float:
        if self.swarm.objective.is_minimization:
            return float(np.min(fitness))
        return float(np.max(fitness))

    def record(self, report: StepReport) -> IterationMetrics:
        """Record the state of the swarm after ``report``'s step."""
        now = time.perf_counter()
        fitness = self._particle_fitness()

        metrics = IterationMetrics(
            iteration=report.iteration,
            best_fitness=self.swarm.best_fitness(),
            local_fitness=report.local_fitness,
            mean_fitness=float(np.mean(fitness)),
            omega=report.omega,
            global_best_changed=report.global_best_changed,
            personal_bests_improved=report.personal_bests_improved,
            duration=now - self._last_tick,
        )
        self._last_tick = now
        self.history.append(metrics)
        return metrics

    def best_curve(self) -> np.ndarray:
        """Global best fitness per recorded iteration."""
        return np.array([m.best_fitness for m in self.history])

    def get_summary(self) -> Dict[str, Any]:
        """Aggregate statistics over the recorded run."""
        curve = self.best_curve()
        changes = sum(1 for m in self.history if m.global_best_changed)

        return {
            "iterations": self.history[-1].iteration,
            "initial_best_fitness": float(curve[0]),
            "final_best_fitness": float(curve[-1]),
            "improvement": float(abs(curve[-1] - curve[0])),
            "global_best_changes": changes,
            "total_time": sum(m.duration for m in self.history),
            "best_position": self.swarm.best().tolist(),
        }
