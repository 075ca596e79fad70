"""Particle Swarm Optimization implementation for OpenSwarm.

A step runs in two strictly ordered phases. First every particle is
updated against the same frozen global best and the same resolved
options; then, once all of them have finished, the global best is
recomputed from their current positions.

Author: Nik Jois <nikjois@llamasearch.ai>
"""

import numpy as np
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, List, Sequence, Tuple
from dataclasses import dataclass
import logging

from .distributions import Distribution
from .fitness import Objective
from .options import SwarmOptions
from .particle import Particle, UpdateSign, _read_only
from openswarm.models.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepReport:
    """Outcome of a single swarm iteration."""
    iteration: int
    omega: float
    local_best: np.ndarray
    local_fitness: float
    global_best_changed: bool
    personal_bests_improved: int


class Swarm:
    """Population of particles plus the best position any of them has found."""

    def __init__(
        self,
        size: int,
        dimensions: int,
        position_distribution: Distribution,
        velocity_distribution: Distribution,
        objective: Objective,
        seed: Optional[int] = None,
        update_sign: UpdateSign = UpdateSign.ADD,
        max_workers: Optional[int] = None,
    ):
        if size < 1:
            raise ConfigurationError(
                f"Swarm size must be at least 1, got {size}", details={"size": size}
            )
        if dimensions < 1:
            raise ConfigurationError(
                f"Swarm dimensionality must be at least 1, got {dimensions}",
                details={"dimensions": dimensions}
            )

        # One stream for the swarm (initialization, omega) and one per particle
        # so that r1/r2 draws do not depend on the order particles are updated in.
        swarm_seq, *particle_seqs = np.random.SeedSequence(seed).spawn(size + 1)
        rng = np.random.default_rng(swarm_seq)

        particles = []
        for particle_seq in particle_seqs:
            position = position_distribution.sample(dimensions, rng)
            velocity = velocity_distribution.sample(dimensions, rng)
            particles.append(Particle(
                position,
                velocity,
                rng=np.random.default_rng(particle_seq),
                update_sign=update_sign,
            ))

        self._setup(particles, objective, rng, max_workers)
        logger.info(f"Swarm initialized with {size} particles in {dimensions} dimensions")

    @classmethod
    def from_particles(
        cls,
        particles: Sequence[Particle],
        objective: Objective,
        rng: Optional[np.random.Generator] = None,
        max_workers: Optional[int] = None,
    ) -> "Swarm":
        """Build a swarm around already constructed particles."""
        particles = list(particles)
        if not particles:
            raise ConfigurationError("Swarm requires at least one particle", details={"size": 0})

        dimensions = {p.dimensions for p in particles}
        if len(dimensions) != 1:
            raise ConfigurationError(
                f"All particles must share one dimensionality, got {sorted(dimensions)}"
            )

        swarm = cls.__new__(cls)
        swarm._setup(particles, objective, rng or np.random.default_rng(), max_workers)
        logger.info(f"Swarm assembled from {len(particles)} particles")
        return swarm

    def _setup(
        self,
        particles: List[Particle],
        objective: Objective,
        rng: np.random.Generator,
        max_workers: Optional[int],
    ) -> None:
        if max_workers is not None and max_workers < 1:
            raise ConfigurationError(f"max_workers must be positive, got {max_workers}")

        self._particles = particles
        self.objective = objective
        self.rng = rng
        self.max_workers = max_workers
        self.iteration = 0

        fittest = objective.fittest_index([p.position for p in particles])
        self._global_best = particles[fittest].position.copy()

    @property
    def size(self) -> int:
        return len(self._particles)

    @property
    def dimensions(self) -> int:
        return self._global_best.size

    @property
    def particles(self) -> Tuple[Particle, ...]:
        return tuple(self._particles)

    def best(self) -> np.ndarray:
        """Global best position (read-only)."""
        return _read_only(self._global_best)

    def best_fitness(self) -> float:
        """Objective value of the global best in the caller's direction."""
        return self.objective.evaluate(self._global_best)

    def step(self, options: Optional[SwarmOptions] = None) -> StepReport:
        """Advance the swarm by exactly one iteration."""
        options = (options or SwarmOptions()).resolve(self.rng)
        global_best = self.best()
        logger.debug(f"Omega (w): {options.omega}")

        improved = self._update_particles(global_best, options)

        # Barrier passed: every particle holds its post-update position.
        positions = [p.position for p in self._particles]
        local_best = positions[self.objective.fittest_index(positions)].copy()
        local_fitness = self.objective.evaluate(local_best)
        logger.debug(f"Best in iteration {self.iteration + 1}: x: {local_best}, fitness: {local_fitness}")

        changed = self.objective.is_improvement(local_best, self._global_best)
        if changed:
            self._global_best = local_best
            logger.info(f"Global best changed to {local_best} (fitness {local_fitness})")

        self.iteration += 1
        return StepReport(
            iteration=self.iteration,
            omega=options.omega,
            local_best=_read_only(local_best),
            local_fitness=local_fitness,
            global_best_changed=changed,
            personal_bests_improved=improved,
        )

    def _update_particles(self, global_best: np.ndarray, options: SwarmOptions) -> int:
        def update(particle: Particle) -> bool:
            return particle.update(global_best, options, self.objective)

        if self.max_workers is None or self.max_workers == 1:
            results = [update(p) for p in self._particles]
        else:
            # Leaving the executor context joins every worker.
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                results = list(executor.map(update, self._particles))

        for i, particle in enumerate(self._particles):
            logger.debug(f"{i + 1}) x: {particle.position}, v: {particle.velocity}")

        return sum(results)

    def __repr__(self) -> str:
        return f"Swarm(size={self.size}, dimensions={self.dimensions}, iteration={self.iteration})"
