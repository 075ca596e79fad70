"""
Textual reporting of swarm state.

Author: Nik Jois <nikjois@llamasearch.ai>
"""

from typing import Optional

import numpy as np
from rich.table import Table

from .optimization.particle_swarm import Swarm


def format_vector(vector: np.ndarray, precision: int = 6) -> str:
    return np.array2string(np.asarray(vector), precision=precision, separator=", ")


def format_summary(swarm: Swarm, show_particles: bool = False) -> str:
    """
    Build a plain-text summary of the swarm.

    Sections: particles (optional), current fitness of each particle,
    personal bests, and the global best. Fitness values are reported in
    the objective's own direction.
    """
    objective = swarm.objective
    particles_out = []
    fitness_out = [">>> Fitness <<<"]
    bests_out = [">>> Personal bests <<<"]

    if show_particles:
        particles_out.append(">>> Particles <<<")

    for i, particle in enumerate(swarm.particles, start=1):
        if show_particles:
            particles_out.append(
                f"{i}) x: {format_vector(particle.position)},  v: {format_vector(particle.velocity)}"
            )

        fitness_out.append(f"{i}) {objective.evaluate(particle.position)}")
        bests_out.append(
            f"{i}) x: {format_vector(particle.personal_best)}, "
            f"fitness: {objective.evaluate(particle.personal_best)}"
        )

    best_global = (
        f">>> Global best: x: {format_vector(swarm.best())}, fitness: {swarm.best_fitness()}"
    )

    return "\n".join(particles_out + fitness_out + bests_out + [best_global])


def build_particle_table(swarm: Swarm, title: Optional[str] = None) -> Table:
    """Rich table with one row per particle."""
    table = Table(title=title or f"Swarm (iteration {swarm.iteration})")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Position")
    table.add_column("Velocity")
    table.add_column("Fitness", justify="right")
    table.add_column("Personal best")
    table.add_column("Best fitness", justify="right", style="green")

    objective = swarm.objective
    for i, particle in enumerate(swarm.particles, start=1):
        table.add_row(
            str(i),
            format_vector(particle.position, precision=4),
            format_vector(particle.velocity, precision=4),
            f"{objective.evaluate(particle.position):.6g}",
            format_vector(particle.personal_best, precision=4),
            f"{objective.evaluate(particle.personal_best):.6g}",
        )

    return table
