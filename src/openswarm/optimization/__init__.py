"""
Particle swarm optimization engine for OpenSwarm.

Author: Nik Jois <nikjois@llamasearch.ai>
"""

from .fitness import Objective
from .options import SwarmOptions
from .distributions import Distribution, Uniform, Normal, Constant
from .particle import Particle, UpdateSign
from .particle_swarm import Swarm, StepReport

__all__ = [
    "Objective",
    "SwarmOptions",
    "Distribution",
    "Uniform",
    "Normal",
    "Constant",
    "Particle",
    "UpdateSign",
    "Swarm",
    "StepReport",
]
