"""
OpenSwarm Particle Swarm Optimization Toolkit

A particle swarm engine with direction-agnostic objectives, reproducible
randomness, optional threaded particle updates, and drivers for running,
reporting and plotting optimizations.

Author: Nik Jois <nikjois@llamasearch.ai>
Version: 1.0.0
"""

__version__ = "1.0.0"
__author__ = "Nik Jois"
__email__ = "nikjois@llamasearch.ai"

import logging

from .models.errors import (
    SwarmError,
    ConfigurationError,
    NonFiniteFitnessError,
    UnresolvedInertiaError,
)
from .optimization import (
    Objective,
    SwarmOptions,
    Distribution,
    Uniform,
    Normal,
    Constant,
    Particle,
    UpdateSign,
    Swarm,
    StepReport,
)
from .core.config import Config, load_config
from .driver import run, RunResult

__all__ = [
    # Engine
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

    # Errors
    "SwarmError",
    "ConfigurationError",
    "NonFiniteFitnessError",
    "UnresolvedInertiaError",

    # Configuration and driver
    "Config",
    "load_config",
    "run",
    "RunResult",
    "configure_logging",

    # Metadata
    "__version__",
    "__author__",
    "__email__"
]


def configure_logging(level="INFO", format_string=None):
    """Configure logging for OpenSwarm components."""
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=format_string,
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    logging.getLogger("openswarm").setLevel(getattr(logging, level.upper()))
