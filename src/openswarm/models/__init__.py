"""
Shared models for OpenSwarm.
"""

from .errors import (
    SwarmError,
    ConfigurationError,
    NonFiniteFitnessError,
    UnresolvedInertiaError,
)

__all__ = [
    "SwarmError",
    "ConfigurationError",
    "NonFiniteFitnessError",
    "UnresolvedInertiaError",
]
