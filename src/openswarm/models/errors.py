"""
Error types raised by the OpenSwarm optimization engine.

Author: Nik Jois <nikjois@llamasearch.ai>
"""

import time
from typing import Dict, Any, Optional


class SwarmError(Exception):
    """Base exception for swarm optimization errors."""

    def __init__(
        self,
        message: str,
        error_type: str = "swarm_error",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.details = details or {}
        self.timestamp = time.time()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "message": self.message,
            "error_type": self.error_type,
            "details": self.details,
            "timestamp": self.timestamp
        }


class ConfigurationError(SwarmError):
    """Raised when a swarm or run cannot be constructed from its parameters."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_type="configuration_error", details=details)


class NonFiniteFitnessError(SwarmError):
    """Raised when an objective value cannot be ordered (NaN)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_type="non_finite_fitness", details=details)


class UnresolvedInertiaError(SwarmError):
    """Raised when a particle is updated without a concrete inertia weight."""

    def __init__(self, message: str = "Inertia weight (omega) was not resolved before the particle update"):
        super().__init__(message, error_type="unresolved_inertia")
