"""
Configuration management for OpenSwarm runs.
"""

import os
import math
import yaml
import logging
from typing import Dict, Any, Optional, Union, Tuple
from dataclasses import dataclass, field, asdict, fields
from pathlib import Path

from openswarm.models.errors import ConfigurationError
from openswarm.optimization.options import SwarmOptions
from openswarm.optimization.particle import UpdateSign


logger = logging.getLogger(__name__)


@dataclass
class SwarmConfig:
    """Population and initialization settings."""
    size: int = 10
    dimensions: int = 2
    position_range: Tuple[float, float] = (-10.0, 10.0)
    velocity_range: Tuple[float, float] = (-1.0, 1.0)
    update_sign: str = "add"  # add, subtract
    max_workers: Optional[int] = None


@dataclass
class OptionsConfig:
    """Velocity update coefficients."""
    omega: Optional[float] = None  # None: random in [0, 1) each step
    phi_1: float = 2.0
    phi_2: float = 2.0

    def to_options(self) -> SwarmOptions:
        return SwarmOptions(omega=self.omega, phi_1=self.phi_1, phi_2=self.phi_2)


@dataclass
class OutputConfig:
    """Reporting and plotting settings."""
    show_particles: bool = False
    summary_every: int = 0  # 0: final summary only
    plot_path: Optional[str] = None
    frame_duration: int = 250  # milliseconds
    plot_bounds: Tuple[float, float] = (-5.0, 5.0)


@dataclass
class Config:
    """Main configuration class for an OpenSwarm run."""

    # Problem
    objective: str = "booth"
    maximize: bool = False
    iterations: int = 80
    seed: Optional[int] = None

    # Component configurations
    swarm: SwarmConfig = field(default_factory=SwarmConfig)
    options: OptionsConfig = field(default_factory=OptionsConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    # Environment settings
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "WARNING"))

    def __post_init__(self):
        """Post-initialization configuration setup."""
        self.swarm.position_range = tuple(self.swarm.position_range)
        self.swarm.velocity_range = tuple(self.swarm.velocity_range)
        self.output.plot_bounds = tuple(self.output.plot_bounds)
        self._validate()

    def _validate(self):
        """Validate configuration settings."""
        if self.swarm.size < 1:
            raise ConfigurationError("swarm.size must be at least 1")

        if self.swarm.dimensions < 1:
            raise ConfigurationError("swarm.dimensions must be at least 1")

        if self.iterations < 0:
            raise ConfigurationError("iterations must not be negative")

        for name in ("position_range", "velocity_range"):
            low, high = getattr(self.swarm, name)
            if not low < high:
                raise ConfigurationError(f"swarm.{name} must satisfy low < high, got ({low}, {high})")

        low, high = self.output.plot_bounds
        if not low < high:
            raise ConfigurationError(f"output.plot_bounds must satisfy low < high, got ({low}, {high})")

        UpdateSign.parse(self.swarm.update_sign)

        if self.swarm.max_workers is not None and self.swarm.max_workers < 1:
            raise ConfigurationError("swarm.max_workers must be positive")

        for name in ("phi_1", "phi_2"):
            if not math.isfinite(getattr(self.options, name)):
                raise ConfigurationError(f"options.{name} must be finite")

        if self.output.summary_every < 0:
            raise ConfigurationError("output.summary_every must not be negative")

        if self.output.plot_path and self.swarm.dimensions < 2:
            raise ConfigurationError("Plotting requires at least 2 dimensions")

        if self.options.omega is not None and not 0.0 <= self.options.omega <= 1.0:
            logger.warning(
                f"Inertia weight {self.options.omega} is outside [0, 1]; the swarm may diverge"
            )

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "Config":
        """Load configuration from YAML file."""
        config_path = Path(config_path)

        if not config_path.exists():
            logger.warning(f"Config file {config_path} not found, using defaults")
            return cls()

        try:
            with open(config_path, 'r') as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Failed to parse config file {config_path}: {e}",
                details={"path": str(config_path)}
            )

        if not config_data:
            logger.warning("Empty config file, using defaults")
            return cls()

        return cls.from_dict(config_data)

    @classmethod
    def from_dict(cls, config_data: Dict[str, Any]) -> "Config":
        """Create configuration from a nested dictionary."""
        nested = {"swarm": SwarmConfig, "options": OptionsConfig, "output": OutputConfig}
        known = {f.name for f in fields(cls)}

        unknown = set(config_data) - known
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {sorted(unknown)}")

        try:
            # Create nested config objects
            sections = {
                name: section_cls(**(config_data.get(name) or {}))
                for name, section_cls in nested.items()
            }
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration section: {e}")

        # Remove nested configs from main config
        main_config = {k: v for k, v in config_data.items() if k not in nested}

        return cls(**sections, **main_config)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        data = asdict(self)
        # Tuples are not safe_load-able
        data["swarm"]["position_range"] = list(self.swarm.position_range)
        data["swarm"]["velocity_range"] = list(self.swarm.velocity_range)
        data["output"]["plot_bounds"] = list(self.output.plot_bounds)
        return data

    def to_file(self, config_path: Union[str, Path]):
        """Save configuration to YAML file."""
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(config_path, 'w') as f:
                yaml.safe_dump(self.to_dict(), f, default_flow_style=False, indent=2)

            logger.info(f"Configuration saved to {config_path}")

        except Exception as e:
            logger.error(f"Failed to save config to {config_path}: {e}")
            raise

    def update_from_env(self):
        """Update configuration from environment variables."""
        env_mappings = {
            "OPENSWARM_OBJECTIVE": "objective",
            "OPENSWARM_ITERATIONS": ("iterations", int),
            "OPENSWARM_SEED": ("seed", int),
            "OPENSWARM_MAXIMIZE": ("maximize", lambda x: x.lower() == "true"),
            "OPENSWARM_OMEGA": ("options.omega", float),
            "OPENSWARM_PHI_1": ("options.phi_1", float),
            "OPENSWARM_PHI_2": ("options.phi_2", float),
            "OPENSWARM_SWARM_SIZE": ("swarm.size", int),
            "OPENSWARM_DIMENSIONS": ("swarm.dimensions", int),
        }

        for env_var, config_path in env_mappings.items():
            value = os.getenv(env_var)
            if value is None:
                continue

            if isinstance(config_path, tuple):
                attr_path, converter = config_path
                try:
                    value = converter(value)
                except ValueError as e:
                    raise ConfigurationError(f"Invalid value for {env_var}: {e}")
            else:
                attr_path = config_path

            # Handle nested attributes
            if "." in attr_path:
                obj_name, attr_name = attr_path.split(".", 1)
                setattr(getattr(self, obj_name), attr_name, value)
            else:
                setattr(self, attr_path, value)

            logger.info(f"Updated {attr_path} from environment variable {env_var}")

        self._validate()


def load_config(config_path: Optional[Union[str, Path]] = None) -> Config:
    """
    Load configuration from file or environment.

    Args:
        config_path: Path to configuration file (optional)

    Returns:
        Loaded configuration object
    """
    if config_path:
        config = Config.from_file(config_path)
    else:
        # Look for config file in standard locations
        possible_paths = [
            "openswarm.yaml",
            "config/openswarm.yaml",
            os.path.expanduser("~/.openswarm/config.yaml"),
        ]

        config = None
        for path in possible_paths:
            if os.path.exists(path):
                config = Config.from_file(path)
                break

        if config is None:
            config = Config()

    # Update from environment variables
    config.update_from_env()

    return config
