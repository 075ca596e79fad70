"""
Core OpenSwarm components.
"""

from .config import Config, SwarmConfig, OptionsConfig, OutputConfig, load_config

__all__ = ['Config', 'SwarmConfig', 'OptionsConfig', 'OutputConfig', 'load_config']
