"""Utility functions for reproducibility and configuration."""

from nbody_pm.utils.reproducibility import make_rng
from nbody_pm.utils.config import load_config, save_config, SimulationConfig

__all__ = ["make_rng", "load_config", "save_config", "SimulationConfig"]
