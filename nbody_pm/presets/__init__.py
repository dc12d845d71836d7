"""Preset scenario generators for particle-mesh simulations."""

from typing import Dict, List, Optional, Type
from nbody_pm.presets.base import Preset
from nbody_pm.presets.cube import CubePreset
from nbody_pm.presets.disk import DiskPreset
from nbody_pm.presets.shell import ShellPreset
from nbody_pm.utils.config import SimulationConfig

PRESETS: Dict[str, Type[Preset]] = {
    "shell": ShellPreset,
    "disk": DiskPreset,
    "cube": CubePreset,
}


def register_preset(name: str, preset_cls: Type[Preset]):
    """Register a preset class under a name (replaces any existing entry)."""
    PRESETS[name] = preset_cls


def list_presets() -> List[str]:
    """List registered preset names."""
    return sorted(PRESETS)


def get_preset(
    name: str,
    config: SimulationConfig,
    n_particles: Optional[int] = None,
    seed: Optional[int] = None,
    **params,
) -> Preset:
    """Build a registered preset.

    Args:
        name: Registry name ('shell', 'disk', 'cube', ...)
        config: Simulation settings
        n_particles: Particle count override
        seed: Seed override
        **params: Preset-specific keyword arguments

    Raises:
        ValueError: If no preset is registered under ``name``
    """
    try:
        preset_cls = PRESETS[name]
    except KeyError:
        raise ValueError(f"Unknown preset '{name}'. Available: {list_presets()}") from None
    return preset_cls(config, n_particles=n_particles, seed=seed, **params)


__all__ = [
    "Preset",
    "ShellPreset",
    "DiskPreset",
    "CubePreset",
    "PRESETS",
    "register_preset",
    "list_presets",
    "get_preset",
]
