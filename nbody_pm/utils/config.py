"""Configuration management."""

import json
import os
import yaml
from typing import Dict, Any, Optional, Tuple
from pathlib import Path
from dataclasses import dataclass, asdict

BOUNDARY_POLICIES = ("clamp", "drop", "open")


@dataclass
class SimulationConfig:
    """Simulation configuration.

    Grid resolution and world extents are fixed for the lifetime of a
    simulation; the mesh buffers are sized from them once at construction.
    """
    # Mesh
    grid_size_x: int = 64
    grid_size_y: int = 64
    grid_size_z: int = 64
    world_width: float = 1_000_000.0
    world_height: float = 1_000_000.0
    world_depth: float = 1_000_000.0

    # Physics
    g: float = 10.0
    dt: float = 1.0
    smoothing_iterations: int = 60
    boundary: str = "drop"
    solver: str = "relaxation"

    # Execution
    n_workers: Optional[int] = None
    backend: str = "numpy"

    # Interactive black hole
    black_hole_mass: float = 1_000_000.0

    # Initial conditions
    preset: str = "shell"
    n_particles: int = 10_000
    preset_params: Dict[str, Any] = None

    # Reproducibility
    seed: Optional[int] = None

    def __post_init__(self):
        if self.preset_params is None:
            self.preset_params = {}
        if self.n_workers is None:
            self.n_workers = os.cpu_count() or 1

        for axis, size in zip("xyz", self.grid_shape):
            if int(size) < 3:
                raise ValueError(
                    f"grid_size_{axis} must be at least 3 for central differencing, got {size}"
                )
        for axis, extent in zip("xyz", self.world_extent):
            if not extent > 0:
                raise ValueError(f"World extent along {axis} must be positive, got {extent}")
        if self.boundary not in BOUNDARY_POLICIES:
            raise ValueError(
                f"Unknown boundary policy '{self.boundary}'. Available: {list(BOUNDARY_POLICIES)}"
            )
        if self.smoothing_iterations < 1:
            raise ValueError(
                f"smoothing_iterations must be >= 1, got {self.smoothing_iterations}"
            )
        if self.n_workers < 1:
            raise ValueError(f"n_workers must be >= 1, got {self.n_workers}")

    @property
    def grid_shape(self) -> Tuple[int, int, int]:
        return (int(self.grid_size_x), int(self.grid_size_y), int(self.grid_size_z))

    @property
    def world_extent(self) -> Tuple[float, float, float]:
        return (float(self.world_width), float(self.world_height), float(self.world_depth))

    @property
    def cell_size(self) -> Tuple[float, float, float]:
        return tuple(extent / size for extent, size in zip(self.world_extent, self.grid_shape))

    @property
    def world_center(self) -> Tuple[float, float, float]:
        return tuple(0.5 * extent for extent in self.world_extent)

    @classmethod
    def cubic(cls, grid_size: int, world_size: float, **kwargs) -> "SimulationConfig":
        """Build a config with the same resolution and extent on every axis."""
        return cls(
            grid_size_x=grid_size,
            grid_size_y=grid_size,
            grid_size_z=grid_size,
            world_width=world_size,
            world_height=world_size,
            world_depth=world_size,
            **kwargs,
        )


def load_config(config_path: str) -> SimulationConfig:
    """Load configuration from file.

    Args:
        config_path: Path to config file (.json or .yaml)

    Returns:
        SimulationConfig object
    """
    config_path = Path(config_path)

    with open(config_path, 'r') as f:
        if config_path.suffix in ('.yaml', '.yml'):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)

    return SimulationConfig(**(data or {}))


def save_config(config: SimulationConfig, output_path: str):
    """Save configuration to file.

    Args:
        config: SimulationConfig object
        output_path: Output file path (.json or .yaml)
    """
    output_path = Path(output_path)
    data = asdict(config)

    with open(output_path, 'w') as f:
        if output_path.suffix in ('.yaml', '.yml'):
            yaml.dump(data, f, default_flow_style=False)
        else:
            json.dump(data, f, indent=2)
