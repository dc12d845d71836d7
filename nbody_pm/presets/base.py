"""Base class for preset scenarios."""

from abc import ABC, abstractmethod
from typing import List, Optional
import numpy as np
from nbody_pm.physics.particles import Particle
from nbody_pm.utils.config import SimulationConfig
from nbody_pm.utils.reproducibility import make_rng


class Preset(ABC):
    """Abstract base class for preset scenarios.

    Presets place particles inside the world box described by ``config``;
    they never touch the simulation itself.
    """

    def __init__(self, config: SimulationConfig, n_particles: Optional[int] = None, seed: Optional[int] = None):
        """Initialize preset.

        Args:
            config: Simulation settings (world extents and centre)
            n_particles: Number of particles, central body included
                (``config.n_particles`` if None)
            seed: Random seed for reproducibility (``config.seed`` if None)
        """
        self.config = config
        self.n_particles = config.n_particles if n_particles is None else int(n_particles)
        self.seed = config.seed if seed is None else seed
        if self.n_particles < 0:
            raise ValueError(f"n_particles must be non-negative, got {self.n_particles}")

    def rng(self) -> np.random.Generator:
        return make_rng(self.seed)

    @property
    def half_box(self) -> float:
        """Half of the smallest world extent."""
        return 0.5 * min(self.config.world_extent)

    @abstractmethod
    def generate(self) -> List[Particle]:
        """Generate initial conditions.

        Returns:
            List of particles
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this preset."""
        pass


def central_star(config: SimulationConfig, mass: float) -> Particle:
    """Resting particle at the world centre."""
    cx, cy, cz = config.world_center
    return Particle(cx, cy, cz, m=mass)
