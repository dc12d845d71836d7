"""Uniform cube preset."""

import numpy as np
from typing import List, Optional
from nbody_pm.physics.particles import Particle
from nbody_pm.presets.base import Preset
from nbody_pm.utils.config import SimulationConfig


class CubePreset(Preset):
    """Particles spread uniformly through an axis-aligned cube at the world centre."""

    def __init__(
        self,
        config: SimulationConfig,
        n_particles: Optional[int] = None,
        seed: Optional[int] = None,
        side: float = 0.5,
        particle_mass: float = 1.0,
    ):
        """Initialize cube preset.

        Args:
            config: Simulation settings
            n_particles: Number of particles
            seed: Random seed
            side: Cube side as a fraction of the smallest extent
            particle_mass: Mass of every particle
        """
        super().__init__(config, n_particles, seed)
        self.side = side
        self.particle_mass = particle_mass

    @property
    def name(self) -> str:
        return "cube"

    def generate(self) -> List[Particle]:
        """Generate cube initial conditions."""
        rng = self.rng()
        half_side = self.side * self.half_box
        center = np.asarray(self.config.world_center)
        points = center + rng.uniform(-half_side, half_side, (self.n_particles, 3))
        return [Particle(float(x), float(y), float(z), m=self.particle_mass) for x, y, z in points]
