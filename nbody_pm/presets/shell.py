"""Spherical shell preset."""

import numpy as np
from typing import List, Optional
from nbody_pm.physics.particles import Particle
from nbody_pm.presets.base import Preset, central_star
from nbody_pm.utils.config import SimulationConfig


class ShellPreset(Preset):
    """Thin spherical shell of equal-mass particles around a central star."""

    def __init__(
        self,
        config: SimulationConfig,
        n_particles: Optional[int] = None,
        seed: Optional[int] = None,
        radius: float = 0.3,
        thickness: float = 0.05,
        central_mass: float = 10_000.0,
        particle_mass: float = 1.0,
    ):
        """Initialize shell preset.

        Args:
            config: Simulation settings
            n_particles: Number of particles, central star included
            seed: Random seed
            radius: Shell radius as a fraction of half the smallest extent
            thickness: Shell thickness, same units as ``radius``
            central_mass: Mass of the central star (0 to omit it)
            particle_mass: Mass of every shell particle
        """
        super().__init__(config, n_particles, seed)
        self.radius = radius
        self.thickness = thickness
        self.central_mass = central_mass
        self.particle_mass = particle_mass

    @property
    def name(self) -> str:
        return "shell"

    def generate(self) -> List[Particle]:
        """Generate shell initial conditions."""
        particles = []
        n = self.n_particles
        if self.central_mass > 0 and n > 0:
            particles.append(central_star(self.config, self.central_mass))
            n -= 1

        rng = self.rng()
        scale = self.half_box
        r_inner = (self.radius - 0.5 * self.thickness) * scale
        r_outer = (self.radius + 0.5 * self.thickness) * scale
        r = rng.uniform(r_inner, r_outer, n)

        # Uniform directions on the sphere
        theta = rng.uniform(0.0, 2.0 * np.pi, n)
        cos_phi = rng.uniform(-1.0, 1.0, n)
        sin_phi = np.sqrt(1.0 - cos_phi ** 2)

        cx, cy, cz = self.config.world_center
        x = cx + r * sin_phi * np.cos(theta)
        y = cy + r * sin_phi * np.sin(theta)
        z = cz + r * cos_phi

        for i in range(n):
            particles.append(Particle(float(x[i]), float(y[i]), float(z[i]), m=self.particle_mass))
        return particles
