"""Flat disk preset with a mixed stellar population."""

import numpy as np
from typing import List, Optional, Tuple
from nbody_pm.physics.particles import Particle
from nbody_pm.presets.base import Preset, central_star
from nbody_pm.utils.config import SimulationConfig

# (fraction of the budget, mass range); remnants take whatever is left
STELLAR_CLASSES: Tuple[Tuple[float, Tuple[float, float]], ...] = (
    (0.70, (0.08, 0.60)),    # red dwarfs
    (0.125, (0.60, 1.50)),   # medium stars
    (0.05, (1.50, 8.00)),    # massive stars
    (0.005, (8.00, 150.0)),  # supermassive stars
)
REMNANT_MASS_RANGE = (0.90, 1.10)


class DiskPreset(Preset):
    """Thin disk in the x-y plane around a central star.

    Particle masses follow a fixed stellar mix so a few heavy stars sit
    among many light ones.
    """

    def __init__(
        self,
        config: SimulationConfig,
        n_particles: Optional[int] = None,
        seed: Optional[int] = None,
        radius: float = 0.6,
        inner_radius: float = 0.05,
        half_thickness: float = 0.01,
        central_mass: float = 100_000.0,
    ):
        """Initialize disk preset.

        Args:
            config: Simulation settings
            n_particles: Number of particles, central star included
            seed: Random seed
            radius: Outer disk radius as a fraction of half the smallest extent
            inner_radius: Empty hole around the star, same units
            half_thickness: Half of the disk thickness, same units
            central_mass: Mass of the central star (0 to omit it)
        """
        super().__init__(config, n_particles, seed)
        if not 0 <= inner_radius < radius:
            raise ValueError(f"Need 0 <= inner_radius < radius, got {inner_radius}, {radius}")
        self.radius = radius
        self.inner_radius = inner_radius
        self.half_thickness = half_thickness
        self.central_mass = central_mass

    @property
    def name(self) -> str:
        return "disk"

    def stellar_masses(self, n: int, rng: np.random.Generator) -> np.ndarray:
        """Draw ``n`` masses following the stellar class mix."""
        masses = []
        remaining = n
        for fraction, (m_lo, m_hi) in STELLAR_CLASSES:
            count = min(int(round(n * fraction)), remaining)
            masses.append(rng.uniform(m_lo, m_hi, count))
            remaining -= count
        masses.append(rng.uniform(*REMNANT_MASS_RANGE, remaining))
        return np.concatenate(masses)

    def generate(self) -> List[Particle]:
        """Generate disk initial conditions."""
        particles = []
        n = self.n_particles
        if self.central_mass > 0 and n > 0:
            particles.append(central_star(self.config, self.central_mass))
            n -= 1

        rng = self.rng()
        scale = self.half_box
        # Area-uniform radii between the inner hole and the rim
        r_in, r_out = self.inner_radius * scale, self.radius * scale
        r = np.sqrt(rng.uniform(r_in ** 2, r_out ** 2, n))
        theta = rng.uniform(0.0, 2.0 * np.pi, n)
        h = self.half_thickness * scale
        dz = rng.uniform(-h, h, n)
        masses = self.stellar_masses(n, rng)

        cx, cy, cz = self.config.world_center
        x = cx + r * np.cos(theta)
        y = cy + r * np.sin(theta)
        z = cz + dz

        for i in range(n):
            particles.append(Particle(float(x[i]), float(y[i]), float(z[i]), m=float(masses[i])))
        return particles
