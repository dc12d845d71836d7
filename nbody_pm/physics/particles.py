"""Particle records and the structure-of-arrays particle store."""

import math
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple
import numpy as np
from nbody_pm.backends.base import Backend


@dataclass
class Particle:
    """One particle as handed across the simulation boundary.

    ``r`` is the display radius used by renderers; it defaults to sqrt(m).
    """
    x: float
    y: float
    z: float
    vx: float = 0.0
    vy: float = 0.0
    vz: float = 0.0
    m: float = 1.0
    r: Optional[float] = None

    def __post_init__(self):
        if not self.m >= 0:
            raise ValueError(f"Particle mass must be non-negative, got {self.m}")
        if self.r is None:
            self.r = math.sqrt(self.m)


class ParticleStore:
    """Per-particle state held column-wise.

    Positions and velocities are ``(3, n)`` arrays, so every axis row
    (``x``, ``vy``, ...) is its own contiguous array; masses and radii are
    ``(n,)``. Particles are addressed by their current index only, and
    indices shift whenever the store is compacted.
    """

    def __init__(
        self,
        backend: Backend,
        positions: Any = None,
        velocities: Any = None,
        masses: Any = None,
        radii: Any = None,
    ):
        """Initialize the store from column arrays.

        Args:
            backend: Compute backend owning the arrays
            positions: (3, n) positions
            velocities: (3, n) velocities (zeros if None)
            masses: (n,) masses
            radii: (n,) display radii (sqrt(masses) if None)

        Raises:
            ValueError: If shapes or lengths disagree, or a mass is negative or NaN
        """
        self.backend = backend

        positions_np = np.zeros((3, 0)) if positions is None else np.asarray(backend.to_numpy(positions), dtype=np.float64)
        if positions_np.ndim != 2 or positions_np.shape[0] != 3:
            raise ValueError(f"positions must have shape (3, n), got {positions_np.shape}")
        n = positions_np.shape[1]

        if velocities is None:
            velocities_np = np.zeros((3, n))
        else:
            velocities_np = np.asarray(backend.to_numpy(velocities), dtype=np.float64)
        if velocities_np.shape != (3, n):
            raise ValueError(f"velocities must have shape (3, {n}), got {velocities_np.shape}")

        masses_np = np.zeros(n) if masses is None else np.asarray(backend.to_numpy(masses), dtype=np.float64).reshape(-1)
        if masses_np.shape != (n,):
            raise ValueError(f"masses must have length {n}, got {masses_np.shape[0]}")
        if not np.all(masses_np >= 0):
            raise ValueError("Particle masses must be non-negative")

        if radii is None:
            radii_np = np.sqrt(masses_np)
        else:
            radii_np = np.asarray(backend.to_numpy(radii), dtype=np.float64).reshape(-1)
        if radii_np.shape != (n,):
            raise ValueError(f"radii must have length {n}, got {radii_np.shape[0]}")

        self.positions = backend.array(positions_np)
        self.velocities = backend.array(velocities_np)
        self.masses = backend.array(masses_np)
        self.radii = backend.array(radii_np)

    @classmethod
    def from_particles(cls, particles: Iterable[Particle], backend: Backend) -> "ParticleStore":
        """Build a store from a list of particle records."""
        particles = list(particles)
        positions = np.array([[p.x for p in particles], [p.y for p in particles], [p.z for p in particles]],
                             dtype=np.float64).reshape(3, len(particles))
        velocities = np.array([[p.vx for p in particles], [p.vy for p in particles], [p.vz for p in particles]],
                              dtype=np.float64).reshape(3, len(particles))
        masses = np.array([p.m for p in particles], dtype=np.float64)
        radii = np.array([p.r for p in particles], dtype=np.float64)
        return cls(backend, positions, velocities, masses, radii)

    @classmethod
    def from_arrays(cls, backend: Backend, x, y, z, vx=None, vy=None, vz=None, m=None, r=None) -> "ParticleStore":
        """Build a store from flat per-axis arrays.

        Raises:
            ValueError: If the arrays do not all have the same length
        """
        columns = {"x": x, "y": y, "z": z, "vx": vx, "vy": vy, "vz": vz, "m": m, "r": r}
        lengths = {
            name: len(np.asarray(backend.to_numpy(col)).reshape(-1))
            for name, col in columns.items() if col is not None
        }
        if len(set(lengths.values())) > 1:
            raise ValueError(f"Particle arrays have mismatched lengths: {lengths}")
        n = lengths["x"]

        def _column(col, default):
            if col is None:
                return np.full(n, default, dtype=np.float64)
            return np.asarray(backend.to_numpy(col), dtype=np.float64).reshape(-1)

        positions = np.stack([_column(x, 0.0), _column(y, 0.0), _column(z, 0.0)])
        velocities = np.stack([_column(vx, 0.0), _column(vy, 0.0), _column(vz, 0.0)])
        masses = _column(m, 1.0)
        radii = None if r is None else _column(r, 0.0)
        return cls(backend, positions, velocities, masses, radii)

    @property
    def count(self) -> int:
        return int(self.masses.shape[0])

    def __len__(self) -> int:
        return self.count

    @property
    def x(self):
        return self.positions[0]

    @property
    def y(self):
        return self.positions[1]

    @property
    def z(self):
        return self.positions[2]

    @property
    def vx(self):
        return self.velocities[0]

    @property
    def vy(self):
        return self.velocities[1]

    @property
    def vz(self):
        return self.velocities[2]

    def append(self, particle: Particle) -> int:
        """Append one particle and return its index."""
        b = self.backend
        self.positions = b.concatenate([self.positions, b.array([[particle.x], [particle.y], [particle.z]])], axis=1)
        self.velocities = b.concatenate([self.velocities, b.array([[particle.vx], [particle.vy], [particle.vz]])], axis=1)
        self.masses = b.concatenate([self.masses, b.array([particle.m])])
        self.radii = b.concatenate([self.radii, b.array([particle.r])])
        return self.count - 1

    def set_mass(self, index: int, mass: float):
        """Set one particle's mass in place.

        Raises:
            IndexError: If index is not a current particle index
            ValueError: If mass is negative or NaN
        """
        if not 0 <= index < self.count:
            raise IndexError(f"Particle index {index} out of range for {self.count} particles")
        if not mass >= 0:
            raise ValueError(f"Particle mass must be non-negative, got {mass}")
        self.masses[index] = mass

    def compact(self, keep) -> int:
        """Keep only the particles selected by a boolean mask, preserving order.

        Returns:
            Number of particles removed
        """
        before = self.count
        self.positions = self.positions[:, keep]
        self.velocities = self.velocities[:, keep]
        self.masses = self.masses[keep]
        self.radii = self.radii[keep]
        return before - self.count

    def particle(self, index: int) -> Particle:
        """Return a copy of one particle as a record."""
        pos = self.backend.to_numpy(self.positions[:, index])
        vel = self.backend.to_numpy(self.velocities[:, index])
        return Particle(
            float(pos[0]), float(pos[1]), float(pos[2]),
            float(vel[0]), float(vel[1]), float(vel[2]),
            float(self.backend.to_numpy(self.masses[index])),
            float(self.backend.to_numpy(self.radii[index])),
        )

    def to_particles(self) -> List[Particle]:
        """Return every particle as a record."""
        return [self.particle(i) for i in range(self.count)]

    def get_state(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """Get current state as NumPy arrays.

        Returns:
            Tuple of (positions (n, 3), velocities (n, 3), masses (n,), radii (n,))
        """
        b = self.backend
        return (
            b.to_numpy(self.positions).T.copy(),
            b.to_numpy(self.velocities).T.copy(),
            b.to_numpy(self.masses).copy(),
            b.to_numpy(self.radii).copy(),
        )
