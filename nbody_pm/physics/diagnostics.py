"""Diagnostics for particle-mesh simulations."""

import numpy as np
from typing import Dict
from nbody_pm.backends.base import Backend
from nbody_pm.physics.mesh import Mesh


class Diagnostics:
    """Scalar and vector summaries of a particle population.

    Positions and velocities are ``(3, n)`` arrays (backend or NumPy);
    everything is evaluated on the host.
    """

    def __init__(self, backend: Backend):
        self.backend = backend

    def _host(self, array) -> np.ndarray:
        return np.asarray(self.backend.to_numpy(array), dtype=np.float64)

    def center_of_mass(self, positions, masses) -> np.ndarray:
        """Mass-weighted centroid; the plain centroid when total mass is zero."""
        positions_np = self._host(positions)
        masses_np = self._host(masses).reshape(-1)
        total = masses_np.sum()
        if positions_np.shape[1] == 0:
            return np.zeros(3)
        if total <= 0:
            return positions_np.mean(axis=1)
        return (positions_np * masses_np).sum(axis=1) / total

    def kinetic_energy(self, velocities, masses) -> float:
        """K = 0.5 * sum m v^2."""
        velocities_np = self._host(velocities)
        masses_np = self._host(masses).reshape(-1)
        return float(0.5 * np.sum(masses_np * np.sum(velocities_np ** 2, axis=0)))

    def mesh_potential_energy(self, mesh: Mesh, positions, masses) -> float:
        """U = 0.5 * sum m * phi, with phi read at each particle's deposit cell.

        Only meaningful right after a potential solve for these positions.
        """
        b = mesh.backend
        if self._host(masses).size == 0:
            return 0.0
        cells = mesh.deposit_index(b.array(self._host(positions)))
        phi = self._host(mesh.potential_grid[cells])
        return float(0.5 * np.sum(self._host(masses).reshape(-1) * phi))

    def mean_radius(self, positions, masses) -> float:
        """Mean (unweighted) distance of particles from the centre of mass."""
        positions_np = self._host(positions)
        if positions_np.shape[1] == 0:
            return 0.0
        com = self.center_of_mass(positions_np, masses)
        return float(np.mean(np.linalg.norm(positions_np - com[:, None], axis=0)))

    def total_momentum(self, velocities, masses) -> np.ndarray:
        """P = sum m v, shape (3,)."""
        return (self._host(velocities) * self._host(masses).reshape(-1)).sum(axis=1)

    def angular_momentum(self, positions, velocities, masses) -> np.ndarray:
        """L = sum m (r - r_com) x v, shape (3,)."""
        positions_np = self._host(positions)
        if positions_np.shape[1] == 0:
            return np.zeros(3)
        masses_np = self._host(masses).reshape(-1)
        r = positions_np - self.center_of_mass(positions_np, masses_np)[:, None]
        per_particle = np.cross(r.T, self._host(velocities).T) * masses_np[:, None]
        return per_particle.sum(axis=0)

    def summary(self, mesh: Mesh, positions, velocities, masses) -> Dict[str, float]:
        """Table row used by the CLI: count, K, mesh U and mean radius."""
        return {
            "particles": int(self._host(masses).size),
            "kinetic": self.kinetic_energy(velocities, masses),
            "potential": self.mesh_potential_energy(mesh, positions, masses),
            "mean_radius": self.mean_radius(positions, masses),
        }
