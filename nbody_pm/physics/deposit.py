"""Nearest-grid-point mass deposition."""

import logging
from typing import Any
from nbody_pm.physics.mesh import Mesh
from nbody_pm.physics.particles import ParticleStore
from nbody_pm.physics.workers import WorkerPool

logger = logging.getLogger(__name__)


class MassDepositor:
    """Bins particle mass into mesh cells.

    Each worker histograms its own particle range into a private grid and
    the partial grids are summed into ``mesh.mass_grid`` afterwards in
    chunk order, so no two tasks ever write the same cell.
    """

    def __init__(self, mesh: Mesh, pool: WorkerPool):
        self.mesh = mesh
        self.pool = pool

    def deposit(self, store: ParticleStore) -> Any:
        """Rebuild the mass grid from current particle positions.

        Args:
            store: Particle store to read positions and masses from

        Returns:
            The mesh's flat mass grid
        """
        mesh = self.mesh
        backend = mesh.backend
        positions = store.positions
        masses = store.masses

        def _bin_range(lo: int, hi: int):
            indices = mesh.deposit_index(positions[:, lo:hi])
            return backend.bincount(indices, weights=masses[lo:hi], minlength=mesh.n_cells)

        partial_grids = self.pool.map_ranges(_bin_range, store.count)

        mesh.clear_mass()
        for partial in partial_grids:
            mesh.mass_grid += partial

        logger.debug("Deposited %d particles from %d partial grids", store.count, len(partial_grids))
        return mesh.mass_grid
