"""Iterative smoothing (Jacobi-style) potential solver."""

import logging
from typing import Optional
from nbody_pm.physics.mesh import Mesh
from nbody_pm.physics.solvers.base import PoissonSolver
from nbody_pm.physics.workers import WorkerPool
from nbody_pm.utils.config import SimulationConfig

logger = logging.getLogger(__name__)


class RelaxationSolver(PoissonSolver):
    """Approximate potential by repeated 7-point averaging of ``-G * mass``.

    Each sweep replaces every interior cell of the potential with the mean of
    the matching scratch cell and its six axis neighbours, then copies the
    potential back into scratch. The outer one-cell shell of the potential
    stays at zero. This is a smoothing kernel rather than a converged
    Poisson solve; more iterations spread each mass further.
    """

    def __init__(self, iterations: int = 60):
        """Initialize solver.

        Args:
            iterations: Number of smoothing sweeps (at least 1)
        """
        if iterations < 1:
            raise ValueError(f"iterations must be >= 1, got {iterations}")
        self.iterations = int(iterations)

    @property
    def name(self) -> str:
        return "relaxation"

    @classmethod
    def from_config(cls, config: SimulationConfig) -> "RelaxationSolver":
        return cls(iterations=config.smoothing_iterations)

    def solve(self, mesh: Mesh, g: float, pool: Optional[WorkerPool] = None):
        pool = pool or WorkerPool(1)
        gx = mesh.shape[0]
        potential = mesh.view(mesh.potential_grid)
        scratch = mesh.view(mesh.scratch)

        mesh.scratch[...] = -g * mesh.mass_grid
        mesh.potential_grid[...] = 0.0

        def _sweep(lo: int, hi: int):
            s = scratch
            potential[lo:hi, 1:-1, 1:-1] = (
                s[lo:hi, 1:-1, 1:-1]
                + s[lo - 1:hi - 1, 1:-1, 1:-1]
                + s[lo + 1:hi + 1, 1:-1, 1:-1]
                + s[lo:hi, :-2, 1:-1]
                + s[lo:hi, 2:, 1:-1]
                + s[lo:hi, 1:-1, :-2]
                + s[lo:hi, 1:-1, 2:]
            ) / 7.0

        def _copy_back(lo: int, hi: int):
            scratch[lo:hi] = potential[lo:hi]

        for _ in range(self.iterations):
            # Two separate phases: no slab may read scratch while another copies into it
            pool.map_ranges(_sweep, gx - 1, start=1)
            pool.map_ranges(_copy_back, gx)

        logger.debug("Relaxation finished %d sweeps on %s grid", self.iterations, mesh.shape)
        return mesh.potential_grid
