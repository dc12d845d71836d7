"""Abstract base class for Poisson solvers."""

from abc import ABC, abstractmethod
from typing import Optional
from nbody_pm.physics.mesh import Mesh
from nbody_pm.physics.workers import WorkerPool
from nbody_pm.utils.config import SimulationConfig


class PoissonSolver(ABC):
    """Abstract interface for mesh potential solvers.

    A solver reads ``mesh.mass_grid`` and overwrites ``mesh.potential_grid``;
    it may use ``mesh.scratch`` freely.
    """

    @abstractmethod
    def solve(self, mesh: Mesh, g: float, pool: Optional[WorkerPool] = None):
        """Compute the gravitational potential for the current mass grid.

        Args:
            mesh: Mesh holding the deposited mass
            g: Gravitational constant
            pool: Worker pool for data-parallel sweeps (optional)

        Returns:
            The mesh's flat potential grid
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the registry name of this solver."""
        pass

    @classmethod
    def from_config(cls, config: SimulationConfig) -> "PoissonSolver":
        """Build the solver from simulation settings."""
        return cls()
