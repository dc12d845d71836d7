"""Poisson solvers and the name -> solver registry."""

from typing import Dict, List, Type
from nbody_pm.physics.solvers.base import PoissonSolver
from nbody_pm.physics.solvers.relaxation import RelaxationSolver
from nbody_pm.physics.solvers.spectral import SpectralSolver
from nbody_pm.utils.config import SimulationConfig

SOLVERS: Dict[str, Type[PoissonSolver]] = {
    "relaxation": RelaxationSolver,
    "spectral": SpectralSolver,
}


def register_solver(name: str, solver_cls: Type[PoissonSolver]):
    """Register a solver class under a name (replaces any existing entry)."""
    SOLVERS[name] = solver_cls


def list_solvers() -> List[str]:
    """List registered solver names."""
    return sorted(SOLVERS)


def get_solver(name: str, config: SimulationConfig) -> PoissonSolver:
    """Build a registered solver.

    Args:
        name: Registry name ('relaxation', 'spectral', ...)
        config: Simulation settings passed to the solver's ``from_config``

    Returns:
        Solver instance

    Raises:
        ValueError: If no solver is registered under ``name``
    """
    try:
        solver_cls = SOLVERS[name]
    except KeyError:
        raise ValueError(f"Unknown solver '{name}'. Available: {list_solvers()}") from None
    return solver_cls.from_config(config)


__all__ = [
    "PoissonSolver",
    "RelaxationSolver",
    "SpectralSolver",
    "SOLVERS",
    "register_solver",
    "list_solvers",
    "get_solver",
]
