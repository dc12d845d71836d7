"""Particle-mesh physics engine."""

from nbody_pm.physics.boundary import BoundaryPolicy
from nbody_pm.physics.diagnostics import Diagnostics
from nbody_pm.physics.mesh import Mesh
from nbody_pm.physics.particles import Particle, ParticleStore
from nbody_pm.physics.simulator import ParticleMeshSimulation
from nbody_pm.physics.solvers import get_solver, list_solvers, register_solver
from nbody_pm.physics.workers import WorkerPool

__all__ = [
    "BoundaryPolicy",
    "Diagnostics",
    "Mesh",
    "Particle",
    "ParticleStore",
    "ParticleMeshSimulation",
    "WorkerPool",
    "get_solver",
    "list_solvers",
    "register_solver",
]
