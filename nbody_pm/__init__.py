"""
nbody-pm - Particle-Mesh N-body gravity simulation.

Features:
- Nearest-grid-point mass deposition on a fixed 3D mesh
- Relaxation and FFT (spectral) Poisson solvers behind one registry
- Multithreaded deposit, solve and integrate phases
- Clamp, drop or open world boundaries
- Circular-orbit initial velocities from the mesh potential
- Preset scenarios, state files and projection snapshots
"""

__version__ = "0.1.0"

from nbody_pm.physics.simulator import ParticleMeshSimulation
from nbody_pm.physics.particles import Particle
from nbody_pm.utils.config import SimulationConfig
from nbody_pm.backends.factory import get_backend, list_available_backends

__all__ = [
    "ParticleMeshSimulation",
    "Particle",
    "SimulationConfig",
    "get_backend",
    "list_available_backends",
]
