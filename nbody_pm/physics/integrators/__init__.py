"""Numerical integrators for particle-mesh simulations."""

from nbody_pm.physics.integrators.base import Integrator
from nbody_pm.physics.integrators.euler import SemiImplicitEulerIntegrator

__all__ = ["Integrator", "SemiImplicitEulerIntegrator"]
