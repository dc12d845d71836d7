"""Semi-implicit Euler integrator."""

from typing import Any
from nbody_pm.physics.integrators.base import Integrator


class SemiImplicitEulerIntegrator(Integrator):
    """Symplectic (semi-implicit) Euler.

    Velocity is kicked first and the position drifts with the new velocity,
    which keeps orbits bounded far better than explicit Euler at the same
    cost.
    """

    @property
    def name(self) -> str:
        return "semi_implicit_euler"

    @property
    def order(self) -> int:
        return 1

    def step(self, positions: Any, velocities: Any, accelerations: Any, dt: float):
        """Euler step: v_new = v + a*dt, r_new = r + v_new*dt."""
        velocities += accelerations * dt
        positions += velocities * dt
