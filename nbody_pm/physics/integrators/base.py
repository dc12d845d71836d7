"""Abstract base class for numerical integrators."""

from abc import ABC, abstractmethod
from typing import Any


class Integrator(ABC):
    """Abstract interface for numerical integrators.

    Integrators update position and velocity arrays in place, so they can be
    handed slices of the particle store and run over disjoint index ranges.
    """

    @abstractmethod
    def step(self, positions: Any, velocities: Any, accelerations: Any, dt: float):
        """Perform one integration step in place.

        Args:
            positions: (3, k) positions (updated in place)
            velocities: (3, k) velocities (updated in place)
            accelerations: (3, k) accelerations at the current positions
            dt: Time step
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this integrator."""
        pass

    @property
    @abstractmethod
    def order(self) -> int:
        """Return the order of accuracy (1 for Euler)."""
        pass
