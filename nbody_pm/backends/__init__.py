"""Compute backend abstractions for particle-mesh simulation."""

from nbody_pm.backends.base import Backend
from nbody_pm.backends.factory import get_backend, list_available_backends

__all__ = ["Backend", "get_backend", "list_available_backends"]
