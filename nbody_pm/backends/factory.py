"""Backend factory for creating and managing compute backends."""

from typing import List, Optional
from nbody_pm.backends.base import Backend
from nbody_pm.backends.numpy_backend import NumPyBackend
from nbody_pm.backends.cupy_backend import CuPyBackend, CUPY_AVAILABLE


def list_available_backends() -> List[str]:
    """List all available backends.

    Returns:
        List of backend names that can be instantiated
    """
    backends = ["numpy"]  # Always available

    if CUPY_AVAILABLE:
        backends.append("cupy")

    return backends


def get_backend(name: Optional[str] = None, prefer_gpu: bool = False) -> Backend:
    """Get a backend instance.

    Args:
        name: Backend name ('numpy', 'cupy'). If None, auto-selects.
        prefer_gpu: If True and name is None, prefer CuPy over NumPy.

    Returns:
        Backend instance

    Raises:
        ValueError: If requested backend is not available
    """
    if name is None:
        if prefer_gpu and CUPY_AVAILABLE:
            return CuPyBackend()
        return NumPyBackend()

    name_lower = name.lower()

    if name_lower == "numpy":
        return NumPyBackend()
    elif name_lower == "cupy":
        if not CUPY_AVAILABLE:
            raise ValueError("CuPy backend not available. Install with: pip install cupy")
        return CuPyBackend()
    else:
        available = list_available_backends()
        raise ValueError(f"Unknown backend '{name}'. Available: {available}")
