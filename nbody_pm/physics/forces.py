"""Potential gradient sampling at particle positions."""

from typing import Any
from nbody_pm.physics.mesh import Mesh


def sample_gradient(mesh: Mesh, positions: Any) -> Any:
    """Central-difference gradient of the potential at each particle's cell.

    The cell index is clamped to ``[1, dim-2]`` on every axis so both
    neighbours always exist.

    Args:
        mesh: Mesh with a solved potential grid
        positions: (3, k) particle positions

    Returns:
        (3, k) gradient of the potential
    """
    b = mesh.backend
    phi = mesh.potential_grid
    center = mesh.gradient_index(positions)
    components = []
    for axis in range(3):
        stride = mesh.strides[axis]
        components.append(
            (phi[center + stride] - phi[center - stride]) / (2.0 * mesh.cell_size[axis])
        )
    return b.stack(components)


def accelerations(mesh: Mesh, positions: Any) -> Any:
    """Acceleration ``a = -grad(phi)`` at each particle, shape (3, k)."""
    return -sample_gradient(mesh, positions)
