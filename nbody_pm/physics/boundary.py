"""World boundary handling."""

from enum import Enum
from typing import Any, Sequence
from nbody_pm.backends.base import Backend


class BoundaryPolicy(str, Enum):
    """What happens to particles that leave the world box.

    CLAMP pins them to the wall and stops motion across it, DROP removes
    them after integration, OPEN lets them go (their mesh indices are
    clamped, so they still feel and contribute to the edge cells).
    """
    CLAMP = "clamp"
    DROP = "drop"
    OPEN = "open"


def clamp_to_walls(positions: Any, velocities: Any, extent: Sequence[float], backend: Backend):
    """Clamp positions into ``[0, extent]`` per axis, in place.

    The velocity component along an axis is zeroed for every particle that
    touched that axis' wall.
    """
    for axis in range(3):
        outside = (positions[axis] < 0.0) | (positions[axis] > extent[axis])
        velocities[axis] = backend.where(outside, 0.0, velocities[axis])
        positions[axis] = backend.clip(positions[axis], 0.0, extent[axis])
