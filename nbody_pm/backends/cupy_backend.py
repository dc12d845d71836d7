"""CuPy backend implementation (optional, CUDA-only)."""

from typing import Any, Sequence, Tuple, Union
import numpy as np
from nbody_pm.backends.base import Backend

try:
    import cupy as cp
    CUPY_AVAILABLE = True
except ImportError:
    CUPY_AVAILABLE = False


class CuPyBackend(Backend):
    """CuPy-based backend (CUDA GPU only)."""

    def __init__(self, device: int = 0):
        """Initialize CuPy backend.

        Args:
            device: CUDA device ID
        """
        if not CUPY_AVAILABLE:
            raise ImportError("CuPy not available. Install with: pip install cupy")

        self._device = device
        cp.cuda.Device(device).use()

    @property
    def name(self) -> str:
        return "cupy"

    @property
    def device(self) -> str:
        return f"cuda:{self._device}"

    def array(self, data: Any, dtype=None) -> Any:
        return cp.array(data, dtype=dtype or cp.float64)

    def zeros(self, shape: Union[int, Tuple[int, ...]], dtype=None) -> Any:
        return cp.zeros(shape, dtype=dtype or cp.float64)

    def floor(self, array: Any) -> Any:
        return cp.floor(array)

    def clip(self, array: Any, min_val: float, max_val: float) -> Any:
        return cp.clip(array, min_val, max_val)

    def where(self, condition: Any, x: Any, y: Any) -> Any:
        return cp.where(condition, x, y)

    def stack(self, arrays: Sequence[Any], axis: int = 0) -> Any:
        return cp.stack(arrays, axis=axis)

    def concatenate(self, arrays: Sequence[Any], axis: int = 0) -> Any:
        return cp.concatenate(arrays, axis=axis)

    def to_index(self, array: Any) -> Any:
        return cp.asarray(array).astype(cp.int64)

    def bincount(self, indices: Any, weights: Any, minlength: int) -> Any:
        return cp.bincount(indices, weights=weights, minlength=minlength)

    def fftn(self, array: Any) -> Any:
        return cp.fft.fftn(array)

    def ifftn(self, array: Any) -> Any:
        return cp.fft.ifftn(array)

    def fftfreq(self, n: int) -> Any:
        return cp.fft.fftfreq(n, d=1.0 / n)

    def real(self, array: Any) -> Any:
        return cp.real(array)

    def to_numpy(self, array: Any) -> np.ndarray:
        if isinstance(array, cp.ndarray):
            return cp.asnumpy(array)
        return np.asarray(array)
