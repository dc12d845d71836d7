"""NumPy backend implementation."""

from typing import Any, Sequence, Tuple, Union
import numpy as np
from nbody_pm.backends.base import Backend


class NumPyBackend(Backend):
    """NumPy-based backend (baseline, always available)."""

    @property
    def name(self) -> str:
        return "numpy"

    @property
    def device(self) -> str:
        return "cpu"

    def array(self, data: Any, dtype=None) -> np.ndarray:
        return np.array(data, dtype=dtype or np.float64)

    def zeros(self, shape: Union[int, Tuple[int, ...]], dtype=None) -> np.ndarray:
        return np.zeros(shape, dtype=dtype or np.float64)

    def floor(self, array: Any) -> np.ndarray:
        return np.floor(array)

    def clip(self, array: Any, min_val: float, max_val: float) -> np.ndarray:
        return np.clip(array, min_val, max_val)

    def where(self, condition: Any, x: Any, y: Any) -> np.ndarray:
        return np.where(condition, x, y)

    def stack(self, arrays: Sequence[Any], axis: int = 0) -> np.ndarray:
        return np.stack(arrays, axis=axis)

    def concatenate(self, arrays: Sequence[Any], axis: int = 0) -> np.ndarray:
        return np.concatenate(arrays, axis=axis)

    def to_index(self, array: Any) -> np.ndarray:
        return np.asarray(array).astype(np.int64)

    def bincount(self, indices: Any, weights: Any, minlength: int) -> np.ndarray:
        return np.bincount(indices, weights=weights, minlength=minlength)

    def fftn(self, array: Any) -> np.ndarray:
        return np.fft.fftn(array)

    def ifftn(self, array: Any) -> np.ndarray:
        return np.fft.ifftn(array)

    def fftfreq(self, n: int) -> np.ndarray:
        # d=1/n turns the cycle-per-sample frequencies into integer wave numbers
        return np.fft.fftfreq(n, d=1.0 / n)

    def real(self, array: Any) -> np.ndarray:
        return np.real(array)

    def to_numpy(self, array: Any) -> np.ndarray:
        return np.asarray(array)
