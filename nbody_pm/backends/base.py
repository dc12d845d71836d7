"""Abstract base class for compute backends."""

from abc import ABC, abstractmethod
from typing import Any, Sequence, Tuple, Union
import numpy as np


class Backend(ABC):
    """Abstract interface for array computation backends.

    The particle store and mesh buffers live on a backend so the same
    deposit/solve/integrate pipeline can run on NumPy or on a GPU array
    library with a unified API.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this backend."""
        pass

    @property
    @abstractmethod
    def device(self) -> str:
        """Return the device type (e.g., 'cpu', 'cuda:0')."""
        pass

    @abstractmethod
    def array(self, data: Any, dtype=None) -> Any:
        """Create an array from data.

        Args:
            data: Input data (list, numpy array, etc.)
            dtype: Optional data type

        Returns:
            Backend array object
        """
        pass

    @abstractmethod
    def zeros(self, shape: Union[int, Tuple[int, ...]], dtype=None) -> Any:
        """Create an array of zeros.

        Args:
            shape: Array shape
            dtype: Optional data type

        Returns:
            Zero-filled array
        """
        pass

    @abstractmethod
    def floor(self, array: Any) -> Any:
        """Element-wise floor."""
        pass

    @abstractmethod
    def clip(self, array: Any, min_val: float, max_val: float) -> Any:
        """Clip array values to range."""
        pass

    @abstractmethod
    def where(self, condition: Any, x: Any, y: Any) -> Any:
        """Conditional selection."""
        pass

    @abstractmethod
    def stack(self, arrays: Sequence[Any], axis: int = 0) -> Any:
        """Stack arrays along a new axis. E.g. stack([gx, gy, gz]) -> (3, n)."""
        pass

    @abstractmethod
    def concatenate(self, arrays: Sequence[Any], axis: int = 0) -> Any:
        """Join arrays along an existing axis."""
        pass

    @abstractmethod
    def to_index(self, array: Any) -> Any:
        """Cast a float array holding whole numbers to an integer index array."""
        pass

    @abstractmethod
    def bincount(self, indices: Any, weights: Any, minlength: int) -> Any:
        """Weighted histogram of integer indices.

        Used for mass deposition: each worker bins its own particle range
        into a private grid of length ``minlength``.
        """
        pass

    @abstractmethod
    def fftn(self, array: Any) -> Any:
        """Forward N-dimensional complex FFT."""
        pass

    @abstractmethod
    def ifftn(self, array: Any) -> Any:
        """Inverse N-dimensional complex FFT (normalized by 1/N)."""
        pass

    @abstractmethod
    def fftfreq(self, n: int) -> Any:
        """Wrapped signed integer frequencies for an axis of length n."""
        pass

    @abstractmethod
    def real(self, array: Any) -> Any:
        """Real part of a complex array."""
        pass

    @abstractmethod
    def to_numpy(self, array: Any) -> np.ndarray:
        """Convert backend array to NumPy array.

        This is needed for diagnostics, rendering and I/O operations.
        """
        pass
