"""Shared worker pool for data-parallel simulation phases."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def split_range(start: int, stop: int, n_chunks: int) -> List[Tuple[int, int]]:
    """Split ``[start, stop)`` into at most ``n_chunks`` contiguous ranges.

    Every index belongs to exactly one range and ranges are returned in
    ascending order.
    """
    total = stop - start
    if total <= 0:
        return []
    n_chunks = max(1, min(n_chunks, total))
    chunk_size = -(-total // n_chunks)  # ceil
    return [(lo, min(lo + chunk_size, stop)) for lo in range(start, stop, chunk_size)]


class WorkerPool:
    """Thread pool that runs one simulation phase at a time.

    ``map_ranges`` is a phase barrier: it returns only after every chunk of
    the phase has finished, so the next phase never observes partial
    results. NumPy releases the GIL inside its kernels, which is what the
    chunks spend their time in.
    """

    def __init__(self, n_workers: int = 1):
        if n_workers < 1:
            raise ValueError(f"n_workers must be >= 1, got {n_workers}")
        self.n_workers = int(n_workers)
        self._executor: Optional[ThreadPoolExecutor] = None
        if self.n_workers > 1:
            self._executor = ThreadPoolExecutor(
                max_workers=self.n_workers, thread_name_prefix="nbody-pm"
            )

    def map_ranges(
        self,
        fn: Callable[[int, int], T],
        stop: int,
        start: int = 0,
    ) -> List[T]:
        """Run ``fn(lo, hi)`` over contiguous chunks of ``[start, stop)``.

        Args:
            fn: Task taking a half-open index range; must only write inside it
            stop: End of the index range (exclusive)
            start: Start of the index range

        Returns:
            Task results in chunk order (independent of completion order)
        """
        chunks = split_range(start, stop, self.n_workers)
        if self._executor is None or len(chunks) <= 1:
            return [fn(lo, hi) for lo, hi in chunks]

        futures = [self._executor.submit(fn, lo, hi) for lo, hi in chunks]
        # result() re-raises a task's exception in the caller
        return [future.result() for future in futures]

    def close(self):
        """Shut down worker threads."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
            logger.debug("Worker pool with %d workers shut down", self.n_workers)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
