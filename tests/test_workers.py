"""Tests for the worker pool."""

import threading
import pytest
from nbody_pm.physics.workers import WorkerPool, split_range


def test_split_range_covers_everything():
    """Test chunks are contiguous, ordered and cover the range once."""
    for total in (1, 5, 10, 17):
        for n_chunks in (1, 3, 8, 32):
            chunks = split_range(0, total, n_chunks)
            assert len(chunks) <= n_chunks
            assert chunks[0][0] == 0
            assert chunks[-1][1] == total
            for (_, hi), (lo, _) in zip(chunks, chunks[1:]):
                assert hi == lo


def test_split_range_offset_and_empty():
    """Test ranges with a start offset and empty ranges."""
    assert split_range(1, 4, 8) == [(1, 2), (2, 3), (3, 4)]
    assert split_range(5, 5, 4) == []


def test_map_ranges_results_in_chunk_order():
    """Test results come back in chunk order for any worker count."""
    for n_workers in (1, 2, 4):
        with WorkerPool(n_workers) as pool:
            results = pool.map_ranges(lambda lo, hi: list(range(lo, hi)), 10)
        flat = [i for chunk in results for i in chunk]
        assert flat == list(range(10))


def test_map_ranges_uses_threads():
    """Test chunks run on pool threads when there is more than one worker."""
    names = set()

    def task(lo, hi):
        names.add(threading.current_thread().name)

    with WorkerPool(3) as pool:
        pool.map_ranges(task, 30)
    assert any(name.startswith("nbody-pm") for name in names)


def test_map_ranges_propagates_errors():
    """Test an exception inside a task reaches the caller."""
    def task(lo, hi):
        raise RuntimeError("boom")

    with WorkerPool(2) as pool:
        with pytest.raises(RuntimeError, match="boom"):
            pool.map_ranges(task, 4)


def test_invalid_worker_count():
    """Test a non-positive worker count is rejected."""
    with pytest.raises(ValueError):
        WorkerPool(0)
