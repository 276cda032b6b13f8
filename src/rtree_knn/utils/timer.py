"""Timing context manager for benchmarking."""

import time
from contextlib import contextmanager
from dataclasses import dataclass


@dataclass
class TimingResult:
    """Elapsed wall-clock time for a block of ``n_ops`` operations."""

    elapsed: float = 0.0
    n_ops: int = 1

    @property
    def per_op(self) -> float:
        return self.elapsed / self.n_ops if self.n_ops > 0 else 0.0


@contextmanager
def timer(n_ops: int = 1):
    """Measure wall-clock time in seconds of the enclosed block.

    Usage:
        with timer(n_ops=len(queries)) as t:
            for q in queries:
                knn(index, q, 10)
        print(f"{t.per_op * 1e6:.1f}us per query")
    """
    result = TimingResult(n_ops=n_ops)
    start = time.perf_counter()
    try:
        yield result
    finally:
        result.elapsed = time.perf_counter() - start
