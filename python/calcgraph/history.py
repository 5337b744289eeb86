"""
Bounded undo history for a curve's point arena.

One ring buffer row per save, one column per sample point. The oldest row is
overwritten once the buffer is full.
"""

import numpy as np
from typing import Iterator, Optional, Tuple


class SnapshotRing:
    """Fixed-capacity stack of {y, point_type} snapshots for every point."""

    def __init__(self, capacity: int, n_points: int):
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")

        self._y = np.empty((capacity, n_points), dtype=np.float64)
        self._types = np.empty((capacity, n_points), dtype=np.int8)
        self._head = 0    # next slot to write
        self._depth = 0

    @property
    def capacity(self) -> int:
        return self._y.shape[0]

    @property
    def depth(self) -> int:
        return self._depth

    def __len__(self):
        return self._depth

    def push(self, y: np.ndarray, types: np.ndarray) -> None:
        self._y[self._head] = y
        self._types[self._head] = types
        self._head = (self._head + 1) % self.capacity
        self._depth = min(self._depth + 1, self.capacity)

    def peek(self) -> Optional[Tuple[np.ndarray, np.ndarray]]:
        """Most recent snapshot (read-only views), or None when empty."""
        if self._depth == 0:
            return None
        slot = (self._head - 1) % self.capacity
        return readonly(self._y[slot]), readonly(self._types[slot])

    def pop(self) -> Optional[Tuple[np.ndarray, np.ndarray]]:
        """Remove and return the most recent snapshot (copies), or None when empty."""
        if self._depth == 0:
            return None
        self._head = (self._head - 1) % self.capacity
        self._depth -= 1
        return self._y[self._head].copy(), self._types[self._head].copy()

    def clear(self) -> None:
        self._head = 0
        self._depth = 0

    def column(self, index: int) -> Iterator[Tuple[float, int]]:
        """Saved (y, type) pairs of a single point, oldest first."""
        start = (self._head - self._depth) % self.capacity
        for k in range(self._depth):
            slot = (start + k) % self.capacity
            yield self._y[slot, index], self._types[slot, index]


def readonly(arr: np.ndarray) -> np.ndarray:
    view = arr.view()
    view.flags.writeable = False
    return view
