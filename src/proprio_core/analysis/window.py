"""Fixed-capacity rolling sample window."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from typing import Any, Generic, TypeVar

import numpy as np
from numpy.typing import NDArray

T = TypeVar("T")


class RollingWindow(Generic[T]):
    """Insertion-ordered buffer of the most recent samples.

    Appending at capacity evicts the oldest sample.
    """

    def __init__(self, capacity: int = 60) -> None:
        """Initialize an empty window.

        Args:
            capacity: Maximum number of samples retained

        Raises:
            ValueError: If capacity is less than 1
        """
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._buffer: deque[T] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._buffer)

    def __iter__(self) -> Iterator[T]:
        return iter(self._buffer)

    def __getitem__(self, index: int) -> T:
        return self._buffer[index]

    @property
    def is_full(self) -> bool:
        """Check if the window holds `capacity` samples."""
        return len(self._buffer) >= self.capacity

    @property
    def latest(self) -> T | None:
        """Most recently appended sample."""
        return self._buffer[-1] if self._buffer else None

    def append(self, sample: T) -> None:
        """Add a sample, evicting the oldest when full."""
        self._buffer.append(sample)

    def clear(self) -> None:
        """Remove all samples."""
        self._buffer.clear()

    def to_array(self) -> NDArray[np.floating[Any]]:
        """Samples as a float64 array, oldest first."""
        return np.asarray(self._buffer, dtype=np.float64)
