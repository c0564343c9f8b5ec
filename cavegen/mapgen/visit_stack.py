import numpy as np

from cavegen.exceptions import ResourceExhaustedError
from cavegen.mapgen.types import GridCell

INITIAL_CAPACITY = 16


class VisitStack:
    """LIFO of (x, y) cells backed by an array that doubles when full."""

    def __init__(self, max_capacity: int | None = None):
        self.max_capacity = max_capacity
        self.capacity = 0
        self.size = 0
        self.cells = np.empty((0, 2), dtype=np.int32)

    def __len__(self) -> int:
        return self.size

    def push(self, x: int, y: int):
        if self.size >= self.capacity:
            self._grow()
        self.cells[self.size] = (x, y)
        self.size += 1

    def pop(self) -> GridCell:
        if self.size == 0:
            raise IndexError("pop from empty VisitStack")
        self.size -= 1
        x, y = self.cells[self.size]
        return int(x), int(y)

    def _grow(self):
        capacity = INITIAL_CAPACITY if self.capacity == 0 else self.capacity * 2
        if self.max_capacity is not None and capacity > self.max_capacity:
            raise ResourceExhaustedError(f"Not enough memory for {capacity} elements")
        try:
            cells = np.empty((capacity, 2), dtype=np.int32)
        except MemoryError as e:
            raise ResourceExhaustedError(
                f"Not enough memory for {capacity} elements"
            ) from e
        cells[: self.size] = self.cells[: self.size]
        self.cells = cells
        self.capacity = capacity
