import typing as t

import numpy as np
import numpy.typing as npt

from cavegen.data_models import MIN_MAP_SIZE
from cavegen.exceptions import ConfigurationError
from cavegen.mapgen.types import ACCESSIBLE, NEIGHBOR_ACCESSIBLE, OPEN, WALL, GridCell
from cavegen.mapgen.visit_stack import VisitStack
from cavegen.utils import utils
from cavegen.world.occupancy_grid import OccupancyGrid

AccessibilityMap = npt.NDArray[np.uint8]


class ConnectivityEnforcer:
    """Seals off every open area that can't be reached from the map center.

    A typical flood fill paints with a 1x1 brush. Here we paint with a 3x3
    brush: a cell is marked ACCESSIBLE only if it is the center of an empty
    3x3 block reachable from the seed, which keeps flood-filled passages at
    least 3 cells wide. Cells covered by the brush but not at its center get
    NEIGHBOR_ACCESSIBLE instead, so a single visited bit is not enough.

    Open cells that were never painted are sealed, except for single-cell
    dead ends (exactly one open orthogonal neighbor). Those are not really
    accessible, but they are kept open because they make the map look more
    interesting.
    """

    def __init__(self, grid: OccupancyGrid, max_stack_capacity: int | None = None):
        if grid.width < MIN_MAP_SIZE or grid.height < MIN_MAP_SIZE:
            raise ConfigurationError(
                f"map must be at least {MIN_MAP_SIZE}x{MIN_MAP_SIZE} to carve "
                f"the seed, got {grid.width}x{grid.height}"
            )
        self.grid = grid
        self.center: GridCell = (grid.width // 2, grid.height // 2)
        self.accessibility: AccessibilityMap = np.zeros(
            (grid.height, grid.width), dtype=np.uint8
        )
        self.stack = VisitStack(max_capacity=max_stack_capacity)

    def carve_seed(self) -> int:
        """Opens the 3x3 block at the center of the map and queues its center.
        Returns the number of walls removed."""
        cx, cy = self.center
        block = self.grid.grid[cy - 1 : cy + 2, cx - 1 : cx + 2]
        carved = int(block.sum())
        block[:, :] = OPEN
        self.stack.push(cx, cy)
        return carved

    def flood_fill(self) -> int:
        """Drains the visit stack. Returns the number of cells marked ACCESSIBLE."""
        clear = self.grid.clear_centers()
        visited = 0

        while len(self.stack) > 0:
            x, y = self.stack.pop()
            if self.accessibility[y][x] & ACCESSIBLE:
                continue
            self.accessibility[y][x] |= ACCESSIBLE
            visited += 1

            for nx, ny in self.grid.get_neighbors((x, y)):
                self.accessibility[ny][nx] |= NEIGHBOR_ACCESSIBLE

            for dx, dy in utils.CHESSBOARD_NEIGHBORHOOD:
                nx, ny = x + dx, y + dy
                if self.grid.is_cell_in_bounds((nx, ny)) and clear[ny][nx]:
                    self.stack.push(nx, ny)

        return visited

    def untouched_open_cells(self) -> npt.NDArray[np.bool_]:
        return np.logical_and(~self.grid.grid, self.accessibility == 0)

    def preserve_holes(self) -> int:
        """Marks untouched single-cell dead ends as ACCESSIBLE. Returns how many."""
        padded = np.pad(self.grid.grid, 1, mode="constant", constant_values=True)
        padded = padded.astype(np.int8)
        orthogonal_walls = (
            padded[1:-1, 2:] + padded[2:, 1:-1] + padded[1:-1, :-2] + padded[:-2, 1:-1]
        )
        holes = np.logical_and(self.untouched_open_cells(), orthogonal_walls == 3)
        self.accessibility[holes] |= ACCESSIBLE
        return int(holes.sum())

    def seal_unreachable(self) -> int:
        """Turns every untouched open cell into a wall. Returns how many."""
        unreachable = self.untouched_open_cells()
        self.grid.grid[unreachable] = WALL
        return int(unreachable.sum())

    def enforce_connectivity(self) -> AccessibilityMap:
        self.carve_seed()
        self.flood_fill()
        self.preserve_holes()
        self.seal_unreachable()
        return self.accessibility

    def is_accessible(self, x: int, y: int) -> bool:
        return bool(self.accessibility[y][x] & ACCESSIBLE)

    def accessible_cells(self) -> t.Set[GridCell]:
        ys, xs = np.nonzero(self.accessibility & ACCESSIBLE)
        return set(zip(xs.tolist(), ys.tolist()))


def enforce_connectivity(
    grid: OccupancyGrid, max_stack_capacity: int | None = None
) -> AccessibilityMap:
    return ConnectivityEnforcer(
        grid, max_stack_capacity=max_stack_capacity
    ).enforce_connectivity()
