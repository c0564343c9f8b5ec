import typing as t

import numpy as np
import numpy.typing as npt

from cavegen.exceptions import ConfigurationError
from cavegen.mapgen import utils
from cavegen.world.occupancy_grid import OccupancyGrid


def smoothing_pass(
    cells: npt.NDArray[np.bool_], threshold: int = 4
) -> npt.NDArray[np.bool_]:
    """One majority-filter pass. Returns a new array; `cells` is only read."""
    return utils.window_wall_counts(cells) > threshold


def smooth_cells(
    grid: OccupancyGrid, iterations: int = 4, threshold: int = 4
) -> t.List[int]:
    """Applies `iterations` smoothing passes to `grid` in place.

    A cell becomes a wall if more than `threshold` of the 9 cells in its 3x3
    neighborhood (itself included) are walls, and open otherwise.

    Returns the number of cells each pass changed.
    """
    if iterations < 0:
        raise ConfigurationError(f"iterations must be >= 0, got {iterations}")
    if not 0 <= threshold <= 9:
        raise ConfigurationError(f"threshold must be within 0..9, got {threshold}")

    changes: t.List[int] = []
    for _ in range(iterations):
        smoothed = smoothing_pass(grid.grid, threshold)
        changes.append(int(np.count_nonzero(smoothed != grid.grid)))
        grid.set_grid(smoothed)
    return changes
