import numpy as np
import numpy.typing as npt

from cavegen.mapgen.random_source import RandomSource
from cavegen.mapgen.types import VARIATION_MASK, WALL_TILE_INDEX
from cavegen.utils import utils
from cavegen.world.occupancy_grid import OccupancyGrid

# Number of variations of each adjacency pattern in the atlas.
VARIATION_COUNT = (VARIATION_MASK >> 4) + 1


def adjacency_bits(grid: OccupancyGrid, x: int, y: int) -> int:
    """Walls around an open cell: bit 0 right, bit 1 down, bit 2 left, bit 3 up."""
    bits = 0
    for i, (dx, dy) in enumerate(utils.TAXI_NEIGHBORHOOD):
        if grid.is_wall(x + dx, y + dy):
            bits |= 1 << i
    return bits


def variation_bits(draw: float) -> int:
    return (int(draw * VARIATION_COUNT) << 4) & VARIATION_MASK


def select_tiles(grid: OccupancyGrid, rng: RandomSource) -> npt.NDArray[np.uint8]:
    """Picks a tile index for every cell. Consumes one draw per open cell, in
    row-major order."""
    tiles = np.full((grid.height, grid.width), WALL_TILE_INDEX, dtype=np.uint8)
    for y in range(grid.height):
        for x in range(grid.width):
            if grid.grid[y][x]:
                continue
            tiles[y][x] = adjacency_bits(grid, x, y) | variation_bits(rng.random())
    return tiles
