from cavegen.exceptions import ConfigurationError
from cavegen.mapgen.random_source import RandomSource
from cavegen.world.occupancy_grid import OccupancyGrid


def generate_random_cells(
    width: int, height: int, wall_probability: float, rng: RandomSource
) -> OccupancyGrid:
    """Returns a grid where each cell is a wall with probability `wall_probability`.

    Draws are consumed in row-major order, one per cell.
    """
    if not 0.0 <= wall_probability <= 1.0:
        raise ConfigurationError(
            f"wall probability must be within [0, 1], got {wall_probability}"
        )
    grid = OccupancyGrid(width=width, height=height)
    for y in range(height):
        for x in range(width):
            grid.grid[y][x] = rng.random() < wall_probability
    return grid
