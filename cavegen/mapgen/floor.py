import numpy as np
import numpy.typing as npt

from cavegen.exceptions import ConfigurationError
from cavegen.mapgen.random_source import RandomSource


def random_byte(rng: RandomSource) -> int:
    return int(rng.random() * 256) & 0xFF


def generate_floor_tiles(
    width: int, height: int, rng: RandomSource
) -> npt.NDArray[np.uint8]:
    """Random floor tiles whose shared edges agree with their neighbors.

    Tile index convention, for a 16x16 atlas:

        bit 0: feature on the bottom edge, copied by the tile below.
        bit 1: feature on the right edge, copied by the tile to the right.
        bit 6: copy of bit 0 from the tile above.
        bit 7: copy of bit 1 from the tile to the left.
        bits 0..5: random.

    The first row and column take their edges from invisible random tiles.
    """
    if width <= 0 or height <= 0:
        raise ConfigurationError(
            f"floor map dimensions must be positive, got {width}x{height}"
        )
    tiles = np.zeros((height, width), dtype=np.uint8)
    previous_row = [random_byte(rng) for _ in range(width)]

    for y in range(height):
        previous_cell = random_byte(rng)
        for x in range(width):
            cell = (
                ((previous_cell & 2) << 6)
                | ((previous_row[x] & 1) << 6)
                | (random_byte(rng) & 0x3F)
            )
            tiles[y][x] = cell
            previous_row[x] = cell
            previous_cell = cell
    return tiles
