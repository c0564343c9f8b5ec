import numpy as np
import numpy.typing as npt
from PIL import Image

from cavegen.data_models import TileAtlasConfigModel
from cavegen.mapgen.types import WALL_TILE_INDEX
from cavegen.mapgen.tiles import VARIATION_COUNT

WALL_ATLAS_COLUMNS = 16
WALL_ATLAS_ROWS = 9


def wall_atlas_config(tile_size: int = 8) -> TileAtlasConfigModel:
    return TileAtlasConfigModel(
        tile_size=tile_size, columns=WALL_ATLAS_COLUMNS, rows=WALL_ATLAS_ROWS
    )


def right_edge_mask(tile_size: int, variation: int) -> npt.NDArray[np.bool_]:
    """Wall pixels along the right edge of a tile. Odd variations draw a solid
    band with a thicker middle, even ones a broken band."""
    t = tile_size
    mask = np.zeros((t, t), dtype=np.bool_)
    if variation & 1 == 0:
        mask[1:3, t - 1] = True
        mask[t - 3 : t - 1, t - 1] = True
        if variation & 2:
            mask[0, t - 1] = True
        if variation & 4:
            mask[t - 1, t - 1] = True
    else:
        mask[:, t - 1] = True
        mask[3 : t - 3, t - 2] = True
        if variation & 2:
            mask[2, t - 2] = True
        if variation & 4:
            mask[t - 3, t - 2] = True
    return mask


def down_right_corner_mask(tile_size: int) -> npt.NDArray[np.bool_]:
    t = tile_size
    r, c = np.indices((t, t))
    return (t - 1 - r) + (t - 1 - c) < min(5, t)


def generate_wall_atlas(tile_size: int = 8) -> Image.Image:
    """Builds a 16x9 wall tile table.

    Tiles 0x00..0x0f are indexed by which orthogonal neighbors are walls (bit 0
    right, bit 1 down, bit 2 left, bit 3 up), tiles 0x10..0x7f are variations
    of those, and tile 0x80 is a solid wall. Everything else is transparent.
    """
    config = wall_atlas_config(tile_size)
    width, height = config.image_size
    pixels = np.zeros((height, width, 2), dtype=np.uint8)
    corner = down_right_corner_mask(tile_size)

    for variation in range(VARIATION_COUNT):
        edge = right_edge_mask(tile_size, variation)
        for adjacency in range(16):
            mask = np.zeros((tile_size, tile_size), dtype=np.bool_)
            for side in range(4):
                if adjacency & (1 << side):
                    mask |= np.rot90(edge, k=-side)
                    if adjacency & (1 << ((side + 1) % 4)):
                        mask |= np.rot90(corner, k=-side)
            y = variation * tile_size
            x = adjacency * tile_size
            pixels[y : y + tile_size, x : x + tile_size, 1][mask] = 255

    y = (WALL_TILE_INDEX // WALL_ATLAS_COLUMNS) * tile_size
    x = (WALL_TILE_INDEX % WALL_ATLAS_COLUMNS) * tile_size
    pixels[y : y + tile_size, x : x + tile_size, 1] = 255
    return Image.fromarray(pixels)
