import typing as t

import numpy as np
import numpy.typing as npt
from PIL import Image

from cavegen.exceptions import AtlasSizeError
from cavegen.rendering.atlas import TileAtlas


def write_tile(
    canvas: npt.NDArray[np.uint8], tile: npt.NDArray[np.uint8], x: int, y: int
):
    """Copies the non-transparent pixels of `tile` onto `canvas` at (x, y)."""
    h, w = tile.shape[:2]
    target = canvas[y : y + h, x : x + w]
    opaque = tile[:, :, 1] != 0
    target[opaque] = tile[opaque]


def render_tile_map(
    tiles: npt.NDArray[np.integer],
    atlas: TileAtlas,
    background: t.Tuple[int, int] = (255, 255),
) -> Image.Image:
    """Draws every tile of a (height, width) index map onto a new LA image."""
    if tiles.size > 0 and int(tiles.max()) >= atlas.tile_count:
        raise AtlasSizeError(
            f"Tile index {int(tiles.max()):#x} is outside an atlas of "
            f"{atlas.tile_count} tiles"
        )
    rows, columns = tiles.shape
    size = atlas.tile_size
    canvas = np.empty((rows * size, columns * size, 2), dtype=np.uint8)
    canvas[:, :] = background

    for r in range(rows):
        for c in range(columns):
            write_tile(canvas, atlas.get_tile(int(tiles[r][c])), c * size, r * size)

    return Image.fromarray(canvas)
