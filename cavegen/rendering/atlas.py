import typing as t

import numpy as np
import numpy.typing as npt
from PIL import Image
from typing_extensions import Self

from cavegen.data_models import TileAtlasConfigModel
from cavegen.exceptions import AtlasSizeError


class TileAtlas:
    """A table of same-size tiles stored in one grayscale + alpha image.

    Tile `i` sits at row `i // columns`, column `i % columns`.
    """

    def __init__(self, image: Image.Image, config: TileAtlasConfigModel):
        expected = config.image_size
        if image.size != expected:
            raise AtlasSizeError(
                "Unexpected tile image size: expected {},{}, got {},{}".format(
                    *expected, *image.size
                ),
                expected=expected,
                actual=image.size,
            )
        self.config = config
        self.tile_size = config.tile_size
        self.columns = config.columns
        self.rows = config.rows
        # (height, width, 2): luminance and alpha
        self.pixels: npt.NDArray[np.uint8] = np.array(
            image.convert("LA"), dtype=np.uint8
        )

    @classmethod
    def load(cls, path: str, config: TileAtlasConfigModel) -> Self:
        with Image.open(path) as image:
            image.load()
            return cls(image, config)

    @property
    def tile_count(self) -> int:
        return self.columns * self.rows

    def tile_origin(self, index: int) -> t.Tuple[int, int]:
        """Pixel (x, y) of the top left corner of a tile."""
        if not 0 <= index < self.tile_count:
            raise AtlasSizeError(
                f"Tile index {index:#x} is outside an atlas of {self.tile_count} tiles"
            )
        return (
            (index % self.columns) * self.tile_size,
            (index // self.columns) * self.tile_size,
        )

    def get_tile(self, index: int) -> npt.NDArray[np.uint8]:
        x, y = self.tile_origin(index)
        return self.pixels[y : y + self.tile_size, x : x + self.tile_size]
