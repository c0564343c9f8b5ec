import numpy as np

from cavegen.mapgen.types import WALL_TILE_INDEX
from cavegen.rendering.atlas import TileAtlas
from cavegen.rendering.wall_atlas import generate_wall_atlas, wall_atlas_config


class Test:
    def setup_method(self):
        self.atlas = TileAtlas(generate_wall_atlas(8), wall_atlas_config(8))

    def opaque(self, index: int) -> np.ndarray:
        return self.atlas.get_tile(index)[:, :, 1] != 0

    def test_size(self):
        image = generate_wall_atlas(8)
        assert image.mode == "LA"
        assert image.size == (128, 72)
        assert generate_wall_atlas(4).size == (64, 36)

    def test_solid_wall(self):
        assert self.opaque(WALL_TILE_INDEX).all()
        assert not self.opaque(WALL_TILE_INDEX + 1).any()

    def test_no_walls_is_transparent(self):
        for variation in range(8):
            assert not self.opaque(variation << 4).any()

    def test_walls_follow_bits(self):
        right = self.opaque(0x01)
        assert right.any()
        assert not right[:, :7].any()

        down = self.opaque(0x02)
        assert down.any()
        assert not down[:7, :].any()

        left = self.opaque(0x04)
        assert not left[:, 1:].any()

        up = self.opaque(0x08)
        assert not up[1:, :].any()

    def test_variations_differ(self):
        assert not np.array_equal(self.opaque(0x01), self.opaque(0x11))
        assert self.opaque(0x11)[:, 7].all()

    def test_all_sides(self):
        tile = self.opaque(0x1F)
        assert tile[0, :].all() and tile[7, :].all()
        assert tile[:, 0].all() and tile[:, 7].all()
        assert not tile[3:5, 3:5].any()
