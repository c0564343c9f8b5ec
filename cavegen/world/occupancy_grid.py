import typing as t

import numpy as np
import numpy.typing as npt
from PIL import Image
from typing_extensions import Self

from cavegen.exceptions import ConfigurationError, ResourceExhaustedError
from cavegen.mapgen import utils as map_utils
from cavegen.mapgen.types import GridCell
from cavegen.utils import utils


class OccupancyGrid:
    """A width x height grid of wall (True) and open (False) cells.

    Cells are stored row-major in a numpy array of shape (height, width) and
    addressed as (x, y). Coordinates outside the grid read as wall.
    """

    def __init__(
        self,
        *,
        width: int,
        height: int,
        grid: npt.NDArray[np.bool_] | None = None,
    ):
        if width <= 0 or height <= 0:
            raise ConfigurationError(
                f"grid dimensions must be positive, got {width}x{height}"
            )
        self.width = width
        self.height = height

        if grid is not None:
            self.set_grid(grid)
        else:
            try:
                self.grid = np.ones((height, width), dtype=np.bool_)
            except MemoryError as e:
                raise ResourceExhaustedError(
                    f"Not enough memory for a {width}x{height} grid"
                ) from e

    def set_grid(self, grid: npt.NDArray[np.bool_]):
        if grid.shape != (self.height, self.width):
            raise ConfigurationError(
                f"expected grid of shape {(self.height, self.width)}, got {grid.shape}"
            )
        self.grid = grid.astype(np.bool_)

    @classmethod
    def from_rows(cls, rows: t.Sequence[str], wall: str = "#") -> Self:
        """Builds a grid from strings such as `"#.#"`, one per row."""
        grid = np.array([[c == wall for c in row] for row in rows], dtype=np.bool_)
        height, width = grid.shape
        return cls(width=width, height=height, grid=grid)

    def is_cell_in_bounds(self, cell: GridCell) -> bool:
        return map_utils.is_in_map(cell[0], cell[1], self.grid)

    def is_wall(self, x: int, y: int) -> bool:
        return map_utils.is_wall(x, y, self.grid)

    def is_open(self, x: int, y: int) -> bool:
        return not self.is_wall(x, y)

    def set_cell(self, x: int, y: int, wall: bool):
        self.grid[y][x] = wall

    def is_block_open(self, x: int, y: int) -> bool:
        """True if the 3x3 block centered at (x, y) has no walls."""
        for dx, dy in utils.BLOCK_3X3:
            if self.is_wall(x + dx, y + dy):
                return False
        return True

    def clear_centers(self) -> npt.NDArray[np.bool_]:
        """Vectorized `is_block_open` for every cell of the grid."""
        return map_utils.window_wall_counts(self.grid) == 0

    def get_neighbors(self, cell: GridCell) -> t.List[GridCell]:
        result: t.List[GridCell] = []
        cx, cy = cell
        for dx, dy in utils.CHESSBOARD_NEIGHBORHOOD:
            nx, ny = cx + dx, cy + dy
            if self.is_cell_in_bounds((nx, ny)):
                result.append((nx, ny))
        return result

    def orthogonal_wall_count(self, x: int, y: int) -> int:
        return sum(
            int(self.is_wall(x + dx, y + dy)) for dx, dy in utils.TAXI_NEIGHBORHOOD
        )

    @property
    def wall_count(self) -> int:
        return int(self.grid.sum())

    @property
    def open_count(self) -> int:
        return self.grid.size - self.wall_count

    def copy(self) -> "OccupancyGrid":
        return OccupancyGrid(
            width=self.width, height=self.height, grid=self.grid.copy()
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OccupancyGrid):
            return NotImplemented
        return self.grid.shape == other.grid.shape and bool(
            np.array_equal(self.grid, other.grid)
        )

    def to_ascii(self, wall: str = "#", empty: str = ".") -> str:
        return "\n".join(
            "".join(wall if cell else empty for cell in row) for row in self.grid
        )

    def to_image(self, scale: int = 1) -> Image.Image:
        """Debug rendering: walls black, open cells white."""
        pixels = np.where(self.grid, 0, 255).astype(np.uint8)
        image = Image.fromarray(pixels)
        if scale != 1:
            image = image.resize(
                (self.width * scale, self.height * scale), Image.Resampling.NEAREST
            )
        return image
