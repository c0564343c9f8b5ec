import numpy as np
import numpy.typing as npt

from cavegen.data_models import CaveGenConfigModel
from cavegen.mapgen.connectivity import AccessibilityMap, ConnectivityEnforcer
from cavegen.mapgen.initializer import generate_random_cells
from cavegen.mapgen.random_source import RandomSource, make_random_source
from cavegen.mapgen.smoother import smooth_cells
from cavegen.mapgen.tiles import select_tiles
from cavegen.utils.utils import CaveGenLog, CaveGenLogger
from cavegen.world.occupancy_grid import OccupancyGrid

STEP_INIT = 0
STEP_SMOOTH = 1
STEP_CONNECT = 2
STEP_TILES = 3


class MapGen:
    """Generates one cave map.

    Each instance owns its grid, random source and logger, so several maps can
    be generated side by side as long as they don't share a MapGen.
    """

    def __init__(
        self,
        config: CaveGenConfigModel | None = None,
        rng: RandomSource | None = None,
        logger: CaveGenLogger | None = None,
        max_stack_capacity: int | None = None,
    ):
        self.config = config if config is not None else CaveGenConfigModel()
        self.width = self.config.width
        self.height = self.config.height
        self.rng = (
            rng if rng is not None else make_random_source(self.config.random_seed)
        )
        self.logger = logger if logger is not None else CaveGenLogger(printout=False)
        self.max_stack_capacity = max_stack_capacity
        self.map: OccupancyGrid | None = None
        self.accessibility: AccessibilityMap | None = None

    def print_grid(self):
        if self.map is None:
            raise RuntimeError("gen_map() has not been called")
        print(self.map.to_ascii())

    def gen_map(self) -> OccupancyGrid:
        grid = generate_random_cells(
            self.width, self.height, self.config.wall_probability, self.rng
        )
        self.logger.append(
            CaveGenLog(
                f"Seeded {self.width}x{self.height} grid with {grid.wall_count} walls.",
                STEP_INIT,
            )
        )

        changes = smooth_cells(
            grid,
            iterations=self.config.smoothing_iterations,
            threshold=self.config.smoothing_threshold,
        )
        for i, changed in enumerate(changes):
            self.logger.append(
                CaveGenLog(
                    f"Smoothing pass {i + 1} changed {changed} cells.", STEP_SMOOTH
                )
            )

        enforcer = ConnectivityEnforcer(
            grid, max_stack_capacity=self.max_stack_capacity
        )
        carved = enforcer.carve_seed()
        self.logger.append(
            CaveGenLog(
                f"Carved seed at {enforcer.center}, removing {carved} walls.",
                STEP_CONNECT,
            )
        )
        reached = enforcer.flood_fill()
        self.logger.append(
            CaveGenLog(f"Flood fill reached {reached} cells.", STEP_CONNECT)
        )
        holes = enforcer.preserve_holes()
        self.logger.append(
            CaveGenLog(f"Preserved {holes} single-cell holes.", STEP_CONNECT)
        )
        sealed = enforcer.seal_unreachable()
        self.logger.append(
            CaveGenLog(f"Sealed {sealed} unreachable cells.", STEP_CONNECT)
        )

        self.map = grid
        self.accessibility = enforcer.accessibility
        return grid

    def gen_tiles(self) -> npt.NDArray[np.uint8]:
        if self.map is None:
            self.gen_map()
        assert self.map is not None
        tiles = select_tiles(self.map, self.rng)
        self.logger.append(
            CaveGenLog(
                f"Selected tiles for {self.map.open_count} open cells.", STEP_TILES
            )
        )
        return tiles
