import typing as t

WALL = True
OPEN = False

# Accessibility bits
ACCESSIBLE = 1
NEIGHBOR_ACCESSIBLE = 2

# Tile index layout
ADJACENCY_MASK = 0x0F
VARIATION_MASK = 0x70
WALL_TILE_INDEX = 0x80

GridCell = t.Tuple[int, int]
