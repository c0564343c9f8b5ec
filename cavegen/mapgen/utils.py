import typing as t

import numpy as np
import numpy.typing as npt


def is_in_map(x: int, y: int, map: npt.NDArray[t.Any]) -> bool:
    H, W = map.shape
    return not (x < 0 or x >= W or y < 0 or y >= H)


def is_wall(x: int, y: int, map: npt.NDArray[np.bool_]) -> bool:
    if is_in_map(x, y, map):
        return bool(map[y][x])
    return True


def window_wall_counts(map: npt.NDArray[np.bool_]) -> npt.NDArray[np.int8]:
    """Number of walls in the 3x3 block centered on every cell, with the area
    outside the map counted as wall."""
    H, W = map.shape
    padded = np.pad(map, 1, mode="constant", constant_values=True).astype(np.int8)
    counts = np.zeros((H, W), dtype=np.int8)
    for dy in (0, 1, 2):
        for dx in (0, 1, 2):
            counts += padded[dy : dy + H, dx : dx + W]
    return counts
