from typing import List, Sequence, Tuple

import numpy as np

from .types import GridStride


def generate_grids_and_stride(target_w: int, target_h: int, strides: Sequence[int]) -> List[GridStride]:
    """
    Enumerate anchor positions in the order the detection head emits them.

    For each stride (in the given order) every cell of the `target_w // s` x
    `target_h // s` grid is listed row-major (y outer, x inner). Sizes that are
    not a multiple of the stride are floored, exactly like the exported head.
    """

    grid_strides: List[GridStride] = []
    for stride in strides:
        num_grid_w = target_w // stride
        num_grid_h = target_h // stride
        for gy in range(num_grid_h):
            for gx in range(num_grid_w):
                grid_strides.append(GridStride(grid_x=gx, grid_y=gy, stride=stride))
    return grid_strides


def grid_strides_to_arrays(grid_strides: Sequence[GridStride]) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    gx = np.fromiter((g.grid_x for g in grid_strides), dtype=np.int64, count=len(grid_strides))
    gy = np.fromiter((g.grid_y for g in grid_strides), dtype=np.int64, count=len(grid_strides))
    s = np.fromiter((g.stride for g in grid_strides), dtype=np.int64, count=len(grid_strides))
    return gx, gy, s


def num_anchors(target_w: int, target_h: int, strides: Sequence[int]) -> int:
    return sum((target_w // s) * (target_h // s) for s in strides)
