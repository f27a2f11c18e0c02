import unittest

import numpy as np

from yolox_kit.grids import generate_grids_and_stride, grid_strides_to_arrays, num_anchors
from yolox_kit.types import GridStride


class TestGenerateGridsAndStride(unittest.TestCase):
    def test_default_640_layout(self) -> None:
        grids = generate_grids_and_stride(640, 640, (8, 16, 32))
        self.assertEqual(len(grids), 8400)
        self.assertEqual(num_anchors(640, 640, (8, 16, 32)), 8400)

        self.assertTrue(all(g.stride == 8 for g in grids[:6400]))
        self.assertTrue(all(g.stride == 16 for g in grids[6400:8000]))
        self.assertTrue(all(g.stride == 32 for g in grids[8000:]))

    def test_row_major_within_stride(self) -> None:
        grids = generate_grids_and_stride(640, 640, (8, 16, 32))
        self.assertEqual(grids[0], GridStride(0, 0, 8))
        self.assertEqual(grids[1], GridStride(1, 0, 8))
        self.assertEqual(grids[80], GridStride(0, 1, 8))
        self.assertEqual(grids[6399], GridStride(79, 79, 8))
        self.assertEqual(grids[6400], GridStride(0, 0, 16))
        self.assertEqual(grids[6441], GridStride(1, 1, 16))
        self.assertEqual(grids[-1], GridStride(19, 19, 32))

    def test_stride_order_is_kept(self) -> None:
        grids = generate_grids_and_stride(64, 64, (32, 8))
        self.assertEqual([g.stride for g in grids[:4]], [32, 32, 32, 32])
        self.assertEqual(grids[4], GridStride(0, 0, 8))
        self.assertEqual(len(grids), 4 + 64)

    def test_non_divisible_size_is_floored(self) -> None:
        grids = generate_grids_and_stride(100, 50, (32,))
        self.assertEqual(grids, [GridStride(0, 0, 32), GridStride(1, 0, 32), GridStride(2, 0, 32)])

    def test_no_strides(self) -> None:
        self.assertEqual(generate_grids_and_stride(640, 640, ()), [])
        gx, gy, s = grid_strides_to_arrays([])
        self.assertEqual(gx.size, 0)

    def test_arrays_match_list(self) -> None:
        grids = generate_grids_and_stride(96, 64, (8, 16, 32))
        gx, gy, s = grid_strides_to_arrays(grids)
        self.assertTrue(np.array_equal(gx, [g.grid_x for g in grids]))
        self.assertTrue(np.array_equal(gy, [g.grid_y for g in grids]))
        self.assertTrue(np.array_equal(s, [g.stride for g in grids]))


if __name__ == "__main__":
    unittest.main()
