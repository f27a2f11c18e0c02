import unittest

import numpy as np

from yolox_kit.types import Box, Detection
from yolox_kit.visualize import DEFAULT_COLORS, draw_detections, format_label


class TestDrawDetections(unittest.TestCase):
    def _det(self) -> Detection:
        return Detection(
            box=Box(70.0, 70.0, 20.0, 20.0),
            polygon=((10.0, 10.0), (50.0, 10.0), (50.0, 50.0), (10.0, 50.0)),
            label=1,
            score=0.953,
        )

    def test_polygon_edges_drawn_on_copy(self) -> None:
        img = np.zeros((100, 100, 3), dtype=np.uint8)
        out = draw_detections(img, [self._det()], class_names={1: "R_G"})
        self.assertFalse(np.any(img))
        self.assertEqual(out[10, 30].tolist(), [0, 255, 0])
        self.assertEqual(out[30, 50].tolist(), [0, 255, 0])
        self.assertEqual(out[50, 30].tolist(), [0, 255, 0])
        self.assertEqual(out[30, 10].tolist(), [0, 255, 0])
        # polygon interior untouched
        self.assertEqual(out[30, 30].tolist(), [0, 0, 0])

    def test_no_detections(self) -> None:
        img = np.full((20, 20, 3), 7, dtype=np.uint8)
        out = draw_detections(img, [])
        self.assertTrue(np.array_equal(out, img))

    def test_rejects_grayscale(self) -> None:
        with self.assertRaises(ValueError):
            draw_detections(np.zeros((10, 10), dtype=np.uint8), [])

    def test_format_label(self) -> None:
        det = self._det()
        self.assertEqual(format_label(det, {1: "R_G"}), "R_G 95.3%")
        self.assertEqual(format_label(det), "1 95.3%")

    def test_default_palette(self) -> None:
        self.assertEqual(DEFAULT_COLORS.shape, (80, 3))


if __name__ == "__main__":
    unittest.main()
