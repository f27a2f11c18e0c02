import math
import unittest

from yolox_kit.errors import InvalidInput
from yolox_kit.rescale import clip_coordinate, rescale_detections
from yolox_kit.types import Box, Detection


class TestRescaleDetections(unittest.TestCase):
    def test_box_is_clipped_to_image(self) -> None:
        w, h = 320, 240
        det = Detection(
            box=Box(x=-10.0, y=5.0, width=w + 60.0, height=10.0),
            polygon=((0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)),
            label=0,
            score=0.9,
        )
        (out,) = rescale_detections([det], 1.0, w, h)
        self.assertEqual(out.box.x, 0.0)
        self.assertEqual(out.box.x2, w - 1)
        self.assertEqual(out.box.width, w - 1)
        self.assertEqual(out.box.y, 5.0)
        self.assertEqual(out.box.height, 10.0)

    def test_inside_box_unchanged_at_unit_scale(self) -> None:
        det = Detection(
            box=Box(x=10.0, y=20.0, width=30.0, height=40.0),
            polygon=((10.0, 20.0), (40.0, 20.0), (40.0, 60.0), (10.0, 60.0)),
            label=3,
            score=0.5,
        )
        self.assertEqual(rescale_detections([det], 1.0, 100, 100), [det])

    def test_divides_by_scale(self) -> None:
        det = Detection(
            box=Box(x=48.0, y=32.0, width=16.0, height=16.0),
            polygon=((40.0, 24.0), (56.0, 24.0), (56.0, 40.0), (40.0, 40.0)),
            label=1,
            score=0.7,
        )
        (out,) = rescale_detections([det], 0.5, 1280, 768)
        self.assertEqual(out.box, Box(96.0, 64.0, 32.0, 32.0))
        self.assertEqual(out.polygon, ((80.0, 48.0), (112.0, 48.0), (112.0, 80.0), (80.0, 80.0)))
        self.assertEqual((out.label, out.score), (1, 0.7))

    def test_polygon_clipped_independently_of_box(self) -> None:
        det = Detection(
            box=Box(x=20.0, y=20.0, width=10.0, height=10.0),
            polygon=((-5.0, 25.0), (15.0, 200.0), (35.0, 25.0), (25.0, -3.0)),
            label=0,
            score=0.9,
        )
        (out,) = rescale_detections([det], 1.0, 100, 50)
        self.assertEqual(out.box, det.box)
        self.assertEqual(out.polygon, ((0.0, 25.0), (15.0, 49.0), (35.0, 25.0), (25.0, 0.0)))

    def test_order_preserved(self) -> None:
        dets = [
            Detection(Box(float(i), 0.0, 1.0, 1.0), ((0.0, 0.0),) * 4, label=i, score=1.0 - i / 10)
            for i in range(5)
        ]
        out = rescale_detections(dets, 2.0, 10, 10)
        self.assertEqual([d.label for d in out], [0, 1, 2, 3, 4])

    def test_pathological_coordinates(self) -> None:
        det = Detection(
            box=Box(x=float("nan"), y=float("-inf"), width=float("inf"), height=float("inf")),
            polygon=((float("nan"), 1.0),) * 4,
            label=0,
            score=0.9,
        )
        (out,) = rescale_detections([det], 1.0, 20, 10)
        for v in (out.box.x, out.box.y, out.box.width, out.box.height):
            self.assertFalse(math.isnan(v))
        self.assertEqual(out.box, Box(0.0, 0.0, 19.0, 9.0))
        self.assertEqual(out.polygon[0], (0.0, 1.0))

    def test_overflowed_size_covers_image(self) -> None:
        inf = float("inf")
        det = Detection(Box(x=-inf, y=-inf, width=inf, height=inf), ((0.0, 0.0),) * 4, label=0, score=0.9)
        self.assertEqual(det.box.as_xyxy(), (-inf, -inf, inf, inf))
        (out,) = rescale_detections([det], 0.5, 1280, 720)
        self.assertEqual(out.box, Box(0.0, 0.0, 1279.0, 719.0))

    def test_invalid_scale_or_size(self) -> None:
        for scale in (0.0, -1.0, float("nan"), float("inf")):
            with self.assertRaises(InvalidInput):
                rescale_detections([], scale, 10, 10)
        with self.assertRaises(InvalidInput):
            rescale_detections([], 1.0, 0, 10)

    def test_clip_coordinate(self) -> None:
        self.assertEqual(clip_coordinate(-3.0, 9.0), 0.0)
        self.assertEqual(clip_coordinate(12.0, 9.0), 9.0)
        self.assertEqual(clip_coordinate(4.5, 9.0), 4.5)
        self.assertEqual(clip_coordinate(float("nan"), 9.0), 0.0)


if __name__ == "__main__":
    unittest.main()
