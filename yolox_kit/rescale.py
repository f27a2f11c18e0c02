import math
from dataclasses import replace
from typing import List, Sequence

from .errors import InvalidInput
from .types import Box, Detection


def clip_coordinate(value: float, upper: float) -> float:
    """
    Clamp into [0, upper]. NaN maps to 0 so downstream never sees it.
    """

    if math.isnan(value):
        return 0.0
    return max(min(value, upper), 0.0)


def rescale_detections(
    detections: Sequence[Detection],
    scale: float,
    image_w: int,
    image_h: int,
) -> List[Detection]:
    """
    Map detections from network input space back to the original image.

    `scale` is the factor the resize step applied (network / original). Box
    corners and polygon points are divided by it and clipped to
    [0, image_w - 1] x [0, image_h - 1] independently; box width/height are
    recomputed from the clipped corners. Polygon points are not constrained
    to the clipped box.
    """

    if not math.isfinite(scale) or scale <= 0:
        raise InvalidInput(f"scale must be a positive finite number, got {scale!r}")
    if image_w < 1 or image_h < 1:
        raise InvalidInput(f"image size must be positive, got {image_w}x{image_h}")

    max_x = float(image_w - 1)
    max_y = float(image_h - 1)

    out: List[Detection] = []
    for det in detections:
        x0, y0, x1, y1 = det.box.as_xyxy()
        x0 = clip_coordinate(x0 / scale, max_x)
        y0 = clip_coordinate(y0 / scale, max_y)
        x1 = clip_coordinate(x1 / scale, max_x)
        y1 = clip_coordinate(y1 / scale, max_y)

        polygon = tuple(
            (clip_coordinate(px / scale, max_x), clip_coordinate(py / scale, max_y)) for px, py in det.polygon
        )
        out.append(
            replace(
                det,
                box=Box(x=x0, y=y0, width=x1 - x0, height=y1 - y0),
                polygon=polygon,
            )
        )
    return out
