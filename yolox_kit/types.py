import math
from dataclasses import dataclass
from typing import Tuple

Point = Tuple[float, float]
Polygon = Tuple[Point, Point, Point, Point]


@dataclass(frozen=True)
class GridStride:
    """
    One anchor position (grid cell at a given stride).
    """

    grid_x: int
    grid_y: int
    stride: int


def _far_edge(start: float, size: float) -> float:
    # An overflowed size (-inf start, +inf size) still reaches +inf.
    if size == math.inf:
        return math.inf
    return start + size


@dataclass(frozen=True)
class Box:
    """
    Axis-aligned rectangle as top-left corner + size.
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def x2(self) -> float:
        return _far_edge(self.x, self.width)

    @property
    def y2(self) -> float:
        return _far_edge(self.y, self.height)

    @property
    def area(self) -> float:
        return self.width * self.height

    def as_xyxy(self) -> Tuple[float, float, float, float]:
        return self.x, self.y, self.x2, self.y2


@dataclass(frozen=True)
class Detection:
    """
    Box + oriented quadrilateral + class label + confidence.

    `polygon` keeps the point order emitted by the network; it defines the
    edge drawing order and is not guaranteed to be convex or clockwise.
    """

    box: Box
    polygon: Polygon
    label: int
    score: float

    def __post_init__(self) -> None:
        if len(self.polygon) != 4:
            raise ValueError(f"polygon must have exactly 4 points, got {len(self.polygon)}")

    def as_xyxy(self) -> Tuple[float, float, float, float]:
        return self.box.as_xyxy()
