from __future__ import annotations

from typing import Dict, Iterable, Optional, Sequence, Tuple

import numpy as np

from .types import Detection

# YOLOX demo palette, RGB-ish floats in [0, 1], indexed by class id.
DEFAULT_COLORS = np.array(
    [
        0.000, 0.447, 0.741, 0.850, 0.325, 0.098, 0.929, 0.694, 0.125, 0.494, 0.184, 0.556,
        0.466, 0.674, 0.188, 0.301, 0.745, 0.933, 0.635, 0.078, 0.184, 0.300, 0.300, 0.300,
        0.600, 0.600, 0.600, 1.000, 0.000, 0.000, 1.000, 0.500, 0.000, 0.749, 0.749, 0.000,
        0.000, 1.000, 0.000, 0.000, 0.000, 1.000, 0.667, 0.000, 1.000, 0.333, 0.333, 0.000,
        0.333, 0.667, 0.000, 0.333, 1.000, 0.000, 0.667, 0.333, 0.000, 0.667, 0.667, 0.000,
        0.667, 1.000, 0.000, 1.000, 0.333, 0.000, 1.000, 0.667, 0.000, 1.000, 1.000, 0.000,
        0.000, 0.333, 0.500, 0.000, 0.667, 0.500, 0.000, 1.000, 0.500, 0.333, 0.000, 0.500,
        0.333, 0.333, 0.500, 0.333, 0.667, 0.500, 0.333, 1.000, 0.500, 0.667, 0.000, 0.500,
        0.667, 0.333, 0.500, 0.667, 0.667, 0.500, 0.667, 1.000, 0.500, 1.000, 0.000, 0.500,
        1.000, 0.333, 0.500, 1.000, 0.667, 0.500, 1.000, 1.000, 0.500, 0.000, 0.333, 1.000,
        0.000, 0.667, 1.000, 0.000, 1.000, 1.000, 0.333, 0.000, 1.000, 0.333, 0.333, 1.000,
        0.333, 0.667, 1.000, 0.333, 1.000, 1.000, 0.667, 0.000, 1.000, 0.667, 0.333, 1.000,
        0.667, 0.667, 1.000, 0.667, 1.000, 1.000, 1.000, 0.000, 1.000, 1.000, 0.333, 1.000,
        1.000, 0.667, 1.000, 0.333, 0.000, 0.000, 0.500, 0.000, 0.000, 0.667, 0.000, 0.000,
        0.833, 0.000, 0.000, 1.000, 0.000, 0.000, 0.000, 0.167, 0.000, 0.000, 0.333, 0.000,
        0.000, 0.500, 0.000, 0.000, 0.667, 0.000, 0.000, 0.833, 0.000, 0.000, 1.000, 0.000,
        0.000, 0.000, 0.167, 0.000, 0.000, 0.333, 0.000, 0.000, 0.500, 0.000, 0.000, 0.667,
        0.000, 0.000, 0.833, 0.000, 0.000, 1.000, 0.000, 0.000, 0.000, 0.143, 0.143, 0.143,
        0.286, 0.286, 0.286, 0.429, 0.429, 0.429, 0.571, 0.571, 0.571, 0.714, 0.714, 0.714,
        0.857, 0.857, 0.857, 0.000, 0.447, 0.741, 0.314, 0.717, 0.741, 0.500, 0.500, 0.000,
    ],
    dtype=np.float32,
).reshape(-1, 3)


def _color_for_label(label: int, colors: np.ndarray) -> np.ndarray:
    return colors[label % len(colors)]


def format_label(det: Detection, class_names: Optional[Dict[int, str]] = None) -> str:
    name = class_names.get(det.label, str(det.label)) if class_names else str(det.label)
    return f"{name} {det.score * 100:.1f}%"


def draw_detections(
    image_bgr: np.ndarray,
    detections: Iterable[Detection],
    *,
    class_names: Optional[Dict[int, str]] = None,
    colors: Optional[Sequence[Sequence[float]]] = None,
    draw_box: bool = False,
    polygon_color: Tuple[int, int, int] = (0, 255, 0),
    line_thickness: int = 1,
    font_scale: float = 0.4,
    font_thickness: int = 1,
) -> np.ndarray:
    """
    Draw detection polygons (+ optional boxes) and labels; returns a copy.

    Polygon edges follow point order: p0 -> p1 -> p2 -> p3 -> p0.

    Args:
        image_bgr: input image in BGR (H, W, 3).
        detections: detections in original image coordinates.
        class_names: optional mapping {label: name}.
        colors: per-class colours as floats in [0, 1]; defaults to `DEFAULT_COLORS`.
    """

    try:
        import cv2  # type: ignore
    except Exception as e:  # pragma: no cover
        raise ImportError("OpenCV is required for draw_detections(). Install with `pip install opencv-python`.") from e

    if image_bgr is None or not hasattr(image_bgr, "shape"):
        raise TypeError("image_bgr must be a NumPy array (BGR).")
    if image_bgr.ndim != 3 or image_bgr.shape[2] != 3:
        raise ValueError(f"Expected image shape (H, W, 3), got {getattr(image_bgr, 'shape', None)}")

    palette = DEFAULT_COLORS if colors is None else np.asarray(colors, dtype=np.float32).reshape(-1, 3)
    out = image_bgr.copy()
    h, w = out.shape[:2]

    for det in detections:
        color = _color_for_label(det.label, palette)
        color_bgr = tuple(int(c) for c in (color * 255))

        if draw_box:
            x1, y1, x2, y2 = (int(round(v)) for v in det.as_xyxy())
            cv2.rectangle(out, (x1, y1), (x2, y2), color_bgr, thickness=line_thickness)

        pts = np.round(np.array(det.polygon, dtype=np.float64)).astype(np.int32).reshape(-1, 1, 2)
        cv2.polylines(out, [pts], isClosed=True, color=polygon_color, thickness=line_thickness)

        label = format_label(det, class_names)
        txt_color = (0, 0, 0) if float(np.mean(color)) > 0.5 else (255, 255, 255)
        txt_bk_color = tuple(int(c) for c in (color * 0.7 * 255))

        (tw, th), baseline = cv2.getTextSize(label, cv2.FONT_HERSHEY_SIMPLEX, font_scale, font_thickness)
        x = int(det.box.x)
        y = min(int(det.box.y) + 1, h - 1)
        cv2.rectangle(out, (x, y), (min(x + tw, w - 1), min(y + th + baseline, h - 1)), txt_bk_color, thickness=-1)
        cv2.putText(
            out,
            label,
            (x, min(y + th, h - 1)),
            cv2.FONT_HERSHEY_SIMPLEX,
            font_scale,
            txt_color,
            thickness=font_thickness,
            lineType=cv2.LINE_AA,
        )

    return out
