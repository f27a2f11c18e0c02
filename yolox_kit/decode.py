import logging
from typing import List, Sequence

import numpy as np

from .errors import InvalidInput
from .grids import grid_strides_to_arrays
from .types import Detection, Box, GridStride

logger = logging.getLogger(__name__)

# [dx, dy, log_w, log_h] + 4 polygon points (x, y) + objectness, then class scores.
BOX_FIELDS = 4
POLYGON_FIELDS = 8
OBJECTNESS_INDEX = BOX_FIELDS + POLYGON_FIELDS
CLASS_OFFSET = OBJECTNESS_INDEX + 1


def record_size(num_classes: int) -> int:
    return 5 + POLYGON_FIELDS + num_classes


def reshape_predictions(preds, num_anchors: int, num_classes: int) -> np.ndarray:
    """
    Flatten a raw head output and view it as (num_anchors, record_size) float32.

    Accepts `(1, A, R)`, `(A, R)` or a flat buffer; only the element count has
    to match.
    """

    flat = np.asarray(preds, dtype=np.float32).reshape(-1)
    size = record_size(num_classes)
    expected = num_anchors * size
    if flat.size != expected:
        raise InvalidInput(
            f"Prediction buffer has {flat.size} values, expected {expected} "
            f"({num_anchors} anchors x {size} fields for {num_classes} classes)."
        )
    return flat.reshape(num_anchors, size)


def generate_proposals(
    grid_strides: Sequence[GridStride],
    preds,
    prob_threshold: float,
    num_classes: int,
) -> List[Detection]:
    """
    Decode every anchor and emit one candidate per class whose
    objectness * class score is above `prob_threshold`.

    Candidates come out anchor-major, class-minor (same order as a nested
    anchor/class loop). Math runs in float32 like the exported network.
    """

    gx, gy, s = grid_strides_to_arrays(grid_strides)
    feats = reshape_predictions(preds, len(gx), num_classes)
    if feats.shape[0] == 0:
        return []

    gx = gx.astype(np.float32)
    gy = gy.astype(np.float32)
    s = s.astype(np.float32)

    # yolox/models/yolo_head.py decode:
    #   xy = (xy + grid) * stride, wh = exp(wh) * stride
    x_center = (feats[:, 0] + gx) * s
    y_center = (feats[:, 1] + gy) * s
    with np.errstate(over="ignore"):
        w = np.exp(feats[:, 2]) * s
        h = np.exp(feats[:, 3]) * s
    x0 = x_center - w * np.float32(0.5)
    y0 = y_center - h * np.float32(0.5)

    points_x = (feats[:, BOX_FIELDS:OBJECTNESS_INDEX:2] + gx[:, None]) * s[:, None]
    points_y = (feats[:, BOX_FIELDS + 1:OBJECTNESS_INDEX:2] + gy[:, None]) * s[:, None]

    scores = feats[:, OBJECTNESS_INDEX:OBJECTNESS_INDEX + 1] * feats[:, CLASS_OFFSET:]
    anchor_idx, class_idx = np.nonzero(scores > np.float32(prob_threshold))

    proposals: List[Detection] = []
    for a, c in zip(anchor_idx.tolist(), class_idx.tolist()):
        polygon = tuple((float(points_x[a, k]), float(points_y[a, k])) for k in range(4))
        proposals.append(
            Detection(
                box=Box(x=float(x0[a]), y=float(y0[a]), width=float(w[a]), height=float(h[a])),
                polygon=polygon,
                label=int(c),
                score=float(scores[a, c]),
            )
        )

    logger.debug("decoded %d proposals from %d anchors", len(proposals), feats.shape[0])
    return proposals
