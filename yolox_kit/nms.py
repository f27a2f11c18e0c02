from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np

from .types import Box, Detection


@dataclass(frozen=True)
class NMSConfig:
    iou_threshold: float = 0.45
    # None keeps every survivor.
    max_detections: Optional[int] = None
    # If False, boxes only suppress boxes of the same label.
    class_agnostic: bool = True


def sort_by_score(detections: Sequence[Detection]) -> List[Detection]:
    """
    Descending score order. `sorted` is stable, so equal scores keep their
    decode order and NMS results are reproducible.
    """

    return sorted(detections, key=lambda d: d.score, reverse=True)


def iou_one_to_many(box: np.ndarray, others: np.ndarray) -> np.ndarray:
    """
    IoU of one xyxy box against an (N, 4) array of xyxy boxes.

    Entries whose union is not positive (e.g. two zero-area boxes, or NaN
    coordinates) get an IoU of 0.
    """

    with np.errstate(invalid="ignore"):
        xx1 = np.maximum(box[0], others[:, 0])
        yy1 = np.maximum(box[1], others[:, 1])
        xx2 = np.minimum(box[2], others[:, 2])
        yy2 = np.minimum(box[3], others[:, 3])

        w = np.maximum(0.0, xx2 - xx1)
        h = np.maximum(0.0, yy2 - yy1)
        inter = w * h
        area = (box[2] - box[0]) * (box[3] - box[1])
        areas = (others[:, 2] - others[:, 0]) * (others[:, 3] - others[:, 1])
        union = area + areas - inter
        return np.divide(inter, union, out=np.zeros_like(inter), where=union > 0)


def box_iou(a: Box, b: Box) -> float:
    """
    Intersection over union of two axis-aligned boxes.
    """

    ious = iou_one_to_many(
        np.array(a.as_xyxy(), dtype=np.float64),
        np.array([b.as_xyxy()], dtype=np.float64),
    )
    return float(ious[0])


def nms_sorted(detections: Sequence[Detection], iou_threshold: float) -> List[int]:
    """
    Greedy NMS over detections already sorted by descending score.

    A detection is dropped when its IoU with any previously kept detection is
    above `iou_threshold`. Returns the kept indices in input order.
    """

    n = len(detections)
    if n == 0:
        return []

    boxes = np.array([d.as_xyxy() for d in detections], dtype=np.float64)

    keep: List[int] = []
    for i in range(n):
        if keep:
            iou = iou_one_to_many(boxes[i], boxes[keep])
            if np.any(iou > iou_threshold):
                continue
        keep.append(i)

    return keep


def nms(detections: Sequence[Detection], cfg: NMSConfig) -> List[Detection]:
    """
    Sort + suppress. Output stays in descending score order.
    """

    ordered = sort_by_score(detections)
    if not ordered:
        return []

    if cfg.class_agnostic:
        kept = nms_sorted(ordered, cfg.iou_threshold)
    else:
        by_label: Dict[int, List[int]] = {}
        for idx, det in enumerate(ordered):
            by_label.setdefault(det.label, []).append(idx)

        kept = []
        for idx in by_label.values():
            keep_local = nms_sorted([ordered[i] for i in idx], cfg.iou_threshold)
            kept.extend(idx[j] for j in keep_local)
        # Global indices into `ordered` are already score ordered.
        kept.sort()

    if cfg.max_detections is not None:
        kept = kept[: cfg.max_detections]
    return [ordered[i] for i in kept]
