import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .decode import generate_proposals, record_size
from .grids import generate_grids_and_stride, num_anchors
from .nms import NMSConfig, nms
from .rescale import rescale_detections
from .types import Detection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class YoloxPostConfig:
    """
    Tunables for decoding a YOLOX head with polygon outputs.

    Defaults match the exported 6-class model: 640x640 input, strides 8/16/32.
    """

    num_classes: int = 6
    conf_threshold: float = 0.3
    nms_threshold: float = 0.45
    strides: Tuple[int, ...] = (8, 16, 32)
    # (width, height) of the network input.
    input_size: Tuple[int, int] = (640, 640)
    max_detections: Optional[int] = None
    class_agnostic_nms: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.num_classes, bool) or not isinstance(self.num_classes, int) or self.num_classes < 1:
            raise ValueError("num_classes must be an integer >= 1")
        if not 0.0 <= self.conf_threshold <= 1.0:
            raise ValueError("conf_threshold must be in [0, 1]")
        if not 0.0 <= self.nms_threshold <= 1.0:
            raise ValueError("nms_threshold must be in [0, 1]")
        if not self.strides:
            raise ValueError("strides must not be empty")
        if any(isinstance(s, bool) or not isinstance(s, int) or s <= 0 for s in self.strides):
            raise ValueError("strides must be positive integers")
        if len(self.input_size) != 2 or any(v <= 0 for v in self.input_size):
            raise ValueError("input_size must be (width, height) with positive values")
        if self.max_detections is not None and self.max_detections < 1:
            raise ValueError("max_detections must be >= 1 or None")


class YoloxPostprocessor:
    """
    Raw head output -> detections in original image coordinates.

    Stages: grid/stride enumeration -> proposal decode + confidence filter ->
    score sort -> greedy NMS -> rescale + clip. Nothing is cached between
    calls; each `process` call only reads the buffer it is given.
    """

    def __init__(self, cfg: YoloxPostConfig):
        self.cfg = cfg

    def expected_length(self) -> int:
        input_w, input_h = self.cfg.input_size
        return num_anchors(input_w, input_h, self.cfg.strides) * record_size(self.cfg.num_classes)

    def process(self, preds, scale: float, image_w: int, image_h: int) -> List[Detection]:
        """
        Args:
            preds: flat float buffer (or any array with the same element count)
                of `num_anchors * (13 + num_classes)` values
            scale: resize factor used by the letterbox step (network / original)
            image_w, image_h: original image size in pixels

        Raises:
            InvalidInput: buffer length or geometry does not fit the config
        """

        input_w, input_h = self.cfg.input_size
        grid_strides = generate_grids_and_stride(input_w, input_h, self.cfg.strides)
        proposals = generate_proposals(grid_strides, preds, self.cfg.conf_threshold, self.cfg.num_classes)

        nms_cfg = NMSConfig(
            iou_threshold=self.cfg.nms_threshold,
            max_detections=self.cfg.max_detections,
            class_agnostic=self.cfg.class_agnostic_nms,
        )
        picked = nms(proposals, nms_cfg)
        logger.debug("kept %d of %d proposals after NMS", len(picked), len(proposals))

        return rescale_detections(picked, scale, image_w, image_h)


def decode_outputs(
    preds,
    scale: float,
    image_w: int,
    image_h: int,
    cfg: Optional[YoloxPostConfig] = None,
) -> List[Detection]:
    return YoloxPostprocessor(cfg or YoloxPostConfig()).process(preds, scale, image_w, image_h)
