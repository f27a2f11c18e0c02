"""
YOLOX post-processing for detection heads that emit a 4-point polygon per box.

Core (NumPy only): grid/stride enumeration, proposal decoding, score sort,
greedy NMS and rescaling back to the source image. Preprocessing, the ONNX
Runtime backend, rendering and frame sinks sit around it and need OpenCV /
onnxruntime only when used.
"""

from .types import Box, Detection, GridStride
from .errors import InvalidInput
from .grids import generate_grids_and_stride, num_anchors
from .decode import generate_proposals, record_size
from .nms import NMSConfig, box_iou, nms, nms_sorted, sort_by_score
from .rescale import rescale_detections
from .postprocess import YoloxPostConfig, YoloxPostprocessor, decode_outputs
from .config import ModelProfile, load_model_profile
from .letterbox import static_resize
from .runtime import YoloxPipeline, LetterboxConfig, load_pipeline
from .visualize import draw_detections
from .sinks import FrameSink, ListSink, VideoFileSink, WindowSink

__all__ = [
    "Box",
    "Detection",
    "GridStride",
    "InvalidInput",
    "generate_grids_and_stride",
    "num_anchors",
    "generate_proposals",
    "record_size",
    "NMSConfig",
    "box_iou",
    "nms",
    "nms_sorted",
    "sort_by_score",
    "rescale_detections",
    "YoloxPostConfig",
    "YoloxPostprocessor",
    "decode_outputs",
    "ModelProfile",
    "load_model_profile",
    "static_resize",
    "YoloxPipeline",
    "LetterboxConfig",
    "load_pipeline",
    "draw_detections",
    "FrameSink",
    "ListSink",
    "VideoFileSink",
    "WindowSink",
]
