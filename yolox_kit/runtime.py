from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, Union

import numpy as np

from .letterbox import static_resize
from .postprocess import YoloxPostConfig, YoloxPostprocessor
from .types import Detection


PathLike = Union[str, Path]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LetterboxConfig:
    color: Tuple[int, int, int] = (114, 114, 114)


@dataclass(frozen=True)
class PreprocessResult:
    blob: np.ndarray
    # (width, height) of the source image
    orig_size: Tuple[int, int]
    scale: float


@dataclass
class YoloxPipeline:
    """
    Preprocess (static resize) -> inference -> YOLOX post-processing.

    Expects BGR images (OpenCV-style) as `np.ndarray` and returns `Detection`
    objects in original image coordinates.
    """

    infer_fn: Callable[[np.ndarray], np.ndarray]
    post_cfg: YoloxPostConfig = field(default_factory=YoloxPostConfig)
    letterbox_cfg: LetterboxConfig = field(default_factory=LetterboxConfig)
    backend: Optional[object] = None

    def __post_init__(self) -> None:
        self.post = YoloxPostprocessor(self.post_cfg)

    def preprocess(self, image_bgr: np.ndarray) -> PreprocessResult:
        if image_bgr is None or not hasattr(image_bgr, "shape"):
            raise TypeError("image_bgr must be a NumPy array (BGR).")
        if image_bgr.ndim != 3 or image_bgr.shape[2] != 3:
            raise ValueError(f"Expected image shape (H, W, 3), got {getattr(image_bgr, 'shape', None)}")

        orig_h, orig_w = image_bgr.shape[:2]
        img, scale = static_resize(image_bgr, new_shape=self.post_cfg.input_size, color=self.letterbox_cfg.color)

        # YOLOX exports take raw 0..255 BGR values: HWC -> CHW, add batch.
        blob = np.ascontiguousarray(np.transpose(img.astype(np.float32), (2, 0, 1))[None, ...])

        return PreprocessResult(blob=blob, orig_size=(orig_w, orig_h), scale=scale)

    def __call__(self, image_bgr: np.ndarray) -> List[Detection]:
        prep = self.preprocess(image_bgr)
        t0 = time.perf_counter()
        preds = self.infer_fn(prep.blob)
        t1 = time.perf_counter()
        orig_w, orig_h = prep.orig_size
        detections = self.post.process(preds, scale=prep.scale, image_w=orig_w, image_h=orig_h)
        logger.debug(
            "inference %.1fms, postprocess %.1fms, %d detections",
            (t1 - t0) * 1000.0,
            (time.perf_counter() - t1) * 1000.0,
            len(detections),
        )
        return detections


def check_input_size(input_shape: Sequence[object], input_size: Tuple[int, int]) -> None:
    """
    Raise ValueError when a model's NCHW input shape disagrees with `input_size` (width, height).

    Symbolic (dynamic) dimensions are accepted as-is.
    """

    if len(input_shape) != 4:
        return
    dim_h, dim_w = input_shape[2], input_shape[3]
    input_w, input_h = input_size
    if (isinstance(dim_w, int) and dim_w != input_w) or (isinstance(dim_h, int) and dim_h != input_h):
        raise ValueError(
            f"Model input is {dim_w}x{dim_h} but input_size is {input_w}x{input_h}; "
            "set input_width/input_height in the model profile."
        )


def load_pipeline(
    model_path: PathLike,
    *,
    post_cfg: Optional[YoloxPostConfig] = None,
    letterbox_cfg: Optional[LetterboxConfig] = None,
    onnx_providers: Optional[Sequence[str]] = None,
    onnx_input_name: Optional[str] = None,
    onnx_output_name: Optional[str] = None,
) -> YoloxPipeline:
    """
    Create a pipeline for an exported model on disk (ONNX only).
    """

    path = Path(model_path)
    if path.suffix.lower() != ".onnx":
        raise ValueError(f"Unsupported model format '{path.suffix}'. Export the model to ONNX.")

    from .backends.onnxruntime_backend import OnnxRuntimeBackend, OnnxRuntimeBackendConfig

    ort_backend = OnnxRuntimeBackend(
        path,
        OnnxRuntimeBackendConfig(
            providers=onnx_providers,
            input_name=onnx_input_name,
            output_name=onnx_output_name,
        ),
    )
    post_cfg = post_cfg or YoloxPostConfig()
    check_input_size(ort_backend.input_shape, post_cfg.input_size)
    return YoloxPipeline(
        ort_backend.infer,
        post_cfg=post_cfg,
        letterbox_cfg=letterbox_cfg or LetterboxConfig(),
        backend=ort_backend,
    )
