from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

import numpy as np


PathLike = Union[str, Path]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OnnxRuntimeBackendConfig:
    """
    - providers: ORT execution providers, in priority order (None = ORT default)
    - input_name/output_name: override the single input / first output
    """

    providers: Optional[Sequence[str]] = None
    input_name: Optional[str] = None
    output_name: Optional[str] = None


class OnnxRuntimeBackend:
    """
    Runs an exported YOLOX model with one input and one output.

    Expects an NCHW float32 blob shaped (1, 3, H, W) and returns the raw head
    output, typically (1, num_anchors, 13 + num_classes).
    """

    def __init__(self, model_path: PathLike, cfg: OnnxRuntimeBackendConfig = OnnxRuntimeBackendConfig()):
        try:
            import onnxruntime as ort  # type: ignore
        except Exception as e:  # pragma: no cover
            raise ImportError(
                "onnxruntime is required for the ONNX backend. Install it with `pip install onnxruntime`."
            ) from e

        self.model_path = Path(model_path)
        if not self.model_path.exists():
            raise FileNotFoundError(str(self.model_path))

        providers = list(cfg.providers) if cfg.providers is not None else None
        self.session = ort.InferenceSession(str(self.model_path), providers=providers)

        inputs = self.session.get_inputs()
        if len(inputs) != 1 and cfg.input_name is None:
            raise ValueError(f"Model has {len(inputs)} inputs; pass input_name explicitly.")
        self.input_name = cfg.input_name or inputs[0].name
        self.output_name = cfg.output_name or self.session.get_outputs()[0].name
        logger.debug("loaded %s with providers %s", self.model_path, self.session.get_providers())

    @property
    def input_shape(self) -> Sequence[object]:
        for meta in self.session.get_inputs():
            if meta.name == self.input_name:
                return tuple(meta.shape)
        return ()

    def infer(self, blob: np.ndarray) -> np.ndarray:
        outputs = self.session.run([self.output_name], {self.input_name: blob})
        return outputs[0]
