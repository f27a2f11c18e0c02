from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .postprocess import YoloxPostConfig


@dataclass(frozen=True)
class ModelProfile:
    """
    Everything needed to decode and label one exported model.

    `class_names` is only used for rendering; the decoder works on indices.
    """

    post: YoloxPostConfig = field(default_factory=YoloxPostConfig)
    class_names: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.class_names and len(self.class_names) != self.post.num_classes:
            raise ValueError(
                f"class_names has {len(self.class_names)} entries but num_classes is {self.post.num_classes}"
            )

    def class_name(self, label: int) -> str:
        if 0 <= label < len(self.class_names):
            return self.class_names[label]
        return str(label)

    def names_by_id(self) -> Dict[int, str]:
        return dict(enumerate(self.class_names))


def _require_number(payload: Dict[str, Any], key: str) -> float:
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number")
    return float(value)


def _require_int(payload: Dict[str, Any], key: str) -> int:
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer")
    return int(value)


def _optional_int(payload: Dict[str, Any], key: str) -> Optional[int]:
    if payload.get(key) is None:
        return None
    return _require_int(payload, key)


def load_model_profile(path: Path) -> ModelProfile:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Model profile not found: {path}")
    raw = path.read_text(encoding="utf-8")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid model profile JSON: {path}") from exc
    if not isinstance(payload, dict):
        raise ValueError("Model profile must be a JSON object")

    allowed = {
        "schema_version",
        "num_classes",
        "conf_threshold",
        "nms_threshold",
        "strides",
        "input_width",
        "input_height",
        "max_detections",
        "class_agnostic_nms",
        "class_names",
    }
    unknown = sorted(set(payload.keys()) - allowed)
    if unknown:
        raise ValueError(f"Unknown model profile keys: {unknown}")

    if "schema_version" not in payload:
        raise ValueError("Missing required key: schema_version")
    if _require_int(payload, "schema_version") != 1:
        raise ValueError("model profile schema_version must be 1")

    defaults = YoloxPostConfig()
    kwargs: Dict[str, Any] = {}
    if "num_classes" in payload:
        kwargs["num_classes"] = _require_int(payload, "num_classes")
    if "conf_threshold" in payload:
        kwargs["conf_threshold"] = _require_number(payload, "conf_threshold")
    if "nms_threshold" in payload:
        kwargs["nms_threshold"] = _require_number(payload, "nms_threshold")
    if "strides" in payload:
        strides = payload["strides"]
        if not isinstance(strides, list) or any(isinstance(s, bool) or not isinstance(s, int) for s in strides):
            raise ValueError("strides must be a list of integers")
        kwargs["strides"] = tuple(strides)
    input_w = _require_int(payload, "input_width") if "input_width" in payload else defaults.input_size[0]
    input_h = _require_int(payload, "input_height") if "input_height" in payload else defaults.input_size[1]
    kwargs["input_size"] = (input_w, input_h)
    kwargs["max_detections"] = _optional_int(payload, "max_detections")
    if "class_agnostic_nms" in payload:
        agnostic = payload["class_agnostic_nms"]
        if not isinstance(agnostic, bool):
            raise ValueError("class_agnostic_nms must be a boolean")
        kwargs["class_agnostic_nms"] = agnostic

    class_names = payload.get("class_names", [])
    if not isinstance(class_names, list) or any(not isinstance(n, str) for n in class_names):
        raise ValueError("class_names must be a list of strings")

    return ModelProfile(post=YoloxPostConfig(**kwargs), class_names=tuple(class_names))
