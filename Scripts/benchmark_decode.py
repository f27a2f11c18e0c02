from __future__ import annotations

import argparse
import statistics
import time
from dataclasses import dataclass
from typing import List

import numpy as np

from yolox_kit import YoloxPostConfig, YoloxPostprocessor, record_size


@dataclass(frozen=True)
class TimingSummary:
    n: int
    mean_ms: float
    p50_ms: float
    p95_ms: float


def _percentile(sorted_values: List[float], q: float) -> float:
    if not sorted_values:
        raise ValueError("No values provided.")
    pos = (q / 100.0) * (len(sorted_values) - 1)
    lo = int(np.floor(pos))
    hi = int(np.ceil(pos))
    t = pos - lo
    return float(sorted_values[lo] * (1.0 - t) + sorted_values[hi] * t)


def _summarize_ms(values_s: List[float]) -> TimingSummary:
    ms = sorted(v * 1000.0 for v in values_s)
    return TimingSummary(
        n=len(ms),
        mean_ms=float(statistics.fmean(ms)),
        p50_ms=_percentile(ms, 50.0),
        p95_ms=_percentile(ms, 95.0),
    )


def _synthetic_preds(cfg: YoloxPostConfig, active: int, seed: int) -> np.ndarray:
    """Random head output with `active` anchors whose objectness clears the threshold."""
    rng = np.random.default_rng(seed)
    size = record_size(cfg.num_classes)
    n = YoloxPostprocessor(cfg).expected_length() // size
    preds = rng.uniform(-0.5, 0.5, size=(n, size)).astype(np.float32)
    preds[:, 12] = rng.uniform(0.0, cfg.conf_threshold, size=n)
    preds[:, 13:] = rng.uniform(0.0, 1.0, size=(n, cfg.num_classes))
    hot = rng.choice(n, size=min(active, n), replace=False)
    preds[hot, 12] = rng.uniform(0.6, 1.0, size=hot.size)
    return preds


def main() -> int:
    parser = argparse.ArgumentParser(description="Benchmark YOLOX polygon post-processing on a synthetic head output.")
    parser.add_argument("--num-classes", type=int, default=6)
    parser.add_argument("--active", type=int, default=200, help="Anchors with high objectness.")
    parser.add_argument("--conf", type=float, default=0.3)
    parser.add_argument("--nms", type=float, default=0.45)
    parser.add_argument("--warmup", type=int, default=5)
    parser.add_argument("--repeats", type=int, default=50)
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args()

    if args.repeats < 1:
        raise ValueError("--repeats must be >= 1")

    cfg = YoloxPostConfig(num_classes=args.num_classes, conf_threshold=args.conf, nms_threshold=args.nms)
    post = YoloxPostprocessor(cfg)
    preds = _synthetic_preds(cfg, args.active, args.seed)

    timings: List[float] = []
    kept = 0
    for i in range(args.warmup + args.repeats):
        t0 = time.perf_counter()
        kept = len(post.process(preds, scale=0.5, image_w=1280, image_h=1280))
        if i >= args.warmup:
            timings.append(time.perf_counter() - t0)

    s = _summarize_ms(timings)
    print(f"postprocess: n={s.n} mean={s.mean_ms:.3f}ms p50={s.p50_ms:.3f}ms p95={s.p95_ms:.3f}ms detections={kept}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
