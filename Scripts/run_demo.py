import argparse
import logging
from dataclasses import replace

import cv2

from yolox_kit import ModelProfile, VideoFileSink, WindowSink, draw_detections, load_model_profile, load_pipeline
from yolox_kit.logging_utils import add_logging_args, configure_logging

logger = logging.getLogger("run_demo")


def main() -> int:
    parser = argparse.ArgumentParser(description="Run a YOLOX polygon model and visualize detections.")
    src = parser.add_mutually_exclusive_group(required=True)
    src.add_argument("--image", default=None, help="Path to an input image.")
    src.add_argument("--video", default=None, help="Path to an input video file.")
    src.add_argument("--webcam", type=int, default=None, help="Webcam index (e.g., 0).")
    parser.add_argument("--model", required=True, help="Path to an exported YOLOX model (.onnx).")
    parser.add_argument("--profile", default=None, help="Model profile JSON (num_classes, thresholds, class_names).")
    parser.add_argument("--conf", type=float, default=None, help="Override the confidence threshold.")
    parser.add_argument("--nms", type=float, default=None, help="Override the NMS IoU threshold.")
    parser.add_argument(
        "--onnx-providers",
        default=None,
        help='Comma-separated ORT providers, e.g. "CUDAExecutionProvider,CPUExecutionProvider".',
    )
    parser.add_argument("--show", action="store_true", help="Show a window with visualized detections.")
    parser.add_argument("--out", default=None, help="Optional output path (image or video) to save the visualization.")
    parser.add_argument("--fps", type=float, default=15.0, help="Frame rate of the output video.")
    parser.add_argument("--every", type=int, default=1, help="Process every Nth frame for video/webcam.")
    parser.add_argument("--max-frames", type=int, default=0, help="Stop after N frames (0 = no limit).")
    add_logging_args(parser)
    args = parser.parse_args()

    configure_logging(args.log_level, args.verbose, args.quiet)

    if args.every < 1:
        raise ValueError("--every must be >= 1")
    if args.max_frames < 0:
        raise ValueError("--max-frames must be >= 0")

    profile = load_model_profile(args.profile) if args.profile else ModelProfile()
    post_cfg = profile.post
    if args.conf is not None:
        post_cfg = replace(post_cfg, conf_threshold=args.conf)
    if args.nms is not None:
        post_cfg = replace(post_cfg, nms_threshold=args.nms)
    class_names = profile.names_by_id()

    onnx_providers = None
    if args.onnx_providers:
        onnx_providers = [p.strip() for p in str(args.onnx_providers).split(",") if p.strip()]

    pipeline = load_pipeline(args.model, post_cfg=post_cfg, onnx_providers=onnx_providers)

    if args.image is not None:
        img = cv2.imread(args.image)
        if img is None:
            raise FileNotFoundError(f"Could not read image at path: {args.image}")

        detections = pipeline(img)
        for det in detections:
            b = det.box
            print(f"{profile.class_name(det.label)} {det.score:.5f} at {b.x:.2f} {b.y:.2f} {b.width:.2f} x {b.height:.2f}")

        vis = draw_detections(img, detections, class_names=class_names)
        if args.out:
            if not cv2.imwrite(args.out, vis):
                raise RuntimeError(f"Failed to write output image: {args.out}")
        if args.show:
            cv2.imshow("detections", vis)
            cv2.waitKey(0)
            cv2.destroyAllWindows()
        return 0

    if args.video is not None:
        cap = cv2.VideoCapture(args.video)
        if not cap.isOpened():
            raise FileNotFoundError(f"Could not open video: {args.video}")
    else:
        cap = cv2.VideoCapture(int(args.webcam))
        if not cap.isOpened():
            raise RuntimeError(f"Could not open webcam index: {args.webcam}")

    sinks = []
    if args.out:
        sinks.append(VideoFileSink(args.out, fps=args.fps))
    window = WindowSink() if args.show else None
    if window is not None:
        sinks.append(window)

    frame_idx = 0
    processed = 0
    try:
        while True:
            ok, frame = cap.read()
            if not ok or frame is None:
                break

            frame_idx += 1
            if (frame_idx - 1) % args.every != 0:
                continue

            detections = pipeline(frame)
            logger.info("frame %d: %d detections", frame_idx, len(detections))
            vis = draw_detections(frame, detections, class_names=class_names)
            for sink in sinks:
                sink.write(vis)

            if window is not None and window.stop_requested:
                break
            processed += 1
            if args.max_frames and processed >= args.max_frames:
                break
    finally:
        cap.release()
        for sink in sinks:
            sink.close()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
