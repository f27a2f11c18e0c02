from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

import numpy as np

PathLike = Union[str, Path]

logger = logging.getLogger(__name__)


class FrameSink:
    """
    Destination for rendered frames. Sinks are created and closed by the
    caller; the decoder never holds one.
    """

    def write(self, frame: np.ndarray) -> None:
        raise NotImplementedError

    def close(self) -> None:
        pass

    def __enter__(self) -> "FrameSink":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class ListSink(FrameSink):
    """Keeps frames in memory (tests, short clips)."""

    def __init__(self) -> None:
        self.frames: List[np.ndarray] = []
        self.closed = False

    def write(self, frame: np.ndarray) -> None:
        if self.closed:
            raise RuntimeError("write() on a closed sink")
        self.frames.append(frame)

    def close(self) -> None:
        self.closed = True


class VideoFileSink(FrameSink):
    """
    Video file writer. The underlying `cv2.VideoWriter` is opened on the first
    frame, using that frame's size.
    """

    def __init__(self, path: PathLike, fps: float = 15.0, fourcc: str = "MJPG"):
        if fps <= 0:
            raise ValueError("fps must be > 0")
        if len(fourcc) != 4:
            raise ValueError(f"fourcc must be 4 characters, got {fourcc!r}")
        self.path = Path(path)
        self.fps = float(fps)
        self.fourcc = fourcc
        self._writer = None
        self._size: Optional[tuple] = None

    def write(self, frame: np.ndarray) -> None:
        import cv2  # type: ignore

        h, w = frame.shape[:2]
        if self._writer is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            writer = cv2.VideoWriter(str(self.path), cv2.VideoWriter_fourcc(*self.fourcc), self.fps, (w, h))
            if not writer.isOpened():
                raise RuntimeError(f"Failed to open video writer: {self.path}")
            self._writer = writer
            self._size = (w, h)
            logger.debug("opened %s (%dx%d @ %.1f fps)", self.path, w, h, self.fps)
        elif (w, h) != self._size:
            raise ValueError(f"Frame size {(w, h)} differs from video size {self._size}")
        self._writer.write(frame)

    def close(self) -> None:
        if self._writer is not None:
            self._writer.release()
            self._writer = None


class WindowSink(FrameSink):
    """
    Shows frames in an OpenCV window. `stop_requested` turns True once the
    user presses `q` or ESC.
    """

    def __init__(self, name: str = "detections", delay_ms: int = 10):
        self.name = name
        self.delay_ms = delay_ms
        self.stop_requested = False

    def write(self, frame: np.ndarray) -> None:
        import cv2  # type: ignore

        cv2.imshow(self.name, frame)
        key = cv2.waitKey(self.delay_ms) & 0xFF
        if key in (27, ord("q")):
            self.stop_requested = True

    def close(self) -> None:
        import cv2  # type: ignore

        cv2.destroyWindow(self.name)
