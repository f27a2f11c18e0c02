from typing import Tuple

import numpy as np


def static_resize(
    image: np.ndarray,
    new_shape: Tuple[int, int] = (640, 640),
    color: Tuple[int, int, int] = (114, 114, 114),
) -> Tuple[np.ndarray, float]:
    """
    Resize keeping aspect ratio and pad to `new_shape` (width, height).

    The resized image is pasted at the top-left corner, so mapping back to the
    original image only needs a division by the returned scale (no offset).

    Returns:
        padded: (new_h, new_w, C) image filled with `color` outside the resized area
        scale: min(new_w / w, new_h / h)
    """
    try:
        import cv2  # type: ignore
    except Exception as e:  # pragma: no cover
        raise ImportError("OpenCV is required for static_resize(). Install with `pip install opencv-python`.") from e

    if isinstance(new_shape, int):
        new_shape = (new_shape, new_shape)

    h, w = image.shape[:2]
    new_w, new_h = new_shape

    r = min(new_w / w, new_h / h)
    # Truncate like the exported preprocessing does.
    resized_w, resized_h = max(int(w * r), 1), max(int(h * r), 1)

    if (w, h) != (resized_w, resized_h):
        image = cv2.resize(image, (resized_w, resized_h), interpolation=cv2.INTER_LINEAR)

    padded = cv2.copyMakeBorder(
        image, 0, new_h - resized_h, 0, new_w - resized_w, cv2.BORDER_CONSTANT, value=color
    )

    return padded, r
