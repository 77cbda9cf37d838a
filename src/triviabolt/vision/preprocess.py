"""Frame preprocessing ahead of OCR.

Grayscale followed by a strong contrast boost pushes light text to white and
the background to black, which is close to binarizing the strip.
"""

from __future__ import annotations

try:
    import cv2
    import numpy as np
except ImportError:
    cv2 = None  # type: ignore
    np = None  # type: ignore

from ..config import BRIGHTNESS_FACTOR, CONTRAST_FACTOR
from ..exceptions import CaptureError


def to_grayscale(img: np.ndarray) -> np.ndarray:
    if img.ndim == 2:
        return img
    if img.shape[2] == 4:
        return cv2.cvtColor(img, cv2.COLOR_BGRA2GRAY)
    return cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)


def amplify_contrast(
    gray: np.ndarray,
    contrast: float = CONTRAST_FACTOR,
    brightness: float = BRIGHTNESS_FACTOR,
) -> np.ndarray:
    """Scale around mid-gray by ``contrast``, then multiply by ``brightness``."""
    x = gray.astype(np.float32)
    x = (x - 127.5) * contrast + 127.5
    x = x * brightness
    return np.clip(x, 0, 255).astype(np.uint8)


def preprocess_for_ocr(
    img: np.ndarray,
    contrast: float = CONTRAST_FACTOR,
    brightness: float = BRIGHTNESS_FACTOR,
) -> np.ndarray:
    if cv2 is None or np is None:
        raise CaptureError("OpenCV and Numpy are required for preprocessing.")
    if img is None or img.size == 0:
        raise CaptureError("Cannot preprocess an empty image")
    return amplify_contrast(to_grayscale(img), contrast, brightness)
