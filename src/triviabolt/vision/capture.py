"""Capture surfaces: live camera and still images."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional

try:
    import cv2
    import numpy as np
except ImportError:
    cv2 = None  # type: ignore
    np = None  # type: ignore

from .preprocess import preprocess_for_ocr
from .roi import crop_region
from ..config import get_camera_settings
from ..core.models import CaptureRegion
from ..exceptions import CaptureError, CaptureUnavailableError

logger = logging.getLogger(__name__)


class CameraCapture:
    """Live camera feed that yields cropped, preprocessed stills on demand.

    Unset arguments fall back to the configured camera settings. Reads and
    `release()` are serialized, so the device is never released mid-read.
    """

    def __init__(
        self,
        index: Optional[int] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
        fps: Optional[int] = None,
    ):
        default_index, default_width, default_height, default_fps = get_camera_settings()
        self.index = default_index if index is None else index
        self.width = default_width if width is None else width
        self.height = default_height if height is None else height
        self.fps = default_fps if fps is None else fps
        self._cap = None
        self._lock = threading.Lock()

    def open(self) -> "CameraCapture":
        if cv2 is None or np is None:
            raise CaptureError("OpenCV and Numpy are required for camera capture.")

        cap = cv2.VideoCapture(self.index)
        if not cap.isOpened():
            raise CaptureError(f"Could not open camera {self.index}")

        # Keep only the newest frame so each tick sees the live picture
        cap.set(cv2.CAP_PROP_BUFFERSIZE, 1)
        cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        cap.set(cv2.CAP_PROP_FPS, self.fps)

        self._cap = cap
        logger.info(
            f"Opened camera {self.index} at "
            f"{int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))}x{int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))}"
        )
        return self

    @property
    def is_open(self) -> bool:
        return self._cap is not None and self._cap.isOpened()

    def read_frame(self) -> np.ndarray:
        with self._lock:
            if not self.is_open:
                raise CaptureUnavailableError("Camera is not open")
            ok, frame = self._cap.read()
        if not ok or frame is None or frame.size == 0:
            raise CaptureUnavailableError("No frame available yet")
        return frame

    def get_preprocessed_frame(self, region: Optional[CaptureRegion]) -> np.ndarray:
        frame = self.read_frame()
        if region is not None:
            frame = crop_region(frame, region)
        return preprocess_for_ocr(frame)

    def release(self) -> None:
        with self._lock:
            if self._cap is None:
                return
            self._cap.release()
            self._cap = None
        logger.debug(f"Released camera {self.index}")

    def __enter__(self) -> "CameraCapture":
        return self.open()

    def __exit__(self, *exc) -> None:
        self.release()


class StillImageCapture:
    """A fixed image served as if it were the live feed."""

    def __init__(self, image: np.ndarray):
        if image is None or image.size == 0:
            raise CaptureError("Image is empty")
        self.image = image

    @classmethod
    def from_file(cls, path: Path) -> "StillImageCapture":
        if cv2 is None:
            raise CaptureError("OpenCV is required to read images.")
        image = cv2.imread(str(path))
        if image is None:
            raise CaptureError(f"Could not read image: {path}")
        return cls(image)

    def get_preprocessed_frame(self, region: Optional[CaptureRegion]) -> np.ndarray:
        frame = self.image if region is None else crop_region(self.image, region)
        return preprocess_for_ocr(frame)
