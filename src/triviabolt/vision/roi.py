"""Region of Interest (ROI) cropping for the question strip."""

from __future__ import annotations

import logging
from typing import Tuple

try:
    import numpy as np
except ImportError:
    np = None  # type: ignore

from ..core.models import CaptureRegion

logger = logging.getLogger(__name__)


def region_to_rect(
    region: CaptureRegion, width: int, height: int
) -> Tuple[int, int, int, int]:
    """
    Convert a fractional region to a pixel rectangle.

    Returns:
        (x, y, width, height), clamped to the frame and at least 1px each way
    """
    x = min(max(int(round(region.x * width)), 0), max(width - 1, 0))
    y = min(max(int(round(region.y * height)), 0), max(height - 1, 0))
    w = max(1, min(int(round(region.width * width)), width - x))
    h = max(1, min(int(round(region.height * height)), height - y))
    return x, y, w, h


def crop_region(frame: np.ndarray, region: CaptureRegion) -> np.ndarray:
    """Crop ``frame`` to ``region``."""
    height, width = frame.shape[:2]
    x, y, w, h = region_to_rect(region, width, height)
    return frame[y : y + h, x : x + w]
