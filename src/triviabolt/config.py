"""Configuration settings for TriviaBolt."""

import os
from typing import Tuple

from .exceptions import ConfigError, ValidationError
from .core.models import CaptureRegion

# Scan loop (can be overridden via environment variables)
SCAN_INTERVAL_MS = int(os.getenv("TRIVIABOLT_SCAN_INTERVAL_MS", "200"))
SCAN_INTERVAL_RANGE_MS = (50, 5000)

# Camera settings
CAMERA_INDEX = int(os.getenv("TRIVIABOLT_CAMERA_INDEX", "0"))
CAMERA_WIDTH = int(os.getenv("TRIVIABOLT_CAMERA_WIDTH", "1280"))
CAMERA_HEIGHT = int(os.getenv("TRIVIABOLT_CAMERA_HEIGHT", "720"))
CAMERA_FPS = int(os.getenv("TRIVIABOLT_CAMERA_FPS", "60"))

# Active question zone: a narrow strip across the upper middle of the frame
DEFAULT_REGION = (0.05, 0.30, 0.90, 0.25)
REGION = os.getenv("TRIVIABOLT_REGION", ",".join(str(v) for v in DEFAULT_REGION))

# Frame preprocessing (grayscale + contrast amplification before OCR)
CONTRAST_FACTOR = 3.0
BRIGHTNESS_FACTOR = 1.2

# Matching thresholds
MIN_KEYWORDS = 2
MIN_SCORE = 0.25  # score must be strictly greater
MIN_MATCH_COUNT = 2
MIN_OCR_TEXT_LENGTH = 5


def parse_region(region_str: str) -> CaptureRegion:
    """
    Parse a region string into a CaptureRegion.

    Args:
        region_str: Four comma-separated fractions "x,y,width,height"
                    (e.g., "0.05,0.30,0.90,0.25")

    Returns:
        CaptureRegion

    Raises:
        ValueError: If the region string is invalid
    """
    parts = [p.strip() for p in region_str.split(",")]
    if len(parts) != 4:
        raise ValueError(
            f"Invalid region: {region_str}. Use format 'x,y,width,height' "
            f"with fractions of the frame (e.g., '0.05,0.30,0.90,0.25')"
        )
    try:
        x, y, width, height = (float(p) for p in parts)
    except ValueError:
        raise ValueError(f"Invalid region: {region_str}. Values must be numbers")

    try:
        return CaptureRegion(x, y, width, height)
    except ValidationError as e:
        raise ValueError(f"Invalid region: {region_str}. {e}") from e


def get_scan_interval() -> float:
    """Scan interval in seconds."""
    return SCAN_INTERVAL_MS / 1000.0


def get_default_region() -> CaptureRegion:
    """Region from the environment, or the built-in question strip."""
    return parse_region(REGION)


def get_camera_settings() -> Tuple[int, int, int, int]:
    """Return (index, width, height, fps)."""
    return CAMERA_INDEX, CAMERA_WIDTH, CAMERA_HEIGHT, CAMERA_FPS


def validate_config() -> None:
    """Validate configuration values."""
    lo, hi = SCAN_INTERVAL_RANGE_MS
    if not lo <= SCAN_INTERVAL_MS <= hi:
        raise ConfigError(f"Scan interval must be between {lo} and {hi} ms")

    if CAMERA_INDEX < 0:
        raise ConfigError("Invalid camera index")

    if CAMERA_WIDTH <= 0 or CAMERA_HEIGHT <= 0:
        raise ConfigError("Invalid camera dimensions")

    if CAMERA_FPS <= 0:
        raise ConfigError("Invalid FPS value")

    try:
        parse_region(REGION)
    except ValueError as e:
        raise ConfigError(str(e)) from e

    if not 0.0 <= MIN_SCORE < 1.0:
        raise ConfigError("Invalid match score threshold")

# Validate config on import
validate_config()
