"""Utility modules."""

from .logging import setup_logging, get_logger
from .performance import PassTimer
from .validation import (
    validate_interval_ms,
    validate_camera_index,
    validate_question_record,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "PassTimer",
    "validate_interval_ms",
    "validate_camera_index",
    "validate_question_record",
]
