"""Validation utilities."""

import logging
from typing import Any

from ..config import SCAN_INTERVAL_RANGE_MS
from ..exceptions import ValidationError

logger = logging.getLogger(__name__)


def validate_interval_ms(interval_ms: int) -> int:
    """Validate scan interval in milliseconds."""
    min_ms, max_ms = SCAN_INTERVAL_RANGE_MS
    if not min_ms <= interval_ms <= max_ms:
        raise ValidationError(
            f"Scan interval must be between {min_ms} and {max_ms} ms"
        )
    return interval_ms


def validate_camera_index(index: int) -> int:
    """Validate camera device index."""
    if index < 0:
        raise ValidationError("Camera index must be non-negative")
    return index


def validate_question_record(item: Any, idx: int) -> tuple[str, str]:
    """Validate one raw question entry and return (question, answer)."""
    if not isinstance(item, dict):
        raise ValidationError(f"Question {idx + 1} must be an object")

    question = item.get("question")
    answer = item.get("answer")
    if not isinstance(question, str) or not question.strip():
        raise ValidationError(f"Question {idx + 1} has no question text")
    if not isinstance(answer, str) or not answer.strip():
        raise ValidationError(f"Question {idx + 1} has no answer")

    return question.strip(), answer.strip()
