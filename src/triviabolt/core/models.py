"""Data models for question matching and scan state."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..exceptions import ValidationError

# Tolerance for fractional sums such as 0.05 + 0.95
_REGION_EPS = 1e-9


class ScanStatus(str, Enum):
    """Observable status of a scan session."""

    READY = "Ready"
    SEARCHING = "Searching..."
    MATCHED = "Matched"


@dataclass(frozen=True)
class QuestionRecord:
    """A trivia question with its official answer."""

    question: str
    answer: str


@dataclass(frozen=True)
class CaptureRegion:
    """Sub-rectangle of the video frame, as fractions of its dimensions."""

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        for name in ("x", "y", "width", "height"):
            value = getattr(self, name)
            if not 0.0 < value <= 1.0:
                raise ValidationError(
                    f"Region {name} must be in (0, 1], got {value}"
                )
        if self.x + self.width > 1.0 + _REGION_EPS:
            raise ValidationError("Region x + width must not exceed 1")
        if self.y + self.height > 1.0 + _REGION_EPS:
            raise ValidationError("Region y + height must not exceed 1")


@dataclass(frozen=True)
class RecognitionResult:
    """Verbatim OCR output for one capture tick."""

    raw_text: str


@dataclass(frozen=True)
class MatchCandidate:
    """A scored question record."""

    record: QuestionRecord
    score: float
    match_count: int


@dataclass(frozen=True)
class StatusSnapshot:
    """Current observable scan state, for display."""

    status: ScanStatus
    raw_text: str
    last_question: Optional[str] = None
    last_answer: Optional[str] = None
