"""Core scan-and-match modules.

Only the plain data models are imported eagerly; the scanner pulls in the
vision stack (OpenCV, OCR engines) and is imported on demand.
"""

from .models import (
    CaptureRegion,
    MatchCandidate,
    QuestionRecord,
    RecognitionResult,
    ScanStatus,
    StatusSnapshot,
)

__all__ = [
    "CaptureRegion",
    "MatchCandidate",
    "QuestionRecord",
    "RecognitionResult",
    "ScanStatus",
    "StatusSnapshot",
]
