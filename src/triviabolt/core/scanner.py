"""Scan-and-match pipeline: frame -> OCR -> keywords -> match -> session."""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from .matcher import MatchEngine
from .models import (
    CaptureRegion,
    MatchCandidate,
    QuestionRecord,
    RecognitionResult,
    ScanStatus,
    StatusSnapshot,
)
from .question_bank import QuestionBank, default_question_bank
from .scheduler import CaptureScheduler
from .session import MatchListener, ScanSession
from ..config import MIN_OCR_TEXT_LENGTH, get_default_region, get_scan_interval
from ..exceptions import CaptureUnavailableError, OCRError
from ..vision.ocr import OcrEngineHandle

logger = logging.getLogger(__name__)


@dataclass
class ScanResult:
    """Outcome of matching one piece of recognized text."""

    recognition: RecognitionResult
    keywords: List[str] = field(default_factory=list)
    candidate: Optional[MatchCandidate] = None
    enough_keywords: bool = False

    @property
    def raw_text(self) -> str:
        return self.recognition.raw_text

    @property
    def record(self) -> Optional[QuestionRecord]:
        return self.candidate.record if self.candidate else None


class QuestionScanner:
    """Owns one scan session and the loop that feeds it.

    ``capture`` is any object with ``get_preprocessed_frame(region)``;
    ``ocr`` is an :class:`OcrEngineHandle` (one is created if omitted).
    ``stop()`` waits for a running pass, so the capture surface can be
    released as soon as it returns.
    """

    def __init__(
        self,
        capture: Any,
        bank: Optional[QuestionBank] = None,
        ocr: Optional[OcrEngineHandle] = None,
        region: Optional[CaptureRegion] = None,
        interval: Optional[float] = None,
        is_busy: Optional[Callable[[], bool]] = None,
    ):
        self.capture = capture
        self.bank = bank or default_question_bank()
        self.normalizer = self.bank.normalizer
        self.engine = MatchEngine(self.bank)
        self.ocr = ocr or OcrEngineHandle()
        self.region = region or get_default_region()
        self.session = ScanSession()
        self.scheduler = CaptureScheduler(
            self.run_pass,
            interval if interval is not None else get_scan_interval(),
            is_busy=is_busy,
        )
        # Held while a result is committed and while teardown cancels ticks
        self._commit_lock = threading.RLock()

    # -- matching ---------------------------------------------------------

    def match(self, recognition: RecognitionResult) -> ScanResult:
        """Normalize recognized text and match it, without touching the session."""
        result = ScanResult(recognition=recognition)
        if len(recognition.raw_text.strip()) < MIN_OCR_TEXT_LENGTH:
            return result

        result.keywords = self.normalizer.normalize(recognition.raw_text)
        result.enough_keywords = self.normalizer.has_enough_keywords(result.keywords)
        if result.enough_keywords:
            result.candidate = self.engine.find_best_match(result.keywords)
        return result

    def match_text(self, raw_text: str) -> ScanResult:
        return self.match(RecognitionResult(raw_text or ""))

    def _apply(self, result: ScanResult) -> ScanStatus:
        return self.session.apply(
            result.raw_text, result.keywords, result.candidate, result.enough_keywords
        )

    def _recognize(self, image: Any) -> Optional[RecognitionResult]:
        try:
            return RecognitionResult(self.ocr.recognize(image))
        except OCRError as e:
            logger.warning(f"Scan error: {e}")
            self.session.apply_failure()
            return None

    # -- one pass ---------------------------------------------------------

    def run_pass(self) -> Optional[ScanResult]:
        """Capture, recognize and match once. Returns None if nothing was applied."""
        try:
            frame = self.capture.get_preprocessed_frame(self.region)
        except CaptureUnavailableError as e:
            logger.debug(f"Skipping tick: {e}")
            return None

        recognition = self._recognize(frame)
        if recognition is None:
            return None

        result = self.match(recognition)
        with self._commit_lock:
            if not self.scheduler.active:
                logger.debug("Session closed; discarding late scan result")
                return None
            self._apply(result)
        return result

    def scan_image(self, image: Any) -> Optional[ScanResult]:
        """Recognize and match a single preprocessed still image."""
        recognition = self._recognize(image)
        if recognition is None:
            return None
        result = self.match(recognition)
        self._apply(result)
        return result

    # -- loop control -----------------------------------------------------

    def on_tick(self) -> bool:
        return self.scheduler.on_tick()

    def on_match(self, listener: MatchListener) -> None:
        self.session.add_listener(listener)

    def get_status(self) -> StatusSnapshot:
        return self.session.get_status()

    def start(self) -> None:
        self.scheduler.start()

    def stop(self, timeout: Optional[float] = None) -> bool:
        """Cancel ticks, then wait for a running pass to finish."""
        with self._commit_lock:
            self.scheduler.cancel()
        return self.scheduler.stop(timeout)

    def __enter__(self) -> "QuestionScanner":
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.stop()
