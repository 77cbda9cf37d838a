"""Scan session state: status machine with match-event dedupe."""

import logging
import threading
from typing import Callable, List, Optional

from .models import MatchCandidate, QuestionRecord, ScanStatus, StatusSnapshot

logger = logging.getLogger(__name__)

MatchListener = Callable[[QuestionRecord], None]


class ScanSession:
    """Holds the last confirmed match and the current status.

    ``apply`` is called once per completed capture pass. A match event fires
    only when the matched question differs from the last confirmed one, so a
    question that stays on screen is announced once.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._status = ScanStatus.READY
        self._raw_text = ""
        self._last_record: Optional[QuestionRecord] = None
        self._listeners: List[MatchListener] = []
        self.match_events = 0

    @property
    def status(self) -> ScanStatus:
        return self._status

    @property
    def last_confirmed_question(self) -> Optional[str]:
        return self._last_record.question if self._last_record else None

    def add_listener(self, listener: MatchListener) -> None:
        self._listeners.append(listener)

    def apply(
        self,
        raw_text: str,
        keywords: List[str],
        candidate: Optional[MatchCandidate],
        enough_keywords: bool = True,
    ) -> ScanStatus:
        """Apply the outcome of one pass and return the new status."""
        emitted: Optional[QuestionRecord] = None
        with self._lock:
            text = (raw_text or "").strip()
            if text:
                self._raw_text = text

            if not keywords or not enough_keywords:
                self._status = ScanStatus.READY
            elif candidate is None:
                self._status = ScanStatus.SEARCHING
            else:
                record = candidate.record
                if record.question != self.last_confirmed_question:
                    self._last_record = record
                    self.match_events += 1
                    emitted = record
                self._status = ScanStatus.MATCHED
            status = self._status

        if emitted is not None:
            logger.info(f"New match: {emitted.question} -> {emitted.answer}")
            self._notify(emitted)
        return status

    def apply_failure(self) -> ScanStatus:
        """A failed pass keeps the previous visible state."""
        return self._status

    def _notify(self, record: QuestionRecord) -> None:
        for listener in list(self._listeners):
            try:
                listener(record)
            except Exception as e:
                logger.error(f"Match listener failed: {e}")

    def get_status(self) -> StatusSnapshot:
        with self._lock:
            record = self._last_record
            return StatusSnapshot(
                status=self._status,
                raw_text=self._raw_text,
                last_question=record.question if record else None,
                last_answer=record.answer if record else None,
            )
