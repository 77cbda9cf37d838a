"""Keyword-overlap matching of OCR text against the question database.

OCR output is noisy: misread characters, partial words and overlay chrome
bleeding into the crop. Each record is scored by the fraction of its own
keywords found in the input, and only accepted if the fraction is above
``min_score`` or at least ``min_match_count`` keywords overlap. The second
rule lets long questions match on a few strong words; the first keeps short
questions from matching on a single shared word.
"""

import logging
from typing import Collection, List, Optional, Tuple

from .models import MatchCandidate
from .question_bank import QuestionBank
from ..config import MIN_MATCH_COUNT, MIN_SCORE

logger = logging.getLogger(__name__)


def score_keywords(
    record_keywords: Collection[str], input_keywords: Collection[str]
) -> Tuple[float, int]:
    """Return (score, match_count) of a record against the input keywords."""
    if not record_keywords:
        return 0.0, 0
    present = set(input_keywords)
    match_count = sum(1 for word in record_keywords if word in present)
    return match_count / len(record_keywords), match_count


class MatchEngine:
    """Selects at most one best-matching question for a keyword list."""

    def __init__(
        self,
        bank: QuestionBank,
        min_score: float = MIN_SCORE,
        min_match_count: int = MIN_MATCH_COUNT,
    ):
        self.bank = bank
        self.min_score = min_score
        self.min_match_count = min_match_count

    def is_eligible(self, score: float, match_count: int) -> bool:
        return score > self.min_score or match_count >= self.min_match_count

    def _scored(self, keywords: List[str]):
        for record, record_keywords in self.bank.entries():
            if not record_keywords:
                continue
            score, match_count = score_keywords(record_keywords, keywords)
            yield MatchCandidate(record, score, match_count)

    def find_best_match(self, keywords: List[str]) -> Optional[MatchCandidate]:
        """Best eligible candidate, or None.

        A later record only replaces the current best with a strictly higher
        score, so on ties the record listed first wins.
        """
        if len(keywords) < self.bank.normalizer.min_keywords:
            return None

        best: Optional[MatchCandidate] = None
        for candidate in self._scored(keywords):
            best_score = best.score if best is not None else 0.0
            if candidate.score > best_score and self.is_eligible(
                candidate.score, candidate.match_count
            ):
                best = candidate

        if best is not None:
            logger.debug(
                f"Best match {best.score:.2f} ({best.match_count} keywords): "
                f"{best.record.question}"
            )
        return best

    def rank(self, keywords: List[str]) -> List[MatchCandidate]:
        """All eligible candidates, highest score first (database order on ties)."""
        if len(keywords) < self.bank.normalizer.min_keywords:
            return []
        eligible = [
            c for c in self._scored(keywords)
            if c.score > 0 and self.is_eligible(c.score, c.match_count)
        ]
        return sorted(eligible, key=lambda c: c.score, reverse=True)
