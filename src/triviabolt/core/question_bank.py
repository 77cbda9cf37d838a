"""Immutable in-memory question database."""

import json
import logging
from pathlib import Path
from typing import Iterable, Iterator, Optional, Tuple

from .models import QuestionRecord
from .questions import FOOTBALL_TRIVIA
from .text_utils import TextNormalizer
from ..exceptions import QuestionBankError, ValidationError
from ..utils.validation import validate_question_record

logger = logging.getLogger(__name__)


class QuestionBank:
    """Question records with their keywords precomputed once at load time.

    Iteration order is the order the records were given in; the match engine
    relies on it for tie-breaking.
    """

    def __init__(
        self,
        records: Iterable[QuestionRecord],
        normalizer: Optional[TextNormalizer] = None,
    ):
        self.normalizer = normalizer or TextNormalizer()
        self._entries: Tuple[Tuple[QuestionRecord, Tuple[str, ...]], ...] = tuple(
            (record, tuple(self.normalizer.normalize(record.question)))
            for record in records
        )
        unmatchable = sum(1 for _, kw in self._entries if not kw)
        if unmatchable:
            logger.warning(f"{unmatchable} question(s) have no keywords and can never match")

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[QuestionRecord]:
        return (record for record, _ in self._entries)

    @property
    def records(self) -> Tuple[QuestionRecord, ...]:
        return tuple(record for record, _ in self._entries)

    def entries(self) -> Iterator[Tuple[QuestionRecord, Tuple[str, ...]]]:
        """Yield (record, keywords) pairs in database order."""
        return iter(self._entries)


def default_question_bank(normalizer: Optional[TextNormalizer] = None) -> QuestionBank:
    """The built-in football trivia database."""
    return QuestionBank(FOOTBALL_TRIVIA, normalizer)


def load_question_bank(
    path: Path, normalizer: Optional[TextNormalizer] = None
) -> QuestionBank:
    """Load a JSON array of ``{"question": ..., "answer": ...}`` objects."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise QuestionBankError(f"Failed to load questions from {path}: {e}") from e

    if not isinstance(data, list) or not data:
        raise QuestionBankError(f"{path} must contain a non-empty JSON array")

    records = []
    for idx, item in enumerate(data):
        try:
            question, answer = validate_question_record(item, idx)
        except ValidationError as e:
            raise QuestionBankError(f"{path}: {e}") from e
        records.append(QuestionRecord(question, answer))

    logger.info(f"Loaded {len(records)} questions from {path}")
    return QuestionBank(records, normalizer)
