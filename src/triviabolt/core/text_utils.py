"""
Text normalization for noisy OCR output.

Raw OCR text is lower-cased, stripped of overlay fragments, reduced to
``[a-z0-9 ]`` and split into keywords. Stop words and overlay patterns are
passed in, so the same normalizer works for any question domain.
"""

import re
from typing import Iterable, List, Optional

from .constants import STOP_WORDS, UI_ARTIFACT_PATTERNS
from ..config import MIN_KEYWORDS

_NON_ALNUM_RE = re.compile(r"[^a-z0-9 ]")
_WHITESPACE_RE = re.compile(r"\s+")


class TextNormalizer:
    """Turns arbitrary text into a keyword list for scoring."""

    def __init__(
        self,
        stop_words: Optional[Iterable[str]] = None,
        artifact_patterns: Optional[Iterable[str]] = None,
        min_token_length: int = 2,
        min_keywords: int = MIN_KEYWORDS,
    ):
        self.stop_words = frozenset(STOP_WORDS if stop_words is None else stop_words)
        patterns = UI_ARTIFACT_PATTERNS if artifact_patterns is None else artifact_patterns
        self.artifact_patterns = [re.compile(p) for p in patterns]
        self.min_token_length = min_token_length
        self.min_keywords = min_keywords

    def strip_artifacts(self, text: str) -> str:
        """Lower-case and remove overlay fragments such as "question: 3/10"."""
        cleaned = text.lower()
        for pattern in self.artifact_patterns:
            cleaned = pattern.sub("", cleaned)
        return cleaned

    def tokenize(self, text: str) -> List[str]:
        cleaned = _NON_ALNUM_RE.sub(" ", text.lower())
        return [
            token
            for token in _WHITESPACE_RE.split(cleaned)
            if len(token) >= self.min_token_length and token not in self.stop_words
        ]

    def normalize(self, text: str) -> List[str]:
        """Return the surviving keywords of ``text`` in their original order."""
        if not text:
            return []
        return self.tokenize(self.strip_artifacts(text))

    def has_enough_keywords(self, keywords: List[str]) -> bool:
        return len(keywords) >= self.min_keywords
